"""
Generative Image Sources

Optional providers that turn a text prompt into a still image to convert:
- Gemini (gemini-2.5-flash-image) via google-genai
- HuggingFace Inference API (FLUX.1-schnell) via plain HTTP

Providers are opaque to the converter: they return a PIL image or raise
GenerationError. There is no retry logic above this layer.
"""

import io
import os
import time
from typing import Optional

import requests
from google import genai
from PIL import Image, UnidentifiedImageError


GEMINI_MODEL = "gemini-2.5-flash-image"

HF_MODEL = "black-forest-labs/FLUX.1-schnell"
HF_API_URL = "https://router.huggingface.co/hf-inference/models/"

# Pushes generated sources towards material that reads well as glyph density
STYLE_SUFFIX = (
    "high contrast, dramatic lighting, volumetric fog, "
    "black and white photography, depth of field, detailed texture"
)


class GenerationError(RuntimeError):
    """Raised for any failure while generating a source image."""

    def __init__(self, message: str = "Failed to generate image."):
        super().__init__(message)


def enhance_prompt(prompt: str) -> str:
    """Append the source-image style hints to a user prompt."""
    if not prompt or not prompt.strip():
        raise ValueError("Prompt must not be empty")
    return f"{prompt.strip()}, {STYLE_SUFFIX}"


def _decode_image(data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise GenerationError(f"Failed to generate image: undecodable payload ({e})") from e
    return image


class GeminiImageGenerator:
    """
    Generate source images with Gemini.

    Example:
        >>> gen = GeminiImageGenerator(api_key="...")
        >>> image = gen.generate("a lighthouse in a storm")
        >>> image.save("source.png")
    """

    name = "gemini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = GEMINI_MODEL,
        client=None,
    ):
        """
        Initialize the Gemini generator.

        Args:
            api_key: Gemini API key (falls back to GEMINI_API_KEY, GOOGLE_API_KEY, API_KEY)
            model: Image-capable Gemini model id
            client: Pre-built genai.Client (mostly for tests)
        """
        self.api_key = (
            api_key or
            os.environ.get("GEMINI_API_KEY") or
            os.environ.get("GOOGLE_API_KEY") or
            os.environ.get("API_KEY")
        )
        self.model = model
        self._client = client

    @property
    def is_available(self) -> bool:
        return self._client is not None or bool(self.api_key)

    def _get_client(self):
        if self._client is None:
            if not self.api_key:
                raise GenerationError("Failed to generate image: no Gemini API key. Set GEMINI_API_KEY.")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def generate(self, prompt: str, enhance: bool = True) -> Image.Image:
        """
        Generate an image from a text prompt.

        Args:
            prompt: Text description
            enhance: Append the high-contrast style hints first

        Returns:
            PIL Image
        """
        full_prompt = enhance_prompt(prompt) if enhance else prompt
        client = self._get_client()

        print(f"🌐 Sending request to {self.model}...")
        try:
            response = client.models.generate_content(
                model=self.model,
                contents=full_prompt,
            )
        except Exception as e:
            print(f"❌ Gemini image generation error: {e}")
            raise GenerationError() from e

        # Extract the first inline image part
        candidates = response.candidates or []
        parts = []
        if candidates and candidates[0].content is not None:
            parts = candidates[0].content.parts or []

        for part in parts:
            if part.inline_data is not None and part.inline_data.data:
                image = _decode_image(part.inline_data.data)
                print("✅ Image generated successfully!")
                return image

        print("❌ No image data found in response")
        raise GenerationError("Failed to generate image: no image data found in response")


class HuggingFaceImageGenerator:
    """
    Generate source images using the HuggingFace Inference API.

    Example:
        >>> gen = HuggingFaceImageGenerator(api_key="hf_...")
        >>> image = gen.generate("a mountain landscape")
    """

    name = "huggingface"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = HF_MODEL,
        timeout: float = 120,
    ):
        """
        Initialize the HuggingFace generator.

        Args:
            api_key: HuggingFace token (falls back to HF_TOKEN, HUGGINGFACE_TOKEN)
            model: Model ID (default: FLUX.1-schnell)
            timeout: Per-request timeout in seconds
        """
        self.api_key = api_key or os.getenv("HF_TOKEN") or os.getenv("HUGGINGFACE_TOKEN")
        self.model = model
        self.api_url = f"{HF_API_URL}{model}"
        self.timeout = timeout

    @property
    def is_available(self) -> bool:
        return bool(self.api_key)

    @property
    def headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def generate(
        self,
        prompt: str,
        enhance: bool = True,
        width: int = 768,
        height: int = 576,
        num_inference_steps: int = 4,
        seed: Optional[int] = None,
        max_retries: int = 3,
    ) -> Image.Image:
        """
        Generate an image from a text prompt using the cloud API.

        Args:
            prompt: Text description
            enhance: Append the high-contrast style hints first
            width: Image width
            height: Image height
            num_inference_steps: Number of steps
            seed: Random seed
            max_retries: Attempts for timeouts, model loading and rate limits

        Returns:
            PIL Image
        """
        if not self.api_key:
            raise GenerationError("Failed to generate image: no API key. Set HF_TOKEN.")

        payload = {
            "inputs": enhance_prompt(prompt) if enhance else prompt,
            "parameters": {
                "width": width,
                "height": height,
                "guidance_scale": 0.0,
                "num_inference_steps": num_inference_steps,
            },
        }
        if seed is not None:
            payload["parameters"]["seed"] = seed

        for attempt in range(max_retries):
            try:
                print(f"🌐 Sending request to {self.model}...")
                response = requests.post(
                    self.api_url,
                    headers=self.headers,
                    json=payload,
                    timeout=self.timeout,
                )
            except requests.exceptions.Timeout:
                print(f"⏰ Timeout (attempt {attempt + 1}/{max_retries})")
                continue
            except requests.exceptions.RequestException as e:
                print(f"❌ Error: {e}")
                raise GenerationError() from e

            if response.status_code == 200:
                image = _decode_image(response.content)
                print("✅ Image generated successfully!")
                return image

            if response.status_code == 503:
                # Model loading; gateways may answer with an HTML page
                try:
                    wait_time = float(response.json().get("estimated_time", 20))
                except (ValueError, AttributeError, TypeError):
                    wait_time = 20
                print(f"⏳ Model loading... waiting {wait_time:.0f}s")
                time.sleep(wait_time)
                continue

            if response.status_code == 429:
                print("⚠️  Rate limited. Waiting 60s...")
                time.sleep(60)
                continue

            if response.status_code == 401:
                print("❌ Invalid API key. Check your HF_TOKEN.")
            else:
                print(f"❌ Error {response.status_code}: {response.text}")
            raise GenerationError(f"Failed to generate image: HTTP {response.status_code}")

        print("❌ Max retries exceeded")
        raise GenerationError("Failed to generate image: max retries exceeded")


_PROVIDERS = {
    "gemini": GeminiImageGenerator,
    "huggingface": HuggingFaceImageGenerator,
}


def list_providers():
    return list(_PROVIDERS)


def create_generator(provider: str = "gemini", api_key: Optional[str] = None):
    """Create an image generator by provider name."""
    if provider not in _PROVIDERS:
        raise ValueError(f"Unknown provider: {provider}. Available: {list_providers()}")
    return _PROVIDERS[provider](api_key=api_key)
