"""
End-to-End Image-to-Glyph Pipeline

Unified interface combining:
- Source loading (files, bytes, PIL images) or prompt-based generation
- Grid geometry resolution
- Area-averaged sampling
- Tone-to-glyph mapping
- Painting onto an output image

This is the main entry point for the library.
"""

from enum import Enum
from pathlib import Path
from typing import Optional, Union
import time

from PIL import Image

from .bitmap import SourceBitmap, load_bitmap
from .exporter import render_grid_to_image
from .generator import create_generator
from .geometry import resolve_geometry
from .mapper import render
from .result import TransformResult, create_result
from .settings import AsciiSettings


ImageSource = Union[str, Path, bytes, Image.Image, SourceBitmap]


class ProcessingState(Enum):
    IDLE = "IDLE"
    PROCESSING = "PROCESSING"
    GENERATING_AI = "GENERATING_AI"


class AsciiTransformer:
    """
    End-to-end image-to-glyph converter.

    Example:
        >>> transformer = AsciiTransformer(AsciiSettings(char_set_mode="blocks"))
        >>> result = transformer.convert("photo.jpg")
        >>> result.display()
        >>> result.save("output.png")
    """

    def __init__(
        self,
        settings: Optional[AsciiSettings] = None,
        generator=None,
        provider: str = "gemini",
    ):
        """
        Initialize the transformer.

        Args:
            settings: Default settings for conversions
            generator: Image generator for prompt-based sources (lazy if None)
            provider: Provider name used when no generator is given
        """
        self.settings = settings or AsciiSettings()
        self.provider = provider
        self.state = ProcessingState.IDLE
        self._generator = generator

    def _get_generator(self):
        """Get or create the image generator."""
        if self._generator is None:
            self._generator = create_generator(self.provider)
        return self._generator

    def convert(
        self,
        source: ImageSource,
        settings: Optional[AsciiSettings] = None,
        render_image: bool = True,
        **metadata,
    ) -> TransformResult:
        """
        Convert an image to a glyph grid.

        Args:
            source: PIL Image, bitmap, encoded bytes or path to an image file
            settings: Overrides the transformer's default settings
            render_image: Also paint the grid onto an output image
            **metadata: Extra metadata stored on the result

        Returns:
            TransformResult
        """
        settings = settings or self.settings
        self.state = ProcessingState.PROCESSING
        try:
            start_time = time.time()

            bitmap = load_bitmap(source)
            geometry = resolve_geometry(bitmap.width, bitmap.height, settings.resolution)
            sampled = bitmap.sample(geometry.cols, geometry.rows)
            grid = render(sampled, settings)

            map_time = time.time() - start_time

            image = render_grid_to_image(grid, geometry) if render_image else None

            source_image = source if isinstance(source, Image.Image) else None

            return create_result(
                grid=grid,
                geometry=geometry,
                settings=settings,
                image=image,
                source_image=source_image,
                mapping_time=f"{map_time:.2f}s",
                **metadata,
            )
        finally:
            self.state = ProcessingState.IDLE

    def from_prompt(
        self,
        prompt: str,
        settings: Optional[AsciiSettings] = None,
        render_image: bool = True,
    ) -> TransformResult:
        """
        Generate a source image from a prompt, then convert it.

        Raises:
            GenerationError: If the provider could not produce an image
        """
        generator = self._get_generator()

        self.state = ProcessingState.GENERATING_AI
        try:
            start_time = time.time()
            source_image = generator.generate(prompt)
            gen_time = time.time() - start_time
        finally:
            self.state = ProcessingState.IDLE

        print(f"🖼️  Source image {source_image.size[0]}x{source_image.size[1]} ready in {gen_time:.1f}s")

        return self.convert(
            source_image,
            settings=settings,
            render_image=render_image,
            prompt=prompt,
            provider=getattr(generator, "name", type(generator).__name__),
            generation_time=f"{gen_time:.2f}s",
        )


# Convenience functions for quick usage
def image_to_ascii(
    image: ImageSource,
    settings: Optional[AsciiSettings] = None,
    **options
) -> TransformResult:
    """
    Quick function to convert an image.

    Args:
        image: PIL Image, bytes or path to image
        settings: Settings to use (built from **options if None)
        **options: AsciiSettings fields, e.g. char_set_mode="blocks"

    Returns:
        TransformResult
    """
    settings = settings or AsciiSettings(**options)
    return AsciiTransformer(settings).convert(image)


def prompt_to_ascii(
    prompt: str,
    provider: str = "gemini",
    settings: Optional[AsciiSettings] = None,
    **options
) -> TransformResult:
    """
    Quick function to generate a source image from a prompt and convert it.

    Args:
        prompt: Text description
        provider: "gemini" or "huggingface"
        settings: Settings to use (built from **options if None)
        **options: AsciiSettings fields

    Returns:
        TransformResult
    """
    settings = settings or AsciiSettings(**options)
    return AsciiTransformer(settings, provider=provider).from_prompt(prompt)
