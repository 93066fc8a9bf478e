"""
Source Bitmap Utilities

Provides the decoded RGBA bitmap the core reads from:
- Construction from PIL images, encoded bytes or file paths
- Area-averaged resampling down (or up) to the glyph grid size
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union
import io

import cv2
import numpy as np
from PIL import Image


@dataclass(frozen=True, eq=False)
class SourceBitmap:
    """
    A decoded image as a row-major RGBA byte buffer.

    Attributes:
        pixels: uint8 array of shape (height, width, 4), read-only
    """
    pixels: np.ndarray

    def __post_init__(self):
        pixels = self.pixels
        if pixels.dtype != np.uint8 or pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(
                f"Expected uint8 RGBA buffer of shape (height, width, 4), "
                f"got {pixels.dtype} {pixels.shape}"
            )
        if pixels.shape[0] < 1 or pixels.shape[1] < 1:
            raise ValueError(f"Bitmap dimensions must be positive, got {pixels.shape[1]}x{pixels.shape[0]}")

        # Own a read-only copy; the caller's buffer stays independent
        pixels = pixels.copy()
        pixels.flags.writeable = False
        object.__setattr__(self, "pixels", pixels)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def size(self):
        return self.width, self.height

    @classmethod
    def from_image(cls, image: Image.Image) -> "SourceBitmap":
        """
        Build a bitmap from a PIL image of any mode.

        Fully transparent pixels read back as black (0, 0, 0, 0), whatever
        colour they were stored with.
        """
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        pixels = np.array(image, dtype=np.uint8)
        pixels[pixels[..., 3] == 0] = 0
        return cls(pixels)

    @classmethod
    def from_bytes(cls, data: bytes) -> "SourceBitmap":
        """Decode an encoded still image (PNG, JPEG, ...)."""
        with Image.open(io.BytesIO(data)) as image:
            return cls.from_image(image)

    @classmethod
    def from_rgb_array(cls, rgb: np.ndarray) -> "SourceBitmap":
        """Build an opaque bitmap from an (height, width, 3) uint8 array."""
        rgb = np.asarray(rgb, dtype=np.uint8)
        alpha = np.full(rgb.shape[:2] + (1,), 255, dtype=np.uint8)
        return cls(np.concatenate([rgb, alpha], axis=2))

    def sample(self, cols: int, rows: int) -> "SourceBitmap":
        """
        Resample to exactly cols x rows pixels, one pixel per glyph cell.

        Uses area interpolation so each cell carries the average colour of
        the source region it covers.
        """
        if cols < 1 or rows < 1:
            raise ValueError(f"Sample size must be positive, got {cols}x{rows}")
        if (cols, rows) == self.size:
            return self

        resized = cv2.resize(
            np.array(self.pixels),
            (cols, rows),
            interpolation=cv2.INTER_AREA,
        )
        return SourceBitmap(resized)

    def to_image(self) -> Image.Image:
        return Image.fromarray(np.array(self.pixels))


def load_bitmap(source: Union[str, Path, bytes, Image.Image, SourceBitmap]) -> SourceBitmap:
    """
    Load a SourceBitmap from whatever the caller has at hand.

    Args:
        source: File path, encoded image bytes, PIL image or an existing bitmap

    Returns:
        SourceBitmap
    """
    if isinstance(source, SourceBitmap):
        return source
    if isinstance(source, Image.Image):
        return SourceBitmap.from_image(source)
    if isinstance(source, (bytes, bytearray)):
        return SourceBitmap.from_bytes(bytes(source))

    with Image.open(source) as image:
        return SourceBitmap.from_image(image)
