"""
Tone-to-Glyph Mapper

Maps sampled pixels to ramp glyphs by luminance. Glyph density stands in for
grayscale shading: luminance decides which glyph a cell gets, never how
bright it is painted.

Per cell:
1. BT.601 luma
2. Brightness offset
3. Contrast around mid-gray (128)
4. Clamp to [0, 255]
5. Optional inversion
6. Ramp index floor(gray / 255 * (len(ramp) - 1))
7. Space glyphs are left unpainted

Cells are independent, so the whole grid is computed as one vectorized map
over the flat cell index space.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

import numpy as np

from .bitmap import SourceBitmap
from .charsets import BACKGROUND_GLYPH, get_ramp, glyph_array
from .settings import AsciiSettings


LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])

MID_GRAY = 128.0


# =============================================================================
# TONE CURVE
# =============================================================================

def fast_contrast_factor(contrast: float) -> float:
    """
    The classic "fast contrast" factor: 259(C*255 + 255) / (255(259 - C*255)).

    Goes negative once contrast > 259/255, which flips the tone curve.
    Kept to reproduce the legacy renderer; not clamped.
    """
    level = contrast * 255
    return (259 * (level + 255)) / (255 * (259 - level))


def contrast_factor(settings: AsciiSettings) -> float:
    """Slope of the contrast transform for the configured curve."""
    if settings.contrast_curve == "fast":
        return fast_contrast_factor(settings.contrast)
    return float(settings.contrast)


def tone_map(rgb: np.ndarray, settings: AsciiSettings) -> np.ndarray:
    """
    Compute adjusted luminance for an array of pixels.

    Args:
        rgb: Array of shape (..., 3) or (..., 4); alpha is ignored
        settings: Conversion settings

    Returns:
        float64 array of shape (...) with values in [0, 255]
    """
    channels = np.asarray(rgb, dtype=np.float64)
    r, g, b = channels[..., 0], channels[..., 1], channels[..., 2]

    gray = LUMA_WEIGHTS[0] * r + LUMA_WEIGHTS[1] * g + LUMA_WEIGHTS[2] * b
    gray = gray + settings.brightness
    gray = contrast_factor(settings) * (gray - MID_GRAY) + MID_GRAY
    gray = np.clip(gray, 0.0, 255.0)

    if settings.invert:
        gray = 255.0 - gray

    return gray


def ramp_indices(gray: np.ndarray, ramp_length: int) -> np.ndarray:
    """Map luminance in [0, 255] to ramp positions."""
    if ramp_length < 1:
        raise ValueError("Ramp must contain at least one glyph")
    return np.floor((gray / 255.0) * (ramp_length - 1)).astype(np.intp)


def map_pixel(r: int, g: int, b: int, settings: AsciiSettings) -> Optional[str]:
    """
    Map a single pixel to its glyph.

    Returns:
        The glyph to paint, or None when the cell stays background
    """
    ramp = get_ramp(settings.char_set_mode)
    gray = tone_map(np.array([r, g, b]), settings)
    glyph = ramp[int(ramp_indices(gray, len(ramp)))]
    return None if glyph == BACKGROUND_GLYPH else glyph


# =============================================================================
# GLYPH GRID
# =============================================================================

@dataclass(frozen=True, eq=False)
class GlyphGrid:
    """
    The rows x cols result of a conversion.

    Each cell is either a glyph (painted in the foreground colour) or
    empty (None, background only).

    Attributes:
        indices: Read-only (rows, cols) array of ramp positions
        ramp: The ramp the indices point into
    """
    indices: np.ndarray
    ramp: str

    def __post_init__(self):
        if not self.ramp:
            raise ValueError("Ramp must contain at least one glyph")
        if self.indices.ndim != 2:
            raise ValueError(f"Expected a 2D index array, got shape {self.indices.shape}")
        indices = self.indices.copy()
        indices.flags.writeable = False
        object.__setattr__(self, "indices", indices)

    @property
    def rows(self) -> int:
        return self.indices.shape[0]

    @property
    def cols(self) -> int:
        return self.indices.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.cols

    @property
    def chars(self) -> np.ndarray:
        """(rows, cols) array of glyph strings, background included."""
        return glyph_array(self.ramp)[self.indices]

    @property
    def paint_mask(self) -> np.ndarray:
        """True where a glyph gets painted."""
        return self.chars != BACKGROUND_GLYPH

    def cell(self, row: int, col: int) -> Optional[str]:
        glyph = self.ramp[self.indices[row, col]]
        return None if glyph == BACKGROUND_GLYPH else glyph

    def iter_rows(self) -> Iterator[Tuple[Optional[str], ...]]:
        for row in self.indices:
            yield tuple(
                None if self.ramp[i] == BACKGROUND_GLYPH else self.ramp[i]
                for i in row
            )

    def __iter__(self):
        return self.iter_rows()

    def __len__(self) -> int:
        return self.rows

    def lines(self) -> List[str]:
        return ["".join(row) for row in self.chars]

    def to_text(self) -> str:
        return "\n".join(self.lines())

    def __eq__(self, other) -> bool:
        if not isinstance(other, GlyphGrid):
            return NotImplemented
        return self.ramp == other.ramp and np.array_equal(self.indices, other.indices)

    def __hash__(self):
        return hash((self.ramp, self.indices.shape, self.indices.tobytes()))

    def __repr__(self) -> str:
        return f"GlyphGrid(rows={self.rows}, cols={self.cols}, ramp_length={len(self.ramp)})"


def render(bitmap: SourceBitmap, settings: AsciiSettings) -> GlyphGrid:
    """
    Map a bitmap already sampled to cols x rows onto a glyph grid.

    Args:
        bitmap: Sampled bitmap, one pixel per output cell
        settings: Conversion settings

    Returns:
        GlyphGrid of shape (bitmap.height, bitmap.width)
    """
    ramp = get_ramp(settings.char_set_mode)

    # Flat map over every cell; each result depends only on its own pixel
    flat = bitmap.pixels.reshape(-1, 4)
    gray = tone_map(flat, settings)
    indices = ramp_indices(gray, len(ramp)).reshape(bitmap.height, bitmap.width)

    return GlyphGrid(indices=indices, ramp=ramp)
