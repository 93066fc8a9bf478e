"""
Grid Geometry Resolver

Computes how many glyph columns and rows an image produces for a given
detail setting, and the size of the cell each glyph is painted into.
"""

from dataclasses import dataclass
import math


MIN_FONT_SIZE = 5
MAX_FONT_SIZE = 20

# Glyphs are taller than wide; 0.55 works better than 0.6 for dense monospace text
CHAR_ASPECT = 0.55

MIN_COLS = 40
MAX_COLS = 600


@dataclass(frozen=True)
class Geometry:
    """
    Output grid layout for one conversion.

    Attributes:
        cols: Glyph columns (40-600)
        rows: Glyph rows (>= 1)
        cell_width: Width of one glyph cell in output pixels
        cell_height: Height of one glyph cell in output pixels
        font_size: Font size used to paint glyphs
    """
    cols: int
    rows: int
    cell_width: float
    cell_height: float
    font_size: int

    @property
    def output_width(self) -> float:
        return self.cols * self.cell_width

    @property
    def output_height(self) -> float:
        return self.rows * self.cell_height

    @property
    def output_size(self):
        """Integer pixel size of the painted surface (fractions truncate)."""
        return int(self.output_width), int(self.output_height)

    @property
    def cell_count(self) -> int:
        return self.cols * self.rows


def font_size_for(resolution: float) -> int:
    """
    Map resolution linearly (inverted) onto a font size.

    Max resolution (1.0) -> 5px font (highly detailed)
    Min resolution (0.1) -> 20px font
    """
    return max(
        MIN_FONT_SIZE,
        math.floor(MAX_FONT_SIZE - resolution * (MAX_FONT_SIZE - MIN_FONT_SIZE)),
    )


def resolve_geometry(image_width: int, image_height: int, resolution: float) -> Geometry:
    """
    Resolve the glyph grid for an image.

    Args:
        image_width: Source width in pixels
        image_height: Source height in pixels
        resolution: Detail setting in (0, 1]

    Returns:
        Geometry with clamped column count and aspect-preserving row count
    """
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {image_width}x{image_height}")
    if not 0 < resolution <= 1.0:
        raise ValueError(f"resolution must be in (0, 1], got {resolution}")

    font_size = font_size_for(resolution)
    cell_width = font_size * CHAR_ASPECT
    cell_height = font_size

    ratio = image_height / image_width

    # Dynamic columns based on requested resolution vs image width
    cols = math.floor(image_width / (cell_width / resolution))
    safe_cols = min(max(cols, MIN_COLS), MAX_COLS)

    # Cell aspect keeps rows * cell_height proportional to the source height
    rows = max(1, math.floor(safe_cols * ratio * (cell_width / cell_height)))

    return Geometry(
        cols=safe_cols,
        rows=rows,
        cell_width=cell_width,
        cell_height=cell_height,
        font_size=font_size,
    )
