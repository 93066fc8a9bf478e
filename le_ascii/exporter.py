from functools import lru_cache
from typing import Optional, Union
import os
import time

from PIL import Image, ImageDraw, ImageFont

from .geometry import Geometry
from .mapper import GlyphGrid

BACKGROUND_COLOR = "#000000"
FOREGROUND_COLOR = "#FFFFFF"

# Monospace is crucial; first one found wins
FONT_CANDIDATES = [
    "SpaceMono-Regular.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
    "DejaVuSansMono.ttf",
    "/System/Library/Fonts/Menlo.ttc",
    "consola.ttf",
]

DEFAULT_OUTPUT_DIR = "outputs"


@lru_cache(maxsize=32)
def load_font(size: int) -> ImageFont.ImageFont:
    """Load a monospace font at the given size, falling back to Pillow's default."""
    for font_path in FONT_CANDIDATES:
        try:
            return ImageFont.truetype(font_path, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def render_grid_to_image(
    grid: GlyphGrid,
    geometry: Geometry,
    bg_color: str = BACKGROUND_COLOR,
    text_color: str = FOREGROUND_COLOR,
    font: Optional[ImageFont.ImageFont] = None,
) -> Image.Image:
    """
    Paint a glyph grid onto a new image.

    Every non-empty cell is drawn at (col * cell_width, row * cell_height)
    in a single foreground colour; empty cells keep the background.
    """
    if grid.shape != (geometry.rows, geometry.cols):
        raise ValueError(
            f"Grid shape {grid.shape} does not match geometry {geometry.rows}x{geometry.cols}"
        )

    image = Image.new("RGB", geometry.output_size, color=bg_color)
    draw = ImageDraw.Draw(image)
    font = font or load_font(geometry.font_size)

    for y, row in enumerate(grid):
        for x, glyph in enumerate(row):
            if glyph is None:
                continue
            draw.text(
                (x * geometry.cell_width, y * geometry.cell_height),
                glyph,
                font=font,
                fill=text_color,
            )

    return image


def default_export_name() -> str:
    return f"Le_02_{int(time.time() * 1000)}.png"


def export_image(
    image: Image.Image,
    path: Optional[Union[str, os.PathLike]] = None,
    output_dir: str = DEFAULT_OUTPUT_DIR,
) -> str:
    """
    Save a rendered image as PNG.
    Returns the absolute path of the written file.
    """
    if path is None:
        os.makedirs(output_dir, exist_ok=True)
        path = os.path.join(output_dir, default_export_name())
    else:
        parent = os.path.dirname(os.fspath(path))
        if parent:
            os.makedirs(parent, exist_ok=True)

    image.save(path, format="PNG")
    return os.path.abspath(path)
