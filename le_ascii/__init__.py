"""
LE_ASCII Transformer

Image to optical signal converter: turns raster images into
character-mosaic renderings using:
- A detail-driven grid geometry (40-600 columns)
- BT.601 luminance with brightness/contrast/invert adjustments
- Five glyph ramps (detail, halftone, ascii, binary, blocks)
- Optional Gemini / HuggingFace source image generation
"""

__version__ = "0.2.0"

from .bitmap import SourceBitmap, load_bitmap
from .charsets import get_ramp, list_charsets
from .exporter import export_image, render_grid_to_image
from .generator import GenerationError, create_generator
from .geometry import Geometry, resolve_geometry
from .mapper import GlyphGrid, map_pixel, render
from .pipeline import AsciiTransformer, ProcessingState, image_to_ascii, prompt_to_ascii
from .result import TransformResult
from .settings import AsciiSettings

__all__ = [
    "AsciiSettings",
    "AsciiTransformer",
    "GenerationError",
    "Geometry",
    "GlyphGrid",
    "ProcessingState",
    "SourceBitmap",
    "TransformResult",
    "create_generator",
    "export_image",
    "get_ramp",
    "image_to_ascii",
    "list_charsets",
    "load_bitmap",
    "map_pixel",
    "prompt_to_ascii",
    "render",
    "render_grid_to_image",
    "resolve_geometry",
]
