"""
Character Ramp Definitions

Provides the ordered glyph ramps used for tone-based rendering:
- halftone: Compact ramp with a print-like dot feel
- detail: 92 glyphs tuned for depth perception (default)
- ascii: Classic 67-character density ramp
- binary: Space plus two digits
- blocks: Unicode shade blocks (░▒▓█)

Every ramp runs from background (space, index 0) to the densest glyph.
The strings are matched by index, so length and order must not change.
"""

from functools import lru_cache
from typing import Dict, List

import numpy as np


# ============================================================================
# RAMP DEFINITIONS
# ============================================================================

RAMP_HALFTONE = " .·:+*?%S#@"

# Optimized for depth perception
RAMP_DETAIL = (
    " `.-"
    "':_,^=;><+!rc*/z?sLTv)J7(|Fi{C}fI31tlu[neoZ5Yxjya]2ESwqkP6h9d4VpOGbUAKXHm8RD#$Bg0MNWQ%&@"
)

RAMP_ASCII = ' .`^",:;Il!i~+_-?][}{1)(|\\/tfjrxnuvczXYUJCLQ0OZmwqpdbkhao*#MW&8%B@$'

RAMP_BINARY = " 01"

RAMP_BLOCKS = " ░▒▓█"

BACKGROUND_GLYPH = " "

DEFAULT_CHARSET = "detail"


# ============================================================================
# RAMP REGISTRY
# ============================================================================

_RAMP_REGISTRY: Dict[str, str] = {
    "halftone": RAMP_HALFTONE,
    "detail": RAMP_DETAIL,
    "ascii": RAMP_ASCII,
    "binary": RAMP_BINARY,
    "blocks": RAMP_BLOCKS,
}


def get_ramp(name: str = DEFAULT_CHARSET) -> str:
    """
    Get a character ramp by name.

    Available ramps:
        - halftone
        - detail
        - ascii
        - binary
        - blocks

    Args:
        name: Name of the ramp (the ``char_set_mode`` setting)

    Returns:
        The ramp string, background glyph first
    """
    if name not in _RAMP_REGISTRY:
        raise ValueError(f"Unknown charset: {name}. Available: {list_charsets()}")
    return _RAMP_REGISTRY[name]


@lru_cache(maxsize=None)
def glyph_array(ramp: str) -> np.ndarray:
    """Read-only numpy array of the ramp's glyphs, for fancy indexing with ramp positions."""
    glyphs = np.array(list(ramp))
    glyphs.flags.writeable = False
    return glyphs


def list_charsets() -> List[str]:
    """List all available ramp names, in the order the style picker shows them."""
    return ["detail", "halftone", "ascii", "binary", "blocks"]
