"""
Conversion Settings

The immutable settings record consumed by every conversion call.
Ranges are validated at construction so the mapper can trust its inputs.
"""

from dataclasses import dataclass, fields, replace as dataclass_replace
from typing import Any, Dict, Mapping

from .charsets import DEFAULT_CHARSET, list_charsets


RESOLUTION_RANGE = (0.1, 1.0)
CONTRAST_RANGE = (0.5, 3.0)
BRIGHTNESS_RANGE = (-100, 100)

CONTRAST_CURVES = ("linear", "fast")

# camelCase option names used in saved JSON settings
_OPTION_ALIASES = {
    "charSetMode": "char_set_mode",
    "contrastCurve": "contrast_curve",
}


@dataclass(frozen=True)
class AsciiSettings:
    """
    Settings for a single image-to-glyph conversion.

    Attributes:
        resolution: Detail (density) control in [0.1, 1.0]; higher = smaller cells
        contrast: Tone-curve steepness around mid-gray in [0.5, 3.0]
        brightness: Additive luminance offset in [-100, 100], applied before contrast
        invert: Flip the final luminance (255 - gray)
        char_set_mode: Name of the glyph ramp (see list_charsets())
        contrast_curve: "linear" (contrast is the slope) or "fast" (legacy formula)
    """
    resolution: float = 0.7
    contrast: float = 1.1
    brightness: int = 0
    invert: bool = False
    char_set_mode: str = DEFAULT_CHARSET
    contrast_curve: str = "linear"

    def __post_init__(self):
        _check_number("resolution", self.resolution, RESOLUTION_RANGE)
        _check_number("contrast", self.contrast, CONTRAST_RANGE)
        _check_number("brightness", self.brightness, BRIGHTNESS_RANGE)

        # Sliders hand us floats; brightness is integral by contract
        if isinstance(self.brightness, float):
            if not self.brightness.is_integer():
                raise ValueError(f"brightness must be an integer, got {self.brightness}")
            object.__setattr__(self, "brightness", int(self.brightness))

        if not isinstance(self.invert, bool):
            raise ValueError(f"invert must be a bool, got {self.invert!r}")
        if self.char_set_mode not in list_charsets():
            raise ValueError(
                f"Unknown charset: {self.char_set_mode}. Available: {list_charsets()}"
            )
        if self.contrast_curve not in CONTRAST_CURVES:
            raise ValueError(
                f"Unknown contrast curve: {self.contrast_curve}. Available: {list(CONTRAST_CURVES)}"
            )

    def replace(self, **changes) -> "AsciiSettings":
        """Return a validated copy with some fields changed."""
        return dataclass_replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "AsciiSettings":
        """
        Build settings from a plain mapping, e.g. a loaded JSON settings file.

        Accepts the field names as well as the camelCase option
        names (``charSetMode``). Unknown keys are rejected rather than ignored.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown setting: {key}. Recognized: {sorted(known)}")
            kwargs[name] = value
        return cls(**kwargs)


def _check_number(name: str, value: Any, bounds) -> None:
    low, high = bounds
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if not low <= value <= high:
        raise ValueError(f"{name} must be in [{low}, {high}], got {value}")
