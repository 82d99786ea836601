"""
Hex color parsing for text and border colors.

Colors are given as RRGGBB or RRGGBBAA hex strings, optionally prefixed with
'#'. Channels are normalized to floats in [0, 1] so they can be written
straight into PDF color operators (rg / RG) and ExtGState opacities.
"""

import re
from dataclasses import dataclass
from typing import Optional

from errors import InvalidColor

DEFAULT_COLOR = "000000FF"

# int(x, 16) accepts whitespace, signs and underscores, so validate up front
_HEX_COLOR = re.compile(r"[0-9A-Fa-f]{6}(?:[0-9A-Fa-f]{2})?")


@dataclass(frozen=True)
class Rgba:
    """Color channels, each a float between 0 and 1."""
    red: float
    green: float
    blue: float
    alpha: float = 1.0

    @property
    def rgb(self) -> tuple:
        return (self.red, self.green, self.blue)


def hex_to_rgba(value: Optional[str] = None) -> Rgba:
    """
    Convert a hex color string into normalized RGBA channels.

    Args:
        value: 'RRGGBB' or 'RRGGBBAA', optionally prefixed with '#'.
               None or '' resolve to opaque black (000000FF).

    Returns:
        Rgba with each channel between 0 and 1. Alpha is 1 when the
        string has only six digits.

    Raises:
        InvalidColor: If the value (after stripping '#') is not exactly
                      6 or 8 hex digits
    """
    if value is None or value == "":
        value = DEFAULT_COLOR

    if not isinstance(value, str):
        raise InvalidColor(value)

    if value.startswith("#"):
        value = value[1:]

    if not _HEX_COLOR.fullmatch(value):
        raise InvalidColor(value)

    red = int(value[0:2], 16) / 255
    green = int(value[2:4], 16) / 255
    blue = int(value[4:6], 16) / 255
    alpha = int(value[6:8], 16) / 255 if len(value) == 8 else 1.0

    return Rgba(red=red, green=green, blue=blue, alpha=alpha)
