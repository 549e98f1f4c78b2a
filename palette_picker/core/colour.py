"""Colour conversions: hex formatting and HSL."""

import colorsys

from palette_picker.core.types import Color


def to_hex(color: Color) -> str:
    """Format as uppercase '#RRGGBB'. Alpha is never included."""
    return f'#{color.r:02X}{color.g:02X}{color.b:02X}'


def to_hsl(color: Color) -> tuple[float, float, float]:
    """Return (hue degrees 0-360, saturation 0-1, lightness 0-1)."""
    h, lightness, s = colorsys.rgb_to_hls(color.r / 255.0, color.g / 255.0, color.b / 255.0)
    return (h * 360.0, s, lightness)
