"""palette_picker — extract a dominant-colour palette from an image."""

from palette_picker.core.colour import to_hex
from palette_picker.core.errors import DecodeError, EmptyInputError, PaletteError
from palette_picker.core.types import Color, Palette, SourceImage, Swatch
from palette_picker.extractor import extract, extract_async

__version__ = '0.1.0'

__all__ = [
    'Color',
    'DecodeError',
    'EmptyInputError',
    'Palette',
    'PaletteError',
    'SourceImage',
    'Swatch',
    'extract',
    'extract_async',
    'to_hex',
]
