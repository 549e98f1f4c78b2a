"""Error taxonomy for palette extraction."""


class PaletteError(Exception):
    """Base class for every failure the extractor reports."""


class DecodeError(PaletteError):
    """Image bytes are empty, corrupt, or could not be resized."""


class EmptyInputError(PaletteError):
    """Extraction was requested with no image selected."""
