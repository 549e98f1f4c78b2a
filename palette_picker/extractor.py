"""Palette extraction: decode, downscale, quantize, rank, truncate.

The image is resized to a fixed footprint (default 200x200) before analysis.
This bounds the cost of quantization whatever the source resolution, at the
price of colour fidelity: small details can vanish and the aspect ratio is
not kept. Nearest-neighbour resampling is used so resizing never invents
blended colours that are absent from the source.

Ranking is by population, largest first. Equal populations are ordered by
packed 0xRRGGBB value, ascending, so the result is stable across calls.

extract() is pure: no I/O, no logging, no shared state.
"""

import asyncio
import io
import operator
import struct
from collections.abc import Callable, Iterable

import numpy as np
from PIL import Image, UnidentifiedImageError

from palette_picker import registry
from palette_picker.core.errors import DecodeError, EmptyInputError
from palette_picker.core.filters import keep
from palette_picker.core.types import Color, Palette, QuantizerOptions, SourceImage, Swatch

DEFAULT_SIZE = (200, 200)
DEFAULT_MAX_COLORS = 200

# What Pillow raises on corrupt or truncated input, depending on the plugin
_DECODE_ERRORS = (UnidentifiedImageError, OSError, ValueError, SyntaxError, struct.error, Image.DecompressionBombError)


def _positive(value, what: str) -> int:
    try:
        n = operator.index(value)
    except TypeError:
        raise ValueError(f'{what} must be a positive int, got {value!r}') from None
    if n < 1:
        raise ValueError(f'{what} must be a positive int, got {value!r}')
    return n


def _validate(target_size, max_colors) -> tuple[tuple[int, int], int]:
    """Normalise to plain ints; numpy integers are accepted."""
    size = tuple(target_size)
    if len(size) != 2:
        raise ValueError(f'target_size must be two positive ints, got {target_size!r}')
    return (_positive(size[0], 'target_size'), _positive(size[1], 'target_size')), _positive(max_colors, 'max_colors')


def decode(image_bytes: bytes, target_size: tuple[int, int] = DEFAULT_SIZE) -> np.ndarray:
    """Decode and resize. Returns an (N, 4) uint8 RGBA array of opaque-ish pixels.

    Fully transparent pixels are dropped; they carry no colour.
    """
    if len(image_bytes) == 0:
        raise DecodeError('Image is empty (0 bytes)')
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            img.load()
            rgba = img.convert('RGBA')
    except _DECODE_ERRORS as e:
        raise DecodeError(f'Cannot decode image: {e}') from e

    try:
        resized = rgba.resize(target_size, Image.Resampling.NEAREST)
    except (OSError, ValueError, MemoryError) as e:
        raise DecodeError(f'Cannot resize image to {target_size[0]}x{target_size[1]}: {e}') from e

    pixels = np.asarray(resized, dtype=np.uint8).reshape(-1, 4)
    return pixels[pixels[:, 3] > 0]


def rank(swatches: Iterable[Swatch], max_colors: int) -> list[Swatch]:
    """Most populous first, ties by packed RGB ascending, truncated."""
    ordered = sorted(swatches, key=lambda s: (-s.population, s.color.packed))
    return ordered[:max_colors]


def extract(
    image_bytes: bytes | SourceImage | None,
    target_size: tuple[int, int] = DEFAULT_SIZE,
    max_colors: int = DEFAULT_MAX_COLORS,
    quantizer: str = registry.DEFAULT,
    filters: Iterable[Callable[[Color], bool]] = (),
) -> Palette:
    """Extract an ordered palette of at most max_colors colours.

    Raises EmptyInputError when no image is given, DecodeError when the
    bytes cannot be decoded or resized, ValueError on bad arguments and
    KeyError for an unknown quantizer name.
    """
    if image_bytes is None:
        raise EmptyInputError('No image selected')
    if isinstance(image_bytes, SourceImage):
        image_bytes = image_bytes.data
    target_size, max_colors = _validate(target_size, max_colors)
    quant = registry.get(quantizer)
    filters = list(filters)

    pixels = decode(bytes(image_bytes), target_size)
    swatches = quant.execute(pixels, max_colors, QuantizerOptions(filters=filters))
    if filters:
        swatches = [s for s in swatches if keep(s.color, filters)]
    return Palette(swatches=tuple(rank(swatches, max_colors)), quantizer=quant.name)


async def extract_async(
    image_bytes: bytes | SourceImage | None,
    target_size: tuple[int, int] = DEFAULT_SIZE,
    max_colors: int = DEFAULT_MAX_COLORS,
    quantizer: str = registry.DEFAULT,
    filters: Iterable[Callable[[Color], bool]] = (),
) -> Palette:
    """extract() in a worker thread, so decode and quantize do not block the loop."""
    return await asyncio.to_thread(extract, image_bytes, target_size, max_colors, quantizer, list(filters))
