"""Shared types for palette-tool: Color, Swatch, Palette, SourceImage, Quantizer."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

import numpy as np


@dataclass(frozen=True)
class Color:
    """An RGBA colour. Channels are ints in [0, 255]."""

    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self) -> None:
        for channel in ('r', 'g', 'b', 'a'):
            value = getattr(self, channel)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f'Color.{channel} must be an int, got {value!r}')
            if not 0 <= value <= 255:
                raise ValueError(f'Color.{channel} out of range [0, 255]: {value}')

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    @property
    def packed(self) -> int:
        """0xRRGGBB, used as the stable tie-break key when ranking."""
        return (self.r << 16) | (self.g << 8) | self.b

    @property
    def hex(self) -> str:
        from palette_picker.core.colour import to_hex

        return to_hex(self)


@dataclass(frozen=True)
class Swatch:
    """One palette entry: a representative colour and how many pixels it stands for."""

    color: Color
    population: int = 0

    @property
    def hex(self) -> str:
        return self.color.hex


@dataclass(frozen=True)
class Palette:
    """Ordered swatches, most prominent first."""

    swatches: tuple[Swatch, ...] = ()
    quantizer: str = ''

    @classmethod
    def empty(cls) -> Palette:
        return cls()

    def __len__(self) -> int:
        return len(self.swatches)

    def __iter__(self) -> Iterator[Swatch]:
        return iter(self.swatches)

    def __getitem__(self, index: int) -> Swatch:
        return self.swatches[index]

    @property
    def colors(self) -> list[Color]:
        return [s.color for s in self.swatches]

    @property
    def dominant(self) -> Swatch | None:
        return self.swatches[0] if self.swatches else None

    def hex_codes(self) -> list[str]:
        return [s.hex for s in self.swatches]

    def entries(self) -> list[dict[str, Any]]:
        """Colour/hex pairs for the presentation layer."""
        return [
            {
                'hex': s.hex,
                'r': s.color.r,
                'g': s.color.g,
                'b': s.color.b,
                'a': s.color.a,
                'population': s.population,
            }
            for s in self.swatches
        ]


@dataclass(frozen=True)
class SourceImage:
    """Raw image bytes as selected by the user. Never retained by a Palette."""

    data: bytes
    name: str = ''

    def __len__(self) -> int:
        return len(self.data)


@dataclass
class QuantizerOptions:
    """Per-run knobs passed through to a quantizer."""

    filters: list[Callable[[Color], bool]] = field(default_factory=list)


class Quantizer:
    """A self-registering quantization algorithm.

    Usage in a quantizer module:

        quantizer = Quantizer(name='median-cut', help='Box-cut over a 5-bit histogram')

        @quantizer.run
        def run(pixels, max_colors, options):
            ...

    `pixels` is an (N, 4) uint8 RGBA array with transparent pixels removed.
    The run function returns swatches in any order; ranking is done by the
    extractor.
    """

    def __init__(self, name: str, help: str = ''):
        self.name = name
        self.help = help
        self._run_fn: Callable | None = None

    def run(self, fn: Callable) -> Callable:
        """Decorator to register the run function."""
        self._run_fn = fn
        return fn

    def execute(self, pixels: np.ndarray, max_colors: int, options: QuantizerOptions | None = None) -> list[Swatch]:
        """Execute the quantizer's run function."""
        if self._run_fn is None:
            raise RuntimeError(f'Quantizer {self.name} has no run function')
        return self._run_fn(pixels, max_colors, options or QuantizerOptions())
