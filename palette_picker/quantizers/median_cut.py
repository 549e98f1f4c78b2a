"""Median-cut quantization over a 5-bit-per-channel colour histogram.

Every pixel is bucketed by its colour truncated to 5 bits per channel
(32 levels). If there are no more buckets than max_colors, each bucket is a
swatch. Otherwise the bucket set is cut into boxes:

  1. Start with one box holding every bucket, shrunk to fit.
  2. Take the box with the largest volume (in 5-bit space; ties go to the
     older box).
  3. Split it along its longest channel range (ties: red, green, blue) at
     the first bucket where the cumulative population reaches half the box.
  4. Repeat until there are max_colors boxes or no box holds two buckets.

A swatch's colour is the population-weighted mean of the original 8-bit
pixels in its bucket or box, so a solid-colour image comes back exact.

This is the default algorithm.

Example:
    palette-tool median-cut photo.jpg
    palette-tool median-cut photo.jpg --max-colors 16 --filter avoid-red-black-white
"""

import heapq

import numpy as np

from palette_picker.core.filters import keep
from palette_picker.core.types import Color, Quantizer, QuantizerOptions, Swatch

quantizer = Quantizer(
    name='median-cut',
    help='Box-cut over a 5-bit colour histogram, largest box split at the population median.',
)

QUANTIZE_BITS = 5
_SHIFT = 8 - QUANTIZE_BITS
_MASK = (1 << QUANTIZE_BITS) - 1

RED, GREEN, BLUE = 0, 1, 2

# Secondary sort channels per split dimension
_SORT_ORDER = {
    RED: (RED, GREEN, BLUE),
    GREEN: (GREEN, RED, BLUE),
    BLUE: (BLUE, GREEN, RED),
}


def _mean_colour(sums: np.ndarray, population: int) -> Color:
    """Rounded weighted mean, integer arithmetic only."""
    channels = [int((2 * int(s) + population) // (2 * population)) for s in sums]
    return Color(*channels)


class _Histogram:
    """Buckets of 5-bit colours with population and summed 8-bit RGBA."""

    def __init__(self, pixels: np.ndarray):
        q = (pixels[:, :3] >> _SHIFT).astype(np.int64)
        keys = (q[:, 0] << (2 * QUANTIZE_BITS)) | (q[:, 1] << QUANTIZE_BITS) | q[:, 2]
        unique, inverse, counts = np.unique(keys, return_inverse=True, return_counts=True)
        inverse = inverse.reshape(-1)

        self.sums = np.zeros((len(unique), 4), dtype=np.int64)
        np.add.at(self.sums, inverse, pixels.astype(np.int64))
        self.population = counts.astype(np.int64)
        self.coords = np.stack(
            [
                (unique >> (2 * QUANTIZE_BITS)) & _MASK,
                (unique >> QUANTIZE_BITS) & _MASK,
                unique & _MASK,
            ],
            axis=1,
        )

    def __len__(self) -> int:
        return len(self.population)

    def colour(self, i: int) -> Color:
        return _mean_colour(self.sums[i], int(self.population[i]))

    def select(self, mask: np.ndarray) -> None:
        self.sums = self.sums[mask]
        self.population = self.population[mask]
        self.coords = self.coords[mask]


class _Box:
    """A contiguous range [lower, upper] of the shared bucket order."""

    __slots__ = ('lower', 'upper', 'mins', 'maxs')

    def __init__(self, hist: _Histogram, order: np.ndarray, lower: int, upper: int):
        self.fit(hist, order, lower, upper)

    def fit(self, hist: _Histogram, order: np.ndarray, lower: int, upper: int) -> None:
        """Shrink to the bounding cube of buckets order[lower..upper]."""
        self.lower = lower
        self.upper = upper
        coords = hist.coords[order[lower : upper + 1]]
        self.mins = coords.min(axis=0)
        self.maxs = coords.max(axis=0)

    @property
    def volume(self) -> int:
        return int(np.prod(self.maxs - self.mins + 1))

    def can_split(self) -> bool:
        return self.upper > self.lower

    def longest_dimension(self) -> int:
        r, g, b = (int(x) for x in self.maxs - self.mins)
        if r >= g and r >= b:
            return RED
        if g >= r and g >= b:
            return GREEN
        return BLUE

    def split(self, hist: _Histogram, order: np.ndarray) -> '_Box':
        """Sort this box's buckets along its longest axis, cut at the median.

        Shrinks self to the lower half and returns the upper half.
        """
        dim = self.longest_dimension()
        idx = order[self.lower : self.upper + 1]
        primary, secondary, tertiary = _SORT_ORDER[dim]
        coords = hist.coords[idx]
        perm = np.lexsort((coords[:, tertiary], coords[:, secondary], coords[:, primary]))
        idx = idx[perm]
        order[self.lower : self.upper + 1] = idx

        cumulative = np.cumsum(hist.population[idx])
        midpoint = cumulative[-1] / 2.0
        i = int(np.searchsorted(cumulative, midpoint, side='left'))
        split_at = min(self.lower + i, self.upper - 1)

        upper_box = _Box(hist, order, split_at + 1, self.upper)
        self.fit(hist, order, self.lower, split_at)
        return upper_box

    def swatch(self, hist: _Histogram, order: np.ndarray) -> Swatch:
        idx = order[self.lower : self.upper + 1]
        population = int(hist.population[idx].sum())
        sums = hist.sums[idx].sum(axis=0)
        return Swatch(color=_mean_colour(sums, population), population=population)


def _cut(hist: _Histogram, max_colors: int) -> list[Swatch]:
    order = np.arange(len(hist))
    seq = 0
    heap: list[tuple[int, int, _Box]] = []

    first = _Box(hist, order, 0, len(hist) - 1)
    heapq.heappush(heap, (-first.volume, seq, first))

    while len(heap) < max_colors:
        neg_volume, box_seq, box = heapq.heappop(heap)
        if not box.can_split():
            # Largest box is a single bucket, so every box is
            heapq.heappush(heap, (neg_volume, box_seq, box))
            break
        upper = box.split(hist, order)
        seq += 1
        heapq.heappush(heap, (-box.volume, seq, box))
        seq += 1
        heapq.heappush(heap, (-upper.volume, seq, upper))

    return [box.swatch(hist, order) for _vol, _seq, box in heap]


@quantizer.run
def run(pixels: np.ndarray, max_colors: int, options: QuantizerOptions) -> list[Swatch]:
    if len(pixels) == 0:
        return []

    hist = _Histogram(pixels)

    if options.filters:
        mask = np.array([keep(hist.colour(i), options.filters) for i in range(len(hist))], dtype=bool)
        hist.select(mask)
        if len(hist) == 0:
            return []

    if len(hist) <= max_colors:
        return [Swatch(color=hist.colour(i), population=int(hist.population[i])) for i in range(len(hist))]

    return _cut(hist, max_colors)
