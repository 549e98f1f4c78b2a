"""Fixed-bin histogram quantization.

Quantizes each channel to 32-level bins (8 bins per channel, 512 in total)
and counts pixels per bin. A bin's colour is its centre, unless every pixel
in the bin is the same colour, in which case that exact colour is used.

Fastest option. Coarse: colours closer than one bin width merge.

Example:
    palette-tool histogram photo.jpg --json
"""

import numpy as np

from palette_picker.core.types import Color, Quantizer, QuantizerOptions, Swatch

quantizer = Quantizer(
    name='histogram',
    help='Count pixels in 32-level RGB bins. Fast and coarse.',
)

BIN = 32


@quantizer.run
def run(pixels: np.ndarray, max_colors: int, options: QuantizerOptions) -> list[Swatch]:
    if len(pixels) == 0:
        return []

    rgb = pixels[:, :3].astype(np.int64)
    binned = rgb // BIN
    keys = binned[:, 0] * 64 + binned[:, 1] * 8 + binned[:, 2]
    unique, inverse, counts = np.unique(keys, return_inverse=True, return_counts=True)
    inverse = inverse.reshape(-1)

    lo = np.full((len(unique), 3), 255, dtype=np.int64)
    hi = np.zeros((len(unique), 3), dtype=np.int64)
    np.minimum.at(lo, inverse, rgb)
    np.maximum.at(hi, inverse, rgb)
    alpha = np.zeros(len(unique), dtype=np.int64)
    np.add.at(alpha, inverse, pixels[:, 3].astype(np.int64))

    results = []
    for i, key in enumerate(unique):
        if (lo[i] == hi[i]).all():
            r, g, b = (int(x) for x in lo[i])
        else:
            r = int(key // 64) * BIN + BIN // 2
            g = int((key // 8) % 8) * BIN + BIN // 2
            b = int(key % 8) * BIN + BIN // 2
        a = int((2 * alpha[i] + counts[i]) // (2 * counts[i]))
        results.append(Swatch(color=Color(r, g, b, a), population=int(counts[i])))
    return results
