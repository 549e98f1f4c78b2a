"""Dominant colour extraction using k-means clustering.

Samples up to 5000 pixels, runs KMeans (n_init=3, random_state=42) with
n_clusters = min(max_colors, distinct sampled colours). Each cluster centre
becomes a swatch; its population is the cluster size in the sample.

Slower than median-cut on large palettes, but centres sit where the pixels
actually are rather than on box averages.

Example:
    palette-tool kmeans photo.jpg --max-colors 8
"""

import numpy as np
from sklearn.cluster import KMeans

from palette_picker.core.types import Color, Quantizer, QuantizerOptions, Swatch

quantizer = Quantizer(
    name='kmeans',
    help='Dominant colours via k-means over sampled pixels (scikit-learn).',
)

N_SAMPLES = 5000
SEED = 42


@quantizer.run
def run(pixels: np.ndarray, max_colors: int, options: QuantizerOptions) -> list[Swatch]:
    if len(pixels) == 0:
        return []

    if len(pixels) > N_SAMPLES:
        indices = np.random.default_rng(SEED).choice(len(pixels), N_SAMPLES, replace=False)
        pixels = pixels[np.sort(indices)]

    rgb = pixels[:, :3]
    distinct = len(np.unique(rgb, axis=0))
    n_clusters = min(max_colors, distinct)

    km = KMeans(n_clusters=n_clusters, n_init=3, random_state=SEED)
    km.fit(rgb.astype(np.float64))
    labels = km.labels_
    counts = np.bincount(labels, minlength=n_clusters)
    centres = np.clip(np.rint(km.cluster_centers_), 0, 255).astype(int)

    results = []
    for i, centre in enumerate(centres):
        if counts[i] == 0:
            continue
        alpha = int(np.rint(pixels[labels == i, 3].mean()))
        results.append(
            Swatch(
                color=Color(int(centre[0]), int(centre[1]), int(centre[2]), alpha),
                population=int(counts[i]),
            )
        )
    return results
