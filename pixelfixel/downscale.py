"""
Tile-wise dominant color downscaling.

Each output pixel covers a rectangular tile of the source. A small k-means
over the tile splits its fill color from the anti-aliased edge pixels left
by the upscaler, and the biggest cluster gives the output color.
"""

import numpy as np

from .color import round_half_up
from .raster import InvalidDimensionsError, RasterBuffer

DEFAULT_CENTROIDS = 2

# Fixed iteration count, no convergence test
KMEANS_ITERATIONS = 5


def tile_bounds(index: int, source_size: int, target_size: int) -> tuple[int, int]:
    """Half-open source range [start, end) covered by output cell `index`."""
    start = min(index * source_size // target_size, source_size)
    end = min((index + 1) * source_size // target_size, source_size)
    return start, end


def _assign(colors: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    diff = colors[:, None, :] - centroids[None, :, :]
    distances = np.sqrt((diff * diff).sum(axis=2))
    # argmin keeps the lowest centroid index on ties
    return np.argmin(distances, axis=1)


def dominant_color(colors: np.ndarray, k: int = DEFAULT_CENTROIDS) -> tuple[int, int, int]:
    """
    Representative color of the largest of `k` clusters in `colors`.

    Centroids are seeded from evenly spaced members (duplicates allowed when
    there are fewer colors than centroids) and refined for exactly
    KMEANS_ITERATIONS rounds. A cluster that loses all members keeps its
    previous centroid.
    """
    colors = np.asarray(colors, dtype=np.float64).reshape(-1, 3)
    n = len(colors)
    if n == 0:
        raise ValueError("cannot pick a dominant color from an empty tile")
    if k < 1:
        raise ValueError(f"need at least one centroid, got {k}")
    if n == 1:
        r, g, b = colors[0]
        return (int(r), int(g), int(b))

    step = n // k
    centroids = colors[[i * step for i in range(k)]].copy()

    for _ in range(KMEANS_ITERATIONS):
        labels = _assign(colors, centroids)
        for j in range(k):
            members = colors[labels == j]
            if len(members):
                centroids[j] = members.sum(axis=0) / len(members)

    labels = _assign(colors, centroids)
    largest = int(np.argmax(np.bincount(labels, minlength=k)))
    r, g, b = round_half_up(centroids[largest])
    return (int(r), int(g), int(b))


def downscale(
    buffer: RasterBuffer,
    target_width: int,
    target_height: int,
    k: int = DEFAULT_CENTROIDS,
) -> RasterBuffer:
    """
    Downscale to target_width x target_height using per-tile dominant colors.

    Tile boundaries are proportional and need not be integer multiples of
    the source size. Tiles with no source pixels (target larger than source)
    stay transparent black; every other output pixel is fully opaque.
    """
    if target_width <= 0 or target_height <= 0:
        raise InvalidDimensionsError(f"invalid target size {target_width}x{target_height}")

    src = buffer.pixels[:, :, :3]
    out = np.zeros((target_height, target_width, 4), dtype=np.uint8)

    cols = [tile_bounds(tx, buffer.width, target_width) for tx in range(target_width)]
    for ty in range(target_height):
        y1, y2 = tile_bounds(ty, buffer.height, target_height)
        if y1 >= y2:
            continue
        for tx, (x1, x2) in enumerate(cols):
            if x1 >= x2:
                continue
            tile = src[y1:y2, x1:x2].reshape(-1, 3)
            out[ty, tx, :3] = dominant_color(tile, k)
            out[ty, tx, 3] = 255

    return RasterBuffer(target_width, target_height, out.reshape(-1))
