"""
Color math and palette mapping.

Colors are RGB triples of ints in [0, 255]. Alpha never takes part in a
distance or an average.
"""

from typing import Iterable, Sequence

import numpy as np

from .raster import EmptyPaletteError, RasterBuffer, with_rgb

Color = tuple[int, int, int]

# Rows of the (pixels x palette) distance matrix computed at once
_NEAREST_CHUNK = 4096


def round_half_up(values):
    """Round to the nearest integer with halves going up (2.5 -> 3, not 2)."""
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5).astype(np.int64)


def distance_squared(c1: Sequence[int], c2: Sequence[int]) -> int:
    dr = int(c1[0]) - int(c2[0])
    dg = int(c1[1]) - int(c2[1])
    db = int(c1[2]) - int(c2[2])
    return dr * dr + dg * dg + db * db


def color_distance(c1: Sequence[int], c2: Sequence[int]) -> float:
    """Simple RGB Euclidean distance, 0 to ~441."""
    return float(np.sqrt(distance_squared(c1, c2)))


def average_color(colors: Iterable[Sequence[int]]) -> Color:
    """Channel-wise mean of a non-empty color collection, rounded to ints."""
    if not isinstance(colors, np.ndarray):
        colors = list(colors)
    arr = np.asarray(colors, dtype=np.int64)
    if arr.size == 0:
        raise ValueError("cannot average an empty color collection")
    arr = arr.reshape(len(arr), -1)[:, :3]
    r, g, b = round_half_up(arr.sum(axis=0) / len(arr))
    return (int(r), int(g), int(b))


def palette_array(palette: Iterable[Sequence[int]]) -> np.ndarray:
    """Validate a palette and return it as a (P, 3) int64 array."""
    arr = np.asarray([tuple(c)[:3] for c in palette], dtype=np.int64)
    if arr.size == 0:
        raise EmptyPaletteError("palette has no colors")
    if arr.min() < 0 or arr.max() > 255:
        raise ValueError("palette channel values must lie in [0, 255]")
    return arr.reshape(-1, 3)


def nearest_indices(colors: np.ndarray, palette: np.ndarray) -> np.ndarray:
    """
    Index of the nearest palette entry for each row of `colors`.

    Distances are squared RGB distances; argmin keeps the first palette
    entry on ties, so lookups are stable in palette order.
    """
    colors = np.asarray(colors, dtype=np.int64).reshape(-1, 3)
    palette = np.asarray(palette, dtype=np.int64).reshape(-1, 3)
    if len(palette) == 0:
        raise EmptyPaletteError("palette has no colors")
    out = np.empty(len(colors), dtype=np.int64)
    for start in range(0, len(colors), _NEAREST_CHUNK):
        block = colors[start:start + _NEAREST_CHUNK]
        diff = block[:, None, :] - palette[None, :, :]
        out[start:start + len(block)] = np.argmin((diff * diff).sum(axis=2), axis=1)
    return out


def nearest_color(color: Sequence[int], palette: Sequence[Sequence[int]]) -> Color:
    """The palette entry closest to `color`; the earliest entry wins ties."""
    pal = palette_array(palette)
    idx = int(nearest_indices(np.asarray(color[:3]), pal)[0])
    r, g, b = pal[idx]
    return (int(r), int(g), int(b))


def map_to_palette(colors: np.ndarray, palette: np.ndarray) -> np.ndarray:
    """
    Replace every row of `colors` with its nearest palette color.

    Works on the distinct colors only and scatters the result back, which
    keeps the distance matrix small for flat pixel art.
    """
    colors = np.asarray(colors, dtype=np.int64).reshape(-1, 3)
    if len(colors) == 0:
        return colors.copy()
    uniques, inverse = np.unique(colors, axis=0, return_inverse=True)
    idx = nearest_indices(uniques, palette)
    return palette[idx][inverse.reshape(-1)]


def total_distortion(colors: np.ndarray, palette: np.ndarray) -> int:
    """Sum of squared distances from each color to its nearest palette entry."""
    colors = np.asarray(colors, dtype=np.int64).reshape(-1, 3)
    diff = colors - map_to_palette(colors, palette)
    return int((diff * diff).sum())


def apply_palette(buffer: RasterBuffer, palette: Sequence[Sequence[int]]) -> RasterBuffer:
    """Map every pixel to its nearest palette color, keeping alpha as-is."""
    pal = palette_array(palette)
    return with_rgb(buffer, map_to_palette(buffer.rgb(), pal))
