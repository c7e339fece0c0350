"""
Palette construction and palette-size selection.

build_palette is a median cut: keep splitting the bucket with the widest
channel range at its median until there are enough buckets, then average
each bucket. select_best_k sweeps palette sizes and picks the elbow of the
distortion curve.
"""

from typing import Sequence

import numpy as np

from .color import Color, apply_palette, average_color, palette_array, total_distortion
from .raster import RasterBuffer

# Upper bound on the palette sizes tried during auto selection
MAX_AUTO_COLORS = 32

# Auto selection looks at every 4th pixel in scan order
BEST_K_SAMPLE_STRIDE = 4

# Empirical: maps the elbow's position in the twice-differenced curve back
# to a color count. A heuristic, not a derived constant.
ELBOW_OFFSET = 2


def _widest_channel(bucket: np.ndarray) -> tuple[int, int]:
    """(range, channel) of the channel with the largest max - min spread."""
    ranges = bucket.max(axis=0) - bucket.min(axis=0)
    channel = int(np.argmax(ranges))
    return int(ranges[channel]), channel


def build_palette(colors: Sequence[Sequence[int]] | np.ndarray, num_colors: int) -> list[Color]:
    """
    Median cut palette of at most `num_colors` entries.

    Duplicates in `colors` are kept, so frequent colors pull the palette
    toward themselves. Stops early when the bucket picked for splitting has
    fewer than two members, giving a shorter palette.
    """
    if num_colors < 1:
        raise ValueError(f"num_colors must be >= 1, got {num_colors}")
    arr = np.asarray(colors, dtype=np.int64)
    if arr.size == 0:
        return []
    arr = arr.reshape(len(arr), -1)[:, :3]

    buckets = [arr]
    spreads = [_widest_channel(arr)]

    while len(buckets) < num_colors:
        # Strict comparison: the first bucket with the widest range wins
        chosen, best_range = 0, -1
        for i, (spread, _) in enumerate(spreads):
            if spread > best_range:
                chosen, best_range = i, spread

        bucket = buckets[chosen]
        if len(bucket) < 2:
            break

        channel = spreads[chosen][1]
        ordered = bucket[np.argsort(bucket[:, channel], kind="stable")]
        mid = len(ordered) // 2
        low, high = ordered[:mid], ordered[mid:]

        buckets[chosen:chosen + 1] = [low, high]
        spreads[chosen:chosen + 1] = [_widest_channel(low), _widest_channel(high)]

    return [average_color(bucket) for bucket in buckets]


def quantize(buffer: RasterBuffer, num_colors: int) -> RasterBuffer:
    """Reduce the buffer to a median cut palette of `num_colors` colors."""
    palette = build_palette(buffer.rgb(), num_colors)
    return apply_palette(buffer, palette)


def distortion_curve(colors: np.ndarray, max_k: int) -> list[int]:
    """
    Total squared quantization error for k = 1 .. max_k.

    The sweep ends at the first k with zero error; larger palettes can only
    repeat it.
    """
    colors = np.asarray(colors, dtype=np.int64).reshape(-1, 3)
    distortions: list[int] = []
    if len(colors) == 0:
        return distortions
    for k in range(1, max_k + 1):
        palette = palette_array(build_palette(colors, k))
        distortion = total_distortion(colors, palette)
        distortions.append(distortion)
        if distortion == 0:
            break
    return distortions


def elbow_k(distortions: Sequence[float], max_k: int) -> int:
    """
    Pick a palette size from a distortion curve indexed from k = 1.

    rate[i] is the relative drop in distortion from one k to the next; the
    elbow is where that rate itself falls the most (first one on ties). A
    zero distortion ends the curve, so no rate ever divides by zero.
    """
    curve = list(distortions)
    for i, value in enumerate(curve):
        if value == 0:
            curve = curve[:i + 1]
            break

    if len(curve) < 2:
        return 2

    rates = [(curve[i - 1] - curve[i]) / curve[i - 1] for i in range(1, len(curve))]

    elbow, max_drop = 0, -float("inf")
    for i in range(1, len(rates)):
        drop = rates[i - 1] - rates[i]
        if drop > max_drop:
            elbow, max_drop = i, drop

    return max(2, min(elbow + ELBOW_OFFSET, max_k))


def select_best_k(buffer: RasterBuffer, max_k: int = MAX_AUTO_COLORS) -> int:
    """
    Suggest a palette size for `buffer` between 2 and max_k.

    Works on a 1-in-BEST_K_SAMPLE_STRIDE pixel sample and never tries more
    than MAX_AUTO_COLORS colors.
    """
    sample = buffer.rgb()[::BEST_K_SAMPLE_STRIDE]
    if len(sample) == 0 or max_k < 2:
        return 2
    distortions = distortion_curve(sample, min(max_k, MAX_AUTO_COLORS))
    return elbow_k(distortions, max_k)
