"""
Grid detection for upscaled pixel art.

An upscaled logical pixel leaves a color discontinuity along its cell edge
on nearly every row (or column) that crosses it. Summing the color jump at
each boundary over the whole image gives a 1-D signal whose peaks sit on
cell edges; the median gap between peaks is the cell size.
"""

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
from scipy.signal import argrelmax

from .color import round_half_up
from .downscale import DEFAULT_CENTROIDS, downscale
from .raster import RasterBuffer


@dataclass(frozen=True)
class DetectionResult:
    downscaled: RasterBuffer
    h_factor: float
    v_factor: float
    h_peaks: list[int] = field(default_factory=list)
    v_peaks: list[int] = field(default_factory=list)

    @property
    def scale(self) -> float:
        """The larger of the two factors, as reported to users."""
        return max(self.h_factor, self.v_factor)


def build_difference_signal(buffer: RasterBuffer, axis: str) -> np.ndarray:
    """
    Sum of Euclidean RGB distances across each boundary between neighbours.

    axis="x" compares horizontally adjacent pixels and yields width - 1
    values (one per column boundary); axis="y" compares vertically adjacent
    pixels and yields height - 1 values.
    """
    rgb = buffer.pixels[:, :, :3].astype(np.float64)
    if axis == "x":
        diff = rgb[:, 1:, :] - rgb[:, :-1, :]
        return np.sqrt((diff * diff).sum(axis=2)).sum(axis=0)
    if axis == "y":
        diff = rgb[1:, :, :] - rgb[:-1, :, :]
        return np.sqrt((diff * diff).sum(axis=2)).sum(axis=1)
    raise ValueError(f"axis must be 'x' or 'y', got {axis!r}")


def find_peaks(signal: Sequence[float], min_separation: int = 1, min_height: float = 0.0) -> list[int]:
    """
    Indices of strict local maxima, scanned left to right.

    A candidate must exceed both neighbours, reach min_height, and lie at
    least min_separation after the last accepted peak. The first peak of a
    close pair wins; rejected candidates are never revisited. The two end
    positions are never peaks.
    """
    values = np.asarray(signal, dtype=np.float64)
    if values.size < 3:
        return []

    peaks: list[int] = []
    for i in argrelmax(values)[0]:
        if values[i] < min_height:
            continue
        if peaks and i - peaks[-1] < min_separation:
            continue
        peaks.append(int(i))
    return peaks


def median_spacing(peaks: Sequence[int]) -> float:
    """Median gap between consecutive peaks, or 1.0 with fewer than two peaks."""
    if len(peaks) < 2:
        return 1.0
    gaps = np.diff(np.sort(np.asarray(peaks, dtype=np.int64)))
    return float(np.median(gaps))


def target_dimensions(width: int, height: int, h_factor: float, v_factor: float) -> tuple[int, int]:
    """Logical image size for the given cell factors, never below 1x1."""
    new_width = max(1, int(round_half_up(width / h_factor)))
    new_height = max(1, int(round_half_up(height / v_factor)))
    return new_width, new_height


def detect_grid(buffer: RasterBuffer, centroids: int = DEFAULT_CENTROIDS) -> DetectionResult:
    """
    Estimate the upscaling factor on each axis and downscale to match.

    Returns the downscaled buffer together with the horizontal and vertical
    factors (source pixels per logical pixel). An axis without periodic
    edges reports a factor of 1 and is left at full size.
    """
    h_peaks = find_peaks(build_difference_signal(buffer, "x"), min_separation=1, min_height=0.0)
    v_peaks = find_peaks(build_difference_signal(buffer, "y"), min_separation=1, min_height=0.0)

    h_factor = median_spacing(h_peaks)
    v_factor = median_spacing(v_peaks)

    new_width, new_height = target_dimensions(buffer.width, buffer.height, h_factor, v_factor)
    downscaled = downscale(buffer, new_width, new_height, centroids)

    return DetectionResult(downscaled, h_factor, v_factor, h_peaks, v_peaks)
