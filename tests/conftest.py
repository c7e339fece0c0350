import numpy as np
import pytest

from pixelfixel.raster import RasterBuffer

COLORS = np.array(
    [
        (20, 30, 40, 255),
        (200, 40, 60, 255),
        (60, 180, 90, 255),
        (240, 220, 120, 255),
        (90, 80, 210, 255),
    ],
    dtype=np.uint8,
)


@pytest.fixture
def logical_art():
    """8x6 image where every pair of neighbours differs, in both directions."""
    ys, xs = np.mgrid[0:6, 0:8]
    return COLORS[(xs + 2 * ys) % len(COLORS)]


@pytest.fixture
def upscale():
    """Blow a logical (H, W, 4) array up into h x v blocks."""

    def _upscale(array, h, v=None):
        v = h if v is None else v
        big = np.repeat(np.repeat(array, v, axis=0), h, axis=1)
        return RasterBuffer.from_array(big)

    return _upscale


@pytest.fixture
def noisy_buffer():
    rng = np.random.default_rng(1234)
    return RasterBuffer.from_array(rng.integers(0, 256, size=(7, 9, 4), dtype=np.uint8))


@pytest.fixture
def checkerboard():
    ys, xs = np.mgrid[0:8, 0:8]
    board = np.where(((xs + ys) % 2 == 0)[..., None], (250, 250, 250, 255), (10, 10, 10, 255))
    return RasterBuffer.from_array(board.astype(np.uint8))
