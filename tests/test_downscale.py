import numpy as np
import pytest

from pixelfixel.downscale import KMEANS_ITERATIONS, dominant_color, downscale, tile_bounds
from pixelfixel.raster import InvalidDimensionsError, RasterBuffer

RED = (200, 0, 0)
GRAY = (100, 100, 100)


def test_iteration_count_is_fixed():
    assert KMEANS_ITERATIONS == 5


def test_tile_bounds_are_proportional():
    assert [tile_bounds(i, 10, 3) for i in range(3)] == [(0, 3), (3, 6), (6, 10)]
    assert [tile_bounds(i, 2, 3) for i in range(3)] == [(0, 0), (0, 1), (1, 2)]


def test_dominant_color_ignores_edge_noise():
    colors = [RED] * 9
    colors[4] = GRAY
    colors[8] = GRAY
    assert dominant_color(np.array(colors)) == RED


def test_dominant_color_averages_the_winning_cluster():
    colors = np.array([(0, 0, 0), (2, 0, 0), (1, 0, 0), (255, 255, 255)])
    assert dominant_color(colors) == (1, 0, 0)


def test_dominant_color_single_cluster_rounds_half_up():
    assert dominant_color(np.array([(0, 0, 0), (1, 1, 1)]), k=1) == (1, 1, 1)


def test_dominant_color_more_centroids_than_colors():
    assert dominant_color(np.array([(5, 5, 5), (7, 7, 7)]), k=3) == (7, 7, 7)


def test_dominant_color_single_pixel():
    assert dominant_color(np.array([(9, 8, 7)])) == (9, 8, 7)


def test_dominant_color_rejects_empty():
    with pytest.raises(ValueError):
        dominant_color(np.zeros((0, 3)))


def test_same_size_downscale_is_identity(noisy_buffer):
    out = downscale(noisy_buffer, noisy_buffer.width, noisy_buffer.height)
    assert np.array_equal(out.rgb(), noisy_buffer.rgb())
    assert np.all(out.alpha() == 255)


def test_downscale_blocks(logical_art, upscale):
    out = downscale(upscale(logical_art, 3), 8, 6)
    assert np.array_equal(out.pixels, logical_art)


def test_downscale_with_uneven_tiles():
    row = np.array([[RED + (255,), RED + (255,), GRAY + (255,), GRAY + (255,), GRAY + (255,)]], dtype=np.uint8)
    out = downscale(RasterBuffer.from_array(row), 2, 1)
    assert [tuple(c) for c in out.rgb().tolist()] == [RED, GRAY]


def test_empty_tiles_stay_transparent():
    row = np.array([[RED + (255,), GRAY + (255,)]], dtype=np.uint8)
    out = downscale(RasterBuffer.from_array(row), 3, 1)
    assert out.pixels[0].tolist() == [[0, 0, 0, 0], list(RED) + [255], list(GRAY) + [255]]


def test_downscale_leaves_input_untouched(noisy_buffer):
    before = noisy_buffer.data.copy()
    first = downscale(noisy_buffer, 3, 2)
    second = downscale(noisy_buffer, 3, 2)
    assert np.array_equal(noisy_buffer.data, before)
    assert first == second


def test_downscale_rejects_bad_target(noisy_buffer):
    with pytest.raises(InvalidDimensionsError):
        downscale(noisy_buffer, 0, 2)
