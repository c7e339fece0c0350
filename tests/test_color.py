import numpy as np
import pytest

from pixelfixel.color import (
    apply_palette,
    average_color,
    color_distance,
    distance_squared,
    nearest_color,
    nearest_indices,
    round_half_up,
    total_distortion,
)
from pixelfixel.raster import EmptyPaletteError, RasterBuffer


def test_distances():
    assert distance_squared((0, 0, 0), (1, 2, 3)) == 14
    assert color_distance((0, 0, 0), (3, 4, 0)) == 5.0
    # Alpha is ignored
    assert distance_squared((1, 1, 1, 0), (1, 1, 1, 255)) == 0


def test_round_half_up():
    assert round_half_up([0.5, 1.5, 2.5, 2.49]).tolist() == [1, 2, 3, 2]


def test_average_color_rounds_halves_up():
    assert average_color([(0, 0, 0), (1, 1, 1)]) == (1, 1, 1)
    assert average_color([(10, 20, 30), (20, 30, 40)]) == (15, 25, 35)


def test_average_color_rejects_empty():
    with pytest.raises(ValueError):
        average_color([])


def test_nearest_color():
    assert nearest_color((10, 10, 10), [(0, 0, 0), (255, 255, 255)]) == (0, 0, 0)


def test_nearest_color_ties_go_to_first_entry():
    assert nearest_color((5, 0, 0), [(0, 0, 0), (10, 0, 0)]) == (0, 0, 0)
    assert nearest_color((5, 0, 0), [(10, 0, 0), (0, 0, 0)]) == (10, 0, 0)


def test_nearest_color_empty_palette():
    with pytest.raises(EmptyPaletteError):
        nearest_color((1, 2, 3), [])


def test_nearest_indices_vectorised():
    colors = np.array([(0, 0, 0), (250, 250, 250), (120, 0, 0)])
    palette = np.array([(255, 255, 255), (0, 0, 0), (128, 0, 0)])
    assert nearest_indices(colors, palette).tolist() == [1, 0, 2]


def test_total_distortion():
    colors = np.array([(0, 0, 0), (10, 0, 0)])
    assert total_distortion(colors, np.array([(0, 0, 0)])) == 100


def test_apply_palette_keeps_alpha_and_uses_palette_colors(noisy_buffer):
    palette = [(0, 0, 0), (255, 255, 255), (255, 0, 0)]
    mapped = apply_palette(noisy_buffer, palette)
    assert np.array_equal(mapped.alpha(), noisy_buffer.alpha())
    assert {tuple(c) for c in mapped.rgb().tolist()} <= set(palette)


def test_apply_palette_matches_nearest_color(noisy_buffer):
    palette = [(30, 60, 90), (200, 100, 0), (0, 0, 0), (128, 128, 128)]
    mapped = apply_palette(noisy_buffer, palette)
    expected = [nearest_color(tuple(c), palette) for c in noisy_buffer.rgb().tolist()]
    assert [tuple(c) for c in mapped.rgb().tolist()] == expected


def test_apply_palette_returns_new_buffer(noisy_buffer):
    before = noisy_buffer.data.copy()
    mapped = apply_palette(noisy_buffer, [(1, 2, 3)])
    assert mapped is not noisy_buffer
    assert np.array_equal(noisy_buffer.data, before)
    assert apply_palette(noisy_buffer, [(1, 2, 3)]) == mapped


def test_apply_palette_rejects_empty_palette():
    with pytest.raises(EmptyPaletteError):
        apply_palette(RasterBuffer.blank(1, 1), [])
