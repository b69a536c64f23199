import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from trail_glyphs import GlyphPlacement, MatplotlibGlyphMetrics, TrailGlyphMapper


def half_size_width(char, size):
    """Every glyph is half as wide as its font size"""
    return 0.5 * np.asarray(size, dtype=float)


def mapper_with(points, letters="abc", metrics=half_size_width, min_size=6):
    mapper = TrailGlyphMapper(letters, min_size=min_size, metrics=metrics)
    for point in points:
        mapper.append(point)
    return mapper


def test_empty_and_single_point_trails_place_nothing():
    mapper = mapper_with([])
    assert mapper.layout() == []

    assert mapper.on_new_trail_point((4, 4)) == []


def test_letters_wrap_around_the_text():
    mapper = mapper_with([(x, 0) for x in range(0, 60, 10)])
    placements = mapper.layout()

    assert [p.char for p in placements] == ['a', 'b', 'c', 'a', 'b']
    assert [p.x for p in placements] == [0, 10, 20, 30, 40]
    assert all(p.rotation == pytest.approx(0.0) for p in placements)
    assert all(p.size == pytest.approx(10) for p in placements)


def test_nearby_points_are_skipped_until_the_letter_fits():
    mapper = mapper_with([(0, 0), (2, 0), (20, 0)])
    placements = mapper.layout()

    assert placements == [
        GlyphPlacement('a', 0.0, 0.0, 0.0, 20.0),
        GlyphPlacement('b', 2.0, 0.0, 0.0, 18.0),
    ]


def test_minimum_size_applies_to_short_distances():
    # 4 units is below the minimum size 6, so the letter is 3 wide and fits
    mapper = mapper_with([(0, 0), (4, 0)])

    assert mapper.layout() == [GlyphPlacement('a', 0.0, 0.0, 0.0, 6.0)]


def test_point_without_forward_point_gets_no_letter():
    def too_wide(char, size):
        return 2 * np.asarray(size, dtype=float)

    mapper = mapper_with([(0, 0), (10, 0), (30, 5)], metrics=too_wide)
    assert mapper.layout() == []


def test_rotation_points_at_the_forward_point():
    mapper = mapper_with([(0, 0), (0, 10)])
    assert mapper.layout()[0].rotation == pytest.approx(np.pi / 2)

    mapper = mapper_with([(0, 0), (-10, -10)])
    assert mapper.layout()[0].rotation == pytest.approx(-3 * np.pi / 4)


def test_rescan_is_idempotent():
    rng = np.random.default_rng(3)
    points = np.cumsum(rng.normal(0, 5, size=(80, 2)), axis=0)
    mapper = mapper_with(points, letters="Sie hören nicht")

    first = mapper.scan()
    second = mapper.scan()

    assert first == second
    assert mapper.layout() == first


def test_layout_restarts_from_first_letter_when_trail_grows():
    mapper = mapper_with([(0, 0), (10, 0)])
    assert [p.char for p in mapper.layout()] == ['a']

    placements = mapper.on_new_trail_point((20, 0))
    assert [p.char for p in placements] == ['a', 'b']


def test_empty_text_is_rejected():
    with pytest.raises(ValueError):
        TrailGlyphMapper("", metrics=half_size_width)
    with pytest.raises(ValueError):
        TrailGlyphMapper("abc", min_size=0, metrics=half_size_width)


def test_matplotlib_metrics_scale_with_size():
    metrics = MatplotlibGlyphMetrics('Georgia')

    width = float(metrics('W', 10))
    assert width > 0
    assert float(metrics('W', 20)) == pytest.approx(2 * width)
    assert float(metrics('i', 10)) < width

    widths = metrics('W', np.array([10.0, 20.0, 30.0]))
    assert widths.shape == (3,)
    np.testing.assert_allclose(widths, [width, 2 * width, 3 * width])


def test_glyph_wider_than_its_size_stops_the_text():
    def wide_w(char, size):
        factor = 1.03 if char == 'W' else 0.5
        return factor * np.asarray(size, dtype=float)

    mapper = mapper_with([(x, 0) for x in range(0, 100, 10)], letters="aWb", metrics=wide_w)

    assert [p.char for p in mapper.layout()] == ['a']


def test_wide_glyphs_are_reported():
    metrics = MatplotlibGlyphMetrics('Georgia')
    metrics._unit_widths.update({'W': 1.03, 'a': 0.45, 'm': 0.8})

    assert metrics.wide_glyphs("Wam Wa") == ['W']
    assert metrics.wide_glyphs("am") == []
