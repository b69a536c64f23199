import os
import sys

import numpy as np
import pytest
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from drawing_session import FrameDrawing
from sketch_render import SketchRenderer, configure_axes
from trail_glyphs import GlyphPlacement


def make_renderer():
    fig = Figure(figsize=(4, 3), dpi=100)
    FigureCanvasAgg(fig)
    ax = fig.add_axes([0, 0, 1, 1])
    configure_axes(ax, 400, 300)
    return fig, ax, SketchRenderer(ax)


def sample_drawing():
    path = np.array([[10.0, 10.0], [100.0, 50.0], [200.0, 60.0]])
    joints = np.array([[50.0, 30.0], [60.0, 90.0], [40.0, 120.0]])
    glyphs = [GlyphPlacement('S', 40.0, 120.0, np.pi / 2, 12.0),
              GlyphPlacement('i', 45.0, 125.0, 0.0, 6.0)]
    return FrameDrawing(path, joints, glyphs, (0.6, 0.12, 0.3))


def test_axes_use_screen_coordinates():
    fig, ax, renderer = make_renderer()

    assert ax.get_xlim() == (0, 400)
    assert ax.yaxis_inverted()
    assert renderer.points_per_unit() == pytest.approx(0.72)


def test_draw_creates_one_artist_per_command():
    fig, ax, renderer = make_renderer()
    artists = renderer.draw([sample_drawing()])

    assert len(artists) == 4
    assert len(ax.lines) == 2
    assert len(ax.texts) == 2

    text = ax.texts[0]
    assert text.get_text() == 'S'
    # Downward in data space is upward on screen turned around: 90° becomes -90°
    assert text.get_rotation() == pytest.approx(270)
    assert text.get_fontsize() == pytest.approx(12 * 0.72)

    fig.canvas.draw()


def test_hidden_parts_are_not_drawn():
    fig, ax, renderer = make_renderer()
    drawing = FrameDrawing(None, None, [], (0, 0, 0))

    assert renderer.draw([drawing]) == []
    assert len(ax.lines) == 0


def test_next_frame_replaces_previous_artists():
    fig, ax, renderer = make_renderer()
    renderer.draw([sample_drawing(), sample_drawing()])
    assert len(ax.texts) == 4

    renderer.draw([sample_drawing()])
    assert len(ax.texts) == 2
    assert len(ax.lines) == 2

    renderer.clear()
    assert len(ax.texts) == 0
    assert len(ax.lines) == 0
