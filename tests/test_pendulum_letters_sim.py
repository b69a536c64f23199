import os
import sys
from datetime import datetime
from types import SimpleNamespace

import numpy as np
import pytest

pytest.importorskip('tkinter')

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pendulum_letters_sim
from drawing_session import SessionRegistry
from pendulum_letters_sim import PendulumLettersApp, snapshot_filename
from sketch_config import SketchParams


def half_size_width(char, size):
    return 0.5 * np.asarray(size, dtype=float)


class FakeFigure:
    def __init__(self, error=None):
        self.dpi = 100
        self.error = error
        self.saved = []

    def savefig(self, filename, **kwargs):
        if self.error is not None:
            raise self.error
        self.saved.append(filename)


def make_app(fig):
    registry = SessionRegistry(SketchParams(resolution=0.5), metrics=half_size_width, seed=2)
    registry.press(0, 0)
    registry.drag(40, 0)
    registry.drag(80, 20)
    registry.tick()
    registry.tick()
    registry.tick()
    return SimpleNamespace(fig=fig, registry=registry)


def test_snapshot_filename_uses_timestamp():
    assert snapshot_filename(datetime(2026, 10, 19, 13, 45, 2)) == '261019_134502.png'
    assert snapshot_filename().endswith('.png')


def test_save_snapshot_writes_named_file(monkeypatch):
    errors = []
    monkeypatch.setattr(pendulum_letters_sim.messagebox, 'showerror',
                        lambda title, message: errors.append((title, message)))
    app = make_app(FakeFigure())

    assert PendulumLettersApp.save_snapshot(app, 'sketch.png') == 'sketch.png'
    assert app.fig.saved == ['sketch.png']
    assert errors == []


def test_failed_save_is_shown_and_leaves_sketch_alone(monkeypatch):
    errors = []
    monkeypatch.setattr(pendulum_letters_sim.messagebox, 'showerror',
                        lambda title, message: errors.append((title, message)))
    app = make_app(FakeFigure(PermissionError("read-only folder")))
    session = app.registry.live
    iterator = session.path.iterator
    angles = session.pendulum.angles
    trail_length = len(session.trail)

    assert PendulumLettersApp.save_snapshot(app, 'sketch.png') is None

    assert errors == [("Save failed", "read-only folder")]
    assert app.registry.live is session
    assert len(app.registry) == 1
    assert session.path.iterator == iterator
    np.testing.assert_array_equal(session.pendulum.angles, angles)
    assert len(session.trail) == trail_length
