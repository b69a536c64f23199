import logging
import threading
from collections import namedtuple
from enum import Enum

import numpy as np
from matplotlib.colors import hsv_to_rgb

from path_sampler import PathSampler
from pendulum_chain import PendulumChain
from sketch_config import ensure_owner_thread
from trail_glyphs import MatplotlibGlyphMetrics, TrailGlyphMapper

logger = logging.getLogger(__name__)

# Draw commands of one session for one frame. `path` and `joints` are
# (n, 2) arrays or None when hidden, `glyphs` a list of GlyphPlacement.
FrameDrawing = namedtuple('FrameDrawing', ['path', 'joints', 'glyphs', 'color'])


class SessionState(Enum):
    EMPTY = 'empty'
    LIVE = 'live'
    SETTLED = 'settled'


class DrawingSession:
    """
    One drawn stroke with its pendulum and letter trail.

    Joint count and amplitude are copied from the parameters when the
    session is created; gravity, damping, resolution and the visibility
    switches are read from the parameters passed to every tick.
    """

    def __init__(self, params, color=(0.0, 0.0, 0.0), metrics=None, rng=None):
        self.state = SessionState.EMPTY
        self.joints = params.joints
        self.amplitude = params.amplitude
        self.color = tuple(color)

        self.path = PathSampler(resolution=params.resolution)
        self.pendulum = PendulumChain(self.amplitude, self.joints, rng=rng)
        self.mapper = TrailGlyphMapper(params.letters, params.min_glyph_size, metrics)

        # Anchor of the chain on the latest tick, None when it was not animated
        self.anchor = None

    def __repr__(self):
        return (f"DrawingSession(state={self.state.value}, points={len(self.path)}, "
                f"trail={len(self.mapper)})")

    @property
    def trail(self):
        return self.mapper.trail

    def start(self, x, y):
        if self.state is not SessionState.EMPTY:
            raise RuntimeError(f"cannot start a {self.state.value} session")
        self.state = SessionState.LIVE
        self.path.append(x, y)

    def extend(self, x, y):
        if self.state is not SessionState.LIVE:
            raise RuntimeError(f"cannot extend a {self.state.value} session")
        return self.path.append(x, y)

    def settle(self):
        if self.state is not SessionState.LIVE:
            raise RuntimeError(f"cannot settle a {self.state.value} session")
        self.state = SessionState.SETTLED
        self.path.freeze()

    def tick(self, params):
        """
        Advance the session by one frame.

        Returns the new trail point, or None when the chain is not on the
        path (no previous point yet, or the cursor reached the end).
        """
        self.path.advance(params.resolution)
        sample = self.path.sample()
        if sample is None:
            self.anchor = None
            return None

        self.anchor = sample.position
        self.pendulum.update(sample.heading, params.gravity, params.damping)

        trail_point = self.pendulum.terminal_position(sample.position)
        self.mapper.append(trail_point)
        return trail_point

    def drawing(self, params):
        """Draw commands for the current frame, honouring the visibility switches"""
        path = None
        if params.show_path and len(self.path):
            path = np.array(self.path.points)

        joints = None
        if params.show_pendulum and self.anchor is not None:
            joints = self.pendulum.joint_positions(self.anchor)

        glyphs = self.mapper.layout() if params.show_trail else []
        return FrameDrawing(path, joints, glyphs, self.color)


class SessionRegistry:
    """
    All sessions of the sketch: the settled ones plus at most one live one.

    Pointer input and frame ticks must come from the thread that created the
    registry.
    """

    def __init__(self, params, metrics=None, seed=None):
        self.params = params
        self.metrics = metrics if metrics is not None else MatplotlibGlyphMetrics(params.font)
        self.rng = np.random.default_rng(seed)
        self.settled = []
        self.live = None
        self.owner = threading.get_ident()

        wide_glyphs = getattr(self.metrics, 'wide_glyphs', None)
        self.wide_glyphs = wide_glyphs(params.letters) if wide_glyphs else []
        if self.wide_glyphs:
            logger.warning("Letters %s are at least one em wide in this font; "
                           "the text stops at the first of them", ''.join(self.wide_glyphs))

    def __len__(self):
        return len(self.sessions)

    @property
    def sessions(self):
        """Settled sessions in creation order, then the live one"""
        if self.live is None:
            return list(self.settled)
        return self.settled + [self.live]

    def new_color(self):
        """Random hue at fixed saturation and brightness"""
        return tuple(hsv_to_rgb((self.rng.uniform(0.0, 1.0), 0.8, 0.6)))

    def press(self, x, y):
        ensure_owner_thread(self.owner, "SessionRegistry")
        if self.live is not None:
            logger.debug("Press while a session is live, settling it first")
            self.release()

        session = DrawingSession(self.params, self.new_color(), self.metrics, self.rng)
        session.start(x, y)
        self.live = session
        logger.info("Started session %d (joints=%d, amplitude=%s)",
                    len(self.settled) + 1, session.joints, session.amplitude)
        return session

    def drag(self, x, y):
        ensure_owner_thread(self.owner, "SessionRegistry")
        if self.live is None:
            logger.debug("Drag without a live session ignored")
            return None
        return self.live.extend(x, y)

    def release(self):
        ensure_owner_thread(self.owner, "SessionRegistry")
        if self.live is None:
            logger.debug("Release without a live session ignored")
            return None

        session = self.live
        session.settle()
        self.settled.append(session)
        self.live = None
        logger.info("Settled session %d with %d path points", len(self.settled), len(session.path))
        return session

    def reset(self):
        ensure_owner_thread(self.owner, "SessionRegistry")
        count = len(self)
        self.settled = []
        self.live = None
        logger.info("Cleared %d sessions", count)

    def tick(self):
        ensure_owner_thread(self.owner, "SessionRegistry")
        for session in self.sessions:
            session.tick(self.params)

    def frame(self):
        return [session.drawing(self.params) for session in self.sessions]
