"""
Shared tunables of the sketch and the command line that sets them.

SketchParams is read by the frame tick and written by the input handlers.
Both run on the Tk main loop, and the instance refuses writes from any
other thread.
"""
import argparse
import logging
import threading
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_LETTERS = (
    "Sie hören nicht die folgenden Gesänge, Die Seelen, denen ich die ersten sang, "
    "Zerstoben ist das freundliche Gedränge, Verklungen ach! der erste Wiederklang."
)

AMPLITUDE_STEP = 2
GRAVITY_STEP = 0.001
MIN_AMPLITUDE = 2

TOGGLES = ('show_path', 'show_pendulum', 'show_trail')


def ensure_owner_thread(owner, what):
    """Raise if the calling thread is not the one that owns `what`"""
    if threading.get_ident() != owner:
        raise RuntimeError(f"{what} may only be used from the thread that created it")


@dataclass
class SketchParams:
    # Captured by each new drawing session
    joints: int = 4
    amplitude: float = 128
    # Read live on every frame
    resolution: float = 0.04
    gravity: float = 0.094
    damping: float = 0.998
    min_glyph_size: float = 6
    font: str = 'Georgia'
    letters: str = DEFAULT_LETTERS
    show_path: bool = True
    show_pendulum: bool = True
    show_trail: bool = True
    owner: int = field(default_factory=threading.get_ident, repr=False, compare=False)

    def __post_init__(self):
        if self.joints < 1:
            raise ValueError("joints must be at least 1")
        for key in ['amplitude', 'resolution', 'min_glyph_size']:
            if getattr(self, key) <= 0:
                raise ValueError(f"{key} must be positive")
        if not 0 < self.damping <= 1:
            raise ValueError("damping must be in (0, 1]")
        if not self.letters:
            raise ValueError("letters must not be empty")

    def toggle(self, name):
        """Flip one of the visibility switches and return its new value"""
        ensure_owner_thread(self.owner, "SketchParams")
        if name not in TOGGLES:
            raise ValueError(f"unknown toggle: {name}")
        value = not getattr(self, name)
        setattr(self, name, value)
        logger.info("%s = %s", name, value)
        return value

    def change_amplitude(self, step):
        ensure_owner_thread(self.owner, "SketchParams")
        self.amplitude = max(MIN_AMPLITUDE, self.amplitude + step)
        logger.info("amplitude = %s", self.amplitude)
        return self.amplitude

    def change_gravity(self, step):
        ensure_owner_thread(self.owner, "SketchParams")
        # Rounded so repeated key presses do not accumulate float noise
        self.gravity = round(self.gravity + step, 6)
        logger.info("gravity = %.3f", self.gravity)
        return self.gravity


def build_parser():
    parser = argparse.ArgumentParser(
        description="Draw paths and let a branching pendulum write text along them.")
    defaults = SketchParams()
    parser.add_argument('--joints', type=int, default=defaults.joints,
                        help="number of links in each new pendulum (default: %(default)s)")
    parser.add_argument('--amplitude', type=float, default=defaults.amplitude,
                        help="length of the first link in pixels (default: %(default)s)")
    parser.add_argument('--resolution', type=float, default=defaults.resolution,
                        help="path cursor advance per frame (default: %(default)s)")
    parser.add_argument('--gravity', type=float, default=defaults.gravity,
                        help="pull on every link per frame (default: %(default)s)")
    parser.add_argument('--damping', type=float, default=defaults.damping,
                        help="angular velocity factor per frame (default: %(default)s)")
    parser.add_argument('--min-size', type=float, default=defaults.min_glyph_size,
                        help="minimum glyph size in pixels (default: %(default)s)")
    parser.add_argument('--font', default=defaults.font,
                        help="font family for the letters (default: %(default)s)")
    parser.add_argument('--text', default=defaults.letters,
                        help="sentence whose letters are written along the trail")
    parser.add_argument('--seed', type=int, default=None,
                        help="seed for initial pendulum angles and trail colours")
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    parser.add_argument('--log-file', default=None)
    return parser


def parse_args(argv=None):
    """Parse the command line into (SketchParams, namespace)"""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        params = SketchParams(
            joints=args.joints,
            amplitude=args.amplitude,
            resolution=args.resolution,
            gravity=args.gravity,
            damping=args.damping,
            min_glyph_size=args.min_size,
            font=args.font,
            letters=args.text,
        )
    except ValueError as e:
        parser.error(str(e))
    return params, args
