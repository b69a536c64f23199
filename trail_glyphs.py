import logging
from collections import namedtuple

import numpy as np
from matplotlib import font_manager

logger = logging.getLogger(__name__)

DEFAULT_MIN_SIZE = 6

GlyphPlacement = namedtuple('GlyphPlacement', ['char', 'x', 'y', 'rotation', 'size'])


class MatplotlibGlyphMetrics:
    """
    Advance widths of single characters, measured with matplotlib's FreeType fonts.

    Widths scale linearly with the font size, so every character is measured
    once at a reference size and the result is scaled. Sizes may be scalars
    or numpy arrays.
    """

    REFERENCE_SIZE = 100.0
    # Times-like serifs keep every letter of the default text under one em
    FALLBACK_FAMILIES = ['Liberation Serif', 'Times New Roman', 'Nimbus Roman', 'serif']

    def __init__(self, font='Georgia'):
        self.prop = font_manager.FontProperties(family=[font] + self.FALLBACK_FAMILIES)
        self.font_path = font_manager.findfont(self.prop)
        self._unit_widths = {}
        logger.debug("Measuring glyphs with %s", self.font_path)

    def unit_width(self, char):
        """Advance width of `char` at font size 1"""
        if char not in self._unit_widths:
            font = font_manager.get_font(self.font_path)
            font.set_size(self.REFERENCE_SIZE, 72)
            glyph = font.load_char(ord(char))
            # linearHoriAdvance is 16.16 fixed point
            self._unit_widths[char] = glyph.linearHoriAdvance / 65536 / self.REFERENCE_SIZE
        return self._unit_widths[char]

    def __call__(self, char, size):
        return self.unit_width(char) * np.asarray(size, dtype=float)

    def wide_glyphs(self, letters):
        """
        Characters of `letters` at least one em wide.

        Such a glyph is never narrower than the distance it needs, so the
        glyph cursor stops at it and no later letter is ever placed.
        """
        return sorted({char for char in letters if self.unit_width(char) >= 1.0})


class TrailGlyphMapper:
    """
    Turns the trail of the chain's last joint into rotated, spaced letters.

    Every trail point is a candidate position for the next letter of the
    source text. A letter is placed at point k as soon as some later point j
    lies further away than the letter is wide when rendered at size
    max(min_size, distance). The letter is rotated towards point j, and the
    glyph cursor then moves on to the next letter (wrapping at the end of the
    text). Points without such a forward point get no letter.

    The whole trail is scanned from the first letter on every layout, so the
    placements of a trail that has stopped growing never change.
    """

    def __init__(self, letters, min_size=DEFAULT_MIN_SIZE, metrics=None):
        if not letters:
            raise ValueError("source text must not be empty")
        if min_size <= 0:
            raise ValueError("min_size must be positive")

        self.letters = letters
        self.min_size = min_size
        self.metrics = metrics if metrics is not None else MatplotlibGlyphMetrics()
        self.trail = []
        self._layout_cache = (0, [])

    def __len__(self):
        return len(self.trail)

    def append(self, point):
        """Record a trail point (a world position of the last joint)"""
        self.trail.append(np.array(point, dtype=float))

    def on_new_trail_point(self, point):
        self.append(point)
        return self.layout()

    def layout(self):
        """Glyph placements for the current trail, reused while the trail is unchanged"""
        trail_length, placements = self._layout_cache
        if trail_length != len(self.trail):
            placements = self.scan()
            self._layout_cache = (len(self.trail), placements)
        return placements

    def scan(self):
        """Full re-scan of the trail, starting again at the first letter"""
        if len(self.trail) < 2:
            return []

        points = np.array(self.trail)
        placements = []
        letter_index = 0

        for k in range(len(points) - 1):
            char = self.letters[letter_index]

            # Distances from point k to every later point
            distances = np.hypot(*(points[k + 1:] - points[k]).T)
            sizes = np.maximum(self.min_size, distances)
            hits = np.flatnonzero(distances > self.metrics(char, sizes))
            if hits.size == 0:
                continue

            j = k + 1 + hits[0]
            dx, dy = points[j] - points[k]
            placements.append(GlyphPlacement(
                char,
                float(points[k][0]),
                float(points[k][1]),
                float(np.arctan2(dy, dx)),
                float(sizes[hits[0]]),
            ))

            letter_index = (letter_index + 1) % len(self.letters)

        return placements
