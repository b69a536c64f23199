from collections import namedtuple

import numpy as np

DEFAULT_RESOLUTION = 0.04

PathPoint = namedtuple('PathPoint', ['x', 'y'])
PathSample = namedtuple('PathSample', ['position', 'heading'])


class PathSampler:
    """
    Cursor that walks along a drawn path at a fixed rate per frame.

    The cursor `iterator` is fractional: its integer part selects the
    segment between points[i-1] and points[i], and the fractional part is
    the interpolation offset within that segment.
    """

    def __init__(self, points=(), resolution=DEFAULT_RESOLUTION):
        self.points = [PathPoint(float(x), float(y)) for x, y in points]
        self.iterator = 0.0
        self.resolution = resolution
        self.frozen = False

    def __len__(self):
        return len(self.points)

    def append(self, x, y):
        """Add a point at the end of the path (only while the path is open)"""
        if self.frozen:
            raise RuntimeError("cannot append to a frozen path")
        point = PathPoint(float(x), float(y))
        self.points.append(point)
        return point

    def freeze(self):
        self.frozen = True

    @property
    def finished(self):
        return self.frozen and self.iterator >= len(self.points)

    def advance(self, resolution=None):
        """Move the cursor forward, clamped to [0, len(points)]"""
        step = self.resolution if resolution is None else resolution
        self.iterator = float(np.clip(self.iterator + step, 0, len(self.points)))

    def sample(self):
        """
        Interpolated anchor position and heading at the cursor.

        Returns None while there is no previous point to interpolate from
        and once the cursor is parked at the end of the path.
        """
        i = int(np.floor(self.iterator))
        if i == 0 or i >= len(self.points):
            return None

        previous_pos = np.array(self.points[i - 1])
        current_pos = np.array(self.points[i])
        t = self.iterator - i

        position = previous_pos + (current_pos - previous_pos) * t
        dx, dy = current_pos - previous_pos
        # Perpendicular to the direction of travel so the chain hangs below it
        heading = np.arctan2(dy, dx) - np.pi / 2
        return PathSample(position, float(heading))
