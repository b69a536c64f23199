import numpy as np

PATH_COLOR = (0, 0, 0, 0.1)
PENDULUM_COLOR = (0, 0, 0, 0.4)
JOINT_COLOR = (0, 0, 0, 0.2)


def configure_axes(ax, width, height):
    """Make one data unit one pixel with the y axis pointing down, like screen coordinates"""
    ax.set_autoscale_on(False)
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.set_axis_off()


class SketchRenderer:
    """Draws the FrameDrawings of all sessions as matplotlib artists on one Axes"""

    def __init__(self, ax, font='Georgia'):
        self.ax = ax
        self.font = font
        self.artists = []

    def points_per_unit(self):
        """Font points per data unit at the current axes scale"""
        x0 = self.ax.transData.transform((0, 0))[0]
        x1 = self.ax.transData.transform((1, 0))[0]
        return abs(x1 - x0) * 72.0 / self.ax.figure.dpi

    def screen_rotation(self, angle):
        """Data-space angle (radians) to a text rotation in degrees"""
        degrees = np.degrees(angle)
        return -degrees if self.ax.yaxis_inverted() else degrees

    def clear(self):
        for artist in self.artists:
            artist.remove()
        self.artists = []

    def draw(self, drawings):
        """Replace the previous frame's artists with the ones for `drawings`"""
        self.clear()
        scale = self.points_per_unit()

        for drawing in drawings:
            if drawing.path is not None:
                line, = self.ax.plot(drawing.path[:, 0], drawing.path[:, 1], '-',
                                     lw=0.8, color=PATH_COLOR)
                self.artists.append(line)

            if drawing.joints is not None:
                # One segment and one end marker per link
                line, = self.ax.plot(drawing.joints[:, 0], drawing.joints[:, 1], 'o-',
                                     lw=1, color=PENDULUM_COLOR, markersize=2,
                                     markerfacecolor=JOINT_COLOR, markeredgewidth=0)
                self.artists.append(line)

            for glyph in drawing.glyphs:
                text = self.ax.text(glyph.x, glyph.y, glyph.char,
                                    rotation=self.screen_rotation(glyph.rotation),
                                    rotation_mode='anchor', ha='left', va='baseline',
                                    fontsize=glyph.size * scale,
                                    fontfamily=[self.font, 'serif'],
                                    color=drawing.color)
                self.artists.append(text)

        return self.artists
