# lorentzsim/visualization/canvas.py
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection, PolyCollection
from matplotlib.colors import LinearSegmentedColormap
from matplotlib.patches import Circle

from lorentzsim.config.settings import (
    BACKGROUND_INNER,
    BACKGROUND_OUTER,
    HUD_COLOR,
)

_BG_CMAP = LinearSegmentedColormap.from_list("lorentz_bg", [BACKGROUND_INNER, BACKGROUND_OUTER])


def viewport_size(fig):
    """Current figure size in pixels (changes on window resize)."""
    w, h = fig.get_size_inches() * fig.dpi
    return float(w), float(h)


def radial_gradient(width: int, height: int, center) -> np.ndarray:
    """0 at center growing to 1 at a radius equal to the viewport width."""
    ys, xs = np.mgrid[0:max(1, int(height)), 0:max(1, int(width))]
    r = np.hypot(xs - center[0], ys - center[1])
    return np.clip(r / max(1.0, float(width)), 0.0, 1.0)


class FrameCanvas:
    """
    Paints scene Frames onto a matplotlib Axes laid out in pixel
    coordinates (origin top-left, y down). Artists are created once and
    updated in place every frame.
    """
    def __init__(self, fig, ax=None):
        self.fig = fig
        self.ax = ax if ax is not None else fig.add_axes([0.0, 0.0, 1.0, 1.0])
        self.ax.set_axis_off()
        self.ax.set_autoscale_on(False)
        self._px_to_pt = 72.0 / fig.dpi
        self._size = None

        ax = self.ax
        self.background = ax.imshow(np.zeros((2, 2)), cmap=_BG_CMAP, vmin=0.0, vmax=1.0,
                                    interpolation="bilinear", zorder=0, aspect="auto")
        self.axis_lines = LineCollection([], zorder=1)
        self.field_shafts = LineCollection([], zorder=2)
        self.field_heads = PolyCollection([], zorder=2, linewidths=0)
        self.trail, = ax.plot([], [], "-", zorder=3, solid_joinstyle="round")
        self.particle = Circle((0, 0), 1.0, zorder=4, visible=False)
        self.velocity_shaft = LineCollection([], zorder=5)
        self.velocity_head = PolyCollection([], zorder=5, linewidths=0)
        for artist in (self.axis_lines, self.field_shafts, self.field_heads,
                       self.velocity_shaft, self.velocity_head):
            ax.add_collection(artist)
        ax.add_patch(self.particle)

        self.labels = {
            name: ax.text(0, 0, name, fontsize=11, fontweight="bold", zorder=1, visible=False)
            for name in ("X", "Y", "Z")
        }
        self.hud = ax.text(0.02, 0.03, "", transform=ax.transAxes, fontsize=8,
                           family="monospace", color=HUD_COLOR, zorder=6)

    def _resize(self, frame):
        size = (int(frame.width), int(frame.height))
        if size == self._size:
            return
        self._size = size
        self.background.set_data(radial_gradient(size[0], size[1], frame.background_center))
        self.background.set_extent((0, frame.width, frame.height, 0))
        self.ax.set_xlim(0, frame.width)
        self.ax.set_ylim(frame.height, 0)

    def _pt(self, px):
        return px * self._px_to_pt

    def draw(self, frame):
        """Update every artist from `frame`; returns the artists touched."""
        self._resize(frame)

        self.axis_lines.set_segments([(ln.start, ln.end) for ln in frame.axes])
        if frame.axes:
            self.axis_lines.set_colors([ln.color for ln in frame.axes])
            self.axis_lines.set_linewidths([self._pt(ln.width) for ln in frame.axes])

        shown = {lb.text: lb for lb in frame.labels}
        for name, text in self.labels.items():
            lb = shown.get(name)
            text.set_visible(lb is not None)
            if lb is not None:
                text.set_position((lb.x, lb.y))
                text.set_color(lb.color)

        arrows = frame.field_arrows
        self.field_shafts.set_segments([(a.start, a.end) for a in arrows])
        self.field_heads.set_verts([a.head for a in arrows])
        if arrows:
            self.field_shafts.set_linewidths([self._pt(a.width) for a in arrows])
            self.field_shafts.set_color(arrows[0].color)
            self.field_heads.set_facecolor(arrows[0].color)

        if frame.trajectory is not None:
            pts = frame.trajectory.points
            self.trail.set_data(pts[:, 0], pts[:, 1])
            self.trail.set_color(frame.trajectory.color)
            self.trail.set_linewidth(self._pt(frame.trajectory.width))
        else:
            self.trail.set_data([], [])

        disk = frame.particle
        self.particle.set_visible(disk is not None)
        if disk is not None:
            self.particle.center = (disk.x, disk.y)
            self.particle.set_radius(disk.radius)
            self.particle.set_facecolor(disk.color)
            self.particle.set_edgecolor(disk.color)

        va = frame.velocity_arrow
        if va is not None:
            self.velocity_shaft.set_segments([(va.start, va.end)])
            self.velocity_shaft.set_linewidths([self._pt(va.width)])
            self.velocity_shaft.set_color(va.color)
            self.velocity_head.set_verts([va.head])
            self.velocity_head.set_facecolor(va.color)
        else:
            self.velocity_shaft.set_segments([])
            self.velocity_head.set_verts([])

        self.hud.set_text(frame.hud)

        return [self.background, self.axis_lines, self.field_shafts, self.field_heads,
                self.trail, self.particle, self.velocity_shaft, self.velocity_head,
                self.hud, *self.labels.values()]


def render_to_file(frame, path, dpi: int = 100) -> str:
    """Paint a single frame off-screen and save it as an image."""
    fig = plt.figure(figsize=(frame.width / dpi, frame.height / dpi), dpi=dpi)
    try:
        FrameCanvas(fig).draw(frame)
        fig.savefig(path, dpi=dpi)
    finally:
        plt.close(fig)
    return str(path)
