"""
Scene composition: turns simulation state + camera into a Frame of screen
space primitives, back to front:

  background -> axes + labels -> field lattice -> trajectory -> particle
  -> velocity arrow

Nothing here draws. The canvas module paints a Frame with matplotlib.
Degenerate geometry (tiny vectors, non-finite projections, off-screen
arrows) is dropped silently.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from lorentzsim.physics.vector import Vector3
from lorentzsim.visualization.projection import project, project_many, clip_label_position
from lorentzsim.config.settings import (
    AXIS_DRAW_EXTENT,
    AXIS_COLOR,
    AXIS_LABEL_COLORS,
    SCREEN_OFFSET_X,
    CULL_PADDING,
    FIELD_GRID_SPACING,
    FIELD_GRID_COUNT,
    FIELD_MIN_MAGNITUDE,
    FIELD_ARROW_SCALE,
    FIELD_ARROW_HEAD,
    FIELD_ARROW_COLOR,
    VELOCITY_ARROW_SCALE,
    VELOCITY_ARROW_HEAD,
    VELOCITY_COLOR,
    ARROW_MIN_MAGNITUDE,
    ARROW_HEAD_ANGLE,
    ARROW_SHAFT_WIDTH,
    PARTICLE_RADIUS,
    POSITIVE_COLOR,
    NEGATIVE_COLOR,
    NEUTRAL_COLOR,
    TRAJECTORY_COLOR,
    TRAJECTORY_WIDTH,
)

Point2 = Tuple[float, float]


@dataclass
class Line:
    start: Point2
    end: Point2
    color: str
    width: float = 1.0


@dataclass
class Label:
    text: str
    x: float
    y: float
    color: str


@dataclass
class Arrow:
    start: Point2
    end: Point2
    width: float
    head: Tuple[Point2, Point2, Point2]
    color: object


@dataclass
class Disk:
    x: float
    y: float
    radius: float
    color: str


@dataclass
class Polyline:
    points: np.ndarray  # (N, 2)
    color: str
    width: float


@dataclass
class Frame:
    width: float
    height: float
    background_center: Point2
    axes: List[Line] = field(default_factory=list)
    labels: List[Label] = field(default_factory=list)
    field_arrows: List[Arrow] = field(default_factory=list)
    trajectory: Optional[Polyline] = None
    particle: Optional[Disk] = None
    velocity_arrow: Optional[Arrow] = None
    hud: str = ""


def _finite(*vals) -> bool:
    return bool(np.all(np.isfinite(vals)))


def particle_color(charge: float) -> str:
    if charge > 0:
        return POSITIVE_COLOR
    if charge < 0:
        return NEGATIVE_COLOR
    return NEUTRAL_COLOR


def arrows(origins, vector: Vector3, camera, width: float, height: float, color,
           length_scale: float = 1.0, head_base: float = 8.0) -> List[Arrow]:
    """
    Arrows of the same world vector anchored at each of `origins` (N, 3).

    Skipped entirely when |vector| < ARROW_MIN_MAGNITUDE. An individual
    arrow is culled when both projected ends fall outside the viewport
    grown by CULL_PADDING. Shaft width follows the start's scale, head
    length the tip's.
    """
    if vector.magnitude() < ARROW_MIN_MAGNITUDE:
        return []

    origins = np.asarray(origins, dtype=float).reshape(-1, 3)
    tips = origins + vector.scale(length_scale).to_array()
    start = project_many(origins, camera, width, height)
    end = project_many(tips, camera, width, height)

    pad = CULL_PADDING

    def inside(p):
        return ((p[:, 0] >= -pad) & (p[:, 0] <= width + pad)
                & (p[:, 1] >= -pad) & (p[:, 1] <= height + pad))

    keep = (inside(start) | inside(end)) & np.all(np.isfinite(start), axis=1) & np.all(np.isfinite(end), axis=1)

    angle = np.arctan2(end[:, 1] - start[:, 1], end[:, 0] - start[:, 0])
    head_len = head_base * end[:, 2]
    left_x = end[:, 0] - head_len * np.cos(angle - ARROW_HEAD_ANGLE)
    left_y = end[:, 1] - head_len * np.sin(angle - ARROW_HEAD_ANGLE)
    right_x = end[:, 0] - head_len * np.cos(angle + ARROW_HEAD_ANGLE)
    right_y = end[:, 1] - head_len * np.sin(angle + ARROW_HEAD_ANGLE)

    out = []
    for i in np.flatnonzero(keep):
        tip = (float(end[i, 0]), float(end[i, 1]))
        out.append(Arrow(
            start=(float(start[i, 0]), float(start[i, 1])),
            end=tip,
            width=ARROW_SHAFT_WIDTH * float(start[i, 2]),
            head=(tip, (float(left_x[i]), float(left_y[i])), (float(right_x[i]), float(right_y[i]))),
            color=color,
        ))
    return out


def arrow(origin: Vector3, vector: Vector3, camera, width, height, color,
          length_scale=1.0, head_base=8.0) -> Optional[Arrow]:
    found = arrows([tuple(origin)], vector, camera, width, height, color, length_scale, head_base)
    return found[0] if found else None


def field_grid_origins(count: int = FIELD_GRID_COUNT, spacing: float = FIELD_GRID_SPACING) -> np.ndarray:
    """(2*count+1)^3 lattice points centred on the world origin."""
    ticks = np.arange(-count, count + 1, dtype=float) * spacing
    gx, gy, gz = np.meshgrid(ticks, ticks, ticks, indexing="ij")
    return np.column_stack((gx.ravel(), gy.ravel(), gz.ravel()))


# built once; the lattice is fixed in world space
_FIELD_ORIGINS = field_grid_origins()


def axis_layer(camera, width, height):
    lines, labels = [], []
    zero = (0.0, 0.0, 0.0)
    for i, name in enumerate(("X", "Y", "Z")):
        tip = [0.0, 0.0, 0.0]
        tip[i] = AXIS_DRAW_EXTENT
        tail = [0.0, 0.0, 0.0]
        tail[i] = -AXIS_DRAW_EXTENT
        a = project(tail, camera, width, height)
        b = project(tip, camera, width, height)
        if _finite(a.x, a.y, b.x, b.y):
            lines.append(Line((a.x, a.y), (b.x, b.y), AXIS_COLOR, 1.0))
        pos = clip_label_position(zero, tip, camera, width, height)
        if pos is not None:
            labels.append(Label(name, pos[0], pos[1], AXIS_LABEL_COLORS[name]))
    return lines, labels


def field_layer(b_field: Vector3, camera, width, height) -> List[Arrow]:
    if b_field.magnitude() <= FIELD_MIN_MAGNITUDE:
        return []
    return arrows(_FIELD_ORIGINS, b_field, camera, width, height, FIELD_ARROW_COLOR,
                  FIELD_ARROW_SCALE, FIELD_ARROW_HEAD)


def trajectory_layer(state, camera, width, height) -> Optional[Polyline]:
    if len(state.history) < 2:
        return None
    pts = project_many(state.history_array(), camera, width, height)
    pts = pts[np.all(np.isfinite(pts), axis=1)]
    if len(pts) < 2:
        return None
    return Polyline(pts[:, :2], TRAJECTORY_COLOR, TRAJECTORY_WIDTH)


def particle_layer(state, params, camera, width, height) -> Optional[Disk]:
    sp = project(state.position, camera, width, height)
    if not _finite(sp.x, sp.y, sp.scale):
        return None
    return Disk(sp.x, sp.y, max(1.0, PARTICLE_RADIUS * sp.scale), particle_color(params.charge))


def compose_frame(state, params, camera, width: float, height: float) -> Frame:
    """
    Build one complete frame. Never raises for degenerate input; a
    zero-sized viewport just yields a frame with nothing visible.
    """
    width = max(float(width), 1.0)
    height = max(float(height), 1.0)
    frame = Frame(width, height, background_center=(width / 2 - SCREEN_OFFSET_X, height / 2))

    frame.axes, frame.labels = axis_layer(camera, width, height)
    frame.field_arrows = field_layer(params.b_field, camera, width, height)
    frame.trajectory = trajectory_layer(state, camera, width, height)
    frame.particle = particle_layer(state, params, camera, width, height)
    frame.velocity_arrow = arrow(state.position, state.velocity, camera, width, height,
                                 VELOCITY_COLOR, VELOCITY_ARROW_SCALE, VELOCITY_ARROW_HEAD)

    r = state.position
    frame.hud = f"X: {r.x:.1f} Y: {r.y:.1f} Z: {r.z:.1f}"
    return frame
