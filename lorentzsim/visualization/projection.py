# lorentzsim/visualization/projection.py
import math
from typing import NamedTuple, Optional, Tuple

import numpy as np

from lorentzsim.config.settings import (
    CAMERA_DISTANCE,
    FOV,
    SCREEN_OFFSET_X,
    LABEL_PADDING,
)


class ScreenPoint(NamedTuple):
    x: float
    y: float
    scale: float


def project(point, camera, width: float, height: float) -> ScreenPoint:
    """
    World point -> screen pixel plus the perspective scale at its depth.

    Yaw rotates about the vertical (z) axis, pitch about the resulting
    horizontal axis. depth = CAMERA_DISTANCE + view y, floored at 1 so a
    point behind the camera plane does not blow up the divide.
    Screen y grows downwards.
    """
    px, py, pz = point

    cos_y = math.cos(camera.yaw)
    sin_y = math.sin(camera.yaw)
    x1 = px * cos_y - py * sin_y
    y1 = px * sin_y + py * cos_y
    z1 = pz

    cos_p = math.cos(camera.pitch)
    sin_p = math.sin(camera.pitch)
    y2 = y1 * cos_p - z1 * sin_p
    z2 = y1 * sin_p + z1 * cos_p

    depth = CAMERA_DISTANCE + y2
    scale = FOV / max(1.0, depth) * camera.zoom

    center_x = width / 2 - SCREEN_OFFSET_X
    return ScreenPoint(x1 * scale + center_x, -z2 * scale + height / 2, scale)


def project_many(points: np.ndarray, camera, width: float, height: float) -> np.ndarray:
    """
    Vectorized project() for an (N, 3) array. Returns (N, 3) columns
    x, y, scale.
    """
    pts = np.asarray(points, dtype=float).reshape(-1, 3)
    cos_y = math.cos(camera.yaw)
    sin_y = math.sin(camera.yaw)
    x1 = pts[:, 0] * cos_y - pts[:, 1] * sin_y
    y1 = pts[:, 0] * sin_y + pts[:, 1] * cos_y
    z1 = pts[:, 2]

    cos_p = math.cos(camera.pitch)
    sin_p = math.sin(camera.pitch)
    y2 = y1 * cos_p - z1 * sin_p
    z2 = y1 * sin_p + z1 * cos_p

    scale = FOV / np.maximum(1.0, CAMERA_DISTANCE + y2) * camera.zoom
    out = np.empty((pts.shape[0], 3), dtype=float)
    out[:, 0] = x1 * scale + (width / 2 - SCREEN_OFFSET_X)
    out[:, 1] = -z2 * scale + height / 2
    out[:, 2] = scale
    return out


def clip_label_position(origin, axis_tip, camera, width: float, height: float,
                        padding: float = LABEL_PADDING) -> Optional[Tuple[float, float]]:
    """
    Where the projected origin->tip segment leaves the viewport rectangle
    inset by `padding` (Liang-Barsky). Returns the exit point on the tip
    side, or None when the segment misses the rectangle.
    """
    p0 = project(origin, camera, width, height)
    p1 = project(axis_tip, camera, width, height)

    min_x, max_x = padding, width - padding
    min_y, max_y = padding, height - padding

    dx = p1.x - p0.x
    dy = p1.y - p0.y
    p = (-dx, dx, -dy, dy)
    q = (p0.x - min_x, max_x - p0.x, p0.y - min_y, max_y - p0.y)

    t0, t1 = 0.0, 1.0
    for pi, qi in zip(p, q):
        if pi == 0:
            # parallel to this edge: outside means no intersection at all
            if qi < 0:
                return None
            continue
        t = qi / pi
        if pi < 0:
            if t > t1:
                return None
            if t > t0:
                t0 = t
        else:
            if t < t0:
                return None
            if t < t1:
                t1 = t

    if t0 > t1:
        return None
    return (p0.x + t1 * dx, p0.y + t1 * dy)
