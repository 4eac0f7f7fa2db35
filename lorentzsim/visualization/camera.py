# lorentzsim/visualization/camera.py
import logging
from dataclasses import dataclass

from lorentzsim.config.settings import (
    DEFAULT_PITCH,
    DEFAULT_YAW,
    DEFAULT_ZOOM,
    DRAG_SENSITIVITY,
    WHEEL_SENSITIVITY,
    WHEEL_DELTA_PER_STEP,
    clamp_pitch,
    clamp_zoom,
)

log = logging.getLogger(__name__)


@dataclass
class CameraState:
    """
    Orbit camera. pitch is kept in [-pi/2, pi/2], zoom in [0.1, 5];
    yaw is unbounded.
    """
    pitch: float = DEFAULT_PITCH
    yaw: float = DEFAULT_YAW
    zoom: float = DEFAULT_ZOOM

    def __post_init__(self):
        self.pitch = clamp_pitch(self.pitch)
        self.zoom = clamp_zoom(self.zoom)

    def rotate(self, dx: float, dy: float) -> None:
        """Apply a pointer drag of (dx, dy) pixels."""
        self.yaw += dx * DRAG_SENSITIVITY
        self.pitch = clamp_pitch(self.pitch + dy * DRAG_SENSITIVITY)

    def wheel(self, delta_y: float) -> None:
        """Apply a browser-style wheel delta (positive zooms out)."""
        self.zoom = clamp_zoom(self.zoom - delta_y * WHEEL_SENSITIVITY)

    def snapshot(self) -> "CameraState":
        return CameraState(self.pitch, self.yaw, self.zoom)


class CameraController:
    """
    Drag to rotate, scroll to zoom. Binds matplotlib canvas events and
    writes straight into the shared CameraState; the renderer reads it once
    per frame.
    """
    def __init__(self, camera: CameraState, ax=None):
        self.camera = camera
        self.ax = ax
        self.dragging = False
        self._last = (0.0, 0.0)
        self._cids = []

    def connect(self, canvas) -> None:
        self._cids = [
            canvas.mpl_connect("button_press_event", self.on_press),
            canvas.mpl_connect("motion_notify_event", self.on_motion),
            canvas.mpl_connect("button_release_event", self.on_release),
            canvas.mpl_connect("axes_leave_event", self.on_release),
            canvas.mpl_connect("scroll_event", self.on_scroll),
        ]

    def disconnect(self, canvas) -> None:
        for cid in self._cids:
            canvas.mpl_disconnect(cid)
        self._cids = []

    def _accepts(self, event) -> bool:
        return self.ax is None or event.inaxes is self.ax

    def on_press(self, event):
        if not self._accepts(event):
            return
        self.dragging = True
        self._last = (event.x, event.y)

    def on_motion(self, event):
        if not self.dragging or event.x is None or event.y is None:
            return
        dx = event.x - self._last[0]
        # display coordinates grow upwards; screen drag grows downwards
        dy = -(event.y - self._last[1])
        self.camera.rotate(dx, dy)
        self._last = (event.x, event.y)

    def on_release(self, event):
        self.dragging = False

    def on_scroll(self, event):
        if not self._accepts(event):
            return
        # matplotlib: step > 0 means wheel up (zoom in)
        self.camera.wheel(-event.step * WHEEL_DELTA_PER_STEP)
        log.debug("zoom -> %.2f", self.camera.zoom)
