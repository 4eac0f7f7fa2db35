# lorentzsim/visualization/animation.py
import logging
import textwrap
from concurrent.futures import ThreadPoolExecutor

import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation

from lorentzsim.simulation.runner import SimulationLoop
from lorentzsim.services.explain import explain_trajectory
from lorentzsim.visualization.camera import CameraState, CameraController
from lorentzsim.visualization.canvas import FrameCanvas, viewport_size
from lorentzsim.visualization.controls import ControlPanel
from lorentzsim.visualization.scene import compose_frame
from lorentzsim.config.settings import (
    WINDOW_SIZE,
    WINDOW_DPI,
    FRAME_INTERVAL_MS,
    BACKGROUND_OUTER,
)

log = logging.getLogger(__name__)

FORMULA_TEXT = "F = q(v × B)\na = F / m\n\nyellow: velocity (v)\ngrey: magnetic field (B)"
HELP_TEXT = "drag: rotate | wheel: zoom"


class LorentzApp:
    """
    Interactive window: scene canvas, camera controls, control panel and
    the explain overlay, driven by FuncAnimation. Each frame advances the
    simulation at most one step and then repaints.
    """
    def __init__(self, loop: SimulationLoop, camera: CameraState = None):
        self.loop = loop
        self.camera = camera or CameraState()

        plt.rcParams["toolbar"] = "None"
        self.fig = plt.figure(figsize=WINDOW_SIZE, dpi=WINDOW_DPI, facecolor=BACKGROUND_OUTER)
        if self.fig.canvas.manager is not None:
            self.fig.canvas.manager.set_window_title("LorentzSim")

        self.canvas = FrameCanvas(self.fig)
        self.controller = CameraController(self.camera, self.canvas.ax)
        self.controller.connect(self.fig.canvas)

        self.loop.on_stop = self._on_stop
        self.panel = ControlPanel(self.fig, self.loop, on_explain=self.request_explanation)

        self.fig.text(0.01, 0.97, FORMULA_TEXT, va="top", fontsize=8, family="monospace", color="#cbd5e1")
        self.fig.text(0.01, 0.06, HELP_TEXT, fontsize=8, family="monospace", color="#64748b")
        self.explanation = self.fig.text(0.01, 0.80, "", va="top", fontsize=8, color="#e2e8f0", wrap=True)

        self._executor = ThreadPoolExecutor(max_workers=1)
        self._pending = None
        self.anim = None
        self.fig.canvas.mpl_connect("close_event", self._on_close)

    def _on_close(self, _event):
        self.controller.disconnect(self.fig.canvas)
        self._executor.shutdown(wait=False)

    def _on_stop(self):
        log.info("Particle left the domain; playback stopped at t=%.2f", self.loop.state.time)
        self.panel.refresh()

    def request_explanation(self, params):
        """Runs the explain call off the frame loop; the result is picked up in update()."""
        if self._pending is not None and not self._pending.done():
            return
        self.explanation.set_text("Thinking...")
        self._pending = self._executor.submit(explain_trajectory, params)

    def _collect_explanation(self):
        if self._pending is None or not self._pending.done():
            return
        text = self._pending.result()
        self._pending = None
        lines = [wrapped for line in text.splitlines() for wrapped in (textwrap.wrap(line, 70) or [""])]
        self.explanation.set_text("\n".join(lines))

    def update(self, _frame):
        self.loop.tick()
        self._collect_explanation()
        width, height = viewport_size(self.fig)
        frame = compose_frame(self.loop.state, self.loop.params, self.camera.snapshot(), width, height)
        return self.canvas.draw(frame)

    def run(self):
        # widgets redraw themselves, so no blitting
        self.anim = FuncAnimation(self.fig, self.update, interval=FRAME_INTERVAL_MS,
                                  blit=False, cache_frame_data=False)
        try:
            plt.show()
        finally:
            self._executor.shutdown(wait=False)


def animate_simulation(loop: SimulationLoop) -> None:
    LorentzApp(loop).run()
