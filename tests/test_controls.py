# tests/test_controls.py
import matplotlib.pyplot as plt
import pytest

from lorentzsim.physics.vector import Vector3, ZERO
from lorentzsim.simulation.runner import SimulationLoop
from lorentzsim.visualization import animation
from lorentzsim.visualization.controls import ControlPanel


@pytest.fixture
def fig():
    f = plt.figure(figsize=(8, 6), dpi=100)
    yield f
    plt.close(f)


class TestControlPanel:

    def test_initial_values_follow_loop(self, fig, params):
        panel = ControlPanel(fig, SimulationLoop(params))
        assert panel.sliders["mass"].val == 2.0
        assert panel.sliders["vz"].val == 2.0
        assert panel.play_button.label.get_text() == "Play"
        assert panel.info["b"].get_text().startswith("|B|: 2.0")

    def test_field_slider_applies_live(self, fig, params):
        loop = SimulationLoop(params, playing=True)
        for _ in range(5):
            loop.tick()
        panel = ControlPanel(fig, loop)
        panel.sliders["bz"].set_val(-1.0)
        assert loop.params.b_field == Vector3(0, 0, -1.0)
        assert len(loop.state.history) == 5

    def test_velocity_slider_resets(self, fig, params):
        loop = SimulationLoop(params, playing=True)
        for _ in range(5):
            loop.tick()
        panel = ControlPanel(fig, loop)
        panel.sliders["vy"].set_val(3.0)
        assert loop.params.velocity == Vector3(5, 3, 2)
        assert loop.state.position == ZERO
        assert len(loop.state.history) == 0

    def test_buttons(self, fig, params):
        loop = SimulationLoop(params)
        requested = []
        panel = ControlPanel(fig, loop, on_explain=requested.append)
        panel._on_play(None)
        assert loop.playing is True
        assert panel.play_button.label.get_text() == "Pause"
        loop.tick()
        panel._on_reset(None)
        assert loop.state.time == 0.0
        panel._on_explain(None)
        assert requested == [loop.params]


class TestLorentzApp:

    def test_update_and_explanation(self, params, monkeypatch):
        monkeypatch.setattr(animation, "explain_trajectory", lambda p: "Helical motion about +z.")
        app = animation.LorentzApp(SimulationLoop(params, playing=True))
        try:
            artists = app.update(0)
            assert app.loop.steps == 1
            assert app.canvas.particle in artists

            app.request_explanation(params)
            assert app.explanation.get_text() == "Thinking..."
            app._pending.result(timeout=5)
            app.update(1)
            assert app.explanation.get_text() == "Helical motion about +z."
        finally:
            app._executor.shutdown(wait=True)
            plt.close(app.fig)
