# tests/test_runner.py
import pytest

from lorentzsim.physics.params import SimulationParams, InvalidParameterError
from lorentzsim.physics.vector import Vector3, ZERO
from lorentzsim.simulation.runner import SimulationLoop, run_simulation
from lorentzsim.config.settings import DT


@pytest.fixture
def escaping():
    """Straight line along +x at 20 units/time: leaves the domain after ~321 steps."""
    return SimulationParams(mass=1.0, charge=0.0, velocity=Vector3(20, 0, 0), b_field=ZERO)


class TestSimulationLoop:

    def test_paused_loop_does_nothing(self, params):
        loop = SimulationLoop(params)
        assert loop.tick() is False
        assert loop.state.time == 0.0

    def test_playing_loop_steps_once_per_tick(self, params):
        loop = SimulationLoop(params, playing=True)
        for _ in range(5):
            assert loop.tick() is True
        assert loop.steps == 5
        assert loop.state.time == pytest.approx(5 * DT)
        assert len(loop.state.history) == 5

    def test_halt_fires_once_and_freezes(self, escaping):
        calls = []
        loop = SimulationLoop(escaping, playing=True, on_stop=lambda: calls.append(1))
        for _ in range(500):
            loop.tick()
        assert calls == [1]
        assert loop.playing is False
        assert loop.halted is True
        assert loop.state.position.x > 320

        frozen = loop.state
        for _ in range(10):
            assert loop.tick() is False
        assert loop.state is frozen

    def test_reset_after_halt(self, escaping):
        loop = SimulationLoop(escaping, playing=True)
        while loop.tick():
            pass
        loop.reset()
        assert loop.playing is True
        assert loop.halted is False
        assert loop.state.position == ZERO
        assert loop.state.velocity == escaping.velocity
        assert len(loop.state.history) == 0
        assert loop.state.time == 0.0

    def test_velocity_change_resets(self, params):
        loop = SimulationLoop(params, playing=True)
        for _ in range(10):
            loop.tick()
        new_v = Vector3(1, 2, 3)
        loop.set_params(params.with_changes(velocity=new_v))
        assert loop.state.position == ZERO
        assert loop.state.velocity == new_v
        assert len(loop.state.history) == 0
        assert loop.state.time == 0.0
        assert loop.playing is True

    def test_other_changes_apply_live(self, params):
        loop = SimulationLoop(params, playing=True)
        for _ in range(10):
            loop.tick()
        before = loop.state
        loop.set_params(params.with_changes(mass=4.0, charge=-2.0, b_field=Vector3(1, 0, 0)))
        assert loop.state is before
        loop.tick()
        assert len(loop.state.history) == 11
        assert loop.state.time == pytest.approx(11 * DT)

    def test_invalid_params_rejected(self, params):
        loop = SimulationLoop(params)
        with pytest.raises(InvalidParameterError):
            loop.set_params(SimulationParams(mass=0.0, charge=1.0, velocity=params.velocity, b_field=params.b_field))
        assert loop.params is params

    def test_ticks_extend_the_same_history(self, params):
        loop = SimulationLoop(params, playing=True)
        state, history = loop.state, loop.state.history
        for _ in range(4):
            loop.tick()
        assert loop.state is state
        assert loop.state.history is history
        assert len(history) == 4
        assert history[-1] == loop.state.position

    def test_toggle(self, params):
        loop = SimulationLoop(params)
        assert loop.toggle() is True
        assert loop.toggle() is False
        loop.play()
        assert loop.playing is True
        loop.pause()
        assert loop.tick() is False


class TestRunSimulation:

    def test_records(self, params):
        state, records = run_simulation(params, 20)
        assert len(records) == 20
        assert records[-1]["time"] == pytest.approx(state.time)
        assert records[0]["kinetic_energy"] == pytest.approx(0.5 * 2.0 * 29.0, rel=1e-6)

    def test_stops_at_halt(self, escaping):
        state, records = run_simulation(escaping, 1000)
        assert len(records) < 1000
        assert state.position.x > 320
