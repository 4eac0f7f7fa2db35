import logging
from typing import Callable, List, Optional, Tuple

from lorentzsim.physics.params import SimulationParams
from lorentzsim.physics.state import SimulationState
from lorentzsim.physics.solver import OutOfBoundsError, integrate, reset as reset_state
from lorentzsim.physics.diagnostics import kinetic_energy
from lorentzsim.config.settings import DT

log = logging.getLogger(__name__)


class SimulationLoop:
    """
    Frame-driven orchestration of one particle.

    params is a single-writer/single-reader slot: the control layer calls
    set_params(), tick() reads whatever is there. A change of velocity
    resets the run; mass, charge and field apply live on the next step.
    """
    def __init__(self, params: Optional[SimulationParams] = None, dt: float = DT,
                 on_stop: Optional[Callable[[], None]] = None, playing: bool = False):
        self.params = (params or SimulationParams()).validate()
        self.dt = float(dt)
        self.on_stop = on_stop
        self.playing = bool(playing)
        self.halted = False
        self.steps = 0
        self.state = reset_state(self.params)

    def set_params(self, params: SimulationParams) -> None:
        params = params.validate()
        velocity_changed = params.velocity != self.params.velocity
        self.params = params
        if velocity_changed:
            log.debug("velocity changed to %r, resetting", params.velocity)
            self._reset_state()

    def _reset_state(self) -> None:
        self.state = reset_state(self.params)
        self.steps = 0
        self.halted = False

    def reset(self, play: bool = True) -> None:
        """Explicit reset; like the reset button it starts playback."""
        self._reset_state()
        self.playing = bool(play)
        log.info("Simulation reset (playing=%s)", self.playing)

    def play(self) -> None:
        self.playing = True

    def pause(self) -> None:
        self.playing = False

    def toggle(self) -> bool:
        self.playing = not self.playing
        return self.playing

    def tick(self) -> bool:
        """
        One frame of simulation work. Returns True when the state advanced.
        On leaving the domain playback stops, on_stop fires and the last
        valid state stays in place.
        """
        if not self.playing:
            return False
        try:
            r_next, v_next = integrate(self.state, self.params, self.dt)
        except OutOfBoundsError as e:
            self.playing = False
            self.halted = True
            log.warning("Simulation halted: %s", e)
            if self.on_stop is not None:
                self.on_stop()
            return False
        self.state.push(r_next, v_next, self.dt)
        self.steps += 1
        return True


def run_simulation(params: SimulationParams, steps: int, dt: float = DT) -> Tuple[SimulationState, List[dict]]:
    """
    Headless run for up to `steps` steps, stopping early on halt.
    Returns the final state and a per-step record list (time, speed, energy).
    """
    loop = SimulationLoop(params, dt=dt, playing=True)
    records = []
    for _ in range(int(steps)):
        if not loop.tick():
            break
        s = loop.state
        speed = s.velocity.magnitude()
        records.append({
            "step": loop.steps,
            "time": s.time,
            "position": tuple(s.position),
            "speed": speed,
            "kinetic_energy": kinetic_energy(loop.params.mass, s.velocity),
        })
    if loop.halted:
        log.info("Run halted after %d steps (t=%.2f)", loop.steps, loop.state.time)
    return loop.state, records
