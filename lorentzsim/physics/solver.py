# lorentzsim/physics/solver.py
import logging

from lorentzsim.physics.forces import LorentzForce
from lorentzsim.physics.state import SimulationState
from lorentzsim.config.settings import DT, BOUNDS_LIMIT

log = logging.getLogger(__name__)


class SimulationError(Exception):
    """Base class for simulation-level failures."""


class OutOfBoundsError(SimulationError):
    """
    The particle left the simulation domain. The state that triggered it is
    attached so the caller can keep showing it.
    """
    def __init__(self, state: SimulationState, limit: float):
        self.state = state
        self.limit = float(limit)
        super().__init__(f"position {state.position!r} exceeds domain limit {limit:g}")


class RK4Solver:
    """
    Runge-Kutta 4th order solver for velocity-dependent forces.
    """
    def __init__(self, force_model):
        self.force = force_model

    def step(self, position, velocity, dt):
        """
        Perform a single RK4 step. Returns (position, velocity).
        Position increments use the stage velocities.
        """
        accel = self.force.acceleration

        k1v = accel(velocity).scale(dt)
        k1r = velocity.scale(dt)

        v2 = velocity + k1v.scale(0.5)
        k2v = accel(v2).scale(dt)
        k2r = v2.scale(dt)

        v3 = velocity + k2v.scale(0.5)
        k3v = accel(v3).scale(dt)
        k3r = v3.scale(dt)

        v4 = velocity + k3v
        k4v = accel(v4).scale(dt)
        k4r = v4.scale(dt)

        v_next = velocity + (k1v + k2v.scale(2) + k3v.scale(2) + k4v) / 6
        r_next = position + (k1r + k2r.scale(2) + k3r.scale(2) + k4r) / 6
        return r_next, v_next


def is_out_of_bounds(state: SimulationState, limit: float = BOUNDS_LIMIT) -> bool:
    return state.position.max_abs() > limit


def integrate(state: SimulationState, params, dt: float = DT, limit: float = BOUNDS_LIMIT):
    """
    Next (position, velocity) after one fixed step under the current
    parameters. Touches nothing; history bookkeeping is up to the caller.

    Raises OutOfBoundsError (before integrating) when the current position
    is already outside the domain.
    """
    if is_out_of_bounds(state, limit):
        log.info("Particle out of bounds at t=%.2f: %r", state.time, state.position)
        raise OutOfBoundsError(state, limit)

    solver = RK4Solver(LorentzForce.from_params(params))
    return solver.step(state.position, state.velocity, dt)


def step(state: SimulationState, params, dt: float = DT, limit: float = BOUNDS_LIMIT) -> SimulationState:
    """
    Advance the state by one fixed step and return it as a new state.
    The input state is not modified.
    """
    r_next, v_next = integrate(state, params, dt, limit)
    return state.advanced(r_next, v_next, dt)


def reset(params) -> SimulationState:
    """Fresh state at the origin with the parameter velocity."""
    return SimulationState.initial(params.velocity)
