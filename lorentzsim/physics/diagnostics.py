# lorentzsim/physics/diagnostics.py
import math
from typing import Tuple

import numpy as np

from lorentzsim.physics.forces import LorentzForce
from lorentzsim.physics.vector import Vector3, ZERO

# below this magnitude a vector counts as zero
_EPS = 1e-12


def kinetic_energy(mass: float, velocity: Vector3) -> float:
    """
    Kinetic energy m|v|^2/2. The magnetic force does no work, so this is
    used as a numerical stability diagnostic for the integrator.
    """
    return 0.5 * mass * velocity.dot(velocity)


def unit(v: Vector3) -> Vector3:
    mag = v.magnitude()
    if mag < _EPS:
        return ZERO
    return v / mag


def decompose_velocity(velocity: Vector3, b_field: Vector3) -> Tuple[Vector3, Vector3]:
    """
    Split velocity into components parallel and perpendicular to B.
    With B = 0 everything is treated as parallel.
    """
    b_hat = unit(b_field)
    if b_hat == ZERO:
        return velocity, ZERO
    v_par = b_hat.scale(velocity.dot(b_hat))
    return v_par, velocity - v_par


def lorentz_force(params) -> Vector3:
    """F = q(v x B) at the configured initial velocity."""
    return LorentzForce.from_params(params).force(params.velocity)


def cyclotron_radius(params) -> float:
    """R = m|v_perp| / (|q||B|); inf when there is no magnetic force."""
    qb = abs(params.charge) * params.b_field.magnitude()
    if qb < _EPS:
        return math.inf
    _, v_perp = decompose_velocity(params.velocity, params.b_field)
    return params.mass * v_perp.magnitude() / qb


def cyclotron_period(params) -> float:
    """T = 2 pi / omega with omega = |q/m||B|; inf when there is no magnetic force."""
    omega = abs(params.charge_to_mass) * params.b_field.magnitude()
    if omega < _EPS:
        return math.inf
    return 2.0 * math.pi / omega


def helix_pitch(params) -> float:
    period = cyclotron_period(params)
    v_par, _ = decompose_velocity(params.velocity, params.b_field)
    if math.isinf(period):
        return math.inf
    return v_par.magnitude() * period


def classify_trajectory(params, tol: float = 1e-9) -> str:
    """
    'straight', 'circular' or 'helical'.
    """
    if abs(params.charge) < tol or params.b_field.magnitude() < tol:
        return "straight"
    v_par, v_perp = decompose_velocity(params.velocity, params.b_field)
    if v_perp.magnitude() < tol:
        return "straight"
    if v_par.magnitude() < tol:
        return "circular"
    return "helical"


def perpendicular_radii(positions: np.ndarray, b_field: Vector3, center: np.ndarray) -> np.ndarray:
    """
    Distance of each position from the gyration axis through `center`
    (along B), i.e. the radius in the plane perpendicular to B.
    """
    pts = np.asarray(positions, dtype=float) - np.asarray(center, dtype=float)
    b_hat = unit(b_field).to_array()
    along = pts @ b_hat
    perp = pts - np.outer(along, b_hat)
    return np.linalg.norm(perp, axis=1)


def gyration_center(params) -> np.ndarray:
    """
    Guiding center of the orbit for a particle starting at the origin with
    params.velocity: r_c = m (v x B) / (q |B|^2).
    """
    b2 = params.b_field.dot(params.b_field)
    if abs(params.charge) < _EPS or b2 < _EPS:
        return np.zeros(3)
    vxb = params.velocity.cross(params.b_field)
    return vxb.scale(params.mass / (params.charge * b2)).to_array()


def summarize(params, state) -> dict:
    return {
        "time": state.time,
        "speed": state.velocity.magnitude(),
        "kinetic_energy": kinetic_energy(params.mass, state.velocity),
        "field_magnitude": params.b_field.magnitude(),
        "cyclotron_radius": cyclotron_radius(params),
        "cyclotron_period": cyclotron_period(params),
        "helix_pitch": helix_pitch(params),
        "trajectory": classify_trajectory(params),
        "history_length": len(state.history),
    }
