# lorentzsim/physics/params.py
import math
from dataclasses import dataclass, field, replace

from lorentzsim.physics.vector import Vector3
from lorentzsim.config.settings import (
    DEFAULT_MASS,
    DEFAULT_CHARGE,
    DEFAULT_VELOCITY,
    DEFAULT_B_FIELD,
)


class InvalidParameterError(ValueError):
    """Raised when simulation parameters are non-finite or mass <= 0."""


@dataclass(frozen=True)
class SimulationParams:
    """
    Particle and field parameters. Read-only for the integrator; the control
    layer replaces the whole object when a value changes.
    """
    mass: float = DEFAULT_MASS
    charge: float = DEFAULT_CHARGE
    velocity: Vector3 = field(default_factory=lambda: Vector3(*DEFAULT_VELOCITY))
    b_field: Vector3 = field(default_factory=lambda: Vector3(*DEFAULT_B_FIELD))

    def validate(self) -> "SimulationParams":
        if not math.isfinite(self.mass) or self.mass <= 0:
            raise InvalidParameterError(f"mass must be finite and > 0, got {self.mass!r}")
        if not math.isfinite(self.charge):
            raise InvalidParameterError(f"charge must be finite, got {self.charge!r}")
        if not self.velocity.is_finite():
            raise InvalidParameterError(f"velocity must be finite, got {self.velocity!r}")
        if not self.b_field.is_finite():
            raise InvalidParameterError(f"b_field must be finite, got {self.b_field!r}")
        return self

    def with_changes(self, **changes) -> "SimulationParams":
        """
        Return a validated copy with the given fields replaced.
        Raises InvalidParameterError and leaves self untouched on bad input.
        """
        return replace(self, **changes).validate()

    @property
    def charge_to_mass(self) -> float:
        return self.charge / self.mass
