# lorentzsim/physics/forces.py
from lorentzsim.physics.vector import Vector3


class ForceModel:
    """
    Base force model. The field is uniform, so acceleration depends on
    velocity only.
    """
    def acceleration(self, velocity: Vector3) -> Vector3:
        raise NotImplementedError


class LorentzForce(ForceModel):
    """
    Magnetic part of the Lorentz force, a = (q/m)(v x B).
    """
    def __init__(self, charge: float, mass: float, b_field: Vector3):
        self.charge = float(charge)
        self.mass = float(mass)
        self.b_field = b_field
        self.qm = self.charge / self.mass

    @classmethod
    def from_params(cls, params) -> "LorentzForce":
        return cls(params.charge, params.mass, params.b_field)

    def force(self, velocity: Vector3) -> Vector3:
        return velocity.cross(self.b_field).scale(self.charge)

    def acceleration(self, velocity: Vector3) -> Vector3:
        return velocity.cross(self.b_field).scale(self.qm)
