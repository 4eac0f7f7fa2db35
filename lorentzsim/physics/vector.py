# lorentzsim/physics/vector.py
import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Vector3:
    """
    Immutable 3D vector (x, y, z). All arithmetic returns new vectors.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_array(cls, arr) -> "Vector3":
        a = np.asarray(arr, dtype=float)
        if a.shape != (3,):
            raise ValueError(f"Cannot coerce {arr!r} to Vector3")
        return cls(float(a[0]), float(a[1]), float(a[2]))

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> "Vector3":
        return Vector3(-self.x, -self.y, -self.z)

    def scale(self, k: float) -> "Vector3":
        return Vector3(self.x * k, self.y * k, self.z * k)

    __mul__ = scale
    __rmul__ = scale

    def __truediv__(self, k: float) -> "Vector3":
        return Vector3(self.x / k, self.y / k, self.z / k)

    def dot(self, other: "Vector3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vector3") -> "Vector3":
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def magnitude(self) -> float:
        return math.sqrt(self.x ** 2 + self.y ** 2 + self.z ** 2)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)

    def max_abs(self) -> float:
        return max(abs(self.x), abs(self.y), abs(self.z))

    def __repr__(self):
        return f"Vector3({self.x:g}, {self.y:g}, {self.z:g})"


ZERO = Vector3(0.0, 0.0, 0.0)
