# lorentzsim/physics/state.py
from collections import deque
from typing import Iterable, Optional

import numpy as np

from lorentzsim.physics.vector import Vector3, ZERO
from lorentzsim.config.settings import TRAIL_LENGTH


class SimulationState:
    """
    Kinematic state of the particle plus its bounded trajectory history.
    history holds positions oldest first; when full the oldest is dropped.
    """
    def __init__(self, position: Vector3 = ZERO, velocity: Vector3 = ZERO,
                 history: Optional[Iterable[Vector3]] = None, time: float = 0.0,
                 capacity: int = TRAIL_LENGTH):
        if time < 0:
            raise ValueError("time must be >= 0")
        self.position = position
        self.velocity = velocity
        self.history = deque(history or (), maxlen=int(capacity))
        self.time = float(time)

    @classmethod
    def initial(cls, velocity: Vector3, capacity: int = TRAIL_LENGTH) -> "SimulationState":
        return cls(position=ZERO, velocity=velocity, history=None, time=0.0, capacity=capacity)

    @property
    def capacity(self) -> int:
        return self.history.maxlen

    def advanced(self, position: Vector3, velocity: Vector3, dt: float) -> "SimulationState":
        """
        New state after one step; the new position is appended to a copy
        of the history.
        """
        nxt = SimulationState(position, velocity, self.history, self.time + dt, self.capacity)
        nxt.history.append(position)
        return nxt

    def push(self, position: Vector3, velocity: Vector3, dt: float) -> None:
        """In-place version of advanced(), for the owner of the state."""
        self.position = position
        self.velocity = velocity
        self.history.append(position)
        self.time += dt

    def history_array(self) -> np.ndarray:
        if not self.history:
            return np.empty((0, 3), dtype=float)
        return np.array([tuple(p) for p in self.history], dtype=float)

    def __repr__(self):
        return (f"SimulationState(t={self.time:.2f}, r={self.position!r}, "
                f"v={self.velocity!r}, history={len(self.history)})")
