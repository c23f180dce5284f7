# satsys/physics/state.py
import numpy as np


def as_xyz(vec):
    return {"x": float(vec[0]), "y": float(vec[1]), "z": float(vec[2])}


class State:
    """
    Cartesian state of a tracked object.
    r in km, v in km/s (ECI for element orbits, TEME for TLE orbits).
    """
    def __init__(self, position=None, velocity=None):
        position = np.zeros(3) if position is None else position
        velocity = np.zeros(3) if velocity is None else velocity
        if len(position) != 3 or len(velocity) != 3:
            raise ValueError("Position and velocity must be 3D vectors.")
        self.r = np.array(position, dtype=float)
        self.v = np.array(velocity, dtype=float)

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.v))

    def as_dict(self):
        return {"position": as_xyz(self.r), "velocity": as_xyz(self.v)}

    def copy(self):
        return State(self.r.copy(), self.v.copy())
