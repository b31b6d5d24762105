"""Immutable 3D vector value type used for body state."""

import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Vector3D:
    """
    Three-component double-precision vector.

    Arithmetic never mutates an operand; every operation returns a new value.
    Operators are aliases for the named methods: ``a + b``, ``a - b``, ``-a``,
    ``a * s``, ``s * a`` and ``a / s``.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def add(self, other: "Vector3D") -> "Vector3D":
        return Vector3D(self.x + other.x, self.y + other.y, self.z + other.z)

    def subtract(self, other: "Vector3D") -> "Vector3D":
        return Vector3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def scale(self, scalar: float) -> "Vector3D":
        return Vector3D(self.x * scalar, self.y * scalar, self.z * scalar)

    def dot(self, other: "Vector3D") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vector3D") -> "Vector3D":
        return Vector3D(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length(self) -> float:
        return math.hypot(self.x, self.y, self.z)

    def normalize(self) -> "Vector3D":
        """Unit vector in the same direction; the zero vector maps to itself."""
        length = self.length()
        if length == 0:
            return ZERO
        return Vector3D(self.x / length, self.y / length, self.z / length)

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    def __add__(self, other):
        if not isinstance(other, Vector3D):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, Vector3D):
            return NotImplemented
        return self.subtract(other)

    def __neg__(self):
        return Vector3D(-self.x, -self.y, -self.z)

    def __mul__(self, scalar):
        if isinstance(scalar, Vector3D):
            return NotImplemented
        return self.scale(scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar):
        if isinstance(scalar, Vector3D):
            return NotImplemented
        return Vector3D(self.x / scalar, self.y / scalar, self.z / scalar)

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    # -------------------------------------------------------------------------
    # numpy interop
    # -------------------------------------------------------------------------

    def to_array(self) -> np.ndarray:
        return np.array((self.x, self.y, self.z), dtype=np.float64)

    @classmethod
    def from_array(cls, values) -> "Vector3D":
        """Build a vector from any length-3 sequence or array."""
        x, y, z = values
        return cls(float(x), float(y), float(z))

    def __repr__(self) -> str:
        return f"Vector3D({self.x}, {self.y}, {self.z})"


ZERO = Vector3D(0.0, 0.0, 0.0)
Vector3D.ZERO = ZERO
