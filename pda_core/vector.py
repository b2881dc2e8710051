"""
2D vector value type used by the layout, the edge geometry and the stepper.

Vectors are immutable; every operation returns a new value. Code that needs an
accumulator (node forces) rebinds the attribute instead of mutating a shared
vector.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

# Below this component size a vector is treated as zero length.
EPSILON = 1e-8


@dataclass(frozen=True)
class Vec2:
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Vec2":
        return Vec2(-self.x, -self.y)

    def __mul__(self, k: float) -> "Vec2":
        return Vec2(self.x * k, self.y * k)

    __rmul__ = __mul__

    def __truediv__(self, k: float) -> "Vec2":
        return Vec2(self.x / k, self.y / k)

    def dot(self, other: "Vec2") -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Vec2") -> float:
        """Z component of the 3D cross product of the two vectors."""
        return self.x * other.y - self.y * other.x

    def length(self, fallback: float = 0.0) -> float:
        return magnitude(self, fallback)

    def normalized(self, fallback: float = 1.0) -> "Vec2":
        """Unit vector in the same direction.

        A zero vector divided by a nonzero ``fallback`` stays zero, so callers
        never see NaN as long as the fallback is nonzero.
        """
        return self / magnitude(self, fallback)

    def perpendicular(self) -> "Vec2":
        """The vector rotated by a quarter turn (``(x, y) -> (-y, x)``)."""
        return Vec2(-self.y, self.x)

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


def magnitude(v: Vec2, fallback: float) -> float:
    """
    Euclidean length of ``v`` without intermediate overflow.

    Both components are divided by the larger absolute component before
    squaring. If that component is below ``EPSILON`` the vector is considered
    zero and ``fallback`` is returned instead.

    Args:
        v: Vector to measure
        fallback: Value returned for (near) zero vectors

    Returns:
        The length of ``v``, or ``fallback``
    """
    x = abs(v.x)
    y = abs(v.y)
    m = max(x, y)
    if m < EPSILON:
        return fallback

    x /= m
    y /= m
    return m * math.sqrt(x * x + y * y)
