"""
Pairwise Newtonian gravity with numerical safety clamps.

Two renditions of the same law:
    - gravity(): operates on CelestialBody objects, used for direct queries
      and the exact O(n^2) reference sum
    - pair_force(): Numba kernel on scalars, used by the octree traversal

Both apply the same clamps and operation order, so a tree query on two
bodies agrees with gravity() to rounding.
"""

import math

from numba import njit

from config import physics as config
from .vector import Vector3D, ZERO


def gravity(a, b, G: float = None, min_distance: float = None,
            max_distance: float = None) -> Vector3D:
    """
    Force on ``a`` due to ``b``, pointing from ``a`` toward ``b``.

    Returns the zero vector when both bodies are static, or when their
    separation is below ``min_distance`` or above ``max_distance``.
    """
    cfg = config.PHYSICS
    G = cfg["G"] if G is None else G
    min_distance = cfg["min_distance"] if min_distance is None else min_distance
    max_distance = cfg["max_distance"] if max_distance is None else max_distance

    if a.is_static and b.is_static:
        return ZERO

    delta = b.position.subtract(a.position)
    dist = delta.length()
    if dist > max_distance or dist < min_distance:
        return ZERO

    force_magnitude = G * a.mass * b.mass / (dist * dist)
    return delta.normalize().scale(force_magnitude)


def direct_force_on(target, bodies, G: float = None, min_distance: float = None,
                    max_distance: float = None) -> Vector3D:
    """Exact net force on ``target`` by summing over every other body (O(n))."""
    net = ZERO
    for other in bodies:
        if other is None or other is target:
            continue
        net = net.add(gravity(target, other, G, min_distance, max_distance))
    return net


def direct_forces(bodies, G: float = None, min_distance: float = None,
                  max_distance: float = None) -> list:
    """Exact net force on every body, O(n^2). ``None`` entries map to ``None``."""
    return [
        None if body is None else direct_force_on(body, bodies, G, min_distance, max_distance)
        for body in bodies
    ]


@njit(cache=True)
def pair_force(ax: float, ay: float, az: float, mass_a: float, static_a: bool,
               bx: float, by: float, bz: float, mass_b: float, static_b: bool,
               G: float, min_distance: float, max_distance: float) -> tuple:
    """Scalar form of gravity(): force on point a due to point b."""
    if static_a and static_b:
        return 0.0, 0.0, 0.0

    dx = bx - ax
    dy = by - ay
    dz = bz - az
    dist = math.sqrt(dx * dx + dy * dy + dz * dz)
    if dist > max_distance or dist < min_distance:
        return 0.0, 0.0, 0.0

    force_magnitude = G * mass_a * mass_b / (dist * dist)
    return (dx / dist) * force_magnitude, (dy / dist) * force_magnitude, (dz / dist) * force_magnitude
