"""
Celestial body state.

A body is a mutable record of one simulated point mass. The Stepper mutates
bodies in place every tick (velocity first, then position); everything else
reads them. Equality is identity, so a body can be looked up in the octree
snapshot by ``id()``.

Kinds:
    - CelestialBody: plain point mass
    - Star: adds luminosity
    - Planet: adds a parent id (resolved by lookup, never stored as a reference)
    - Spacecraft: adds thrust power and fuel
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from config import physics as config
from .vector import Vector3D, ZERO


class InvalidBody(ValueError):
    """Raised when a body is constructed with unphysical parameters."""


@dataclass(eq=False)
class CelestialBody:
    """
    A single massive point body.

    Attributes:
        id: Unique identifier within a simulation
        mass: Mass in kg (> 0)
        radius: Radius in m (> 0), informational for the core
        color: RGB tuple (0-1 range), informational for the core
        position: Position vector (m)
        velocity: Velocity vector (m/s)
        is_static: Static bodies attract others but never move
    """
    id: str
    mass: float
    radius: float
    color: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    position: Vector3D = ZERO
    velocity: Vector3D = ZERO
    is_static: bool = False

    def __post_init__(self):
        if not (math.isfinite(self.mass) and self.mass > 0):
            raise InvalidBody(f"Body {self.id!r}: mass must be positive, got {self.mass}")
        if not (math.isfinite(self.radius) and self.radius > 0):
            raise InvalidBody(f"Body {self.id!r}: radius must be positive, got {self.radius}")
        if self.color is None or len(self.color) != 3:
            raise InvalidBody(f"Body {self.id!r}: color must be an RGB triple")

        self.mass = float(self.mass)
        self.radius = float(self.radius)
        self.color = tuple(float(c) for c in self.color)
        if not isinstance(self.position, Vector3D):
            self.position = Vector3D.from_array(self.position)
        if not isinstance(self.velocity, Vector3D):
            self.velocity = Vector3D.from_array(self.velocity)

    @property
    def kind(self) -> str:
        return type(self).__name__

    def apply_force(self, force: Vector3D, dt: float):
        """Accelerate by ``force`` for ``dt`` seconds. Static bodies ignore forces."""
        if self.is_static:
            return
        self.velocity = self.velocity.add(force.scale(dt / self.mass))

    def update_position(self, dt: float):
        """Drift along the current velocity for ``dt`` seconds."""
        self.position = self.position.add(self.velocity.scale(dt))

    def __repr__(self) -> str:
        return (f"{self.kind}(id={self.id!r}, mass={self.mass}, radius={self.radius}, "
                f"position={self.position}, velocity={self.velocity}, static={self.is_static})")


@dataclass(eq=False, repr=False)
class Star(CelestialBody):
    luminosity: float = 0.0  # W


@dataclass(eq=False, repr=False)
class Planet(CelestialBody):
    """A planet orbiting the body named by ``parent_id``."""
    parent_id: Optional[str] = None
    is_gas_giant: bool = False


@dataclass(eq=False, repr=False)
class Spacecraft(CelestialBody):
    """
    A body that can accelerate itself while it has fuel.

    Attributes:
        thrust_power: Thrust force magnitude per second of burn
        fuel: Remaining fuel; thrust is unavailable once it reaches 0
    """
    thrust_power: float = 0.0
    fuel: float = 0.0

    def apply_thrust(self, direction: Vector3D, dt: float):
        """
        Fire the engine along ``direction`` for ``dt`` seconds.

        The thrust impulse is routed through ``apply_force``, so a static
        spacecraft burns fuel without moving. A zero direction burns nothing.
        """
        if self.fuel <= 0:
            return
        thrust = direction.normalize().scale(self.thrust_power * dt)
        self.apply_force(thrust, dt)
        burned = thrust.length() * config.SPACECRAFT["fuel_efficiency"]
        self.fuel = max(0.0, self.fuel - burned)
