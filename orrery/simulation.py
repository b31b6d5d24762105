"""
Frame-level simulation owner.

The manager holds the id-indexed body table and turns wall-clock frame time
into simulated time through a clamped time-scale multiplier, then hands the
tick to the Stepper. Renderers read state through snapshots() only.
"""

from types import MappingProxyType
from typing import Dict, NamedTuple, Optional, Tuple

from config import physics as config
from .bodies import CelestialBody, Planet, Spacecraft
from .stepper import Stepper
from .vector import Vector3D


class BodySnapshot(NamedTuple):
    """Read-only view of a body for rendering. No unit scaling is applied."""
    id: str
    kind: str
    position: Vector3D
    radius: float
    color: Tuple[float, float, float]
    is_static: bool


class SimulationManager:
    """
    Owns the body table and drives the Stepper once per frame.

    Time scale is the number of simulated seconds per wall-clock second; the
    default runs one simulated day per second.
    """

    def __init__(self, bodies=None, stepper: Stepper = None,
                 time_scale: float = None, verbose: bool = True):
        sim_cfg = config.SIMULATION
        self.default_time_scale = float(sim_cfg["time_scale"])
        self.min_time_scale = float(sim_cfg["min_time_scale"])
        self.max_time_scale = float(sim_cfg["max_time_scale"])

        self.stepper = stepper if stepper is not None else Stepper()
        self.time_scale = self.default_time_scale if time_scale is None else float(time_scale)
        self.verbose = verbose

        self.paused = False
        self.simulated_time = 0.0
        self.tick_count = 0

        self._bodies: Dict[str, CelestialBody] = {}
        self._reported_orphans = set()
        if bodies is not None:
            self.load(bodies)

    def _log(self, message: str):
        if self.verbose:
            print(f"[Orrery] {message}")

    # -------------------------------------------------------------------------
    # Body table
    # -------------------------------------------------------------------------

    def load(self, bodies):
        """Replace the body table. Accepts a mapping of id -> body or an iterable of bodies."""
        values = bodies.values() if hasattr(bodies, "values") else bodies
        self._bodies = {}
        self._reported_orphans = set()
        for body in values:
            self.add_body(body)
        self.simulated_time = 0.0
        self.tick_count = 0
        self._log(f"Loaded {len(self._bodies)} bodies")

    def add_body(self, body: CelestialBody):
        if body.id in self._bodies:
            raise ValueError(f"Duplicate body id: {body.id!r}")
        self._bodies[body.id] = body

    def get(self, body_id: str) -> Optional[CelestialBody]:
        return self._bodies.get(body_id)

    @property
    def bodies(self):
        return MappingProxyType(self._bodies)

    @property
    def body_count(self) -> int:
        return len(self._bodies)

    def parent_of(self, body_id: str) -> Optional[CelestialBody]:
        """The body a planet orbits, resolved through the id table."""
        body = self._bodies.get(body_id)
        if not isinstance(body, Planet) or body.parent_id is None:
            return None
        parent = self._bodies.get(body.parent_id)
        if parent is None and body_id not in self._reported_orphans:
            self._reported_orphans.add(body_id)
            self._log(f"Parent body {body.parent_id!r} not found for planet {body_id!r}")
        return parent

    def snapshots(self) -> Tuple[BodySnapshot, ...]:
        return tuple(
            BodySnapshot(
                id=body.id,
                kind=body.kind,
                position=body.position,
                radius=body.radius,
                color=body.color,
                is_static=body.is_static,
            )
            for body in self._bodies.values()
        )

    # -------------------------------------------------------------------------
    # Time control
    # -------------------------------------------------------------------------

    @property
    def effective_time_scale(self) -> float:
        return max(self.min_time_scale, min(self.max_time_scale, self.time_scale))

    def toggle_pause(self):
        self.paused = not self.paused
        self._log("Paused" if self.paused else "Running")

    def adjust_time_scale(self, factor: float):
        """Multiply the time scale by ``factor`` unless that leaves the allowed range."""
        new_scale = self.time_scale * factor
        if self.min_time_scale <= new_scale <= self.max_time_scale:
            self.time_scale = new_scale
            self._log(f"Time scale: {self.time_scale:.1f} ({self.time_scale / 86400.0:.2f} days/second)")

    def reset_time_scale(self):
        self.time_scale = self.default_time_scale
        self._log(f"Time scale reset to {self.time_scale / 86400.0:.2f} days/second")

    # -------------------------------------------------------------------------
    # Stepping
    # -------------------------------------------------------------------------

    def update(self, wall_dt: float):
        """Advance the simulation by one frame of ``wall_dt`` wall-clock seconds."""
        if wall_dt < 0:
            raise ValueError(f"Frame time must be non-negative, got {wall_dt}")
        if self.paused:
            return

        dt = wall_dt * self.effective_time_scale
        self.stepper.advance(list(self._bodies.values()), dt)
        self.simulated_time += dt
        self.tick_count += 1

    def thrust(self, craft_id: str, direction: Vector3D, wall_dt: float):
        """Fire a spacecraft's engine for one frame of scaled time."""
        craft = self._bodies[craft_id]
        if not isinstance(craft, Spacecraft):
            raise TypeError(f"Body {craft_id!r} is a {craft.kind}, not a Spacecraft")
        craft.apply_thrust(direction, wall_dt * self.effective_time_scale)
