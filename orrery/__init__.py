"""Barnes-Hut gravity core: bodies, octree, force law and stepper."""

from .vector import Vector3D, ZERO
from .bodies import CelestialBody, Star, Planet, Spacecraft, InvalidBody
from .forces import gravity, direct_force_on, direct_forces
from .octree import BarnesHutTree, OctreeNode
from .stepper import Stepper, advance
from .simulation import SimulationManager, BodySnapshot

__all__ = [
    "Vector3D",
    "ZERO",
    "CelestialBody",
    "Star",
    "Planet",
    "Spacecraft",
    "InvalidBody",
    "gravity",
    "direct_force_on",
    "direct_forces",
    "BarnesHutTree",
    "OctreeNode",
    "Stepper",
    "advance",
    "SimulationManager",
    "BodySnapshot",
]
