"""
Body Presets Library
====================

Ready-made body sets for the orrery. Each preset builds a fresh
``{id: body}`` table, the same shape an external loader would supply.

Presets:
- lineup: Sun to Saturn in a row (display units, no motion)
- solar_system: Sun to Saturn on circular orbits (SI units), plus a probe on a heliocentric orbit
- cluster: Random spherical star cluster
- collapse: Bodies stacked on one coordinate (degenerate geometry check)
"""

import math
from typing import Dict, List, Tuple

import numpy as np

from config import physics as config
from orrery import CelestialBody, Planet, Spacecraft, Star, Vector3D

PRESETS = {
    "lineup": "Sun to Saturn lined up on the x axis (display units, static view)",
    "solar_system": "Sun to Saturn on circular orbits with a heliocentric probe",
    "cluster": "Random spherical star cluster",
    "collapse": "Bodies stacked on a single coordinate",
}

SOLAR_MASS = 1.989e30
AU = 1.496e11

# id, mass (kg), radius (m), color, semi-major axis (m), orbital phase (rad), gas giant
PLANETS = [
    ("mercury", 3.301e23, 2.4397e6, (0.7, 0.7, 0.7), 5.791e10, 2.1, False),
    ("venus", 4.867e24, 6.0518e6, (1.0, 0.8, 0.4), 1.0821e11, 4.4, False),
    ("earth", 5.972e24, 6.371e6, (0.2, 0.6, 1.0), 1.496e11, 0.0, False),
    ("mars", 6.39e23, 3.3895e6, (1.0, 0.4, 0.2), 2.2794e11, 1.3, False),
    ("jupiter", 1.898e27, 6.9911e7, (0.8, 0.6, 0.3), 7.7857e11, 3.5, True),
    ("saturn", 5.683e26, 5.8232e7, (0.9, 0.8, 0.6), 1.43353e12, 5.6, True),
]

# id, mass, display radius, color, display distance, gas giant
LINEUP = [
    ("mercury", 3.301e23, 15, (0.7, 0.7, 0.7), 120, False),
    ("venus", 4.867e24, 18, (1.0, 0.8, 0.4), 180, False),
    ("earth", 5.972e24, 20, (0.2, 0.6, 1.0), 250, False),
    ("mars", 6.39e23, 16, (1.0, 0.4, 0.2), 320, False),
    ("jupiter", 1.898e27, 35, (0.8, 0.6, 0.3), 420, True),
    ("saturn", 5.683e26, 30, (0.9, 0.8, 0.6), 520, True),
]


def _sun(radius: float) -> Star:
    return Star("sun", SOLAR_MASS, radius, (1.0, 0.9, 0.2),
                is_static=True, luminosity=3.828e26)


def build_lineup() -> Dict[str, CelestialBody]:
    """The Sun and six planets in a row, sized for direct display."""
    bodies = {"sun": _sun(50)}
    for body_id, mass, radius, color, distance, gas_giant in LINEUP:
        bodies[body_id] = Planet(body_id, mass, radius, color,
                                 position=Vector3D(distance, 0, 0),
                                 parent_id="sun", is_gas_giant=gas_giant)
    return bodies


def build_solar_system(G: float = None) -> Dict[str, CelestialBody]:
    """
    Sun and planets on circular orbits in the xy plane.

    Orbital speed is sqrt(G * M_sun / a), tangential to the radius vector.
    Earth starts on the +x axis moving toward +y.
    """
    G = config.PHYSICS["G"] if G is None else G
    sun = _sun(6.957e8)
    bodies = {"sun": sun}

    for body_id, mass, radius, color, a, phase, gas_giant in PLANETS:
        speed = math.sqrt(G * sun.mass / a)
        bodies[body_id] = Planet(
            body_id, mass, radius, color,
            position=Vector3D(a * math.cos(phase), a * math.sin(phase), 0.0),
            velocity=Vector3D(-speed * math.sin(phase), speed * math.cos(phase), 0.0),
            parent_id="sun", is_gas_giant=gas_giant,
        )

    # Probe on a circular heliocentric orbit at 1.2 AU
    probe_radius = 1.2 * AU
    probe_speed = math.sqrt(G * sun.mass / probe_radius)
    bodies["probe"] = Spacecraft(
        "probe", 1000.0, 5.0, (0.9, 0.9, 0.9),
        position=Vector3D(0.0, -probe_radius, 0.0),
        velocity=Vector3D(probe_speed, 0.0, 0.0),
        thrust_power=500.0, fuel=1.0e4,
    )
    return bodies


def generate_cluster(n: int, R: float, seed: int = None) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Uniform spherical cluster.

    Returns:
        positions: (n, 3) array (m)
        velocities: (n, 3) array (m/s)
        masses: (n,) array (kg)
    """
    rng = np.random.default_rng(seed)

    phi = rng.uniform(0, 2 * np.pi, n)
    cos_theta = rng.uniform(-1, 1, n)
    sin_theta = np.sqrt(1 - cos_theta ** 2)
    r = R * np.cbrt(rng.uniform(0, 1, n))

    positions = np.zeros((n, 3), dtype=np.float64)
    positions[:, 0] = r * sin_theta * np.cos(phi)
    positions[:, 1] = r * sin_theta * np.sin(phi)
    positions[:, 2] = r * cos_theta

    masses = rng.uniform(0.1, 2.0, n) * SOLAR_MASS

    # Small random velocities, a fraction of the cluster's virial speed
    G = config.PHYSICS["G"]
    virial_speed = math.sqrt(G * masses.sum() / R) if n > 0 else 0.0
    velocities = rng.normal(0, virial_speed * 0.1, (n, 3))

    return positions, velocities, masses


def build_cluster(n: int = 200, R: float = 1.0e3 * AU, seed: int = None) -> Dict[str, CelestialBody]:
    positions, velocities, masses = generate_cluster(n, R, seed)
    bodies = {}
    for i in range(n):
        body_id = f"star_{i:04d}"
        bodies[body_id] = Star(body_id, masses[i], 6.957e8, (1.0, 0.95, 0.8),
                               position=Vector3D.from_array(positions[i]),
                               velocity=Vector3D.from_array(velocities[i]))
    return bodies


def build_collapse(n: int = 16, at: Vector3D = Vector3D(AU, 0.0, 0.0)) -> Dict[str, CelestialBody]:
    """``n`` equal-mass bodies on one coordinate."""
    return {
        f"body_{i:02d}": CelestialBody(f"body_{i:02d}", 1.0e20, 1.0e3, position=at)
        for i in range(n)
    }


def build_preset(name: str, n: int = None, seed: int = None) -> Dict[str, CelestialBody]:
    """Build the named preset. ``n`` and ``seed`` apply to generated presets only."""
    if name == "lineup":
        return build_lineup()
    if name == "solar_system":
        return build_solar_system()
    if name == "cluster":
        return build_cluster(n=200 if n is None else n, seed=seed)
    if name == "collapse":
        return build_collapse(n=16 if n is None else n)
    raise KeyError(f"Unknown preset: {name!r} (available: {', '.join(PRESETS)})")


def get_preset_list() -> List[Tuple[str, str]]:
    return list(PRESETS.items())


def print_preset_menu():
    """Print the preset catalogue."""
    print("\n" + "=" * 60)
    print("  ORRERY PRESETS")
    print("=" * 60)
    for i, (key, description) in enumerate(get_preset_list(), 1):
        print(f"  {i}. {key:<14} {description}")
    print("=" * 60 + "\n")
