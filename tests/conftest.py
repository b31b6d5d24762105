"""Shared fixtures for the orrery test suite."""

import numpy as np
import pytest

from orrery import CelestialBody, Star, Vector3D

SUN_MASS = 1.989e30
EARTH_MASS = 5.972e24
AU = 1.496e11


@pytest.fixture
def sun():
    return Star("sun", SUN_MASS, 6.957e8, (1.0, 0.9, 0.2), is_static=True)


@pytest.fixture
def earth():
    return CelestialBody("earth", EARTH_MASS, 6.371e6, (0.2, 0.6, 1.0),
                         position=Vector3D(AU, 0.0, 0.0),
                         velocity=Vector3D(0.0, 29780.0, 0.0))


def make_random_bodies(n: int, seed: int = 7, extent: float = 1.0e11):
    """``n`` moving bodies scattered uniformly in a cube of edge ``extent``."""
    rng = np.random.default_rng(seed)
    positions = rng.uniform(-extent / 2, extent / 2, (n, 3))
    masses = rng.uniform(1.0e23, 1.0e25, n)
    return [
        CelestialBody(f"b{i}", masses[i], 1.0e6, position=Vector3D.from_array(positions[i]))
        for i in range(n)
    ]


@pytest.fixture
def random_bodies():
    return make_random_bodies(60)
