"""Tests for the per-tick integrator."""

import copy

import pytest

from orrery import CelestialBody, Stepper, Vector3D, ZERO, advance, direct_force_on

from conftest import AU, SUN_MASS, make_random_bodies

G = 6.674e-11


class TestSunEarth:
    def test_one_second_tick(self, sun, earth):
        Stepper().advance([sun, earth], 1.0)

        expected_dv = G * SUN_MASS / (AU * AU)
        assert expected_dv == pytest.approx(5.93e-3, rel=1e-3)
        assert earth.velocity.x == pytest.approx(-expected_dv, rel=1e-9)
        assert earth.velocity.y == 29780.0
        assert earth.velocity.z == 0.0

        # Position drifts along the updated velocity
        assert earth.position.x == pytest.approx(AU - expected_dv, rel=1e-15)
        assert earth.position.y == 29780.0

    def test_sun_does_not_move(self, sun, earth):
        stepper = Stepper()
        for _ in range(10):
            stepper.advance([sun, earth], 3600.0)
        assert sun.position == ZERO
        assert sun.velocity == ZERO

    def test_module_level_advance(self, sun, earth):
        advance([sun, earth], 1.0)
        assert earth.velocity.x < 0.0


class TestStaticBodies:
    def test_static_with_velocity_never_moves(self):
        anchor = CelestialBody("anchor", 1.0e30, 1.0, position=Vector3D(1.0, 2.0, 3.0),
                               velocity=Vector3D(5.0, 0.0, 0.0), is_static=True)
        rock = CelestialBody("rock", 1.0, 1.0, position=Vector3D(1.0e9, 0.0, 0.0))
        Stepper().advance([anchor, rock], 100.0)
        assert anchor.position == Vector3D(1.0, 2.0, 3.0)
        assert anchor.velocity == Vector3D(5.0, 0.0, 0.0)

    def test_all_static_is_frozen(self):
        bodies = [CelestialBody(f"s{i}", 1.0e25, 1.0, position=Vector3D(i * 1.0e6, 0.0, 0.0),
                                is_static=True) for i in range(5)]
        Stepper().advance(bodies, 1000.0)
        for i, b in enumerate(bodies):
            assert b.position == Vector3D(i * 1.0e6, 0.0, 0.0)
            assert b.velocity == ZERO


class TestEmptyInput:
    def test_none_and_empty(self):
        stepper = Stepper()
        stepper.advance(None, 1.0)
        stepper.advance([], 1.0)
        assert stepper.last_node_count == 0

    def test_none_entries_skipped(self, sun, earth):
        Stepper().advance([None, sun, None, earth], 1.0)
        assert earth.velocity.x < 0.0

    def test_zero_dt_changes_nothing(self, sun, earth):
        Stepper().advance([sun, earth], 0.0)
        assert earth.position == Vector3D(AU, 0.0, 0.0)
        assert earth.velocity == Vector3D(0.0, 29780.0, 0.0)


class TestIntegration:
    def test_semi_implicit_euler(self):
        bodies = make_random_bodies(12, seed=11)
        expected = []
        for b in bodies:
            f = direct_force_on(b, bodies)
            v = b.velocity.add(f.scale(10.0 / b.mass))
            expected.append((v, b.position.add(v.scale(10.0))))

        Stepper(theta=0.0).advance(bodies, 10.0)
        for b, (v, p) in zip(bodies, expected):
            for u, w in zip(b.velocity, v):
                assert u == pytest.approx(w, rel=1e-9, abs=1e-18)
            for u, w in zip(b.position, p):
                assert u == pytest.approx(w, rel=1e-12)

    def test_order_independent(self):
        forward = make_random_bodies(30, seed=5)
        backward = list(reversed(copy.deepcopy(forward)))

        Stepper().advance(forward, 60.0)
        Stepper().advance(backward, 60.0)

        by_id = {b.id: b for b in backward}
        for b in forward:
            other = by_id[b.id]
            for u, w in zip(b.velocity, other.velocity):
                assert u == pytest.approx(w, rel=1e-12, abs=1e-18)
            for u, w in zip(b.position, other.position):
                assert u == pytest.approx(w, rel=1e-12)

    def test_records_node_count(self):
        stepper = Stepper()
        stepper.advance(make_random_bodies(20), 1.0)
        assert stepper.last_node_count >= 20

    def test_coincident_bodies_do_not_blow_up(self):
        bodies = [CelestialBody(f"b{i}", 1.0e20, 1.0e3, position=Vector3D(AU, 0.0, 0.0))
                  for i in range(16)]
        Stepper().advance(bodies, 86400.0)
        for b in bodies:
            assert b.position == Vector3D(AU, 0.0, 0.0)
            assert b.velocity == ZERO
