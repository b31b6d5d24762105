"""Tests for the immutable Vector3D value type."""

import dataclasses
import math

import numpy as np
import pytest

from orrery import Vector3D, ZERO


class TestArithmetic:
    def test_add_subtract(self):
        a = Vector3D(1.0, 2.0, 3.0)
        b = Vector3D(4.0, -5.0, 6.0)
        assert a.add(b) == Vector3D(5.0, -3.0, 9.0)
        assert a.subtract(b) == Vector3D(-3.0, 7.0, -3.0)
        assert a + b == a.add(b)
        assert a - b == a.subtract(b)

    def test_scale_and_operators(self):
        a = Vector3D(1.0, -2.0, 0.5)
        assert a.scale(2.0) == Vector3D(2.0, -4.0, 1.0)
        assert a * 2.0 == a.scale(2.0)
        assert 2.0 * a == a.scale(2.0)
        assert a / 2.0 == Vector3D(0.5, -1.0, 0.25)
        assert -a == Vector3D(-1.0, 2.0, -0.5)

    def test_dot_and_cross(self):
        x = Vector3D(1.0, 0.0, 0.0)
        y = Vector3D(0.0, 1.0, 0.0)
        assert x.dot(y) == 0.0
        assert x.cross(y) == Vector3D(0.0, 0.0, 1.0)
        assert y.cross(x) == Vector3D(0.0, 0.0, -1.0)
        assert Vector3D(1.0, 2.0, 3.0).dot(Vector3D(4.0, 5.0, 6.0)) == 32.0

    def test_operands_are_not_mutated(self):
        a = Vector3D(1.0, 2.0, 3.0)
        b = Vector3D(1.0, 1.0, 1.0)
        a.add(b)
        a.scale(10.0)
        a.normalize()
        assert a == Vector3D(1.0, 2.0, 3.0)
        assert b == Vector3D(1.0, 1.0, 1.0)

    def test_frozen(self):
        a = Vector3D(1.0, 2.0, 3.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            a.x = 5.0


class TestLengthAndNormalize:
    def test_length(self):
        assert Vector3D(3.0, 4.0, 0.0).length() == 5.0
        assert ZERO.length() == 0.0

    def test_normalize(self):
        n = Vector3D(0.0, 3.0, 4.0).normalize()
        assert n.length() == pytest.approx(1.0)
        assert n == Vector3D(0.0, 0.6, 0.8)

    def test_normalize_zero_is_zero(self):
        assert ZERO.normalize() == ZERO
        assert Vector3D(0.0, 0.0, 0.0).normalize() == Vector3D(0.0, 0.0, 0.0)

    def test_normalize_small_vector(self):
        n = Vector3D(1e-100, 0.0, 0.0).normalize()
        assert n.x == pytest.approx(1.0)

    def test_normalize_tiny_vector_keeps_direction(self):
        n = Vector3D(1e-300, -1e-300, 0.0).normalize()
        assert not math.isnan(n.x)
        assert n.x == pytest.approx(math.sqrt(0.5))
        assert n.y == pytest.approx(-math.sqrt(0.5))
        assert n.z == 0.0

    def test_tiny_vector_has_nonzero_length(self):
        assert Vector3D(0.0, 0.0, 3e-310).length() == pytest.approx(3e-310)

    def test_huge_vector_length_does_not_overflow(self):
        assert Vector3D(3e200, 4e200, 0.0).length() == pytest.approx(5e200)


class TestArrayInterop:
    def test_round_trip(self):
        a = Vector3D(1.5, -2.5, 3.5)
        arr = a.to_array()
        assert arr.dtype == np.float64
        assert Vector3D.from_array(arr) == a

    def test_from_sequence_and_unpack(self):
        v = Vector3D.from_array((1, 2, 3))
        assert isinstance(v.x, float)
        x, y, z = v
        assert (x, y, z) == (1.0, 2.0, 3.0)
