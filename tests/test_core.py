"""Unit tests for the core math types.

Tests cover:
- Vector3 arithmetic and normalization
- Ray evaluation
- AABB slab test, including axis-parallel rays
- Reflection, refraction and Schlick reflectance
- Thread-local random generators
"""

import math
import threading

import pytest

from core.aabb import AABB
from core.ray import Ray
from core.utils import (
    random_in_unit_disk,
    random_in_unit_sphere,
    random_unit_vector,
    reflect,
    reflectance,
    refract,
    seed_thread_rng,
    thread_rng,
)
from core.vector import Vector3


def unit_box():
    return AABB(Vector3(0, 0, 0), Vector3(1, 1, 1))


class TestVector3:
    def test_arithmetic(self):
        a = Vector3(1, 2, 3)
        b = Vector3(4, 5, 6)
        assert tuple(a + b) == (5, 7, 9)
        assert tuple(b - a) == (3, 3, 3)
        assert tuple(-a) == (-1, -2, -3)
        assert tuple(a * 2) == (2, 4, 6)
        assert tuple(2 * a) == (2, 4, 6)
        assert tuple(a * b) == (4, 10, 18)
        assert tuple(b / 2) == (2, 2.5, 3)

    def test_dot_and_cross(self):
        x = Vector3(1, 0, 0)
        y = Vector3(0, 1, 0)
        assert x.dot(y) == 0
        assert tuple(x.cross(y)) == (0, 0, 1)

    def test_indexing(self):
        v = Vector3(7, 8, 9)
        assert (v[0], v[1], v[2]) == (7, 8, 9)
        with pytest.raises(IndexError):
            v[3]

    def test_normalize(self):
        v = Vector3(3, 0, 4).normalize()
        assert v.length() == pytest.approx(1.0)
        assert tuple(Vector3(0, 0, 0).normalize()) == (0, 0, 0)

    def test_near_zero(self):
        assert Vector3(1e-9, -1e-9, 0).near_zero()
        assert not Vector3(1e-3, 0, 0).near_zero()


def test_ray_at():
    ray = Ray(Vector3(1, 1, 1), Vector3(0, 2, 0), time=0.5)
    assert tuple(ray.at(1.5)) == (1, 4, 1)
    assert ray.time == 0.5


class TestAABB:
    def test_hit_through_center(self):
        ray = Ray(Vector3(-1, 0.5, 0.5), Vector3(1, 0, 0))
        assert unit_box().hit(ray, 0.0, math.inf)

    def test_reversed_direction(self):
        ray = Ray(Vector3(2, 0.5, 0.5), Vector3(-1, 0, 0))
        assert unit_box().hit(ray, 0.0, math.inf)

    def test_parallel_ray_outside_slab_misses(self):
        """A zero direction component outside the slab gives an empty interval."""
        ray = Ray(Vector3(-1, 2, 0.5), Vector3(1, 0, 0))
        assert not unit_box().hit(ray, 0.0, math.inf)

    def test_negative_zero_direction(self):
        ray = Ray(Vector3(0.5, 0.5, 3), Vector3(-0.0, -0.0, -1))
        assert unit_box().hit(ray, 0.0, math.inf)

    def test_ray_in_face_plane_does_not_raise(self):
        ray = Ray(Vector3(-1, 0, 0.5), Vector3(1, 0, 0))
        assert unit_box().hit(ray, 0.0, math.inf)

    def test_interval_excludes_box(self):
        ray = Ray(Vector3(-1, 0.5, 0.5), Vector3(1, 0, 0))
        assert not unit_box().hit(ray, 0.0, 0.5)
        assert not unit_box().hit(ray, 2.5, math.inf)

    def test_diagonal_miss(self):
        ray = Ray(Vector3(-1, -1, -1), Vector3(1, -1, 1))
        assert not unit_box().hit(ray, 0.0, math.inf)

    def test_surrounding_box(self):
        a = AABB(Vector3(0, 0, 0), Vector3(1, 1, 1))
        b = AABB(Vector3(-1, 0.5, 2), Vector3(0.5, 3, 4))
        box = AABB.surrounding_box(a, b)
        assert tuple(box.minimum) == (-1, 0, 0)
        assert tuple(box.maximum) == (1, 3, 4)

    def test_corners(self):
        corners = list(unit_box().corners())
        assert len(corners) == 8
        assert len({tuple(c) for c in corners}) == 8


class TestOptics:
    def test_reflect(self):
        r = reflect(Vector3(1, -1, 0), Vector3(0, 1, 0))
        assert tuple(r) == (1, 1, 0)

    def test_refract_normal_incidence_goes_straight(self):
        d = refract(Vector3(0, -1, 0), Vector3(0, 1, 0), 1 / 1.5)
        assert d.x == pytest.approx(0.0)
        assert d.y == pytest.approx(-1.0)

    def test_refract_snell(self):
        incident = Vector3(1, -1, 0).normalize()
        out = refract(incident, Vector3(0, 1, 0), 1 / 1.5).normalize()
        sin_in = math.sqrt(0.5)
        assert out.x == pytest.approx(sin_in / 1.5)

    def test_schlick_at_normal_incidence(self):
        assert reflectance(1.0, 1.5) == pytest.approx(0.04)

    def test_schlick_at_grazing_angle(self):
        assert reflectance(0.0, 1.5) == pytest.approx(1.0)


class TestRandom:
    def test_unit_sphere_and_disk(self):
        for _ in range(200):
            assert random_in_unit_sphere().length_squared() < 1.0
            p = random_in_unit_disk()
            assert p.z == 0.0
            assert p.length_squared() < 1.0
            assert random_unit_vector().length() == pytest.approx(1.0)

    def test_seeding_is_reproducible(self):
        seed_thread_rng(7)
        first = [thread_rng().random() for _ in range(5)]
        seed_thread_rng(7)
        assert [thread_rng().random() for _ in range(5)] == first

    def test_generators_are_per_thread(self):
        main_rng = thread_rng()
        seen = []
        worker = threading.Thread(target=lambda: seen.append(thread_rng()))
        worker.start()
        worker.join()
        assert seen[0] is not main_rng
