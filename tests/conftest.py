"""Pytest configuration for path tracer tests.

Sources live under src/ as top-level packages; pyproject.toml puts src/
on the path, and the insert below does the same when pytest runs from
another root.
"""

import os
import sys

import pytest

SRC = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from core.utils import seed_thread_rng  # noqa: E402
from core.vector import Color, Vector3  # noqa: E402
from geometry.hittable import HitRecord, Hittable  # noqa: E402
from materials.lambertian import Lambertian  # noqa: E402


class UnboundedPlane(Hittable):
    """The plane y = 0, which reports no bounding box."""

    def __init__(self, material=None):
        self.material = material

    def hit(self, ray, t_min, t_max):
        if ray.direction.y == 0:
            return None
        t = -ray.origin.y / ray.direction.y
        if t < t_min or t > t_max:
            return None
        return HitRecord.facing(ray, t, ray.at(t), Vector3(0, 1, 0), 0.0, 0.0, self.material)

    def bounding_box(self, time0, time1):
        return None


@pytest.fixture(autouse=True)
def seeded_rng():
    """Seed the test thread's generator so every test sees the same draws."""
    return seed_thread_rng(1234)


@pytest.fixture
def gray():
    """A mid-gray Lambertian material."""
    return Lambertian(Color(0.5, 0.5, 0.5))


@pytest.fixture
def unbounded_plane(gray):
    return UnboundedPlane(gray)
