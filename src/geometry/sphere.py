import math
from typing import Optional, Tuple
import numpy as np
from numba import njit
from core.vector import Vector3
from core.ray import Ray
from geometry.hittable import Hittable, HitRecord
from core.aabb import AABB

GRAVITY = 9.8

def sphere_uv(p: Vector3) -> Tuple[float, float]:
    """
    Maps a point on the unit sphere to (u, v) in [0,1]x[0,1].
    u runs around the Y axis starting at X=-1, v from Y=-1 to Y=+1.
    """
    theta = math.acos(max(-1.0, min(1.0, -p.y)))
    phi = math.atan2(-p.z, p.x) + math.pi
    return phi / (2 * math.pi), theta / math.pi

def hit_sphere(center: Vector3, radius: float, material, ray: Ray,
               t_min: float, t_max: float) -> Optional[HitRecord]:
    oc = ray.origin - center
    a = ray.direction.length_squared()
    half_b = oc.dot(ray.direction)
    c = oc.length_squared() - radius * radius
    discriminant = half_b * half_b - a * c

    if discriminant < 0:
        return None

    sqrt_disc = math.sqrt(discriminant)
    # Find the nearest root that lies in the acceptable range
    root = (-half_b - sqrt_disc) / a
    if root < t_min or root > t_max:
        root = (-half_b + sqrt_disc) / a
        if root < t_min or root > t_max:
            return None

    p = ray.at(root)
    outward_normal = (p - center) / radius
    u, v = sphere_uv(outward_normal)
    return HitRecord.facing(ray, root, p, outward_normal, u, v, material)

def _box_at(center: Vector3, radius: float) -> AABB:
    offset = Vector3(abs(radius), abs(radius), abs(radius))
    return AABB(center - offset, center + offset)

class Sphere(Hittable):
    """
    Represents a sphere defined by its center, radius, and material.
    """
    def __init__(self, center: Vector3, radius: float, material):
        self.center = center
        self.radius = radius
        self.material = material

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        return hit_sphere(self.center, self.radius, self.material, ray, t_min, t_max)

    def bounding_box(self, time0: float = 0.0, time1: float = 0.0) -> AABB:
        # The bounding box of a sphere is center ± radius
        return _box_at(self.center, self.radius)

class MovingSphere(Hittable):
    """
    Sphere whose center moves linearly from center0 at time0 to center1 at
    time1. Rays pick the center matching their own time.
    """
    def __init__(self, center0: Vector3, center1: Vector3, time0: float,
                 time1: float, radius: float, material):
        self.center0 = center0
        self.center1 = center1
        self.time0 = time0
        self.time1 = time1
        self.radius = radius
        self.material = material

    def center(self, time: float) -> Vector3:
        if self.time1 == self.time0:
            return self.center0
        f = (time - self.time0) / (self.time1 - self.time0)
        return self.center0 + (self.center1 - self.center0) * f

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        return hit_sphere(self.center(ray.time), self.radius, self.material,
                          ray, t_min, t_max)

    def bounding_box(self, time0: float, time1: float) -> AABB:
        return AABB.surrounding_box(_box_at(self.center(time0), self.radius),
                                    _box_at(self.center(time1), self.radius))

@njit(cache=True)
def simulate_bounce(y0, vy0, floor, gravity, restitution, dt, steps):
    """
    Integrates the height of a ball dropped under gravity onto the plane
    y = floor. Returns steps + 1 heights sampled every dt.
    """
    ys = np.empty(steps + 1)
    y = y0
    vy = vy0
    ys[0] = y
    for i in range(steps):
        vy -= gravity * dt
        y += vy * dt
        if y < floor:
            y = floor + (floor - y) * restitution
            vy = -vy * restitution
        ys[i + 1] = y
    return ys

class GravitySphere(Hittable):
    """
    Sphere falling under gravity and bouncing on the horizontal plane
    y = floor. The trajectory is simulated once, at construction, on a
    fixed grid over [time0, time1]; center(time) interpolates it.
    """
    def __init__(self, center: Vector3, velocity: float, radius: float,
                 material, time0: float = 0.0, time1: float = 100.0,
                 floor: float = 0.0, restitution: float = 0.8,
                 steps: int = 4096):
        if time1 <= time0:
            raise ValueError("GravitySphere needs time1 > time0")
        if steps < 1:
            raise ValueError("GravitySphere needs at least one simulation step")
        self.start = center
        self.radius = radius
        self.material = material
        self.time0 = time0
        self.time1 = time1
        self.dt = (time1 - time0) / steps
        self.heights = simulate_bounce(float(center.y), float(velocity),
                                       float(floor + radius), GRAVITY,
                                       float(restitution), self.dt, int(steps))
        top = float(self.heights.max())
        bottom = float(self.heights.min())
        self.box = AABB(
            Vector3(center.x - radius, bottom - radius, center.z - radius),
            Vector3(center.x + radius, top + radius, center.z + radius),
        )

    def center(self, time: float) -> Vector3:
        last = len(self.heights) - 1
        s = (time - self.time0) / self.dt
        if s <= 0:
            y = self.heights[0]
        elif s >= last:
            y = self.heights[last]
        else:
            i = int(s)
            f = s - i
            y = self.heights[i] * (1.0 - f) + self.heights[i + 1] * f
        return Vector3(self.start.x, float(y), self.start.z)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        return hit_sphere(self.center(ray.time), self.radius, self.material,
                          ray, t_min, t_max)

    def bounding_box(self, time0: float, time1: float) -> AABB:
        # Covers the whole simulated trajectory, independent of the window.
        return self.box
