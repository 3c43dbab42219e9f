# geometry/rect.py
from typing import Optional
from core.vector import Vector3
from core.ray import Ray
from core.aabb import AABB
from geometry.hittable import Hittable, HitRecord

# Thickness given to the flat axis so the box stays non-degenerate.
RECT_PADDING = 1e-4

class AxisAlignedRect(Hittable):
    """
    Rectangle lying in the plane `axis == k`, spanning [a0, a1] along the
    first in-plane axis and [b0, b1] along the second.
    """
    a_axis = 0
    b_axis = 1
    k_axis = 2

    def __init__(self, a0: float, a1: float, b0: float, b1: float, k: float, material):
        self.a0 = min(a0, a1)
        self.a1 = max(a0, a1)
        self.b0 = min(b0, b1)
        self.b1 = max(b0, b1)
        self.k = k
        self.material = material
        n = [0.0, 0.0, 0.0]
        n[self.k_axis] = 1.0
        self.outward_normal = Vector3(*n)

    def _point(self, a: float, b: float, k: float) -> Vector3:
        coords = [0.0, 0.0, 0.0]
        coords[self.a_axis] = a
        coords[self.b_axis] = b
        coords[self.k_axis] = k
        return Vector3(*coords)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        dk = ray.direction[self.k_axis]
        if dk == 0.0:
            return None
        t = (self.k - ray.origin[self.k_axis]) / dk
        if t < t_min or t > t_max:
            return None
        a = ray.origin[self.a_axis] + t * ray.direction[self.a_axis]
        b = ray.origin[self.b_axis] + t * ray.direction[self.b_axis]
        if a < self.a0 or a > self.a1 or b < self.b0 or b > self.b1:
            return None
        u = (a - self.a0) / (self.a1 - self.a0) if self.a1 > self.a0 else 0.0
        v = (b - self.b0) / (self.b1 - self.b0) if self.b1 > self.b0 else 0.0
        return HitRecord.facing(ray, t, ray.at(t), self.outward_normal, u, v, self.material)

    def bounding_box(self, time0: float = 0.0, time1: float = 0.0) -> AABB:
        return AABB(self._point(self.a0, self.b0, self.k - RECT_PADDING),
                    self._point(self.a1, self.b1, self.k + RECT_PADDING))

class XYRect(AxisAlignedRect):
    a_axis, b_axis, k_axis = 0, 1, 2

class XZRect(AxisAlignedRect):
    a_axis, b_axis, k_axis = 0, 2, 1

class YZRect(AxisAlignedRect):
    a_axis, b_axis, k_axis = 1, 2, 0
