# geometry/transform.py
import math
from typing import Optional
from core.vector import Vector3
from core.ray import Ray
from core.aabb import AABB
from geometry.hittable import Hittable, HitRecord

class Translate(Hittable):
    """
    Moves a child object by a fixed offset.
    """
    def __init__(self, offset: Vector3, child: Hittable):
        self.offset = offset
        self.child = child

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        moved = Ray(ray.origin - self.offset, ray.direction, ray.time)
        rec = self.child.hit(moved, t_min, t_max)
        if rec is None:
            return None
        return HitRecord(rec.p + self.offset, rec.normal, rec.t, rec.u, rec.v,
                         rec.front_face, rec.material)

    def bounding_box(self, time0: float, time1: float) -> Optional[AABB]:
        box = self.child.bounding_box(time0, time1)
        if box is None:
            return None
        return box.translated(self.offset)

class RotateY(Hittable):
    """
    Rotates a child object by `angle` degrees about the Y axis.
    The rotated bounding box is computed once, for [time0, time1].
    """
    def __init__(self, angle: float, child: Hittable,
                 time0: float = 0.0, time1: float = 1.0):
        self.child = child
        radians = math.radians(angle)
        self.sin_theta = math.sin(radians)
        self.cos_theta = math.cos(radians)
        self.box = self._rotated_box(child.bounding_box(time0, time1))

    def _to_world(self, v: Vector3) -> Vector3:
        return Vector3(self.cos_theta * v.x + self.sin_theta * v.z,
                       v.y,
                       -self.sin_theta * v.x + self.cos_theta * v.z)

    def _to_object(self, v: Vector3) -> Vector3:
        return Vector3(self.cos_theta * v.x - self.sin_theta * v.z,
                       v.y,
                       self.sin_theta * v.x + self.cos_theta * v.z)

    def _rotated_box(self, box: Optional[AABB]) -> Optional[AABB]:
        if box is None:
            return None
        corners = [self._to_world(c) for c in box.corners()]
        return AABB(Vector3(*(min(c[a] for c in corners) for a in range(3))),
                    Vector3(*(max(c[a] for c in corners) for a in range(3))))

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        rotated = Ray(self._to_object(ray.origin), self._to_object(ray.direction), ray.time)
        rec = self.child.hit(rotated, t_min, t_max)
        if rec is None:
            return None
        # Rotation preserves orientation relative to the ray, so front_face carries over.
        return HitRecord(self._to_world(rec.p), self._to_world(rec.normal), rec.t,
                         rec.u, rec.v, rec.front_face, rec.material)

    def bounding_box(self, time0: float, time1: float) -> Optional[AABB]:
        return self.box
