# geometry/hittable.py
from typing import Optional, Tuple
from core.vector import Vector3
from core.ray import Ray
from core.aabb import AABB

def face_normal(ray: Ray, outward_normal: Vector3) -> Tuple[Vector3, bool]:
    """
    Orients the geometric normal against the incoming ray.
    Returns (normal, front_face).
    """
    front_face = ray.direction.dot(outward_normal) < 0
    return (outward_normal if front_face else -outward_normal), front_face

class HitRecord:
    """
    Records details of a ray-object intersection.
    """
    __slots__ = ("p", "normal", "t", "u", "v", "front_face", "material")

    def __init__(self, p: Vector3, normal: Vector3, t: float,
                 u: float = 0.0, v: float = 0.0, front_face: bool = True,
                 material=None):
        self.p = p              # Intersection point
        self.normal = normal    # Unit normal, always opposing the ray
        self.t = t              # Ray parameter at intersection
        self.u = u              # Texture coordinates
        self.v = v
        self.front_face = front_face  # Whether the hit was on the front side
        self.material = material

    @classmethod
    def facing(cls, ray: Ray, t: float, p: Vector3, outward_normal: Vector3,
               u: float, v: float, material) -> "HitRecord":
        """
        Builds a record whose normal points against the ray.
        """
        normal, front_face = face_normal(ray, outward_normal)
        return cls(p, normal, t, u, v, front_face, material)

    def __repr__(self) -> str:
        return (f"HitRecord(t={self.t}, p={self.p!r}, normal={self.normal!r}, "
                f"front_face={self.front_face})")

class Hittable:
    """
    Abstract class for objects that can be hit by a ray.
    """
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        raise NotImplementedError("hit() must be implemented by subclasses.")

    def bounding_box(self, time0: float, time1: float) -> Optional[AABB]:
        """
        Box enclosing every point hit() can report for rays whose time lies
        in [time0, time1], or None if the object is unbounded.
        """
        raise NotImplementedError("bounding_box() must be implemented by subclasses.")
