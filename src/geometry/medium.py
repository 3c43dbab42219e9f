# geometry/medium.py
import math
from typing import Optional, Union
from core.vector import Vector3
from core.ray import Ray
from core.aabb import AABB
from core.utils import thread_rng
from geometry.hittable import Hittable, HitRecord
from materials.isotropic import Isotropic
from materials.textures import Texture

# Offset between the entry hit and the search for the exit hit.
EXIT_EPSILON = 1e-4

class ConstantMedium(Hittable):
    """
    Homogeneous fog filling a boundary shape. Rays scatter at a random
    interior point whose free-flight distance is exponentially distributed
    with mean `density`, i.e. distance = -density * ln(xi).

    The boundary must be convex: a ray is assumed to enter and leave it
    exactly once.
    """
    def __init__(self, boundary: Hittable, density: float,
                 albedo: Union[Vector3, Texture]):
        if density <= 0:
            raise ValueError(f"ConstantMedium density must be positive, got {density}")
        self.boundary = boundary
        self.density = density
        self.phase_function = Isotropic(albedo)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        entry = self.boundary.hit(ray, -math.inf, math.inf)
        if entry is None:
            return None
        exit_ = self.boundary.hit(ray, entry.t + EXIT_EPSILON, math.inf)
        if exit_ is None:
            return None

        t1 = max(entry.t, t_min)
        t2 = min(exit_.t, t_max)
        if t1 >= t2:
            return None
        t1 = max(t1, 0.0)

        ray_length = ray.direction.length()
        distance_inside = (t2 - t1) * ray_length
        # 1 - random() lies in (0, 1], so the log is finite.
        hit_distance = -self.density * math.log(1.0 - thread_rng().random())
        if hit_distance > distance_inside:
            return None

        t = t1 + hit_distance / ray_length
        # The normal is arbitrary; isotropic scattering ignores it.
        return HitRecord(ray.at(t), Vector3(1, 0, 0), t, 0.0, 0.0, True,
                         self.phase_function)

    def bounding_box(self, time0: float, time1: float) -> Optional[AABB]:
        return self.boundary.bounding_box(time0, time1)
