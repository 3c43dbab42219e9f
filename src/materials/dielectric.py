# src/materials/dielectric.py
import math
from typing import Tuple
from core.ray import Ray
from core.vector import Color
from core.utils import reflect, refract, reflectance, thread_rng
from geometry.hittable import HitRecord
from materials.material import Material

class Dielectric(Material):
    """
    Clear refractive material (glass, water) with index of refraction `ir`.
    """
    def __init__(self, ir: float):
        self.ir = ir

    def refraction_ratio(self, front_face: bool) -> float:
        # Entering the surface from outside vs. leaving it.
        return 1.0 / self.ir if front_face else self.ir

    def scatter(self, ray_in: Ray, rec: HitRecord) -> Tuple[Ray, Color]:
        attenuation = Color(1.0, 1.0, 1.0)  # Glass doesn't absorb light
        ratio = self.refraction_ratio(rec.front_face)

        unit_direction = ray_in.direction.normalize()
        cos_theta = min(-unit_direction.dot(rec.normal), 1.0)
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))

        # Total internal reflection
        cannot_refract = ratio * sin_theta > 1.0
        if cannot_refract or reflectance(cos_theta, ratio) > thread_rng().random():
            direction = reflect(unit_direction, rec.normal)
        else:
            direction = refract(unit_direction, rec.normal, ratio)

        return Ray(rec.p, direction, ray_in.time), attenuation
