# materials/lambertian.py
from typing import Tuple, Union
from core.ray import Ray
from core.vector import Vector3, Color
from core.utils import random_unit_vector
from geometry.hittable import HitRecord
from materials.material import Material
from materials.textures import Texture, as_texture

class Lambertian(Material):
    """
    Ideal diffuse surface. Scattered directions follow a cosine
    distribution about the normal; the albedo may be any texture.
    """

    def __init__(self, albedo: Union[Vector3, Texture]):
        self.texture = as_texture(albedo)

    def scatter(self, ray_in: Ray, rec: HitRecord) -> Tuple[Ray, Color]:
        direction = rec.normal + random_unit_vector()

        # A unit vector opposite the normal cancels it out.
        if direction.near_zero():
            direction = rec.normal

        return Ray(rec.p, direction, ray_in.time), self.texture.value(rec.u, rec.v, rec.p)
