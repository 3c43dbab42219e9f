import math
from core.vector import Vector3
from core.ray import Ray
from core.utils import random_in_unit_disk, thread_rng

class Camera:
    """
    Thin-lens camera aimed from `lookfrom` at `lookat`. `vfov` is the
    vertical field of view in degrees. Each ray leaves a random point of
    the lens disk at a random time within the shutter interval.
    """
    def __init__(self, lookfrom: Vector3, lookat: Vector3, vup: Vector3,
                 vfov: float, aspect_ratio: float, aperture: float = 0.0,
                 focus_dist: float = 10.0, time0: float = 0.0, time1: float = 0.0):
        self.origin = lookfrom
        self.aspect_ratio = aspect_ratio
        self.lens_radius = aperture / 2.0
        self.time0 = time0
        self.time1 = time1

        viewport_height = 2.0 * math.tan(math.radians(vfov) / 2)
        viewport_width = aspect_ratio * viewport_height

        # Orthonormal camera basis
        self.w = (lookfrom - lookat).normalize()
        self.u = vup.cross(self.w).normalize()
        self.v = self.w.cross(self.u)

        # Scale by focus distance
        self.horizontal = self.u * viewport_width * focus_dist
        self.vertical = self.v * viewport_height * focus_dist
        self.lower_left_corner = (self.origin -
                                  self.horizontal * 0.5 -
                                  self.vertical * 0.5 -
                                  self.w * focus_dist)

    def get_ray(self, s: float, t: float) -> Ray:
        """Ray through image-plane coordinates s, t in [0, 1]."""
        if self.lens_radius > 0:
            rd = random_in_unit_disk() * self.lens_radius
            offset = self.u * rd.x + self.v * rd.y
        else:
            offset = Vector3(0, 0, 0)

        origin = self.origin + offset
        direction = (self.lower_left_corner +
                     self.horizontal * s +
                     self.vertical * t -
                     origin)
        time = self.time0 if self.time1 <= self.time0 else thread_rng().uniform(self.time0, self.time1)
        return Ray(origin, direction, time)
