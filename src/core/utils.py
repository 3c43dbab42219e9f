# core/utils.py
import math
import random
import threading
from typing import Optional
from core.vector import Vector3

_local = threading.local()

def thread_rng() -> random.Random:
    """
    Returns the calling thread's private random generator, creating it on
    first use. Render workers never share a generator.
    """
    rng = getattr(_local, "rng", None)
    if rng is None:
        rng = random.Random()
        _local.rng = rng
    return rng

def seed_thread_rng(seed: Optional[int]) -> random.Random:
    """
    Replaces the calling thread's generator with one seeded by `seed`.
    """
    _local.rng = random.Random(seed)
    return _local.rng

def random_double(lo: float = 0.0, hi: float = 1.0) -> float:
    return lo + (hi - lo) * thread_rng().random()

def random_vector(lo: float = 0.0, hi: float = 1.0) -> Vector3:
    return Vector3(random_double(lo, hi), random_double(lo, hi), random_double(lo, hi))

def random_in_unit_sphere() -> Vector3:
    """
    Returns a random point inside a unit sphere.
    """
    rng = thread_rng()
    while True:
        p = Vector3(rng.uniform(-1, 1),
                   rng.uniform(-1, 1),
                   rng.uniform(-1, 1))
        if p.dot(p) < 1.0:
            return p

def random_unit_vector() -> Vector3:
    """
    Returns a random unit vector (uniformly distributed over the sphere).
    """
    return random_in_unit_sphere().normalize()

def random_in_unit_disk() -> Vector3:
    """Random point in the z=0 unit disk, used for lens sampling."""
    rng = thread_rng()
    while True:
        p = Vector3(rng.uniform(-1, 1), rng.uniform(-1, 1), 0)
        if p.dot(p) < 1:
            return p

def reflect(v: Vector3, n: Vector3) -> Vector3:
    """
    Reflects vector v about the normal n.
    """
    return v - n * 2 * v.dot(n)

def refract(uv: Vector3, n: Vector3, etai_over_etat: float) -> Vector3:
    """
    Snell refraction of the unit vector uv through a surface with normal n.
    """
    cos_theta = min(-uv.dot(n), 1.0)
    r_out_perp = (uv + n * cos_theta) * etai_over_etat
    r_out_parallel = n * (-math.sqrt(abs(1.0 - r_out_perp.length_squared())))
    return r_out_perp + r_out_parallel

def reflectance(cosine: float, ref_idx: float) -> float:
    """Schlick's approximation of the Fresnel reflectance."""
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * math.pow((1.0 - cosine), 5)

def clamp(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else hi if x > hi else x
