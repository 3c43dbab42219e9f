# scenes.py
"""
Built-in scenes. Each builder returns a Scene whose world is ready to be
shared by the render workers.
"""
import logging
from typing import Callable, Dict, Optional
from core.vector import Vector3, Color
from core.utils import random_double, random_vector
from camera.camera import Camera
from geometry.box import RectPrism
from geometry.bvh import BVHNode
from geometry.hittable import Hittable
from geometry.medium import ConstantMedium
from geometry.mesh import load_obj, load_ply
from geometry.rect import XYRect, XZRect, YZRect
from geometry.sphere import GravitySphere, MovingSphere, Sphere
from geometry.transform import RotateY, Translate
from geometry.world import HittableList
from materials.lambertian import Lambertian
from materials.metal import Metal
from materials.presets import ColorPresets, DielectricPresets, LightPresets, MetalPresets, TexturePresets
from materials.textures import ImageTexture
from renderer.raytracer import Scene
from renderer.screen import Screen

logger = logging.getLogger(__name__)

SKY = ColorPresets.SKY
BLACK = ColorPresets.BLACK

def _camera(aspect_ratio: float, lookfrom: Vector3, lookat: Vector3, vfov: float = 20.0,
            aperture: float = 0.1, time1: float = 1.0) -> Camera:
    return Camera(lookfrom, lookat, Vector3(0, 1, 0), vfov, aspect_ratio,
                  aperture, 10.0, 0.0, time1)

def _random_material():
    choose_mat = random_double()
    if choose_mat < 0.3:
        return Lambertian(random_vector() * random_vector())
    if choose_mat < 0.6:
        return Metal(random_vector(0.5, 1.0), random_double(0.0, 0.5))
    return DielectricPresets.glass()

def load_texture(path: str) -> ImageTexture:
    """Plain PPM files go through Screen's decoder, everything else through Pillow."""
    if path.lower().endswith(".ppm"):
        return ImageTexture.from_screen(Screen.read_ppm(path))
    return ImageTexture.load(path)

def _hero_spheres(world: HittableList) -> None:
    world.add(Sphere(Vector3(0, 1, 0), 1.0, DielectricPresets.glass()))
    world.add(Sphere(Vector3(-4, 1, 0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Vector3(4, 1, 0), 1.0, MetalPresets.mirror()))

def random_spheres(aspect_ratio: float) -> Scene:
    """Checkered ground, a grid of small random spheres and three large ones."""
    world = HittableList()
    world.add(Sphere(Vector3(0, -1000, -1), 1000, Lambertian(TexturePresets.checkerboard())))
    for a in range(-11, 11):
        for b in range(-11, 11):
            center = Vector3(a + 0.9 * random_double(), 0.2, b + 0.9 * random_double())
            if (center - Vector3(4, 0.2, 0)).length() > 0.9:
                world.add(Sphere(center, 0.2, _random_material()))
    _hero_spheres(world)
    camera = _camera(aspect_ratio, Vector3(13, 2, 3), Vector3(0, 0, 0))
    return Scene(BVHNode.from_list(world, 0.0, 1.0), camera, SKY)

def moving_spheres(aspect_ratio: float) -> Scene:
    """The random-spheres scene with most small spheres bouncing upward during the shutter."""
    world = HittableList()
    world.add(Sphere(Vector3(0, -1000, -1), 1000, Lambertian(TexturePresets.checkerboard())))
    for a in range(-11, 11):
        for b in range(-11, 11):
            center = Vector3(a + 0.9 * random_double(), 0.2, b + 0.9 * random_double())
            if (center - Vector3(4, 0.2, 0)).length() <= 0.9:
                continue
            material = _random_material()
            if random_double() < 0.8:
                center2 = center + Vector3(0, random_double(0.0, 0.5), 0)
                world.add(MovingSphere(center, center2, 0.0, 1.0, 0.2, material))
            else:
                world.add(Sphere(center, 0.2, material))
    _hero_spheres(world)
    camera = _camera(aspect_ratio, Vector3(13, 2, 3), Vector3(0, 0, 0))
    return Scene(BVHNode.from_list(world, 0.0, 1.0), camera, SKY)

def gravity_spheres(aspect_ratio: float, max_time: float = 100.0,
                    shutter: Optional[float] = None) -> Scene:
    """
    Small spheres dropped from random heights, bouncing on the ground.
    The camera shutter opens at `shutter` (default: 1 second in).
    """
    world = HittableList()
    world.add(Sphere(Vector3(0, -1000, -1), 1000, Lambertian(Color(0.8, 0.8, 0.8))))
    for a in range(-11, 11):
        for b in range(-11, 11):
            if abs(a) <= 1 and abs(b) <= 1:
                continue
            if abs(a - 4) <= 1 and abs(b) <= 1:
                continue
            center = Vector3(a + 0.9 * random_double(), 1.7 + random_double(0.0, 2.0),
                             b + 0.9 * random_double())
            world.add(GravitySphere(center, 0.0, 0.2, _random_material(), 0.0, max_time))
    _hero_spheres(world)
    t0 = 1.0 if shutter is None else shutter
    camera = Camera(Vector3(13, 2, 3), Vector3(0, 0, 0), Vector3(0, 1, 0), 20.0,
                    aspect_ratio, 0.1, 10.0, t0, t0 + 0.05)
    return Scene(BVHNode.from_list(world, 0.0, max_time), camera, SKY)

def moving_test(aspect_ratio: float) -> Scene:
    """One red sphere rising from y=-1 to y=7 over ten seconds, shutter open 2-2.5s."""
    world = HittableList()
    world.add(Sphere(Vector3(0, -1000, -1), 1000, Lambertian(TexturePresets.checkerboard())))
    world.add(MovingSphere(Vector3(2, -1, 2), Vector3(2, 7, 2), 0.0, 10.0, 1.0,
                           Lambertian(Color(1, 0, 0))))
    camera = Camera(Vector3(13, 2, 3), Vector3(0, 0, 0), Vector3(0, 1, 0), 20.0,
                    aspect_ratio, 0.1, 10.0, 2.0, 2.5)
    return Scene(BVHNode.from_list(world, 0.0, 10.0), camera, SKY)

def two_checkered_spheres(aspect_ratio: float) -> Scene:
    checker = Lambertian(TexturePresets.checkerboard())
    world = HittableList([
        Sphere(Vector3(0, -10, 0), 10, checker),
        Sphere(Vector3(0, 10, 0), 10, checker),
    ])
    return Scene(world, _camera(aspect_ratio, Vector3(13, 2, 3), Vector3(0, 0, 0)), SKY)

def two_perlin_spheres(aspect_ratio: float) -> Scene:
    marble = Lambertian(TexturePresets.marble(4.0))
    world = HittableList([
        Sphere(Vector3(0, -1000, 0), 1000, marble),
        Sphere(Vector3(0, 2, 0), 2, marble),
    ])
    return Scene(world, _camera(aspect_ratio, Vector3(13, 2, 3), Vector3(0, 0, 0)), SKY)

def earth(aspect_ratio: float, texture: Optional[str] = None) -> Scene:
    """Two spheres wrapped in an image, typically a map of the earth."""
    if texture is None:
        raise ValueError("The earth scene needs an image file (--texture)")
    surface = Lambertian(load_texture(texture))
    world = HittableList([
        Sphere(Vector3(0, -1000, 0), 1000, surface),
        Sphere(Vector3(0, 2, 0), 2, surface),
    ])
    return Scene(world, _camera(aspect_ratio, Vector3(13, 2, 3), Vector3(0, 0, 0)), SKY)

def simple_light(aspect_ratio: float) -> Scene:
    marble = Lambertian(TexturePresets.marble(4.0))
    light = LightPresets.white(4.0)
    world = HittableList([
        Sphere(Vector3(0, -1000, 0), 1000, marble),
        Sphere(Vector3(0, 2, 0), 2, marble),
        XYRect(3, 5, 1, 3, -2, light),
        Sphere(Vector3(0, 7, 0), 2, light),
    ])
    camera = _camera(aspect_ratio, Vector3(26, 3, 6), Vector3(0, 2, 0))
    return Scene(world, camera, BLACK)

def _cornell_walls(world: HittableList, light) -> Lambertian:
    red = ColorPresets.matte(ColorPresets.RED)
    white = ColorPresets.matte(ColorPresets.WHITE)
    green = ColorPresets.matte(ColorPresets.GREEN)
    world.add(YZRect(0, 555, 0, 555, 555, green))
    world.add(YZRect(0, 555, 0, 555, 0, red))
    world.add(light)
    world.add(XZRect(0, 555, 0, 555, 0, white))
    world.add(XZRect(0, 555, 0, 555, 555, white))
    world.add(XYRect(0, 555, 0, 555, 555, white))
    return white

def _cornell_camera(aspect_ratio: float) -> Camera:
    return Camera(Vector3(278, 278, -800), Vector3(278, 278, 0), Vector3(0, 1, 0),
                  40.0, aspect_ratio, 0.0, 10.0, 0.0, 1.0)

def cornell_box(aspect_ratio: float) -> Scene:
    world = HittableList()
    white = _cornell_walls(world, XZRect(213, 343, 227, 332, 554, LightPresets.white(15.0)))
    world.add(Translate(Vector3(265, 0, 295),
                        RotateY(15, RectPrism(Vector3(0, 0, 0), Vector3(165, 330, 165), white))))
    world.add(Translate(Vector3(130, 0, 65),
                        RotateY(-18, RectPrism(Vector3(0, 0, 0), Vector3(165, 165, 165), white))))
    return Scene(world, _cornell_camera(aspect_ratio), BLACK)

def cornell_smoke(aspect_ratio: float) -> Scene:
    """Cornell box whose two blocks are dark and light fog (mean free path 100)."""
    world = HittableList()
    white = _cornell_walls(world, XZRect(113, 443, 127, 432, 554, LightPresets.white(7.0)))
    tall = Translate(Vector3(265, 0, 295),
                     RotateY(15, RectPrism(Vector3(0, 0, 0), Vector3(165, 330, 165), white)))
    short = Translate(Vector3(130, 0, 65),
                      RotateY(-18, RectPrism(Vector3(0, 0, 0), Vector3(165, 165, 165), white)))
    world.add(ConstantMedium(tall, 100.0, Color(0, 0, 0)))
    world.add(ConstantMedium(short, 100.0, Color(1, 1, 1)))
    return Scene(world, _cornell_camera(aspect_ratio), BLACK)

def final_scene(aspect_ratio: float, texture: Optional[str] = None) -> Scene:
    """
    Everything at once: boxes, motion blur, glass, fog, noise and instancing.
    With `texture` the sphere at (400, 200, 400) is image mapped, otherwise checkered.
    """
    ground = Lambertian(ColorPresets.GROUND)
    boxes = HittableList()
    boxes_per_side = 20
    for i in range(boxes_per_side):
        for j in range(boxes_per_side):
            w = 100.0
            x0 = -1000.0 + i * w
            z0 = -1000.0 + j * w
            y1 = random_double(1, 101)
            boxes.add(RectPrism(Vector3(x0, 0, z0), Vector3(x0 + w, y1, z0 + w), ground))

    world = HittableList()
    world.add(BVHNode.from_list(boxes, 0.0, 1.0))
    world.add(XZRect(123, 423, 147, 412, 554, LightPresets.white(7.0)))

    center1 = Vector3(400, 400, 200)
    world.add(MovingSphere(center1, center1 + Vector3(30, 0, 0), 0.0, 1.0, 50,
                           Lambertian(Color(0.7, 0.3, 0.1))))
    world.add(Sphere(Vector3(260, 150, 45), 50, DielectricPresets.glass()))
    world.add(Sphere(Vector3(0, 150, 145), 50, MetalPresets.brushed()))

    boundary = Sphere(Vector3(360, 150, 145), 70, DielectricPresets.glass())
    world.add(boundary)
    world.add(ConstantMedium(boundary, 5.0, Color(0.2, 0.4, 0.9)))
    mist = Sphere(Vector3(0, 0, 0), 5000, DielectricPresets.glass())
    world.add(ConstantMedium(mist, 10000.0, Color(1, 1, 1)))

    mapped = load_texture(texture) if texture is not None else TexturePresets.checkerboard()
    world.add(Sphere(Vector3(400, 200, 400), 100, Lambertian(mapped)))
    world.add(Sphere(Vector3(220, 280, 300), 80, Lambertian(TexturePresets.marble(0.1))))

    white = ColorPresets.matte(ColorPresets.WHITE)
    cluster = HittableList(Sphere(random_vector(0, 165), 10, white) for _ in range(1000))
    world.add(Translate(Vector3(-100, 270, 395),
                        RotateY(15, BVHNode.from_list(cluster, 0.0, 1.0))))

    camera = Camera(Vector3(478, 278, -600), Vector3(278, 278, 0), Vector3(0, 1, 0),
                    40.0, aspect_ratio, 0.0, 10.0, 0.0, 1.0)
    return Scene(world, camera, BLACK)

def benchmark(aspect_ratio: float, nesting: int = 20) -> Scene:
    """One sphere wrapped in `nesting` levels of single-element lists."""
    world: Hittable = Sphere(Vector3(0, 0, 0), 4.0, Lambertian(Color(0.5, 0.5, 0.5)))
    for _ in range(nesting):
        world = HittableList([world])
    return Scene(world, _camera(aspect_ratio, Vector3(13, 2, 3), Vector3(0, 0, 0)), SKY)

def model(aspect_ratio: float, path: str, scale: float = 1.0) -> Scene:
    """A triangle model (.ply or .obj) on a gray ground under the sky."""
    material = Lambertian(Color(0.2, 0.2, 0.2))
    if path.lower().endswith(".obj"):
        mesh = load_obj(path, material, scale)
    else:
        mesh = load_ply(path, material, scale)
    world = HittableList([Sphere(Vector3(0, -1000, 0), 1000, Lambertian(Color(0.5, 0.5, 0.5)))])
    if len(mesh):
        world.add(BVHNode.from_list(mesh, 0.0, 1.0))
    return Scene(world, _camera(aspect_ratio, Vector3(13, 2, 3), Vector3(0, 0, 0)), SKY)

SCENES: Dict[str, Callable[..., Scene]] = {
    "random": random_spheres,
    "moving": moving_spheres,
    "moving_test": moving_test,
    "gravity": gravity_spheres,
    "checkered": two_checkered_spheres,
    "perlin": two_perlin_spheres,
    "earth": earth,
    "simple_light": simple_light,
    "cornell": cornell_box,
    "cornell_smoke": cornell_smoke,
    "final": final_scene,
    "benchmark": benchmark,
}

# Scenes that accept an image texture path.
TEXTURED = {"earth", "final"}

def get_scene(name: str, aspect_ratio: float, texture: Optional[str] = None) -> Scene:
    try:
        builder = SCENES[name]
    except KeyError:
        raise ValueError(f"Unknown scene {name!r}; choose from {', '.join(SCENES)}") from None
    logger.info("Building scene %r", name)
    if name in TEXTURED:
        return builder(aspect_ratio, texture=texture)
    if texture is not None:
        logger.warning("Scene %r takes no texture; ignoring %s", name, texture)
    return builder(aspect_ratio)
