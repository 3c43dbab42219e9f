"""Tests for the integrator, camera and threaded renderer.

Tests cover:
- ray_color bounce limit, background and emission accumulation
- Camera ray generation and shutter times
- RenderConfig validation
- Row partitioning across workers
- End-to-end renders: ground under sky, enclosing light, empty scene
- Worker failures and seeded reproducibility
"""

import logging
import math

import numpy as np
import pytest

from camera.camera import Camera
from core.ray import Ray
from core.vector import Color, Vector3
from geometry.sphere import Sphere
from geometry.world import HittableList
from materials.diffuse_light import DiffuseLight
from materials.lambertian import Lambertian
from materials.material import Material
from renderer.config import RenderConfig
from renderer.raytracer import Renderer, Scene, partition_rows, ray_color, render, render_scene

SKY = Color(0.7, 0.8, 1.0)


class PassThrough(Material):
    """Lets rays continue in a straight line, tinting and optionally glowing."""

    def __init__(self, tint, glow=Color(0, 0, 0)):
        self.tint = tint
        self.glow = glow

    def scatter(self, ray_in, rec):
        return Ray(rec.p, ray_in.direction, ray_in.time), self.tint

    def emitted(self, u, v, p):
        return self.glow


class Exploding(HittableList):
    def hit(self, ray, t_min, t_max):
        raise RuntimeError("broken geometry")


def look_forward(aspect_ratio=1.0):
    return Camera(Vector3(0, 1, 0), Vector3(0, 1, -1), Vector3(0, 1, 0), 90.0, aspect_ratio)


def config(**overrides):
    values = dict(aspect_ratio=1.0, image_width=12, samples_per_pixel=4, max_depth=5,
                  threads=3, seed=11)
    values.update(overrides)
    return RenderConfig(**values)


class TestRayColor:
    forward = Ray(Vector3(0, 0, 0), Vector3(0, 0, -1))

    def tinted_world(self, glow=Color(0, 0, 0)):
        return HittableList([Sphere(Vector3(0, 0, -5), 1.0, PassThrough(Color(0.5, 0.5, 0.5), glow))])

    def test_zero_depth_is_black(self):
        assert tuple(ray_color(self.forward, SKY, HittableList(), 0)) == (0, 0, 0)

    def test_miss_returns_background(self):
        assert tuple(ray_color(self.forward, SKY, HittableList(), 5)) == tuple(SKY)

    def test_attenuation_multiplies_along_path(self):
        world = self.tinted_world()
        c = ray_color(self.forward, Color(1, 1, 1), world, 3)
        assert c.x == pytest.approx(0.25)

    def test_exhausted_depth_drops_background(self):
        world = self.tinted_world()
        assert tuple(ray_color(self.forward, Color(1, 1, 1), world, 2)) == (0, 0, 0)

    def test_emission_weighted_by_path(self):
        world = self.tinted_world(glow=Color(1, 1, 1))
        c = ray_color(self.forward, Color(0, 0, 0), world, 10)
        assert c.x == pytest.approx(1.5)

    def test_light_ends_path(self):
        world = HittableList([Sphere(Vector3(0, 0, 0), 10.0, DiffuseLight(Color(10, 10, 10)))])
        assert tuple(ray_color(self.forward, SKY, world, 1)) == (10, 10, 10)

    def test_absorbed_on_last_bounce(self, gray):
        world = HittableList([Sphere(Vector3(0, -1000, 0), 999, gray)])
        down = Ray(Vector3(0, 0, 0), Vector3(0, -1, 0))
        assert tuple(ray_color(down, SKY, world, 1)) == (0, 0, 0)


class TestCamera:
    def test_center_ray_points_at_target(self):
        cam = Camera(Vector3(0, 0, 0), Vector3(0, 0, -1), Vector3(0, 1, 0), 90.0, 1.0)
        d = cam.get_ray(0.5, 0.5).direction.normalize()
        assert (d.x, d.y, d.z) == (pytest.approx(0.0, abs=1e-12), pytest.approx(0.0, abs=1e-12),
                                   pytest.approx(-1.0))

    def test_corner_ray_spans_field_of_view(self):
        cam = Camera(Vector3(0, 0, 0), Vector3(0, 0, -1), Vector3(0, 1, 0), 90.0, 1.0)
        d = cam.get_ray(1.0, 1.0).direction
        assert d.x == pytest.approx(-d.z)
        assert d.y == pytest.approx(-d.z)

    def test_shutter_times(self):
        cam = Camera(Vector3(0, 0, 0), Vector3(0, 0, -1), Vector3(0, 1, 0), 40.0, 1.0,
                     time0=2.0, time1=3.0)
        times = [cam.get_ray(0.5, 0.5).time for _ in range(50)]
        assert all(2.0 <= t <= 3.0 for t in times)
        still = Camera(Vector3(0, 0, 0), Vector3(0, 0, -1), Vector3(0, 1, 0), 40.0, 1.0)
        assert still.get_ray(0.1, 0.9).time == 0.0

    def test_lens_moves_origin(self):
        cam = Camera(Vector3(0, 0, 0), Vector3(0, 0, -1), Vector3(0, 1, 0), 40.0, 1.0,
                     aperture=2.0)
        origins = {tuple(cam.get_ray(0.5, 0.5).origin) for _ in range(10)}
        assert len(origins) > 1
        assert all(math.hypot(x, y) < 1.0 for x, y, _ in origins)


class TestRenderConfig:
    def test_height_from_aspect_ratio(self):
        assert config(aspect_ratio=16 / 9, image_width=400).image_height == 225

    @pytest.mark.parametrize("field, value", [
        ("threads", 0),
        ("samples_per_pixel", 0),
        ("max_depth", -1),
        ("image_width", 0),
        ("aspect_ratio", 0.0),
        ("threads", 2.5),
        ("threads", True),
    ])
    def test_rejects_invalid_values(self, field, value):
        with pytest.raises(ValueError):
            config(**{field: value})

    def test_rejects_empty_image(self):
        with pytest.raises(ValueError):
            config(aspect_ratio=4.0, image_width=2)


class TestPartitionRows:
    def test_last_band_takes_remainder(self):
        assert partition_rows(10, 3) == [(0, 3), (3, 6), (6, 10)]

    @pytest.mark.parametrize("height, threads", [(1, 1), (7, 7), (2, 5), (100, 8)])
    def test_bands_cover_every_row_once(self, height, threads):
        bands = partition_rows(height, threads)
        assert len(bands) == threads
        rows = [r for start, end in bands for r in range(start, end)]
        assert rows == list(range(height))


class TestRender:
    def test_ground_under_sky_single_bounce(self, gray):
        """With one bounce the ground is black and the sky is the background."""
        world = HittableList([Sphere(Vector3(0, -1000, 0), 1000, gray)])
        screen = render(world, look_forward(), SKY, config(max_depth=1))
        bg = np.array(tuple(SKY))
        assert (screen.pixels >= 0).all()
        assert (screen.pixels <= bg + 1e-9).all()
        assert np.allclose(screen.pixels[-1], bg)
        assert np.allclose(screen.pixels[0], 0.0)

    def test_enclosing_light(self):
        light = DiffuseLight(Color(10, 10, 10))
        world = HittableList([
            Sphere(Vector3(0, 1, 0), 50, light),
            Sphere(Vector3(0, 1, -3), 0.5, Lambertian(Color(0.5, 0.5, 0.5))),
        ])
        screen = render(world, look_forward(), Color(0, 0, 0), config(max_depth=2))
        assert (screen.pixels > 0).all()
        assert (screen.pixels <= 10 + 1e-9).all()
        # Corner rays go straight into the light.
        assert np.allclose(screen.pixels[0, 0], 10.0)

    def test_empty_scene_is_background(self):
        world = HittableList()
        assert world.bounding_box(0, 1) is None
        screen = render(world, look_forward(), SKY, config())
        assert np.allclose(screen.pixels, np.array(tuple(SKY)))

    def test_single_thread_and_odd_sizes(self):
        cfg = config(image_width=7, aspect_ratio=2.0, threads=1, samples_per_pixel=1)
        screen = render(HittableList(), look_forward(2.0), SKY, cfg)
        assert (screen.width, screen.height) == (7, 3)

    def test_more_threads_than_rows(self):
        cfg = config(image_width=4, aspect_ratio=2.0, threads=5, samples_per_pixel=1)
        screen = render(HittableList(), look_forward(2.0), SKY, cfg)
        assert np.allclose(screen.pixels, np.array(tuple(SKY)))

    def test_seeded_renders_repeat(self, gray):
        world = HittableList([Sphere(Vector3(0, -1000, 0), 1000, gray)])
        first = render(world, look_forward(), SKY, config(seed=5))
        second = render(world, look_forward(), SKY, config(seed=5))
        assert np.array_equal(first.pixels, second.pixels)

    def test_failed_worker_leaves_partial_image(self, caplog):
        caplog.set_level(logging.INFO, logger="renderer.raytracer")
        renderer = Renderer(Exploding(), look_forward(), SKY, config(threads=2))
        screen = renderer.render()
        assert (screen.width, screen.height) == (12, 12)
        assert "Render worker" in caplog.text
        assert "Render finished with 0 of 144 pixels" in caplog.text


class TestRenderScene:
    def scene(self):
        return Scene(HittableList(), look_forward(), SKY)

    def test_writes_ppm(self, tmp_path):
        path = tmp_path / "out.ppm"
        render_scene(self.scene(), config(samples_per_pixel=1), str(path))
        assert path.read_text().startswith("P3\n12 12\n255\n")

    def test_writes_png(self, tmp_path):
        from PIL import Image

        path = tmp_path / "out.png"
        render_scene(self.scene(), config(samples_per_pixel=1), str(path))
        with Image.open(path) as img:
            assert img.size == (12, 12)
