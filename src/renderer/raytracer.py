# renderer/raytracer.py
import logging
import math
import queue
import threading
import time
from dataclasses import dataclass
from typing import List, Tuple
from core.vector import Color
from core.ray import Ray
from core.utils import seed_thread_rng, thread_rng
from camera.camera import Camera
from geometry.hittable import Hittable
from renderer.config import RenderConfig
from renderer.screen import Screen

logger = logging.getLogger(__name__)

# Lower bound on hit distance; avoids re-hitting the surface a ray left.
T_MIN = 0.001
PROGRESS_INTERVAL = 10000

# Posted by a worker when it will send no more pixels.
_SENDER_CLOSED = object()

@dataclass(frozen=True)
class Scene:
    """Everything a render reads: shared by all workers, never mutated."""
    world: Hittable
    camera: Camera
    background: Color

def ray_color(ray: Ray, background: Color, world: Hittable, depth: int) -> Color:
    """
    Follows one light path through the scene for at most `depth` bounces.

    Emission is gathered at every hit, weighted by the attenuation of the
    path so far. The walk ends on a miss (adding the background), on
    absorption, or when the bounce limit is reached; light gathered before
    that point is kept.
    """
    product = Color(1.0, 1.0, 1.0)
    output = Color(0.0, 0.0, 0.0)
    current = ray

    while True:
        depth -= 1
        if depth < 0:
            return output
        rec = world.hit(current, T_MIN, math.inf)
        if rec is None:
            return output + product * background
        output = output + rec.material.emitted(rec.u, rec.v, rec.p) * product
        scattered = rec.material.scatter(current, rec)
        if scattered is None:
            return output
        current, attenuation = scattered
        product = product * attenuation

def partition_rows(height: int, threads: int) -> List[Tuple[int, int]]:
    """
    Splits [0, height) into `threads` contiguous ranges of equal size;
    the last range also takes the remainder.
    """
    chunk = height // threads
    ranges = []
    for t in range(threads):
        start = t * chunk
        end = height if t == threads - 1 else start + chunk
        ranges.append((start, end))
    return ranges

class Renderer:
    """
    Renders a scene on a fixed pool of worker threads. Each worker owns a
    band of rows and posts finished pixels to a queue; the calling thread
    is the only writer of the output Screen.
    """
    def __init__(self, world: Hittable, camera: Camera, background: Color,
                 config: RenderConfig):
        self.world = world
        self.camera = camera
        self.background = background
        self.config = config
        self.width = config.image_width
        self.height = config.image_height

    def trace(self, ray: Ray) -> Color:
        return ray_color(ray, self.background, self.world, self.config.max_depth)

    def sample_pixel(self, row: int, col: int) -> Color:
        """Average of samples_per_pixel jittered paths through one pixel."""
        rng = thread_rng()
        samples = self.config.samples_per_pixel
        du = max(self.width - 1, 1)
        dv = max(self.height - 1, 1)
        pixel = Color(0.0, 0.0, 0.0)
        for _ in range(samples):
            s = (col + rng.random()) / du
            t = (row + rng.random()) / dv
            pixel = pixel + self.trace(self.camera.get_ray(s, t))
        return pixel / samples

    def _worker(self, index: int, start: int, end: int, sender: queue.Queue) -> None:
        if self.config.seed is not None:
            seed_thread_rng(self.config.seed + index)
        try:
            for j in range(start, end):
                for i in range(self.width):
                    sender.put((j, i, self.sample_pixel(j, i)))
        except Exception:
            logger.exception("Render worker %d failed on rows [%d, %d)", index, start, end)
        finally:
            sender.put(_SENDER_CLOSED)

    def render(self) -> Screen:
        config = self.config
        logger.info("Rendering %dx%d, %d samples/pixel, depth %d, %d threads",
                    self.width, self.height, config.samples_per_pixel,
                    config.max_depth, config.threads)
        started = time.perf_counter()

        screen = Screen(self.width, self.height)
        channel: queue.Queue = queue.Queue()
        workers = []
        for index, (start, end) in enumerate(partition_rows(self.height, config.threads)):
            logger.debug("Worker %d renders rows [%d, %d)", index, start, end)
            worker = threading.Thread(target=self._worker,
                                      args=(index, start, end, channel),
                                      name=f"render-{index}", daemon=True)
            workers.append(worker)

        for worker in workers:
            worker.start()

        total = self.width * self.height
        received = 0
        open_senders = len(workers)
        while open_senders:
            message = channel.get()
            if message is _SENDER_CLOSED:
                open_senders -= 1
                continue
            row, col, color = message
            screen.update(row, col, color)
            received += 1
            if received % PROGRESS_INTERVAL == 0:
                logger.info("Done %d of %d pixels", received, total)

        for worker in workers:
            worker.join()

        if received < total:
            logger.warning("Render finished with %d of %d pixels", received, total)
        logger.info("Render took %.3fs", time.perf_counter() - started)
        return screen

def render(world: Hittable, camera: Camera, background: Color,
           config: RenderConfig) -> Screen:
    """Render `world` as seen by `camera` into a new Screen."""
    return Renderer(world, camera, background, config).render()

def render_scene(scene: Scene, config: RenderConfig, path: str) -> Screen:
    """
    Render a scene and write it to `path`: PNG when the name ends in
    .png, plain PPM otherwise.
    """
    screen = render(scene.world, scene.camera, scene.background, config)
    if path.lower().endswith(".png"):
        screen.save_png(path)
    else:
        screen.write_ppm(path)
    logger.info("Wrote %s", path)
    return screen
