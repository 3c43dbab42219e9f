import math
import os
from typing import Optional, Union
import numpy as np
from PIL import Image
from core.vector import Vector3
from core.utils import clamp, thread_rng

class Texture:
    """Base class for all textures: a pure function of (u, v, point)."""
    def value(self, u: float, v: float, p: Vector3) -> Vector3:
        raise NotImplementedError("value() must be implemented by texture subclasses.")

class SolidColor(Texture):
    """A solid color texture."""
    def __init__(self, color: Vector3):
        self.color = color

    def value(self, u: float, v: float, p: Vector3) -> Vector3:
        return self.color

def as_texture(albedo: Union[Vector3, Texture]) -> Texture:
    """Wraps a plain color in a SolidColor; textures pass through."""
    if isinstance(albedo, Vector3):
        return SolidColor(albedo)
    return albedo

class CheckerTexture(Texture):
    """
    3-D checker pattern alternating between two textures on the sign of
    sin(scale*x) * sin(scale*y) * sin(scale*z).
    """
    def __init__(self, even: Union[Vector3, Texture], odd: Union[Vector3, Texture],
                 scale: float = 10.0):
        self.even = as_texture(even)
        self.odd = as_texture(odd)
        self.scale = scale

    def value(self, u: float, v: float, p: Vector3) -> Vector3:
        sines = (math.sin(self.scale * p.x) * math.sin(self.scale * p.y)
                 * math.sin(self.scale * p.z))
        if sines < 0:
            return self.odd.value(u, v, p)
        return self.even.value(u, v, p)

class Perlin:
    """Gradient noise over a 256-entry lattice with hashed permutations."""
    POINT_COUNT = 256

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            # Unseeded noise draws its tables from the calling thread's generator.
            seed = thread_rng().getrandbits(64)
        rng = np.random.default_rng(seed)
        vecs = rng.uniform(-1.0, 1.0, (self.POINT_COUNT, 3))
        vecs /= np.linalg.norm(vecs, axis=1, keepdims=True)
        # Plain lists: scalar indexing on ndarrays is slow in the hot path.
        self.ranvec = vecs.tolist()
        self.perm_x = rng.permutation(self.POINT_COUNT).tolist()
        self.perm_y = rng.permutation(self.POINT_COUNT).tolist()
        self.perm_z = rng.permutation(self.POINT_COUNT).tolist()

    def noise(self, p: Vector3) -> float:
        fx, fy, fz = math.floor(p.x), math.floor(p.y), math.floor(p.z)
        u, v, w = p.x - fx, p.y - fy, p.z - fz
        i, j, k = int(fx), int(fy), int(fz)

        # Hermite smoothing of the interpolation weights.
        uu = u * u * (3 - 2 * u)
        vv = v * v * (3 - 2 * v)
        ww = w * w * (3 - 2 * w)

        accum = 0.0
        for di in (0, 1):
            for dj in (0, 1):
                for dk in (0, 1):
                    g = self.ranvec[self.perm_x[(i + di) & 255]
                                    ^ self.perm_y[(j + dj) & 255]
                                    ^ self.perm_z[(k + dk) & 255]]
                    dot = g[0] * (u - di) + g[1] * (v - dj) + g[2] * (w - dk)
                    accum += ((di * uu + (1 - di) * (1 - uu))
                              * (dj * vv + (1 - dj) * (1 - vv))
                              * (dk * ww + (1 - dk) * (1 - ww))
                              * dot)
        return accum

    def turbulence(self, p: Vector3, depth: int = 7) -> float:
        accum = 0.0
        temp = p
        weight = 1.0
        for _ in range(depth):
            accum += weight * self.noise(temp)
            weight *= 0.5
            temp = temp * 2
        return abs(accum)

class NoiseTexture(Texture):
    """Marble-like pattern: sine bands along z perturbed by turbulence."""
    def __init__(self, scale: float = 4.0, seed: Optional[int] = None):
        self.noise = Perlin(seed)
        self.scale = scale

    def value(self, u: float, v: float, p: Vector3) -> Vector3:
        s = 0.5 * (1 + math.sin(self.scale * p.z + 10 * self.noise.turbulence(p, 7)))
        return Vector3(s, s, s)

class ImageTexture(Texture):
    """A texture from an RGB array with values in [0, 1], indexed [row, column]."""
    def __init__(self, data: np.ndarray):
        if data.ndim != 3 or data.shape[2] < 3:
            raise ValueError(f"Expected an (H, W, 3) image array, got shape {data.shape}")
        self.data = data[:, :, :3].tolist()
        self.height = data.shape[0]
        self.width = data.shape[1]

    @classmethod
    def load(cls, image_path: str) -> "ImageTexture":
        """
        Load any format Pillow reads (PNG, JPEG, plain and raw PPM).

        Raises:
            FileNotFoundError: If the image file doesn't exist
            ValueError: If Pillow cannot decode the file
        """
        if not os.path.exists(image_path):
            raise FileNotFoundError(f"Texture file not found: {image_path}")
        try:
            with Image.open(image_path) as img:
                if img.mode != 'RGB':
                    img = img.convert('RGB')
                data = np.asarray(img, dtype=np.float64) / 255.0
        except OSError as e:
            raise ValueError(f"Error loading texture {image_path}: {e}") from e
        return cls(data)

    @classmethod
    def from_screen(cls, screen) -> "ImageTexture":
        """
        Texture from a Screen, stored top row first like a decoded image.
        """
        return cls(screen.to_rgb8().astype(np.float64) / 255.0)

    def value(self, u: float, v: float, p: Vector3) -> Vector3:
        u = clamp(u, 0.0, 1.0)
        v = 1.0 - clamp(v, 0.0, 1.0)  # Image rows run top to bottom

        i = min(int(u * self.width), self.width - 1)
        j = min(int(v * self.height), self.height - 1)

        r, g, b = self.data[j][i]
        return Vector3(r, g, b)
