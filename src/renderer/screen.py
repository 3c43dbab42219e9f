# renderer/screen.py
import os
from typing import List
import numpy as np
from PIL import Image
from core.vector import Color
from renderer.tone_mapping import gamma_quantize, linearize

class Screen:
    """
    Output image buffer of linear colors. Row 0 is the bottom of the image,
    matching the camera's t = 0 edge.
    """
    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Screen dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 3), dtype=np.float64)

    def update(self, row: int, col: int, color: Color) -> None:
        self.pixels[row, col] = (color.x, color.y, color.z)

    def get(self, row: int, col: int) -> Color:
        r, g, b = self.pixels[row, col]
        return Color(float(r), float(g), float(b))

    def to_rgb8(self) -> np.ndarray:
        """Gamma-encoded (height, width, 3) uint8 array, top row first."""
        return gamma_quantize(self.pixels[::-1])

    def to_ppm(self) -> str:
        """Plain-text P3 encoding, top row first."""
        rgb = self.to_rgb8()
        lines: List[str] = ["P3", f"{self.width} {self.height}", "255"]
        lines.extend(f"{r} {g} {b}" for r, g, b in rgb.reshape(-1, 3).tolist())
        return "\n".join(lines) + "\n"

    def write_ppm(self, path: str) -> None:
        with open(path, "w") as f:
            f.write(self.to_ppm())

    def save_png(self, path: str) -> None:
        Image.fromarray(self.to_rgb8()).save(path)

    @classmethod
    def from_ppm(cls, text: str) -> "Screen":
        """
        Decode a plain-text P3 image. Comments introduced by '#' are skipped.
        """
        tokens: List[str] = []
        for line in text.splitlines():
            tokens.extend(line.split("#", 1)[0].split())
        if len(tokens) < 4 or tokens[0] != "P3":
            raise ValueError("Not a plain PPM (P3) image")
        try:
            width, height, max_value = int(tokens[1]), int(tokens[2]), int(tokens[3])
            values = np.array([int(t) for t in tokens[4:]], dtype=np.int64)
        except ValueError as e:
            raise ValueError(f"Malformed PPM token: {e}") from e
        if max_value <= 0:
            raise ValueError(f"Invalid PPM max value {max_value}")
        expected = width * height * 3
        if values.size != expected:
            raise ValueError(f"PPM declares {width}x{height} but holds "
                             f"{values.size} of {expected} channel values")

        screen = cls(width, height)
        # File order is top row first; row 0 of the screen is the bottom.
        screen.pixels = linearize(values.reshape(height, width, 3)[::-1], max_value).copy()
        return screen

    @classmethod
    def read_ppm(cls, path: str) -> "Screen":
        if not os.path.exists(path):
            raise FileNotFoundError(f"Image file not found: {path}")
        with open(path, "r") as f:
            return cls.from_ppm(f.read())
