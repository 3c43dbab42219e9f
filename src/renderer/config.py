# renderer/config.py
from dataclasses import dataclass
from typing import Optional

@dataclass(frozen=True)
class RenderConfig:
    """
    Image and sampling parameters of one render. Every field must be
    positive; violations raise ValueError before any worker starts.
    """
    aspect_ratio: float
    image_width: int
    samples_per_pixel: int
    max_depth: int
    threads: int
    # Per-worker generators are seeded with seed + worker index when set.
    seed: Optional[int] = None

    def __post_init__(self):
        if not self.aspect_ratio > 0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        for name in ("image_width", "samples_per_pixel", "max_depth", "threads"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.image_height < 1:
            raise ValueError(
                f"image_width {self.image_width} at aspect ratio {self.aspect_ratio} "
                f"gives an empty image")

    @property
    def image_height(self) -> int:
        return int(self.image_width / self.aspect_ratio)
