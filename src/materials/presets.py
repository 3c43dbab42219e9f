# materials/presets.py
from core.vector import Color
from materials.metal import Metal
from materials.lambertian import Lambertian
from materials.dielectric import Dielectric
from materials.diffuse_light import DiffuseLight
from materials.textures import CheckerTexture, NoiseTexture

class ColorPresets:
    """Colors shared by the built-in scenes."""

    RED = Color(0.65, 0.05, 0.05)
    GREEN = Color(0.12, 0.45, 0.15)
    WHITE = Color(0.73, 0.73, 0.73)
    GROUND = Color(0.48, 0.83, 0.53)
    CHECKER_DARK = Color(0.2, 0.3, 0.1)
    CHECKER_LIGHT = Color(0.9, 0.9, 0.9)
    SKY = Color(0.7, 0.8, 1.0)
    BLACK = Color(0.0, 0.0, 0.0)

    @staticmethod
    def matte(color: Color) -> Lambertian:
        """Create a matte material with the given color."""
        return Lambertian(color)

class MetalPresets:
    """Predefined metal materials."""

    @staticmethod
    def mirror() -> Metal:
        return Metal(Color(0.7, 0.6, 0.5), fuzz=0.0)

    @staticmethod
    def brushed() -> Metal:
        return Metal(Color(0.8, 0.8, 0.9), fuzz=1.0)

class DielectricPresets:
    """Predefined dielectric materials with realistic refractive indices."""

    @staticmethod
    def glass() -> Dielectric:
        return Dielectric(1.5)

class LightPresets:
    """Light sources of a given intensity."""

    @staticmethod
    def white(intensity: float) -> DiffuseLight:
        return DiffuseLight(Color(1.0, 1.0, 1.0) * intensity)

class TexturePresets:
    """Predefined texture presets."""

    @staticmethod
    def checkerboard(even: Color = None, odd: Color = None) -> CheckerTexture:
        """Green/white checkerboard unless other colors are given."""
        return CheckerTexture(even if even is not None else ColorPresets.CHECKER_DARK,
                              odd if odd is not None else ColorPresets.CHECKER_LIGHT)

    @staticmethod
    def marble(scale: float = 4.0) -> NoiseTexture:
        return NoiseTexture(scale)
