"""Tests for the output image buffer and its encoders.

Tests cover:
- Gamma-2 quantization, clamping and the 255 cap
- Plain PPM layout (top row first) and decoding
- PNG export through Pillow
- Using a rendered Screen as an image texture
"""

import numpy as np
import pytest
from PIL import Image

from core.vector import Color, Vector3
from materials.textures import ImageTexture
from renderer.screen import Screen
from renderer.tone_mapping import gamma_quantize, linearize


class TestToneMapping:
    def test_gamma_and_cap(self):
        linear = np.array([[[0.0, 0.25, 1.0], [4.0, -1.0, np.nan]]])
        out = gamma_quantize(linear)
        assert out.dtype == np.uint8
        assert out.tolist() == [[[0, 128, 255], [255, 0, 0]]]

    def test_linearize_inverts_quantize(self):
        values = np.arange(256).reshape(1, 256, 1).repeat(3, axis=2)
        assert np.array_equal(gamma_quantize(linearize(values)), values)


class TestScreen:
    def test_rejects_empty_size(self):
        with pytest.raises(ValueError):
            Screen(0, 4)

    def test_update_and_get(self):
        screen = Screen(3, 2)
        screen.update(1, 2, Color(0.1, 0.2, 0.3))
        assert tuple(screen.get(1, 2)) == (0.1, 0.2, 0.3)
        assert tuple(screen.get(0, 0)) == (0, 0, 0)

    def test_ppm_is_top_row_first(self):
        screen = Screen(2, 2)
        screen.update(1, 0, Color(1, 1, 1))  # top left
        screen.update(0, 1, Color(0.25, 0, 0))  # bottom right
        lines = screen.to_ppm().splitlines()
        assert lines[:3] == ["P3", "2 2", "255"]
        assert lines[3:] == ["255 255 255", "0 0 0", "0 0 0", "128 0 0"]

    def test_write_and_read_ppm(self, tmp_path):
        screen = Screen(2, 1)
        screen.update(0, 0, Color(1, 0, 0))
        screen.update(0, 1, Color(0, 0.25, 1))
        path = tmp_path / "image.ppm"
        screen.write_ppm(str(path))
        decoded = Screen.read_ppm(str(path))
        assert (decoded.width, decoded.height) == (2, 1)
        assert decoded.to_ppm() == screen.to_ppm()

    def test_from_ppm_skips_comments(self):
        text = "P3\n# made by hand\n1 1 # one pixel\n255\n255 0 0\n"
        screen = Screen.from_ppm(text)
        assert tuple(screen.get(0, 0)) == (1, 0, 0)

    def test_from_ppm_rescales_max_value(self):
        screen = Screen.from_ppm("P3 1 1 15 15 0 0")
        assert screen.to_rgb8()[0, 0].tolist() == [255, 0, 0]

    @pytest.mark.parametrize("text", [
        "P6\n1 1\n255\n0 0 0\n",
        "P3\n2 1\n255\n0 0 0\n",
        "P3\n1 1\n255\n0 zero 0\n",
        "P3\n1 1\n0\n0 0 0\n",
        "",
    ])
    def test_from_ppm_rejects_malformed(self, text):
        with pytest.raises(ValueError):
            Screen.from_ppm(text)

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Screen.read_ppm(str(tmp_path / "nope.ppm"))

    def test_save_png(self, tmp_path):
        screen = Screen(3, 2)
        screen.update(1, 0, Color(1, 0, 0))
        path = tmp_path / "image.png"
        screen.save_png(str(path))
        with Image.open(path) as img:
            assert img.size == (3, 2)
            assert img.getpixel((0, 0)) == (255, 0, 0)
            assert img.getpixel((0, 1)) == (0, 0, 0)

    def test_screen_as_texture(self):
        screen = Screen(2, 2)
        screen.update(1, 0, Color(0, 1, 0))
        tex = ImageTexture.from_screen(screen)
        assert tuple(tex.value(0.0, 1.0, Vector3(0, 0, 0))) == (0, 1, 0)
        assert tuple(tex.value(1.0, 0.0, Vector3(0, 0, 0))) == (0, 0, 0)
