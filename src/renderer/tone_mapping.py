# renderer/tone_mapping.py
import math
import numpy as np
from numba import njit

# 8-bit channels scale by 256 and cap at 255 so that 1.0 maps to 255.
COLOR_MAX = 256.0

@njit(cache=True)
def gamma_quantize_kernel(linear_image, output_image):
    """
    Gamma-2 encode a linear (H, W, 3) image into 8-bit channels.
    Negative and NaN inputs map to 0.
    """
    h, w, _ = linear_image.shape
    for y in range(h):
        for x in range(w):
            for c in range(3):
                value = linear_image[y, x, c]
                if not value > 0.0:
                    value = 0.0
                value = math.sqrt(value)
                if value > 1.0:
                    value = 1.0
                output_image[y, x, c] = min(255, int(COLOR_MAX * value))

def gamma_quantize(linear_image: np.ndarray) -> np.ndarray:
    output = np.empty(linear_image.shape, dtype=np.uint8)
    gamma_quantize_kernel(np.ascontiguousarray(linear_image, dtype=np.float64), output)
    return output

def linearize(channels: np.ndarray, max_value: int = 255) -> np.ndarray:
    """
    Inverse of gamma_quantize for decoded 8-bit data: quantizing the result
    again reproduces the input values.
    """
    return (channels.astype(np.float64) / max_value) ** 2
