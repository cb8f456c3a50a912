"""Hash, value noise and fractal noise.

All functions take arrays of shape (..., 3) and return arrays of shape (...).
They are pure: the same input always produces the same output.
"""

import numpy as np

from . import constants as C
from .vecmath import clamp, fract, mix

# corners of the unit lattice cell, in x-fastest order
_CORNERS = np.array(
    [[x, y, z] for z in (0.0, 1.0) for y in (0.0, 1.0) for x in (0.0, 1.0)]
)


def hash3(p) -> np.ndarray:
    """Scramble a 3D point into a value in [0, 1)."""
    p3 = fract(np.asarray(p, dtype=np.float64) * 0.1031)
    p3 = p3 + np.sum(p3 * (p3[..., [1, 2, 0]] + 33.33), axis=-1)[..., None]
    return fract((p3[..., 0] + p3[..., 1]) * p3[..., 2])


def value_noise(p) -> np.ndarray:
    """Smoothed value noise.

    The eight corners of the lattice cell containing ``p`` are hashed and
    blended trilinearly with the ``f*f*(3-2f)`` curve, so the derivative
    vanishes on cell boundaries.
    """
    p = np.asarray(p, dtype=np.float64)
    cell = np.floor(p)
    f = p - cell
    w = f * f * (3.0 - 2.0 * f)

    corners = hash3(cell[..., None, :] + _CORNERS)
    c000, c100, c010, c110, c001, c101, c011, c111 = np.moveaxis(corners, -1, 0)

    wx, wy, wz = w[..., 0], w[..., 1], w[..., 2]
    x00 = mix(c000, c100, wx)
    x10 = mix(c010, c110, wx)
    x01 = mix(c001, c101, wx)
    x11 = mix(c011, c111, wx)
    return mix(mix(x00, x10, wy), mix(x01, x11, wy), wz)


def rotate_y(p) -> np.ndarray:
    """Rotate about the vertical axis to decorrelate octaves."""
    c, s = C.ROTATION_COS, C.ROTATION_SIN
    x, y, z = p[..., 0], p[..., 1], p[..., 2]
    return np.stack((c * x - s * z, y, s * x + c * z), axis=-1)


def fbm(p, octaves: int, lacunarity: float) -> np.ndarray:
    """Sum ``octaves`` layers of noise, normalized to roughly [0, 1]."""
    pos = np.asarray(p, dtype=np.float64)
    total = np.zeros(pos.shape[:-1])
    amp = 0.5
    norm = 0.0
    for _ in range(octaves):
        total += amp * value_noise(pos)
        norm += amp
        pos = rotate_y(pos) * lacunarity
        amp *= 0.5
    return total / norm


def fbm_base(p) -> np.ndarray:
    """Coarse cloud shapes, 4 octaves."""
    return fbm(p, C.FBM_BASE_OCTAVES, C.FBM_BASE_LACUNARITY)


def fbm_detail(p) -> np.ndarray:
    """Fine erosion detail, 5 octaves."""
    return fbm(p, C.FBM_DETAIL_OCTAVES, C.FBM_DETAIL_LACUNARITY)


def remap(value, old_min, old_max, new_min, new_max):
    """Clamp ``value`` to [old_min, old_max] and rescale it to [new_min, new_max].

    Where the old range is degenerate the result is ``new_min``.
    """
    value, old_min, old_max = np.broadcast_arrays(
        np.asarray(value, dtype=np.float64), old_min, old_max
    )
    spread = old_max - old_min
    ok = spread > C.REMAP_MIN_SPREAD
    safe_spread = np.where(ok, spread, 1.0)
    t = (clamp(value, old_min, old_max) - old_min) / safe_spread
    return np.where(ok, new_min + t * (new_max - new_min), new_min)
