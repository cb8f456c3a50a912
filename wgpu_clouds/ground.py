"""Checkerboard ground plane at y=0 with distance fog."""

import numpy as np

from . import constants as C
from .sky import sky_color
from .vecmath import as_vec3, fract, mix

_DARK = np.array(C.GROUND_DARK)
_LIGHT = np.array(C.GROUND_LIGHT)


def ground_hit(camera_pos, ray_dir):
    """Return ``(t, hit)`` for the intersection of the rays with y=0."""
    camera_pos = as_vec3(camera_pos)
    ray_y = as_vec3(ray_dir)[..., 1]
    descending = ray_y < 0.0
    t = -camera_pos[..., 1] / np.where(descending, ray_y, -1.0)
    hit = descending & (t > 0.0)
    return np.where(hit, t, 0.0), hit


def checker_color(xz) -> np.ndarray:
    """Tile color for ground positions given as (..., 2) arrays of x and z."""
    cell = np.floor(np.asarray(xz, dtype=np.float64) * C.GROUND_TILE_SCALE)
    odd = fract((cell[..., 0] + cell[..., 1]) * 0.5) > 0.01
    return np.where(odd[..., None], _LIGHT, _DARK)


@np.errstate(under="ignore")
def shade_ground(background, camera_pos, ray_dir, sun_dir, haze) -> np.ndarray:
    """Replace ``background`` with fogged ground wherever the rays hit it."""
    camera_pos = as_vec3(camera_pos)
    ray_dir = as_vec3(ray_dir)
    t, hit = ground_hit(camera_pos, ray_dir)
    if not hit.any():
        return background

    pos = camera_pos + ray_dir[hit] * t[hit][:, None]
    color = checker_color(pos[:, [0, 2]])
    fog = 1.0 - np.exp(-t[hit] * C.GROUND_FOG_DENSITY * (1.0 + haze * C.GROUND_FOG_HAZE_GAIN))
    flat = ray_dir[hit] * np.array((1.0, 0.0, 1.0))
    fog_color = sky_color(flat, sun_dir)

    out = np.array(background, dtype=np.float64)
    out[hit] = mix(color, fog_color, fog[:, None])
    return out
