"""Single-scatter lighting for cloud samples."""

import numpy as np

from . import constants as C
from .density import cloud_density
from .sky import sky_color
from .vecmath import as_vec3, clamp, dot, mix, smoothstep

_GROUND_AMBIENT = np.array(C.GROUND_AMBIENT)
_SUN_LIGHT_WARM = np.array(C.SUN_LIGHT_WARM)
_SUN_LIGHT_WHITE = np.array(C.SUN_LIGHT_WHITE)
_ZENITH = np.array((0.0, 1.0, 0.0))


def henyey_greenstein(cos_angle, g):
    g2 = g * g
    return (1.0 - g2) / (4.0 * np.pi * (1.0 + g2 - 2.0 * g * cos_angle) ** 1.5)


def dual_lobe_phase(cos_angle, anisotropy):
    """Forward lobe with ``anisotropy`` blended with a fixed backward lobe."""
    forward = henyey_greenstein(cos_angle, anisotropy)
    backward = henyey_greenstein(cos_angle, C.BACKWARD_ANISOTROPY)
    return mix(forward, backward, C.BACKWARD_LOBE_WEIGHT)


@np.errstate(under="ignore")
def shadow_transmittance(p, sun_dir, ctx) -> np.ndarray:
    """Transmittance towards the sun from a short fixed-step march."""
    pos = np.array(p, dtype=np.float64)
    sun_dir = as_vec3(sun_dir)
    shadow = np.zeros(pos.shape[:-1])
    alive = np.ones(pos.shape[:-1], dtype=bool)
    for _ in range(C.SHADOW_STEPS):
        pos = pos + sun_dir * C.SHADOW_STEP_SIZE
        alive &= pos[..., 1] <= C.CLOUD_TOP
        if not alive.any():
            break
        shadow[alive] += cloud_density(pos[alive], ctx) * C.SHADOW_STEP_SIZE
    return np.exp(-shadow)


def ambient_light(p, sun_dir) -> np.ndarray:
    """Desaturated zenith sky above, dim ground bounce below."""
    sky = sky_color(_ZENITH, sun_dir)
    grey = np.full(3, np.sum(sky * 0.33))
    sky = mix(sky, grey, C.AMBIENT_DESATURATION)
    h = clamp((np.asarray(p)[..., 1] - C.CUMULUS_BOTTOM) / C.AMBIENT_HEIGHT_RANGE, 0.0, 1.0)
    return mix(_GROUND_AMBIENT, sky * C.AMBIENT_SKY_GAIN, h[..., None])


def sun_light_color(sun_dir) -> np.ndarray:
    return mix(_SUN_LIGHT_WARM, _SUN_LIGHT_WHITE, smoothstep(0.0, 0.3, float(sun_dir[1])))


@np.errstate(under="ignore")
def in_scattered_light(p, ray_dir, sun_dir, density, ctx) -> np.ndarray:
    """Radiance scattered towards the camera at cloud samples ``p``."""
    p = as_vec3(p)
    ray_dir = as_vec3(ray_dir)
    sun_dir = as_vec3(sun_dir)
    density = np.asarray(density, dtype=np.float64)

    direct = shadow_transmittance(p, sun_dir, ctx)
    powder = 1.0 - np.exp(-density * C.POWDER_STRENGTH)
    phase = dual_lobe_phase(dot(ray_dir, sun_dir), ctx.anisotropy)
    sun_power = smoothstep(-0.1, 0.1, float(sun_dir[1]))

    strength = direct * phase * powder * C.DIRECT_GAIN * sun_power
    light = sun_light_color(sun_dir) * strength[..., None] + ambient_light(p, sun_dir)
    return light * np.asarray(ctx.cloud_color)
