"""Analytic gradient sky with sun glow and an optional sun disk."""

import numpy as np

from . import constants as C
from .vecmath import as_vec3, dot, mix, smoothstep

_ZENITH_DAY = np.array(C.ZENITH_DAY)
_HORIZON_DAY = np.array(C.HORIZON_DAY)
_ZENITH_SUNSET = np.array(C.ZENITH_SUNSET)
_HORIZON_SUNSET = np.array(C.HORIZON_SUNSET)
_ZENITH_NIGHT = np.array(C.ZENITH_NIGHT)
_HORIZON_NIGHT = np.array(C.HORIZON_NIGHT)
_SUN_WARM = np.array(C.SUN_WARM)
_SUN_WHITE = np.array(C.SUN_WHITE)


def sun_tint(sun_dir) -> np.ndarray:
    """Warm near the horizon, near white high up."""
    sun_y = max(float(sun_dir[1]), -0.1)
    return mix(_SUN_WARM, _SUN_WHITE, smoothstep(0.0, 0.3, sun_y))


@np.errstate(under="ignore")
def sky_color(ray_dir, sun_dir, include_disk: bool = False) -> np.ndarray:
    """Sky radiance seen along ``ray_dir`` for a single sun direction.

    The sharp sun disk is only added when ``include_disk`` is set. Fog,
    horizon and ambient lookups must leave it off so the sun never shows
    twice or through the ground.
    """
    ray_dir = as_vec3(ray_dir)
    sun_dir = as_vec3(sun_dir)
    sun_y = max(float(sun_dir[1]), -0.1)

    day = smoothstep(0.0, 0.4, sun_y)
    night = smoothstep(0.1, -0.1, sun_y)
    zenith = mix(mix(_ZENITH_SUNSET, _ZENITH_DAY, day), _ZENITH_NIGHT, night)
    horizon = mix(mix(_HORIZON_SUNSET, _HORIZON_DAY, day), _HORIZON_NIGHT, night)

    up = np.maximum(ray_dir[..., 1], 0.0) ** C.SKY_GRADIENT_EXPONENT
    sky = mix(horizon, zenith, up[..., None])

    sun_dot = np.maximum(dot(ray_dir, sun_dir), 0.0)
    tint = sun_tint(sun_dir)
    night_fade = smoothstep(-0.1, 0.0, float(sun_dir[1]))
    glow = sun_dot**C.SUN_GLOW_EXPONENT * C.SUN_GLOW_GAIN * night_fade
    sky = sky + tint * glow[..., None]

    if include_disk:
        disk = smoothstep(*C.SUN_DISK_EDGES, sun_dot)
        visible = smoothstep(-0.05, 0.05, float(sun_dir[1]))
        sky = sky + tint * (disk * C.SUN_DISK_GAIN * visible)[..., None]
    return sky
