"""Two-layer procedural cloud density."""

import numpy as np

from . import constants as C
from .noise import fbm_base, fbm_detail, remap, value_noise
from .vecmath import clamp, smoothstep


def _wind(time, speed, n):
    offset = np.zeros((n, 3))
    offset[:, 0] = time * speed
    return offset


def _local_threshold(weather, coverage, gain):
    return 1.0 - clamp(coverage + (weather - 0.5) * gain, 0.0, 1.0)


def _cumulus(p, warped_y, threshold, time):
    density = np.zeros(len(p))
    h = (warped_y - C.CUMULUS_BOTTOM) / (C.CUMULUS_TOP - C.CUMULUS_BOTTOM)
    mask = smoothstep(0.0, C.CUMULUS_FADE_IN, h) * smoothstep(1.0, C.CUMULUS_FADE_OUT, h)
    active = (
        (warped_y > C.CUMULUS_BOTTOM)
        & (warped_y < C.CUMULUS_TOP)
        & (mask > C.LAYER_MASK_MIN)
    )
    if not active.any():
        return density

    p_layer = p[active] + _wind(time, C.CUMULUS_WIND, active.sum())
    shape = fbm_base(p_layer * C.CUMULUS_SHAPE_SCALE)
    d = remap(shape, threshold[active] - C.CUMULUS_THRESHOLD_BIAS, 1.0, 0.0, 1.0)

    # erode only where the base shape is present
    eroding = d > 0.0
    if eroding.any():
        detail = fbm_detail(p_layer[eroding] * C.CUMULUS_DETAIL_SCALE)
        de = d[eroding]
        d[eroding] = de - detail * C.CUMULUS_EROSION * (1.0 - de)
    density[active] = np.maximum(d, 0.0) * mask[active] * C.CUMULUS_GAIN
    return density


def _cirrus(p, warped_y, coverage, time):
    density = np.zeros(len(p))
    h = (warped_y - C.CIRRUS_BOTTOM) / (C.CIRRUS_TOP - C.CIRRUS_BOTTOM)
    mask = smoothstep(0.0, C.CIRRUS_FADE_IN, h) * smoothstep(1.0, C.CIRRUS_FADE_OUT, h)
    active = (
        (warped_y > C.CIRRUS_BOTTOM)
        & (warped_y < C.CIRRUS_TOP)
        & (mask > C.LAYER_MASK_MIN)
    )
    if not active.any():
        return density

    n = active.sum()
    pa = p[active]
    weather = value_noise(
        pa * C.CIRRUS_WEATHER_SCALE + _wind(time, C.CIRRUS_WEATHER_WIND, n)
    )
    threshold = _local_threshold(weather, coverage, C.CIRRUS_WEATHER_GAIN)

    p_cirrus = (pa + _wind(time, C.CIRRUS_WIND, n)) * C.CIRRUS_STRETCH
    d = remap(fbm_detail(p_cirrus), threshold * C.CIRRUS_THRESHOLD_SCALE, 1.0, 0.0, 1.0)
    density[active] = np.maximum(d, 0.0) * mask[active] * C.CIRRUS_GAIN
    return density


def cloud_density(p, ctx) -> np.ndarray:
    """Cloud density at world positions ``p`` for the frame ``ctx``.

    Zero outside the cloud band. Inside it, a low frequency weather map
    modulates the global coverage, a domain warp displaces the altitude used
    to pick the layers, and the cumulus and cirrus layers are summed.
    """
    p = np.asarray(p, dtype=np.float64)
    shape = p.shape[:-1]
    flat = p.reshape(-1, 3)
    result = np.zeros(len(flat))

    inside = (flat[:, 1] >= C.CLOUD_BOTTOM) & (flat[:, 1] <= C.CLOUD_TOP)
    if not inside.any():
        return result.reshape(shape)

    q = flat[inside]
    n = len(q)
    time = ctx.time * ctx.wind_speed

    weather = value_noise(q * C.WEATHER_SCALE + _wind(time, C.WEATHER_WIND, n))
    threshold = _local_threshold(weather, ctx.coverage, C.WEATHER_GAIN)

    warp1 = value_noise(q * C.WARP_SCALE_1 + _wind(time, C.WARP_WIND_1, n))
    drift = np.zeros((n, 3))
    drift[:, 1] = time * C.WARP_WIND_2
    warp2 = value_noise(q * C.WARP_SCALE_2 - drift)
    warp = warp1 + warp2 * 0.5
    wx, wy, wz = C.WARP_OFFSET
    warped = q + np.stack(
        (warp * wx, (warp - C.WARP_VERTICAL_BIAS) * wy, warp * wz), axis=-1
    )
    # the layers are chosen by warped altitude but sampled unwarped
    warped_y = warped[:, 1]

    density = _cumulus(q, warped_y, threshold, time) + _cirrus(
        q, warped_y, ctx.coverage, time
    )
    result[inside] = density * ctx.density_multiplier
    return result.reshape(shape)
