"""Front-to-back integration of the cloud slab."""

from dataclasses import dataclass, field

import numpy as np

from . import constants as C
from .density import cloud_density
from .lighting import in_scattered_light
from .sky import sky_color
from .vecmath import as_vec3, fract


def _signed_floor(y):
    # keeps horizontal rays finite: zero counts as slightly descending
    return np.where(
        y > 0.0,
        np.maximum(y, C.HORIZONTAL_EPSILON),
        np.minimum(y, -C.HORIZONTAL_EPSILON),
    )


def slab_interval(camera_pos, ray_dir):
    """Ray parameters where the rays cross the cloud band.

    Returns ``(t_start, t_end, active)``. Rays from below the band must
    ascend, rays from above must descend, and rays from inside always march
    from 0 to the boundary they are heading for.
    """
    cam_y = float(as_vec3(camera_pos)[1])
    ray_y = as_vec3(ray_dir)[..., 1]
    dy = _signed_floor(ray_y)
    to_bottom = (C.CLOUD_BOTTOM - cam_y) / dy
    to_top = (C.CLOUD_TOP - cam_y) / dy

    if cam_y < C.CLOUD_BOTTOM:
        active = ray_y > 0.0
        t_start, t_end = to_bottom, to_top
    elif cam_y > C.CLOUD_TOP:
        active = ray_y < 0.0
        t_start, t_end = to_top, to_bottom
    else:
        active = np.ones(ray_y.shape, dtype=bool)
        t_start = np.zeros(ray_y.shape)
        t_end = np.where(ray_y > 0.0, to_top, to_bottom)

    t_start = np.where(active, t_start, 0.0)
    t_end = np.where(active, t_end, 0.0)
    return t_start, t_end, active


def step_count(steps) -> int:
    """Round the sample budget and bound it to [1, 128]."""
    return int(min(max(round(float(steps)), C.MIN_STEPS), C.MAX_STEPS))


def pixel_jitter(uv) -> np.ndarray:
    """Per-pixel offset in [0, 1) used to dither banding."""
    uv = np.asarray(uv, dtype=np.float64)
    return fract(np.sin(uv[..., 0] * 12.9898 + uv[..., 1] * 78.233) * 43758.5453)


@dataclass
class RayMarchState:
    """Accumulators of one batch of rays, discarded after compositing."""

    t_start: np.ndarray
    t_end: np.ndarray
    active: np.ndarray
    transmittance: np.ndarray
    scattered_light: np.ndarray
    weighted_depth: np.ndarray
    total_alpha: np.ndarray
    history: list = field(default_factory=list)

    @classmethod
    def empty(cls, t_start, t_end, active):
        n = t_start.shape
        return cls(
            t_start=t_start,
            t_end=t_end,
            active=active,
            transmittance=np.ones(n),
            scattered_light=np.zeros(n + (3,)),
            weighted_depth=np.zeros(n),
            total_alpha=np.zeros(n),
        )

    @property
    def opacity(self) -> np.ndarray:
        return 1.0 - self.transmittance

    def average_depth(self) -> np.ndarray:
        """Opacity-weighted mean cloud depth, ``t_end`` where nothing was hit."""
        seen = self.total_alpha > C.ALPHA_EPSILON
        safe_alpha = np.where(seen, self.total_alpha, 1.0)
        return np.where(seen, self.weighted_depth / safe_alpha, self.t_end)


@np.errstate(under="ignore")
def march_clouds(camera_pos, ray_dir, uv, ctx, record: bool = False) -> RayMarchState:
    """Integrate the cloud slab along a batch of rays.

    ``ray_dir`` is an (N, 3) array and ``uv`` the matching (N, 2) screen
    coordinates used for jitter. With ``record`` set, a copy of the
    transmittance is appended to ``state.history`` after every step.
    """
    camera_pos = as_vec3(camera_pos)
    ray_dir = as_vec3(ray_dir).reshape(-1, 3)
    uv = np.asarray(uv, dtype=np.float64).reshape(-1, 2)
    sun_dir = np.asarray(ctx.sun_dir, dtype=np.float64)

    t_start, t_end, active = slab_interval(camera_pos, ray_dir)
    state = RayMarchState.empty(t_start, t_end, active)

    steps = step_count(ctx.steps)
    step_size = (t_end - t_start) / steps
    t = t_start + step_size * pixel_jitter(uv)

    for _ in range(steps):
        live = active & (state.transmittance >= C.MIN_TRANSMITTANCE) & (t <= t_end)
        if not live.any():
            break
        idx = np.nonzero(live)[0]
        p = camera_pos + ray_dir[idx] * t[idx, None]
        density = cloud_density(p, ctx)

        dense = density > C.DENSITY_EPSILON
        if dense.any():
            hit = idx[dense]
            d = density[dense]
            light = in_scattered_light(p[dense], ray_dir[hit], sun_dir, d, ctx)

            step_trans = np.exp(-d * C.EXTINCTION_SCALE * step_size[hit])
            absorbed = state.transmittance[hit] * (1.0 - step_trans)

            state.weighted_depth[hit] += t[hit] * absorbed
            state.total_alpha[hit] += absorbed
            state.scattered_light[hit] += light * absorbed[:, None]
            state.transmittance[hit] *= step_trans

        t[idx] += step_size[idx]
        if record:
            state.history.append(state.transmittance.copy())
    return state


@np.errstate(under="ignore")
def composite_clouds(background, state: RayMarchState, ray_dir, sun_dir, haze) -> np.ndarray:
    """Fog the cloud layer by its mean depth and lay it over ``background``."""
    ray_dir = as_vec3(ray_dir).reshape(-1, 3)
    fog_density = C.CLOUD_FOG_DENSITY * (1.0 + haze * C.CLOUD_FOG_HAZE_GAIN)
    t_atm = np.exp(-state.average_depth() * fog_density)[:, None]
    horizon = sky_color(ray_dir * np.array((1.0, 0.0, 1.0)), sun_dir)

    fogged = state.scattered_light * t_atm + horizon * (1.0 - t_atm) * state.opacity[:, None]
    composed = background * state.transmittance[:, None] + fogged
    return np.where(state.active[:, None], composed, background)
