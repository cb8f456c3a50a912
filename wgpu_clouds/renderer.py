"""CPU evaluation of the cloud model.

Every pixel is a pure function of its coordinates and the FrameContext, so a
frame is split into bands of rows that are shaded independently on a thread
pool.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor

import numpy as np
from PIL import Image

from .ground import shade_ground
from .raymarch import composite_clouds, march_clouds
from .sky import sky_color
from .tonemap import tonemap
from .vecmath import normalize

log = logging.getLogger(__name__)


def pixel_uvs(resolution, rows=None) -> np.ndarray:
    """Screen uv of pixel centres as an (rows, width, 2) array.

    Row 0 is the top of the image, uv (0, 0) the bottom-left corner.
    """
    width, height = resolution
    if rows is None:
        rows = range(height)
    y = np.asarray(rows, dtype=np.float64)
    x = np.arange(width, dtype=np.float64)
    u = (x + 0.5) / width
    v = 1.0 - (y + 0.5) / height
    uu, vv = np.meshgrid(u, v)
    return np.stack((uu, vv), axis=-1)


def camera_rays(uv, ctx) -> np.ndarray:
    """World space view rays for screen coordinates ``uv``."""
    uv = np.asarray(uv, dtype=np.float64)
    sx = (uv[..., 0] - 0.5) * 2.0 * ctx.aspect
    sy = (uv[..., 1] - 0.5) * 2.0
    rays = (
        np.asarray(ctx.camera_dir)
        + sx[..., None] * np.asarray(ctx.camera_right)
        + sy[..., None] * np.asarray(ctx.camera_up)
    )
    return normalize(rays)


@np.errstate(under="ignore")
def trace_rays(rays, uv, ctx) -> np.ndarray:
    """Linear radiance along (N, 3) ``rays``; ``uv`` only seeds the jitter.

    Sky with the sun disk first, the ground replaces it where it is hit,
    then the cloud layer is composited over the result.
    """
    rays = np.asarray(rays, dtype=np.float64).reshape(-1, 3)
    color = sky_color(rays, ctx.sun_dir, include_disk=True)
    color = shade_ground(color, ctx.camera_pos, rays, ctx.sun_dir, ctx.haze)

    state = march_clouds(ctx.camera_pos, rays, uv, ctx)
    if state.active.any():
        color = composite_clouds(color, state, rays, ctx.sun_dir, ctx.haze)
    return color


def shade_linear(uv, ctx) -> np.ndarray:
    """Linear radiance for screen coordinates ``uv`` of shape (..., 2)."""
    uv = np.asarray(uv, dtype=np.float64)
    flat_uv = uv.reshape(-1, 2)
    color = trace_rays(camera_rays(flat_uv, ctx), flat_uv, ctx)
    return color.reshape(uv.shape[:-1] + (3,))


def shade(uv, ctx) -> np.ndarray:
    """Display RGB in [0, 1] for screen coordinates ``uv``."""
    return tonemap(shade_linear(uv, ctx))


def _bands(height, tile_rows):
    return [(y0, min(y0 + tile_rows, height)) for y0 in range(0, height, tile_rows)]


def render_frame(ctx, workers=None, tile_rows: int = 16) -> np.ndarray:
    """Render a whole frame, returning an (height, width, 4) float32 RGBA array.

    The image is cut into bands of ``tile_rows`` rows, one task each. The
    tasks write to disjoint slices of the output and share nothing else.
    """
    if tile_rows < 1:
        raise ValueError("tile_rows must be at least 1")
    width, height = ctx.resolution
    out = np.ones((height, width, 4), dtype=np.float32)

    def render_band(band):
        y0, y1 = band
        uv = pixel_uvs(ctx.resolution, range(y0, y1))
        out[y0:y1, :, :3] = shade(uv, ctx)

    bands = _bands(height, tile_rows)
    if workers is None:
        workers = min(len(bands), os.cpu_count() or 1)
    log.debug("rendering %dx%d in %d bands on %d workers", width, height, len(bands), workers)

    if workers <= 1:
        for band in bands:
            render_band(band)
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # list() so exceptions raised in a band propagate here
            list(executor.map(render_band, bands))
    return out


def to_image(rgba) -> Image.Image:
    """Convert a float RGBA frame to an 8-bit PIL image."""
    data = np.clip(np.asarray(rgba) * 255.0 + 0.5, 0, 255).astype(np.uint8)
    return Image.fromarray(data)
