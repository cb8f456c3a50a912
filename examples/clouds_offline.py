# test_example = false

"""
Render a short sequence of frames on the CPU and save them as PNG files.
No GPU is needed for this.
"""

import logging
from pathlib import Path

from wgpu_clouds import Camera, CloudParams, FrameContext, render_frame, to_image

logging.basicConfig(level=logging.DEBUG, format="%(levelname)s:%(name)s:%(message)s")

params = CloudParams(coverage=0.5, steps=48)
camera = Camera(phi=0.25, position=(0.0, 2.0, 0.0))
size = params.scaled_resolution((640, 360))
out_dir = Path(Path(__file__).parent, "frames")

if __name__ == "__main__":
    out_dir.mkdir(exist_ok=True)
    for i in range(8):
        ctx = FrameContext.from_params(params, camera, size, time=i * 0.5)
        to_image(render_frame(ctx)).save(out_dir / f"clouds_{i:03d}.png")
