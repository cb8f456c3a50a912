from .cloudscape import Cloudscape
from .params import DEFAULT_PARAMS, Camera, CloudParams, FrameContext
from .renderer import render_frame, shade, to_image
from .uniforms import UniformArray, frame_uniforms

__version__ = "0.1.0"
version_info = tuple(map(int, __version__.split(".")))  # noqa
