import logging
import os
import time

import wgpu

from .params import Camera, CloudParams, FrameContext
from .passes import CloudRenderPass, ImageRenderPass
from .uniforms import UNIFORM_LAYOUT, UniformArray, frame_uniforms

log = logging.getLogger(__name__)


class Cloudscape:
    """Renders the volumetric cloud and sky model on the GPU via WGPU.

    Parameters:
        params (CloudParams): Cloud and atmosphere settings. Defaults to ``CloudParams()``.
        camera (Camera): Camera pose. Defaults to ``Camera()``, standing on the ground looking slightly up.
        resolution (tuple): The resolution of the canvas in (width, height). Defaults to (800, 450).
        offscreen (bool): Whether to render offscreen. Default is False.
        title (str): The title of the window. Defaults to "Clouds".
        canvas (RenderCanvas): An existing rendercanvas to draw into, e.g. a ``QRenderWidget``. Optional.

    The frame state is rebuilt from ``params`` and ``camera`` before every frame and uploaded
    as one uniform block (see :mod:`wgpu_clouds.uniforms`). Change them only between frames,
    with :meth:`set_params` and :meth:`set_camera`.
    """

    def __init__(
        self,
        params: CloudParams = None,
        camera: Camera = None,
        resolution=(800, 450),
        offscreen=None,
        title: str = "Clouds",
        canvas=None,
    ) -> None:
        self._uniform_data = UniformArray(*UNIFORM_LAYOUT)
        self._params = (params or CloudParams()).clamped()
        self._camera = (camera or Camera()).clamped()
        self._resolution = (int(resolution[0]), int(resolution[1]))
        self._time = 0.0

        # if no explicit offscreen option was given
        # inherit the rendercanvas force offscreen option
        if offscreen is None and os.environ.get("RENDERCANVAS_FORCE_OFFSCREEN") == "true":
            offscreen = True
        self._offscreen = bool(offscreen)
        self.title = title
        self._canvas = canvas

        self._device = wgpu.utils.get_default_device()
        self._prepare_canvas()
        self._bind_events()

        self.clouds = CloudRenderPass(main=self)
        self.clouds._prepare_render()
        self.image = ImageRenderPass(main=self)
        self.image._prepare_render()

    @property
    def resolution(self):
        """The resolution of the canvas as a tuple (width, height) in pixels."""
        return self._resolution

    @property
    def render_size(self):
        """The size the clouds are rendered at, the canvas size scaled by ``params.resolution``."""
        return self._params.scaled_resolution(self._resolution)

    @property
    def params(self) -> CloudParams:
        return self._params

    @property
    def camera(self) -> Camera:
        return self._camera

    def set_params(self, params: CloudParams):
        """Replace the cloud params, takes effect with the next frame."""
        if not isinstance(params, CloudParams):
            raise TypeError("params must be a CloudParams instance")
        self._params = params.clamped()

    def set_camera(self, camera: Camera):
        """Replace the camera pose, takes effect with the next frame."""
        if not isinstance(camera, Camera):
            raise TypeError("camera must be a Camera instance")
        self._camera = camera.clamped()

    def frame_context(self) -> FrameContext:
        """The immutable state of the next frame."""
        return FrameContext.from_params(
            self._params, self._camera, self.render_size, self._time
        )

    def _prepare_canvas(self):
        if self._canvas is None:
            # imported here so the CPU renderer works without a display backend
            if self._offscreen:
                from rendercanvas.offscreen import RenderCanvas
            else:
                from rendercanvas.auto import RenderCanvas

            self._canvas = RenderCanvas(title=self.title, size=self.resolution, max_fps=60)
        self._present_context = self._canvas.get_context("wgpu")

        # We use non srgb variants, because the shader does its own gamma encoding.
        self._format = self._present_context.get_preferred_format(
            self._device.adapter
        ).removesuffix("-srgb")

        self._present_context.configure(device=self._device, format=self._format)
        log.info(
            "canvas ready: %s, format %s, offscreen=%s",
            self.resolution,
            self._format,
            self._offscreen,
        )

    def _bind_events(self):
        def on_resize(event):
            w, h = int(event["width"]), int(event["height"])
            if w > 0 and h > 0:
                self._resolution = (w, h)

        self._canvas.add_event_handler(on_resize, "resize")

    def _update(self):
        now = time.perf_counter()
        if not hasattr(self, "_last_time"):
            self._last_time = now

        time_delta = now - self._last_time
        self._last_time = now
        self._time += time_delta

    def _draw_frame(self):
        # the frame state is published here, between frames only
        if not self._offscreen:
            self._update()
        frame_uniforms(self.frame_context(), self._uniform_data)

        # the clouds pass resizes its target before the image pass binds it
        self._device.queue.submit([self.clouds.draw(), self.image.draw()])
        self._canvas.request_draw()

    def show(self):
        self._canvas.request_draw(self._draw_frame)
        if self._offscreen:
            from rendercanvas.offscreen import loop
        else:
            from rendercanvas.auto import loop
        loop.run()

    def snapshot(self, time_float: float = 0.0) -> memoryview:
        """
        Returns an image of the specified time. (Only available when ``offscreen=True``)
        Snapshots are stored in the channel order of the canvas format.

        Parameters:
            time_float (float): The time in seconds since the start of the animation. (Default is 0.0)
        Returns:
            frame (memoryview): snapshot with alpha at the canvas resolution, the clouds upscaled from ``render_size``. This object can be converted to a numpy array (without copying data)
        using ``np.asarray(arr)``
        """
        if not self._offscreen:
            raise NotImplementedError("Snapshot is only available in offscreen mode.")

        self._time = float(time_float)
        self._canvas.request_draw(self._draw_frame)
        frame = self._canvas.draw()

        return frame
