import logging

import wgpu

from .shader import construct_code, construct_image_code

log = logging.getLogger(__name__)


class RenderPass:
    """
    Base class for the renderpasses of a Cloudscape. Every pass draws a full-screen quad.
    Parameters:
        code (str): WGSL source with ``vs_main`` and ``fs_main`` entry points.
        main (Cloudscape): the main `Cloudscape` this renderpass belongs to. Defaults to None.
    """

    vertex_count = 6

    def __init__(self, code: str, main=None):
        self._shader_code = code
        self._main = main

    @property
    def shader_code(self) -> str:
        """The WGSL shader code to use."""
        return self._shader_code

    @property
    def main(self):
        if self._main is not None:
            return self._main
        else:
            raise AttributeError(
                "main not set yet and the renderpass isn't ready to be used"
            )

    @main.setter
    def main(self, main_cls):
        """
        Register the main cloudscape class for this renderpass.
        """
        self._main = main_cls

    @property
    def _device(self) -> wgpu.GPUDevice:
        return self.main._device

    @property
    def format(self) -> wgpu.TextureFormat:
        """texture format of the canvas, accessed via the main class."""
        return self.main._format

    def get_current_texture(self) -> wgpu.GPUTexture:
        raise NotImplementedError()

    def _binding_layout(self) -> list:
        raise NotImplementedError()

    def _bind_group_entries(self) -> list:
        raise NotImplementedError()

    def _prepare_render(self):
        """
        This private method can only be called after the main Cloudscape class is set.
        It creates the shader module and the render pipeline.
        """
        self._shader_module = self._device.create_shader_module(
            label=f"shader {self}", code=self.shader_code
        )
        self._setup_renderpipeline()

    def _setup_renderpipeline(self):
        """
        prepares the render pipeline and bind group. Called again when a bound resource is replaced.
        """
        bind_group_layout = self._device.create_bind_group_layout(
            entries=self._binding_layout()
        )
        self._bind_group = self._device.create_bind_group(
            layout=bind_group_layout,
            entries=self._bind_group_entries(),
        )

        self._render_pipeline = self._device.create_render_pipeline(
            label=f"render_pipeline {self}",
            layout=self._device.create_pipeline_layout(
                bind_group_layouts=[bind_group_layout]
            ),
            vertex={
                "module": self._shader_module,
                "entry_point": "vs_main",
                "buffers": [],
            },
            primitive={
                "topology": wgpu.PrimitiveTopology.triangle_list,
                "front_face": wgpu.FrontFace.ccw,
                "cull_mode": wgpu.CullMode.none,
            },
            depth_stencil=None,
            multisample=None,
            fragment={
                "module": self._shader_module,
                "entry_point": "fs_main",
                "targets": [
                    {
                        "format": self.format,
                    },
                ],
            },
        )
        log.debug("created render pipeline for %s with format %s", self, self.format)

    def _encode(self) -> wgpu.GPUCommandBuffer:
        command_encoder: wgpu.GPUCommandEncoder = self._device.create_command_encoder()
        current_texture: wgpu.GPUTexture = self.get_current_texture()

        render_pass: wgpu.GPURenderPassEncoder = command_encoder.begin_render_pass(
            label=f"renderpass {self}",
            color_attachments=[
                {
                    "view": current_texture.create_view(),
                    "resolve_target": None,
                    "clear_value": (0, 0, 0, 1),
                    "load_op": wgpu.LoadOp.clear,
                    "store_op": wgpu.StoreOp.store,
                }
            ],
        )
        render_pass.set_pipeline(self._render_pipeline)
        render_pass.set_bind_group(0, self._bind_group)
        render_pass.draw(self.vertex_count, 1, 0, 0)
        render_pass.end()

        return command_encoder.finish()

    def __repr__(self):
        """
        small representation for labels
        """
        return f"<{self.__class__.__name__}>"


class CloudRenderPass(RenderPass):
    """
    Evaluates the cloud model into a texture of ``main.render_size``, which is the canvas size
    scaled by ``CloudParams.resolution``.
    """

    def __init__(self, code: str = None, **kwargs):
        super().__init__(code if code is not None else construct_code(), **kwargs)
        self._target = None

    @property
    def target(self) -> wgpu.GPUTexture:
        """The texture the clouds are rendered into."""
        if self._target is None:
            self._target = self._init_texture()
        return self._target

    def get_current_texture(self) -> wgpu.GPUTexture:
        return self.target

    def _init_texture(self) -> wgpu.GPUTexture:
        w, h = self.main.render_size
        return self._device.create_texture(
            label=f"target of {self} sized {(w, h)}",
            size=(w, h, 1),
            format=self.format,
            usage=wgpu.TextureUsage.RENDER_ATTACHMENT
            | wgpu.TextureUsage.TEXTURE_BINDING,
        )

    def resize_target(self) -> bool:
        """Replace the target texture if the render size changed. Returns True if it was replaced."""
        if tuple(self.target.size[0:2]) == tuple(self.main.render_size):
            return False
        self._target.destroy()
        self._target = self._init_texture()
        log.debug("resized %s target to %s", self, self.main.render_size)
        return True

    def _prepare_render(self):
        # the uniform buffer is bound by the pipeline, so it exists first
        self._uniform_buffer = self._device.create_buffer(
            size=self.main._uniform_data.nbytes,
            usage=wgpu.BufferUsage.UNIFORM | wgpu.BufferUsage.COPY_DST,
        )
        super()._prepare_render()

    def _binding_layout(self) -> list:
        return [
            {
                "binding": 0,
                "visibility": wgpu.ShaderStage.FRAGMENT,
                "buffer": {"type": wgpu.BufferBindingType.uniform},
            },
        ]

    def _bind_group_entries(self) -> list:
        return [
            {
                "binding": 0,
                "resource": {
                    "buffer": self._uniform_buffer,
                    "offset": 0,
                    "size": self.main._uniform_data.nbytes,
                },
            },
        ]

    def draw(self) -> wgpu.GPUCommandBuffer:
        """
        Uploads the uniforms and encodes the draw call for this renderpass.
        Returns the command buffer.
        """
        self.resize_target()
        self._device.queue.write_buffer(
            buffer=self._uniform_buffer,
            buffer_offset=0,
            data=self.main._uniform_data.mem,
            data_offset=0,
            size=self.main._uniform_data.nbytes,
        )
        return self._encode()


class ImageRenderPass(RenderPass):
    """
    Draws the cloud target onto the canvas, upscaled with linear filtering.
    """

    def __init__(self, code: str = None, **kwargs):
        super().__init__(code if code is not None else construct_image_code(), **kwargs)
        self._bound_texture = None

    def get_current_texture(self) -> wgpu.GPUTexture:
        """
        The current (next) texture to draw to
        """
        return self.main._present_context.get_current_texture()

    def _prepare_render(self):
        self._sampler = self._device.create_sampler(
            address_mode_u=wgpu.AddressMode.clamp_to_edge,
            address_mode_v=wgpu.AddressMode.clamp_to_edge,
            mag_filter=wgpu.FilterMode.linear,
            min_filter=wgpu.FilterMode.linear,
        )
        super()._prepare_render()

    def _binding_layout(self) -> list:
        return [
            {
                "binding": 0,
                "visibility": wgpu.ShaderStage.FRAGMENT,
                "texture": {
                    "sample_type": wgpu.TextureSampleType.float,
                    "view_dimension": wgpu.TextureViewDimension.d2,
                },
            },
            {
                "binding": 1,
                "visibility": wgpu.ShaderStage.FRAGMENT,
                "sampler": {"type": wgpu.SamplerBindingType.filtering},
            },
        ]

    def _bind_group_entries(self) -> list:
        self._bound_texture = self.main.clouds.target
        return [
            {"binding": 0, "resource": self._bound_texture.create_view()},
            {"binding": 1, "resource": self._sampler},
        ]

    def draw(self) -> wgpu.GPUCommandBuffer:
        """
        Encodes the upscaling draw call. Returns the command buffer.
        """
        if self._bound_texture is not self.main.clouds.target:
            self._setup_renderpipeline()
        return self._encode()
