import numpy as np
import pytest
from testutils import can_use_wgpu_lib

if not can_use_wgpu_lib:
    pytest.skip("Skipping tests that need the wgpu lib", allow_module_level=True)


def test_cloudscape_offscreen():
    from wgpu_clouds import Cloudscape

    scape = Cloudscape(resolution=(64, 36), offscreen=True)
    assert scape.resolution == (64, 36)
    assert scape._offscreen is True
    for renderpass in (scape.clouds, scape.image):
        assert "fn vs_main" in renderpass.shader_code
        assert "fn fs_main" in renderpass.shader_code


def test_cloudscape_force_offscreen():
    from wgpu_clouds import Cloudscape

    # set by the conftest fixture
    scape = Cloudscape(resolution=(32, 18))
    assert scape._offscreen is True


def test_cloudscape_snapshot():
    from wgpu_clouds import Cloudscape

    scape = Cloudscape(resolution=(64, 36), offscreen=True)
    frame1 = np.asarray(scape.snapshot(1.0))
    frame2 = np.asarray(scape.snapshot(1.0))
    assert frame1.shape == (36, 64, 4)
    assert np.array_equal(frame1, frame2)


def test_cloudscape_set_params():
    from wgpu_clouds import Camera, Cloudscape, CloudParams

    scape = Cloudscape(resolution=(32, 18), offscreen=True)
    scape.set_params(CloudParams(density=9.0, haze=0.5))
    scape.set_camera(Camera(phi=0.5, position=(0.0, 500.0, 0.0)))
    ctx = scape.frame_context()
    assert ctx.density_multiplier == 3.0
    assert ctx.haze == 0.5
    assert ctx.camera_pos == (0.0, 100.0, 0.0)

    with pytest.raises(TypeError):
        scape.set_params({"density": 1.0})
    with pytest.raises(TypeError):
        scape.set_camera((0.2, 0.0))


def test_cloudscape_snapshot_needs_offscreen():
    from wgpu_clouds import Cloudscape

    scape = Cloudscape(resolution=(32, 18), offscreen=True)
    scape._offscreen = False
    with pytest.raises(NotImplementedError):
        scape.snapshot()


def test_cloudscape_renders_at_scaled_resolution():
    from wgpu_clouds import Cloudscape, CloudParams

    scape = Cloudscape(CloudParams(resolution=0.25), resolution=(64, 36), offscreen=True)
    assert scape.render_size == (16, 9)
    assert scape.frame_context().resolution == (16, 9)

    frame = np.asarray(scape.snapshot(0.5))
    # the clouds are upscaled onto the full canvas
    assert frame.shape == (36, 64, 4)
    assert tuple(scape.clouds.target.size[0:2]) == (16, 9)


def test_cloudscape_resolution_change_resizes_target():
    from wgpu_clouds import Cloudscape, CloudParams

    scape = Cloudscape(CloudParams(resolution=0.25), resolution=(64, 36), offscreen=True)
    scape.snapshot()
    old_target = scape.clouds.target

    scape.set_params(CloudParams(resolution=0.5))
    frame = np.asarray(scape.snapshot())
    assert frame.shape == (36, 64, 4)
    assert tuple(scape.clouds.target.size[0:2]) == (32, 18)
    assert scape.clouds.target is not old_target
    assert scape.image._bound_texture is scape.clouds.target


def test_cloudscape_scaled_aspect():
    from wgpu_clouds import Cloudscape, CloudParams

    scape = Cloudscape(CloudParams(resolution=0.5), resolution=(80, 30), offscreen=True)
    assert scape.frame_context().aspect == pytest.approx(80 / 30)
