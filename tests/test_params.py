import dataclasses
import json
import math

import pytest

from wgpu_clouds import DEFAULT_PARAMS, Camera, CloudParams, FrameContext


def test_defaults():
    params = CloudParams()
    assert params == DEFAULT_PARAMS
    assert params.density == 1.8
    assert params.steps == 64
    assert params.cloud_color == (1.0, 1.0, 1.0)


def test_from_json_camel_case_merges_defaults():
    params = CloudParams.from_json({"sunY": 0.8, "windSpeed": 1.5, "scatteringAnisotropy": 0.3})
    assert params.sun_y == 0.8
    assert params.wind_speed == 1.5
    assert params.anisotropy == 0.3
    assert params.coverage == DEFAULT_PARAMS.coverage


def test_from_json_file(tmp_path):
    path = tmp_path / "storm.json"
    path.write_text(json.dumps({"density": 3.0, "coverage": 0.9, "haze": 0.7}))
    params = CloudParams.from_json(path)
    assert params.density == 3.0
    assert params.haze == 0.7


def test_from_json_round_trip_keys():
    data = DEFAULT_PARAMS.to_json()
    assert "sunX" in data
    assert CloudParams.from_json(data) == DEFAULT_PARAMS


def test_from_json_with_invalid_path():
    with pytest.raises(FileNotFoundError):
        CloudParams.from_json("/invalid/path")


def test_from_json_with_invalid_type():
    with pytest.raises(TypeError):
        CloudParams.from_json(123)


def test_from_json_unknown_key():
    with pytest.raises(ValueError):
        CloudParams.from_json({"thunder": 1.0})


def test_from_json_non_numeric_value():
    with pytest.raises(ValueError):
        CloudParams.from_json({"density": "thick"})


def test_from_json_non_finite_value():
    with pytest.raises(ValueError):
        CloudParams.from_json({"haze": float("nan")})
    with pytest.raises(ValueError):
        CloudParams.from_json({"density": float("inf")})


def test_from_json_file_with_nan_literal(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text('{"haze": NaN}')
    with pytest.raises(ValueError):
        CloudParams.from_json(path)


def test_clamped(caplog):
    params = CloudParams(density=5.0, steps=400, anisotropy=0.99, haze=-1.0)
    with caplog.at_level("WARNING"):
        clamped = params.clamped()
    assert clamped.density == 3.0
    assert clamped.steps == 128
    assert clamped.anisotropy == 0.95
    assert clamped.haze == 0.0
    assert "clamping density" in caplog.text
    # the input is untouched
    assert params.density == 5.0


def test_sun_direction_is_normalized():
    x, y, z = CloudParams(sun_x=3.0, sun_y=0.0, sun_z=4.0).sun_direction()
    assert (x, y, z) == pytest.approx((0.6, 0.0, 0.8))


def test_sun_direction_fallback():
    assert CloudParams(sun_x=0.0, sun_y=0.0, sun_z=0.0).sun_direction() == (0.0, 1.0, 0.0)


def test_scaled_resolution():
    assert CloudParams(resolution=0.5).scaled_resolution((800, 450)) == (400, 225)
    assert CloudParams(resolution=0.1).scaled_resolution((5, 5)) == (1, 1)


def test_camera_basis_is_orthonormal():
    direction, up, right = Camera(phi=0.4, theta=1.1).basis()

    def dot(a, b):
        return sum(i * j for i, j in zip(a, b))

    for v in (direction, up, right):
        assert dot(v, v) == pytest.approx(1.0)
    assert dot(direction, up) == pytest.approx(0.0, abs=1e-12)
    assert dot(direction, right) == pytest.approx(0.0, abs=1e-12)
    assert dot(up, right) == pytest.approx(0.0, abs=1e-12)
    assert up[1] > 0.0


def test_camera_basis_fallback_when_looking_straight_up():
    direction, up, right = Camera(phi=math.pi / 2).basis()
    assert right == (1.0, 0.0, 0.0)
    assert all(math.isfinite(c) for c in up)


def test_camera_clamped():
    camera = Camera(phi=3.0, position=(1.0, 500.0, 2.0)).clamped()
    assert camera.phi == 1.5
    assert camera.position == (1.0, 100.0, 2.0)
    assert Camera(position=(0.0, -3.0, 0.0)).clamped().position[1] == 0.1


def test_frame_context_from_params():
    params = CloudParams(sun_x=0.0, sun_y=2.0, sun_z=0.0, density=2.0, steps=32)
    ctx = FrameContext.from_params(params, Camera(), resolution=(640, 480), time=4.0)
    assert ctx.sun_dir == (0.0, 1.0, 0.0)
    assert ctx.density_multiplier == 2.0
    assert ctx.steps == 32
    assert ctx.camera_pos == (0.0, 1.0, 0.0)
    assert ctx.aspect == pytest.approx(640 / 480)


def test_frame_context_is_immutable():
    ctx = FrameContext.from_params(CloudParams())
    with pytest.raises(dataclasses.FrozenInstanceError):
        ctx.time = 3.0


def test_frame_context_rejects_empty_resolution():
    with pytest.raises(ValueError):
        FrameContext.from_params(CloudParams(), resolution=(0, 10))


def test_clamped_replaces_non_finite_values(caplog):
    params = CloudParams(haze=float("nan"), coverage=float("inf"), sun_y=float("nan"))
    with caplog.at_level("WARNING"):
        clamped = params.clamped()
    assert clamped.haze == DEFAULT_PARAMS.haze
    assert clamped.coverage == DEFAULT_PARAMS.coverage
    assert clamped.sun_y == DEFAULT_PARAMS.sun_y
    assert all(math.isfinite(v) for v in clamped.to_json().values())
    assert "haze is nan" in caplog.text
