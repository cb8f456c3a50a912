import numpy as np
import pytest
from testutils import random_points

from wgpu_clouds import CloudParams, FrameContext
from wgpu_clouds import constants as C
from wgpu_clouds.density import cloud_density


def make_context(**kwargs):
    params = CloudParams(**kwargs)
    return FrameContext.from_params(params, resolution=(4, 4), time=2.0)


def test_density_is_deterministic():
    ctx = make_context()
    p = random_points(300)
    first = cloud_density(p, ctx)
    second = cloud_density(p.copy(), ctx)
    assert np.array_equal(first, second)
    assert first.shape == (300,)


def test_density_depends_on_time():
    p = random_points(300)
    ctx_a = make_context()
    ctx_b = FrameContext.from_params(CloudParams(), resolution=(4, 4), time=30.0)
    assert not np.array_equal(cloud_density(p, ctx_a), cloud_density(p, ctx_b))


def test_density_is_zero_outside_band():
    ctx = make_context(density=3.0, coverage=1.0)
    below = random_points(200, low=(-60, -40, -60), high=(60, 0.999, 60))
    above = random_points(200, low=(-60, 16.001, -60), high=(60, 90, 60))
    assert np.all(cloud_density(below, ctx) == 0.0)
    assert np.all(cloud_density(above, ctx) == 0.0)


def test_density_is_non_negative():
    ctx = make_context(coverage=0.9)
    assert np.all(cloud_density(random_points(1000), ctx) >= 0.0)


def test_single_point_returns_scalar():
    ctx = make_context()
    value = cloud_density(np.array([0.0, 5.0, 0.0]), ctx)
    assert np.shape(value) == ()
    assert cloud_density(np.array([0.0, 0.5, 0.0]), ctx) == 0.0


def test_density_multiplier_scales_linearly():
    p = random_points(500)
    one = cloud_density(p, make_context(density=1.0))
    two = cloud_density(p, make_context(density=2.0))
    assert np.allclose(two, one * 2.0)
    assert np.all(cloud_density(p, make_context(density=0.0)) == 0.0)


def test_more_coverage_means_more_cloud():
    p = random_points(3000)
    sparse = cloud_density(p, make_context(coverage=0.1)).mean()
    dense = cloud_density(p, make_context(coverage=0.9)).mean()
    assert dense > sparse


def test_layers_stay_between_band_limits():
    ctx = make_context(coverage=1.0, density=1.0)
    p = random_points(4000, low=(-60, C.CLOUD_BOTTOM, -60), high=(60, C.CLOUD_TOP, 60))
    d = cloud_density(p, ctx)
    assert d.max() > 0.0
    assert d.max() <= C.CUMULUS_GAIN + C.CIRRUS_GAIN


@pytest.mark.parametrize("shape", [(10, 3), (2, 5, 3)])
def test_density_keeps_batch_shape(shape):
    ctx = make_context()
    p = np.random.uniform(0, 16, size=shape)
    assert cloud_density(p, ctx).shape == shape[:-1]
