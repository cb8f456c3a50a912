import numpy as np

from wgpu_clouds import constants as C
from wgpu_clouds.ground import checker_color, ground_hit, shade_ground
from wgpu_clouds.vecmath import normalize

SUN = normalize(np.array([0.6, 0.2, 0.4]))


def test_checker_parity():
    xz = np.array([[1.0, 1.0], [5.0, 1.0], [-1.0, 1.0], [-1.0, -1.0], [4.5, 4.5]])
    colors = checker_color(xz)
    dark, light = np.array(C.GROUND_DARK), np.array(C.GROUND_LIGHT)
    assert np.array_equal(colors[0], dark)
    assert np.array_equal(colors[1], light)
    assert np.array_equal(colors[2], light)
    assert np.array_equal(colors[3], dark)
    assert np.array_equal(colors[4], dark)


def test_checker_tiles_alternate_along_a_line():
    x = np.arange(0.0, 40.0, 4.0) + 2.0
    xz = np.stack((x, np.full_like(x, 1.0)), axis=-1)
    red = checker_color(xz)[:, 0]
    assert np.all(red[::2] == 0.02)
    assert np.all(red[1::2] == 0.04)


def test_ground_hit():
    cam = np.array([0.0, 2.0, 0.0])
    rays = np.array([[0.0, -1.0, 0.0], [0.0, 1.0, 0.0], [1.0, 0.0, 0.0]])
    t, hit = ground_hit(cam, rays)
    assert hit.tolist() == [True, False, False]
    assert t[0] == 2.0


def test_ground_replaces_background_and_sun():
    cam = np.array([0.0, 0.001, 0.0])
    rays = np.array([[0.0, -1.0, 0.0], [0.0, 1.0, 0.0]])
    background = np.full((2, 3), 10.0)
    out = shade_ground(background, cam, rays, SUN, haze=0.0)
    assert np.allclose(out[0], C.GROUND_DARK, atol=1e-4)
    assert np.array_equal(out[1], background[1])


def test_haze_thickens_ground_fog():
    cam = np.array([0.0, 2.0, 0.0])
    rays = normalize(np.array([[1.0, -0.05, 0.3]]))
    background = np.zeros((1, 3))
    clear = shade_ground(background, cam, rays, SUN, haze=0.0)
    hazy = shade_ground(background, cam, rays, SUN, haze=1.0)
    # the fog color is far brighter than the tiles
    assert hazy.sum() > clear.sum()
