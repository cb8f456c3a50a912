import numpy as np
import pytest

from wgpu_clouds.tonemap import filmic, gamma_encode, tonemap


def test_black_stays_black():
    assert np.all(tonemap(np.zeros(3)) == 0.0)


def test_output_range():
    x = np.random.exponential(4.0, size=(1000, 3))
    y = tonemap(x)
    assert np.all(y >= 0.0)
    assert np.all(y <= 1.0)


def test_bright_values_saturate():
    assert np.all(tonemap(np.full(3, 1e6)) == 1.0)


def test_curve_is_monotonic():
    x = np.linspace(0.0, 20.0, 2001)
    assert np.all(np.diff(filmic(x)) >= 0.0)


def test_gamma_encode():
    assert gamma_encode(1.0) == 1.0
    assert gamma_encode(0.5) == pytest.approx(0.5 ** (1 / 2.2))


def test_known_value():
    a, b, c, d, e = 2.51, 0.03, 2.43, 0.59, 0.14
    x = 0.5
    expected = (x * (a * x + b)) / (x * (c * x + d) + e)
    assert filmic(x) == pytest.approx(expected)
