"""Utilities shared by the tests."""

import numpy as np


def _determine_can_use_wgpu_lib():
    try:
        import wgpu.utils

        wgpu.utils.get_default_device()
    except Exception:
        return False
    return True


can_use_wgpu_lib = _determine_can_use_wgpu_lib()


def random_points(n, low=(-60.0, 1.0, -60.0), high=(60.0, 16.0, 60.0)):
    """Uniform random points in a box, shape (n, 3)."""
    return np.random.uniform(low, high, size=(n, 3))
