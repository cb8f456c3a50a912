"""Small WGSL-like helpers over numpy arrays.

Vectors are arrays whose last axis has length 3. Everything broadcasts.
"""

import numpy as np


def as_vec3(v) -> np.ndarray:
    v = np.asarray(v, dtype=np.float64)
    if v.shape[-1:] != (3,):
        raise ValueError(f"expected an array with a last axis of 3, got {v.shape}")
    return v


def fract(x):
    return x - np.floor(x)


def mix(a, b, t):
    return a + (b - a) * t


def clamp(x, lo, hi):
    return np.minimum(np.maximum(x, lo), hi)


def smoothstep(edge0, edge1, x):
    # edge0 > edge1 gives a falling ramp, like WGSL
    t = clamp((x - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def dot(a, b):
    return np.sum(a * b, axis=-1)


def length(v):
    return np.sqrt(dot(v, v))


def normalize(v):
    n = length(v)[..., None]
    return v / np.maximum(n, 1e-12)
