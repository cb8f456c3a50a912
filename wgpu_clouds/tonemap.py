"""Filmic tone curve and gamma encoding."""

import numpy as np

from . import constants as C
from .vecmath import clamp


def filmic(x):
    """Fixed-coefficient filmic curve, clamped to [0, 1]."""
    x = np.maximum(np.asarray(x, dtype=np.float64), 0.0)
    num = x * (C.FILMIC_A * x + C.FILMIC_B)
    den = x * (C.FILMIC_C * x + C.FILMIC_D) + C.FILMIC_E
    return clamp(num / den, 0.0, 1.0)


def gamma_encode(x, gamma: float = C.GAMMA):
    return np.asarray(x) ** (1.0 / gamma)


def tonemap(x):
    """Linear radiance to display values in [0, 1]."""
    return gamma_encode(filmic(x))
