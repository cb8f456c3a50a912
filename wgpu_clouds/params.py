import json
import logging
import math
import os
from dataclasses import dataclass, fields, replace
from typing import Tuple

from . import constants as C

log = logging.getLogger(__name__)

# camelCase names used by JSON presets and generated parameter sets
_JSON_KEYS = {
    "density": "density",
    "coverage": "coverage",
    "sunX": "sun_x",
    "sunY": "sun_y",
    "sunZ": "sun_z",
    "windSpeed": "wind_speed",
    "colorR": "color_r",
    "colorG": "color_g",
    "colorB": "color_b",
    "scatteringAnisotropy": "anisotropy",
    "resolution": "resolution",
    "steps": "steps",
    "haze": "haze",
}

_RANGES = {
    "density": (0.0, 3.0),
    "coverage": (0.0, 1.0),
    "wind_speed": (0.0, 2.0),
    "color_r": (0.0, 1.0),
    "color_g": (0.0, 1.0),
    "color_b": (0.0, 1.0),
    "anisotropy": (0.0, 0.95),
    "resolution": (0.1, 1.0),
    "steps": (16, 128),
    "haze": (0.0, 1.0),
}


@dataclass
class CloudParams:
    """User facing cloud and atmosphere settings.

    The sun position does not need to be normalized. ``resolution`` scales
    the output size, ``steps`` is the ray march sample budget.
    """

    density: float = 1.8
    coverage: float = 0.6
    sun_x: float = 0.6
    sun_y: float = 0.2
    sun_z: float = 0.4
    wind_speed: float = 0.5
    color_r: float = 1.0
    color_g: float = 1.0
    color_b: float = 1.0
    anisotropy: float = 0.8
    resolution: float = 0.5
    steps: int = 64
    haze: float = 0.2

    @classmethod
    def from_json(cls, dict_or_path) -> "CloudParams":
        """Build params from a JSON file or dict, missing keys keep their defaults.

        Both the camelCase keys (``sunX``, ``windSpeed``, ...) and the field
        names are accepted.
        """
        if isinstance(dict_or_path, (str, os.PathLike)):
            with open(dict_or_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        else:
            data = dict_or_path
        if not isinstance(data, dict):
            raise TypeError("cloud params must be a dict")

        names = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = _JSON_KEYS.get(key, key)
            if name not in names:
                raise ValueError(f"Unknown cloud parameter {key!r}")
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"Cloud parameter {key!r} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ValueError(f"Cloud parameter {key!r} must be finite, got {value!r}")
            kwargs[name] = value
        return cls(**kwargs)

    def to_json(self) -> dict:
        """Inverse of :meth:`from_json`, using the camelCase keys."""
        return {key: getattr(self, name) for key, name in _JSON_KEYS.items()}

    def clamped(self) -> "CloudParams":
        """A copy with every field inside its documented range.

        Non-finite values fall back to the field default.
        """
        changes = {}
        for f in fields(self):
            name, value = f.name, getattr(self, f.name)
            if not math.isfinite(value):
                log.warning("%s is %s, using the default %s", name, value, f.default)
                changes[name] = value = f.default
            if name not in _RANGES:
                continue
            lo, hi = _RANGES[name]
            bounded = min(max(value, lo), hi)
            if name == "steps":
                bounded = int(round(bounded))
            if bounded != value:
                log.warning("clamping %s from %s to %s", name, value, bounded)
                changes[name] = bounded
        return replace(self, **changes)

    def sun_direction(self) -> Tuple[float, float, float]:
        """Unit vector towards the sun, straight up if the position is ~0."""
        length = math.sqrt(self.sun_x**2 + self.sun_y**2 + self.sun_z**2)
        if length < 1e-6:
            log.warning("sun position has no length, using (0, 1, 0)")
            return (0.0, 1.0, 0.0)
        return (self.sun_x / length, self.sun_y / length, self.sun_z / length)

    @property
    def cloud_color(self) -> Tuple[float, float, float]:
        return (self.color_r, self.color_g, self.color_b)

    def scaled_resolution(self, size) -> Tuple[int, int]:
        """Output pixel size for a ``(width, height)`` target."""
        w, h = size
        return (max(1, int(w * self.resolution)), max(1, int(h * self.resolution)))


DEFAULT_PARAMS = CloudParams()


def _cross(a, b):
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


@dataclass
class Camera:
    """Camera pose as pitch ``phi``, yaw ``theta`` and a position."""

    phi: float = 0.2
    theta: float = 0.0
    position: Tuple[float, float, float] = (0.0, 1.0, 0.0)

    def clamped(self) -> "Camera":
        """A copy with pitch in +-1.5 rad and altitude in [0.1, 100]."""
        x, y, z = self.position
        return replace(
            self,
            phi=min(max(self.phi, -C.PHI_LIMIT), C.PHI_LIMIT),
            position=(x, min(max(y, C.MIN_ALTITUDE), C.MAX_ALTITUDE), z),
        )

    def basis(self):
        """Return the ``(direction, up, right)`` unit vectors of the view."""
        direction = (
            math.cos(self.phi) * math.sin(self.theta),
            math.sin(self.phi),
            math.cos(self.phi) * math.cos(self.theta),
        )
        right = _cross(direction, (0.0, 1.0, 0.0))
        length = math.sqrt(sum(c * c for c in right))
        if length > C.BASIS_EPSILON:
            right = tuple(c / length for c in right)
        else:
            right = (1.0, 0.0, 0.0)
        up = _cross(right, direction)
        return direction, up, right


def _vec(values) -> Tuple[float, float, float]:
    x, y, z = values
    return (float(x), float(y), float(z))


@dataclass(frozen=True)
class FrameContext:
    """Everything one frame needs. Immutable, one instance per frame."""

    resolution: Tuple[int, int]
    time: float
    camera_pos: Tuple[float, float, float]
    camera_dir: Tuple[float, float, float]
    camera_up: Tuple[float, float, float]
    camera_right: Tuple[float, float, float]
    sun_dir: Tuple[float, float, float] = (0.0, 1.0, 0.0)
    haze: float = 0.2
    cloud_color: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    density_multiplier: float = 1.8
    coverage: float = 0.6
    wind_speed: float = 0.5
    anisotropy: float = 0.8
    steps: int = 64

    def __post_init__(self):
        w, h = self.resolution
        if w < 1 or h < 1:
            raise ValueError(f"resolution must be at least 1x1, got {self.resolution}")
        for name in ("camera_pos", "camera_dir", "camera_up", "camera_right", "sun_dir", "cloud_color"):
            object.__setattr__(self, name, _vec(getattr(self, name)))
        object.__setattr__(self, "resolution", (int(w), int(h)))

    @property
    def aspect(self) -> float:
        return self.resolution[0] / self.resolution[1]

    @classmethod
    def from_params(cls, params: CloudParams, camera: Camera = None, resolution=(800, 450), time=0.0):
        """Assemble the frame state from params and a camera pose."""
        camera = (camera or Camera()).clamped()
        direction, up, right = camera.basis()
        return cls(
            resolution=tuple(resolution),
            time=float(time),
            camera_pos=camera.position,
            camera_dir=direction,
            camera_up=up,
            camera_right=right,
            sun_dir=params.sun_direction(),
            haze=params.haze,
            cloud_color=params.cloud_color,
            density_multiplier=params.density,
            coverage=params.coverage,
            wind_speed=params.wind_speed,
            anisotropy=params.anisotropy,
            steps=params.steps,
        )
