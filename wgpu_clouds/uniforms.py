import ctypes

# (name, format, count) in shader order. Every vec3 shares its 16-byte
# slot with a scalar, either padding or a packed parameter.
UNIFORM_LAYOUT = (
    ("resolution", "f", 2),
    ("time", "f", 1),
    ("pad0", "f", 1),
    ("camera_pos", "f", 3),
    ("pad1", "f", 1),
    ("camera_dir", "f", 3),
    ("pad2", "f", 1),
    ("camera_up", "f", 3),
    ("pad3", "f", 1),
    ("camera_right", "f", 3),
    ("pad4", "f", 1),
    ("sun_dir", "f", 3),
    ("haze", "f", 1),
    ("cloud_color", "f", 3),
    ("density", "f", 1),
    ("coverage", "f", 1),
    ("wind_speed", "f", 1),
    ("anisotropy", "f", 1),
    ("steps", "f", 1),
)


class UniformArray:
    """Convenience class to create a uniform array.

    Ensure that the order matches structs in the shader code.
    See https://www.w3.org/TR/WGSL/#alignment-and-size for reference on alignment.
    """

    def __init__(self, *args):
        fields = []
        byte_offset = 0
        for name, format, n in args:
            if format not in ("f", "i", "I"):
                raise ValueError(f"unsupported uniform format {format!r} for {name}")
            field = name, format, byte_offset, byte_offset + n * 4
            fields.append(field)
            byte_offset += n * 4
        nbytes = byte_offset
        while nbytes % 16:
            nbytes += 1
        self._mem = memoryview((ctypes.c_uint8 * nbytes)()).cast("B")
        self._views = {}
        self._offsets = {}
        for name, format, i1, i2 in fields:
            self._views[name] = self._mem[i1:i2].cast(format)
            self._offsets[name] = i1

    @property
    def mem(self):
        return self._mem

    @property
    def nbytes(self):
        return self._mem.nbytes

    def offset(self, key) -> int:
        """Byte offset of a field inside the buffer."""
        return self._offsets[key]

    def __getitem__(self, key):
        v = self._views[key].tolist()
        return v[0] if len(v) == 1 else v

    def __setitem__(self, key, val):
        m = self._views[key]
        n = m.shape[0]
        if n == 1:
            if not isinstance(val, (float, int)):
                raise TypeError(f"{key} expects a number, got {val!r}")
            m[0] = val
        else:
            if len(val) != n:
                raise ValueError(f"{key} expects {n} values, got {len(val)}")
            for i in range(n):
                m[i] = val[i]


def frame_uniforms(ctx, data: UniformArray = None) -> UniformArray:
    """Pack a FrameContext into the uniform block, reusing ``data`` if given."""
    if data is None:
        data = UniformArray(*UNIFORM_LAYOUT)
    data["resolution"] = tuple(float(v) for v in ctx.resolution)
    data["time"] = float(ctx.time)
    data["camera_pos"] = ctx.camera_pos
    data["camera_dir"] = ctx.camera_dir
    data["camera_up"] = ctx.camera_up
    data["camera_right"] = ctx.camera_right
    data["sun_dir"] = ctx.sun_dir
    data["haze"] = float(ctx.haze)
    data["cloud_color"] = ctx.cloud_color
    data["density"] = float(ctx.density_multiplier)
    data["coverage"] = float(ctx.coverage)
    data["wind_speed"] = float(ctx.wind_speed)
    data["anisotropy"] = float(ctx.anisotropy)
    data["steps"] = float(ctx.steps)
    return data
