"""Fixed constants of the cloud and sky model.

These values are part of the model, not tunable parameters. The WGSL source in
:mod:`wgpu_clouds.shader` uses the same numbers, keep both in sync.
"""

# Cloud band (world units)
CLOUD_BOTTOM = 1.0
CLOUD_TOP = 16.0
CUMULUS_BOTTOM = 3.0
CUMULUS_TOP = 8.0
CIRRUS_BOTTOM = 10.0
CIRRUS_TOP = 14.0

# Fractal noise
ROTATION_COS = 0.8
ROTATION_SIN = 0.6
FBM_BASE_OCTAVES = 4
FBM_BASE_LACUNARITY = 2.02
FBM_BASE_NORM = 0.9375  # 0.5 + 0.25 + 0.125 + 0.0625
FBM_DETAIL_OCTAVES = 5
FBM_DETAIL_LACUNARITY = 2.03
FBM_DETAIL_NORM = 0.96875
REMAP_MIN_SPREAD = 1e-8

# Weather map and domain warp
WEATHER_SCALE = 0.03
WEATHER_WIND = 0.1
WEATHER_GAIN = 1.2
WARP_SCALE_1 = 0.15
WARP_SCALE_2 = 0.4
WARP_WIND_1 = 0.1
WARP_WIND_2 = 0.2
WARP_OFFSET = (2.0, 6.0, 1.5)
WARP_VERTICAL_BIAS = 0.6

# Low layer (cumulus)
CUMULUS_WIND = 0.5
CUMULUS_SHAPE_SCALE = 0.15
CUMULUS_DETAIL_SCALE = 2.5
CUMULUS_THRESHOLD_BIAS = 0.05
CUMULUS_EROSION = 0.35
CUMULUS_FADE_IN = 0.2
CUMULUS_FADE_OUT = 0.5
CUMULUS_GAIN = 2.5

# High layer (cirrus)
CIRRUS_WEATHER_SCALE = (0.05, 0.0, 0.1)
CIRRUS_WEATHER_WIND = 0.2
CIRRUS_WEATHER_GAIN = 0.8
CIRRUS_WIND = 1.2
CIRRUS_STRETCH = (0.1, 0.5, 0.1)
CIRRUS_THRESHOLD_SCALE = 0.9
CIRRUS_FADE_IN = 0.2
CIRRUS_FADE_OUT = 0.8
CIRRUS_GAIN = 1.8

LAYER_MASK_MIN = 0.01

# Sky palettes
ZENITH_DAY = (0.1, 0.4, 0.85)
HORIZON_DAY = (0.6, 0.8, 0.95)
ZENITH_SUNSET = (0.05, 0.1, 0.25)
HORIZON_SUNSET = (0.95, 0.45, 0.1)
ZENITH_NIGHT = (0.0, 0.0, 0.02)
HORIZON_NIGHT = (0.01, 0.02, 0.08)
SUN_WARM = (1.0, 0.3, 0.05)
SUN_WHITE = (1.0, 1.0, 0.9)
SKY_GRADIENT_EXPONENT = 0.6
SUN_GLOW_EXPONENT = 128.0
SUN_GLOW_GAIN = 0.6
SUN_DISK_EDGES = (0.999, 0.9995)
SUN_DISK_GAIN = 10.0

# Lighting
SHADOW_STEPS = 4
SHADOW_STEP_SIZE = 1.0
POWDER_STRENGTH = 2.0
BACKWARD_ANISOTROPY = -0.3
BACKWARD_LOBE_WEIGHT = 0.4
DIRECT_GAIN = 6.0
SUN_LIGHT_WARM = (1.0, 0.4, 0.1)
SUN_LIGHT_WHITE = (1.0, 0.95, 0.9)
AMBIENT_DESATURATION = 0.6
AMBIENT_SKY_GAIN = 0.8
GROUND_AMBIENT = (0.03, 0.03, 0.036)  # (0.1, 0.1, 0.12) * 0.3
AMBIENT_HEIGHT_RANGE = 11.0

# Ground
GROUND_DARK = (0.02, 0.02, 0.03)
GROUND_LIGHT = (0.04, 0.04, 0.05)
GROUND_TILE_SCALE = 0.25
GROUND_FOG_DENSITY = 0.02
GROUND_FOG_HAZE_GAIN = 5.0

# Ray march
MAX_STEPS = 128
MIN_STEPS = 1
DENSITY_EPSILON = 0.001
EXTINCTION_SCALE = 0.8
MIN_TRANSMITTANCE = 0.01
ALPHA_EPSILON = 0.001
CLOUD_FOG_DENSITY = 0.04
CLOUD_FOG_HAZE_GAIN = 2.0
HORIZONTAL_EPSILON = 1e-6

# Tone mapping
FILMIC_A = 2.51
FILMIC_B = 0.03
FILMIC_C = 2.43
FILMIC_D = 0.59
FILMIC_E = 0.14
GAMMA = 2.2

# Camera
BASIS_EPSILON = 0.0001
PHI_LIMIT = 1.5
MIN_ALTITUDE = 0.1
MAX_ALTITUDE = 100.0
