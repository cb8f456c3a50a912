"""WGSL source of the cloud model for the GPU path.

Mirrors the numpy implementation in this package, including the constants in
:mod:`wgpu_clouds.constants`.
"""

uniforms_wgsl = """
struct Uniforms {
    resolution: vec2<f32>,
    time: f32,
    pad0: f32,
    camera_pos: vec3<f32>,
    pad1: f32,
    camera_dir: vec3<f32>,
    pad2: f32,
    camera_up: vec3<f32>,
    pad3: f32,
    camera_right: vec3<f32>,
    pad4: f32,
    sun_dir: vec3<f32>,
    haze: f32,
    cloud_color: vec3<f32>,
    density: f32,
    coverage: f32,
    wind_speed: f32,
    anisotropy: f32,
    steps: f32,
};

@group(0) @binding(0)
var<uniform> u: Uniforms;
"""

vertex_wgsl = """
struct VertexOut {
    @builtin(position) position: vec4<f32>,
    @location(0) uv: vec2<f32>,
};

@vertex
fn vs_main(@builtin(vertex_index) vert_index: u32) -> VertexOut {
    var pos = array<vec2<f32>, 6>(
        vec2<f32>(-1.0, -1.0), vec2<f32>(1.0, -1.0), vec2<f32>(-1.0, 1.0),
        vec2<f32>(-1.0, 1.0), vec2<f32>(1.0, -1.0), vec2<f32>(1.0, 1.0)
    );
    var out: VertexOut;
    out.position = vec4<f32>(pos[vert_index], 0.0, 1.0);
    out.uv = pos[vert_index] * 0.5 + 0.5;
    return out;
}
"""

noise_wgsl = """
// smoothstep that also accepts falling edges (edge0 > edge1)
fn ramp(edge0: f32, edge1: f32, x: f32) -> f32 {
    let t = clamp((x - edge0) / (edge1 - edge0), 0.0, 1.0);
    return t * t * (3.0 - 2.0 * t);
}

fn hash3(p: vec3<f32>) -> f32 {
    var p3 = fract(p * 0.1031);
    p3 += dot(p3, p3.yzx + 33.33);
    return fract((p3.x + p3.y) * p3.z);
}

fn value_noise(x: vec3<f32>) -> f32 {
    let p = floor(x);
    let f = fract(x);
    let w = f * f * (3.0 - 2.0 * f);

    let x00 = mix(hash3(p), hash3(p + vec3<f32>(1.0, 0.0, 0.0)), w.x);
    let x10 = mix(hash3(p + vec3<f32>(0.0, 1.0, 0.0)), hash3(p + vec3<f32>(1.0, 1.0, 0.0)), w.x);
    let x01 = mix(hash3(p + vec3<f32>(0.0, 0.0, 1.0)), hash3(p + vec3<f32>(1.0, 0.0, 1.0)), w.x);
    let x11 = mix(hash3(p + vec3<f32>(0.0, 1.0, 1.0)), hash3(p + vec3<f32>(1.0, 1.0, 1.0)), w.x);
    return mix(mix(x00, x10, w.y), mix(x01, x11, w.y), w.z);
}

fn rotate_y(p: vec3<f32>) -> vec3<f32> {
    return vec3<f32>(0.8 * p.x - 0.6 * p.z, p.y, 0.6 * p.x + 0.8 * p.z);
}

fn fbm_base(p: vec3<f32>) -> f32 {
    var f = 0.0;
    var pos = p;
    var amp = 0.5;
    for (var i = 0; i < 4; i++) {
        f += amp * value_noise(pos);
        pos = rotate_y(pos) * 2.02;
        amp *= 0.5;
    }
    return f / 0.9375;
}

fn fbm_detail(p: vec3<f32>) -> f32 {
    var f = 0.0;
    var pos = p;
    var amp = 0.5;
    for (var i = 0; i < 5; i++) {
        f += amp * value_noise(pos);
        pos = rotate_y(pos) * 2.03;
        amp *= 0.5;
    }
    return f / 0.96875;
}

fn remap(value: f32, old_min: f32, old_max: f32, new_min: f32, new_max: f32) -> f32 {
    let spread = old_max - old_min;
    if (spread <= 1e-8) {
        return new_min;
    }
    return new_min + (clamp(value, old_min, old_max) - old_min) * (new_max - new_min) / spread;
}
"""

sky_wgsl = """
fn sun_tint(sun_dir: vec3<f32>) -> vec3<f32> {
    let sun_y = max(sun_dir.y, -0.1);
    return mix(vec3<f32>(1.0, 0.3, 0.05), vec3<f32>(1.0, 1.0, 0.9), ramp(0.0, 0.3, sun_y));
}

fn sky_color(ray_dir: vec3<f32>, sun_dir: vec3<f32>, include_disk: bool) -> vec3<f32> {
    let sun_y = max(sun_dir.y, -0.1);

    let day = ramp(0.0, 0.4, sun_y);
    let night = ramp(0.1, -0.1, sun_y);
    let zenith = mix(mix(vec3<f32>(0.05, 0.1, 0.25), vec3<f32>(0.1, 0.4, 0.85), day), vec3<f32>(0.0, 0.0, 0.02), night);
    let horizon = mix(mix(vec3<f32>(0.95, 0.45, 0.1), vec3<f32>(0.6, 0.8, 0.95), day), vec3<f32>(0.01, 0.02, 0.08), night);

    var sky = mix(horizon, zenith, pow(max(ray_dir.y, 0.0), 0.6));

    let sun_dot = max(dot(ray_dir, sun_dir), 0.0);
    let tint = sun_tint(sun_dir);
    let glow = pow(sun_dot, 128.0) * 0.6 * ramp(-0.1, 0.0, sun_dir.y);
    sky += tint * glow;

    if (include_disk) {
        let disk = ramp(0.999, 0.9995, sun_dot);
        sky += tint * disk * 10.0 * ramp(-0.05, 0.05, sun_dir.y);
    }
    return sky;
}
"""

density_wgsl = """
fn local_threshold(weather: f32, gain: f32) -> f32 {
    return 1.0 - clamp(u.coverage + (weather - 0.5) * gain, 0.0, 1.0);
}

fn cloud_density(p: vec3<f32>) -> f32 {
    if (p.y < 1.0 || p.y > 16.0) {
        return 0.0;
    }
    let time = u.time * u.wind_speed;
    var density = 0.0;

    let weather = value_noise(p * 0.03 + vec3<f32>(time * 0.1, 0.0, 0.0));
    let thresh = local_threshold(weather, 1.2);

    let warp1 = value_noise(p * 0.15 + vec3<f32>(time * 0.1, 0.0, 0.0));
    let warp2 = value_noise(p * 0.4 - vec3<f32>(0.0, time * 0.2, 0.0));
    let warp = warp1 + warp2 * 0.5;
    let warped = p + vec3<f32>(warp * 2.0, (warp - 0.6) * 6.0, warp * 1.5);

    // cumulus
    if (warped.y > 3.0 && warped.y < 8.0) {
        let h = (warped.y - 3.0) / 5.0;
        let mask = ramp(0.0, 0.2, h) * ramp(1.0, 0.5, h);
        if (mask > 0.01) {
            let p_layer = p + vec3<f32>(time * 0.5, 0.0, 0.0);
            var d = remap(fbm_base(p_layer * 0.15), thresh - 0.05, 1.0, 0.0, 1.0);
            if (d > 0.0) {
                d = d - fbm_detail(p_layer * 2.5) * 0.35 * (1.0 - d);
                density += max(d, 0.0) * mask * 2.5;
            }
        }
    }

    // cirrus
    if (warped.y > 10.0 && warped.y < 14.0) {
        let h = (warped.y - 10.0) / 4.0;
        let mask = ramp(0.0, 0.2, h) * ramp(1.0, 0.8, h);
        if (mask > 0.01) {
            let weather_high = value_noise(p * vec3<f32>(0.05, 0.0, 0.1) + vec3<f32>(time * 0.2, 0.0, 0.0));
            let thresh_high = local_threshold(weather_high, 0.8);
            let p_cirrus = (p + vec3<f32>(time * 1.2, 0.0, 0.0)) * vec3<f32>(0.1, 0.5, 0.1);
            let d = remap(fbm_detail(p_cirrus), thresh_high * 0.9, 1.0, 0.0, 1.0);
            density += max(d, 0.0) * mask * 1.8;
        }
    }
    return density * u.density;
}
"""

lighting_wgsl = """
fn henyey_greenstein(cos_angle: f32, g: f32) -> f32 {
    let g2 = g * g;
    return (1.0 - g2) / (4.0 * 3.14159265 * pow(1.0 + g2 - 2.0 * g * cos_angle, 1.5));
}

fn dual_lobe_phase(cos_angle: f32) -> f32 {
    return mix(henyey_greenstein(cos_angle, u.anisotropy), henyey_greenstein(cos_angle, -0.3), 0.4);
}

fn in_scattered_light(p: vec3<f32>, ray_dir: vec3<f32>, sun_dir: vec3<f32>, density: f32) -> vec3<f32> {
    var light_pos = p;
    var shadow = 0.0;
    for (var i = 0; i < 4; i++) {
        light_pos += sun_dir * 1.0;
        if (light_pos.y > 16.0) {
            break;
        }
        shadow += cloud_density(light_pos) * 1.0;
    }
    let direct = exp(-shadow);
    let powder = 1.0 - exp(-density * 2.0);
    let phase = dual_lobe_phase(dot(ray_dir, sun_dir));

    let sky_raw = sky_color(vec3<f32>(0.0, 1.0, 0.0), sun_dir, false);
    let sky = mix(sky_raw, vec3<f32>(dot(sky_raw, vec3<f32>(0.33))), 0.6);
    let h = clamp((p.y - 3.0) / 11.0, 0.0, 1.0);
    let ambient = mix(vec3<f32>(0.03, 0.03, 0.036), sky * 0.8, h);

    let sun_color = mix(vec3<f32>(1.0, 0.4, 0.1), vec3<f32>(1.0, 0.95, 0.9), ramp(0.0, 0.3, sun_dir.y));
    let sun_power = ramp(-0.1, 0.1, sun_dir.y);
    return (sun_color * direct * phase * powder * 6.0 * sun_power + ambient) * u.cloud_color;
}
"""

fragment_wgsl = """
fn filmic(color: vec3<f32>) -> vec3<f32> {
    let x = max(color, vec3<f32>(0.0));
    let a = 2.51;
    let b = 0.03;
    let c = 2.43;
    let d = 0.59;
    let e = 0.14;
    return clamp((x * (a * x + b)) / (x * (c * x + d) + e), vec3<f32>(0.0), vec3<f32>(1.0));
}

@fragment
fn fs_main(@location(0) uv: vec2<f32>) -> @location(0) vec4<f32> {
    let aspect = u.resolution.x / u.resolution.y;
    let ndc = (uv - 0.5) * 2.0;
    let ray_dir = normalize(u.camera_dir + ndc.x * aspect * u.camera_right + ndc.y * u.camera_up);
    let flat_dir = vec3<f32>(ray_dir.x, 0.0, ray_dir.z);

    var col = sky_color(ray_dir, u.sun_dir, true);

    // ground replaces the sky, sun disk included
    if (ray_dir.y < 0.0) {
        let t_ground = -u.camera_pos.y / ray_dir.y;
        if (t_ground > 0.0) {
            let p_ground = u.camera_pos + ray_dir * t_ground;
            let cell = floor(p_ground.xz * 0.25);
            var ground = vec3<f32>(0.02, 0.02, 0.03);
            if (fract((cell.x + cell.y) * 0.5) > 0.01) {
                ground = vec3<f32>(0.04, 0.04, 0.05);
            }
            let fog = 1.0 - exp(-t_ground * 0.02 * (1.0 + u.haze * 5.0));
            col = mix(ground, sky_color(flat_dir, u.sun_dir, false), fog);
        }
    }

    var dy = max(ray_dir.y, 1e-6);
    if (ray_dir.y <= 0.0) {
        dy = min(ray_dir.y, -1e-6);
    }
    var t_start = 0.0;
    var t_end = 0.0;
    var march = false;
    if (u.camera_pos.y < 1.0) {
        if (ray_dir.y > 0.0) {
            t_start = (1.0 - u.camera_pos.y) / dy;
            t_end = (16.0 - u.camera_pos.y) / dy;
            march = true;
        }
    } else if (u.camera_pos.y > 16.0) {
        if (ray_dir.y < 0.0) {
            t_start = (16.0 - u.camera_pos.y) / dy;
            t_end = (1.0 - u.camera_pos.y) / dy;
            march = true;
        }
    } else {
        if (ray_dir.y > 0.0) {
            t_end = (16.0 - u.camera_pos.y) / dy;
        } else {
            t_end = (1.0 - u.camera_pos.y) / dy;
        }
        march = true;
    }

    if (march) {
        let steps = clamp(i32(round(u.steps)), 1, 128);
        let step_size = (t_end - t_start) / f32(steps);
        var t = t_start + step_size * fract(sin(dot(uv, vec2<f32>(12.9898, 78.233))) * 43758.5453);
        var transmittance = 1.0;
        var scattered = vec3<f32>(0.0);
        var weighted_depth = 0.0;
        var total_alpha = 0.0;

        for (var i = 0; i < 128; i++) {
            if (i >= steps || transmittance < 0.01 || t > t_end) {
                break;
            }
            let p = u.camera_pos + ray_dir * t;
            let density = cloud_density(p);
            if (density > 0.001) {
                let light = in_scattered_light(p, ray_dir, u.sun_dir, density);
                let step_trans = exp(-density * 0.8 * step_size);
                let absorbed = transmittance * (1.0 - step_trans);
                weighted_depth += t * absorbed;
                total_alpha += absorbed;
                scattered += light * absorbed;
                transmittance *= step_trans;
            }
            t += step_size;
        }

        var depth = t_end;
        if (total_alpha > 0.001) {
            depth = weighted_depth / total_alpha;
        }
        let t_atm = exp(-depth * 0.04 * (1.0 + u.haze * 2.0));
        let horizon = sky_color(flat_dir, u.sun_dir, false);
        let fogged = scattered * t_atm + horizon * (1.0 - t_atm) * (1.0 - transmittance);
        col = col * transmittance + fogged;
    }

    col = pow(filmic(col), vec3<f32>(1.0 / 2.2));
    return vec4<f32>(col, 1.0);
}
"""


def construct_code() -> str:
    """Assemble the full shader module, entry points ``vs_main`` and ``fs_main``."""
    return (
        uniforms_wgsl
        + vertex_wgsl
        + noise_wgsl
        + sky_wgsl
        + density_wgsl
        + lighting_wgsl
        + fragment_wgsl
    )


image_wgsl = """
@group(0) @binding(0)
var frame_texture: texture_2d<f32>;
@group(0) @binding(1)
var frame_sampler: sampler;

@fragment
fn fs_main(@location(0) uv: vec2<f32>) -> @location(0) vec4<f32> {
    // texture rows run top to bottom
    return textureSample(frame_texture, frame_sampler, vec2<f32>(uv.x, 1.0 - uv.y));
}
"""


def construct_image_code() -> str:
    """Shader of the pass that upscales the cloud target onto the canvas."""
    return vertex_wgsl + image_wgsl
