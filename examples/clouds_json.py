from pathlib import Path

from wgpu_clouds import Camera, Cloudscape, CloudParams

json_path = Path(Path(__file__).parent, "sunset.json")
params = CloudParams.from_json(json_path)
scape = Cloudscape(params, Camera(phi=0.15, theta=0.6))

if __name__ == "__main__":
    scape.show()
