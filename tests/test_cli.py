import json

from PIL import Image

from wgpu_clouds.cli import argument_parser, main_cli


def test_defaults():
    args = argument_parser.parse_args([])
    assert tuple(args.resolution) == (800, 450)
    assert tuple(args.camera) == (0.2, 0.0, 0.0, 1.0, 0.0)
    assert args.output is None


def test_render_to_file(tmp_path):
    output = tmp_path / "clouds.png"
    main_cli(["--resolution", "16", "12", "--output", str(output), "--workers", "2"])
    image = Image.open(output)
    # the default resolution param halves the canvas
    assert image.size == (8, 6)


def test_render_with_params_file(tmp_path):
    preset = tmp_path / "preset.json"
    preset.write_text(json.dumps({"resolution": 1.0, "steps": 16, "sunY": 0.9}))
    output = tmp_path / "clouds.png"
    main_cli(
        [
            "--params",
            str(preset),
            "--resolution",
            "10",
            "6",
            "--camera",
            "0.4",
            "0.5",
            "0",
            "2",
            "0",
            "--time",
            "3",
            "--output",
            str(output),
        ]
    )
    assert Image.open(output).size == (10, 6)
