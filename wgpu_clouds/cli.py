import argparse
import logging

from .params import Camera, CloudParams, FrameContext

log = logging.getLogger(__name__)

argument_parser = argparse.ArgumentParser(
    description="Render procedural volumetric clouds over a gradient sky"
)

argument_parser.add_argument(
    "--params",
    type=str,
    help="JSON file with cloud parameters (camelCase or snake_case keys)",
    default=None,
)
argument_parser.add_argument(
    "--resolution",
    type=int,
    nargs=2,
    help="The canvas size, scaled by the resolution parameter for CPU renders",
    default=(800, 450),
)
argument_parser.add_argument(
    "--camera",
    type=float,
    nargs=5,
    metavar=("PHI", "THETA", "X", "Y", "Z"),
    help="Camera pitch, yaw and position",
    default=(0.2, 0.0, 0.0, 1.0, 0.0),
)
argument_parser.add_argument(
    "--time", type=float, help="Animation time in seconds", default=0.0
)
argument_parser.add_argument(
    "--output",
    type=str,
    help="Render one frame on the CPU and save it to this image file",
    default=None,
)
argument_parser.add_argument(
    "--workers", type=int, help="Worker threads for CPU renders", default=None
)
argument_parser.add_argument(
    "--verbose", help="log debug messages", action="store_true"
)


def main_cli(argv=None):
    args = argument_parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s:%(name)s:%(message)s",
    )
    params = CloudParams.from_json(args.params) if args.params else CloudParams()
    params = params.clamped()
    phi, theta, x, y, z = args.camera
    camera = Camera(phi=phi, theta=theta, position=(x, y, z))

    if args.output:
        from .renderer import render_frame, to_image

        size = params.scaled_resolution(args.resolution)
        ctx = FrameContext.from_params(params, camera, size, args.time)
        to_image(render_frame(ctx, workers=args.workers)).save(args.output)
        log.info("saved %dx%d frame to %s", size[0], size[1], args.output)
        return

    from .cloudscape import Cloudscape

    Cloudscape(params, camera, resolution=args.resolution).show()


if __name__ == "__main__":
    main_cli()
