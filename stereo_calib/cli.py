"""
Stereo calibration command line tool.

Usage:
    # Show a calibration
    stereo-calib info --calib_dir calib --name zed

    # Disparity (pixels) to depth (meters)
    stereo-calib depth 12.5 30 64 --name zed

    # Depth to disparity, in meters or millimeters
    stereo-calib disparity 2.5 10 --name zed
    stereo-calib disparity 2500 --mm --name zed

    # Write a copy of the calibration for half-resolution images
    stereo-calib scale 0.5 --output_dir calib_half --name zed

Defaults for the calibration directory, camera name and log level come from
an optional YAML config (--config), section ``calibration`` and ``logging``.
"""

import argparse
import sys
from typing import List, Optional

from .calibration import CalibrationError, StereoCameraModel
from .utils.config_loader import get_nested, load_config
from .utils.logger import setup_logger


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Inspect stereo calibrations and convert depth/disparity",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML config file with calibration/logging defaults",
    )
    parser.add_argument(
        "--calib_dir",
        type=str,
        default=None,
        help="Calibration directory (default: calibration.directory from config)",
    )
    parser.add_argument(
        "--name",
        type=str,
        default=None,
        help="Stereo camera name (default: calibration.camera_name from config)",
    )
    parser.add_argument(
        "--ignore_stereo_transform",
        action="store_true",
        help="Load left/right calibration only, without the pose file",
    )
    parser.add_argument(
        "--log_level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: logging.level from config)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("info", help="Print the calibration summary")

    depth_parser = subparsers.add_parser("depth", help="Convert disparities to depths")
    depth_parser.add_argument("values", type=float, nargs="+", help="Disparities (pixels)")

    disparity_parser = subparsers.add_parser("disparity", help="Convert depths to disparities")
    disparity_parser.add_argument("values", type=float, nargs="+", help="Depths (meters)")
    disparity_parser.add_argument(
        "--mm",
        action="store_true",
        help="Depths are integer millimeters",
    )

    scale_parser = subparsers.add_parser("scale", help="Save a rescaled calibration")
    scale_parser.add_argument("factor", type=float, help="Image resize factor")
    scale_parser.add_argument(
        "--output_dir",
        type=str,
        required=True,
        help="Directory for the rescaled calibration files",
    )

    args = parser.parse_args(argv)
    if args.command == "disparity" and args.mm:
        if not all(value.is_integer() for value in args.values):
            disparity_parser.error("--mm depths must be whole millimeters")
        args.values = [int(value) for value in args.values]

    return args


def print_info(model: StereoCameraModel) -> None:
    print(f"Stereo camera: {model.name}")
    print(f"  Valid: {model.is_valid()}")
    for camera in (model.left, model.right):
        print(
            f"  {camera.name}: fx={camera.fx:.4f} fy={camera.fy:.4f} "
            f"cx={camera.cx:.4f} cy={camera.cy:.4f} size={camera.width}x{camera.height}"
        )
    print(f"  Baseline: {model.baseline():.6f} m")
    print(f"  Stereo transform: {model.stereo_transform()}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    overrides = {"calibration": {}, "logging": {}}
    if args.calib_dir is not None:
        overrides["calibration"]["directory"] = args.calib_dir
    if args.name is not None:
        overrides["calibration"]["camera_name"] = args.name
    if args.ignore_stereo_transform:
        overrides["calibration"]["ignore_stereo_transform"] = True
    if args.log_level is not None:
        overrides["logging"]["level"] = args.log_level

    config = load_config(args.config, overrides)
    logger = setup_logger(
        level=get_nested(config, "logging.level", "INFO"),
        log_file=get_nested(config, "logging.file"),
    )

    calib_dir = get_nested(config, "calibration.directory")
    name = get_nested(config, "calibration.camera_name")
    ignore = bool(get_nested(config, "calibration.ignore_stereo_transform", False))

    model = StereoCameraModel(logger=logger)
    try:
        if not model.load(calib_dir, name, ignore_stereo_transform=ignore):
            logger.error(f"Failed to load stereo calibration \"{name}\" from {calib_dir}")
            return 1

        if args.command == "info":
            print_info(model)
        elif args.command == "depth":
            for disparity in args.values:
                print(f"{disparity:g} px -> {model.compute_depth(disparity):.6f} m")
        elif args.command == "disparity":
            for depth in args.values:
                if args.mm:
                    disparity = model.compute_disparity_mm(depth)
                    print(f"{depth} mm -> {disparity:.6f} px")
                else:
                    print(f"{depth:g} m -> {model.compute_disparity(depth):.6f} px")
        elif args.command == "scale":
            scaled = model.scale(args.factor)
            if not scaled.save(args.output_dir, ignore_stereo_transform=ignore):
                logger.error(f"Failed to save scaled calibration to {args.output_dir}")
                return 1
            print(f"Saved calibration scaled by {args.factor:g} to {args.output_dir}")
    except CalibrationError as e:
        logger.error(f"{e}")
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
