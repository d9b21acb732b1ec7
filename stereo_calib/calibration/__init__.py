"""
Stereo camera calibration.

This package models a calibrated stereo pair: two monocular calibrations
plus the extrinsics relating them, their YAML persistence, and the
depth/disparity conversions built on them.

Classes:
    CameraIntrinsics: Monocular calibration (focal length, principal point,
        distortion, rectified projection).
    StereoExtrinsics: Contents of a stereo pose file (R, T, E, F).
    RigidTransform: Rotation and translation between two frames.
    StereoCameraModel: Left/right models plus extrinsics.

Standalone Functions:
    load_extrinsics: Read <name>_pose.yaml.
    save_extrinsics: Write <name>_pose.yaml.
    compute_depth: Disparity (pixels) to depth (meters).
    compute_disparity: Depth (meters) to disparity (pixels).
    compute_disparity_mm: Depth (millimeters) to disparity (pixels).
    stereo_transform: Rigid transform from R and T.

Example Usage:
    >>> from stereo_calib.calibration import StereoCameraModel
    >>>
    >>> model = StereoCameraModel()
    >>> if model.load("calib", "zed"):
    ...     depth = model.compute_depth(disparity_image)
    ...     half = model.scale(0.5)
"""

from .errors import CalibrationError, InvalidCalibrationError, MalformedCalibrationError
from .intrinsics import CameraIntrinsics
from .transform import RigidTransform
from .extrinsics import StereoExtrinsics, load_extrinsics, save_extrinsics
from .stereo_model import StereoCameraModel
from .stereo_geometry import (
    baseline,
    compute_depth,
    compute_disparity,
    compute_disparity_mm,
    stereo_transform,
)

__all__ = [
    # Errors
    "CalibrationError",
    "InvalidCalibrationError",
    "MalformedCalibrationError",
    # Classes
    "CameraIntrinsics",
    "RigidTransform",
    "StereoExtrinsics",
    "StereoCameraModel",
    # Standalone functions
    "load_extrinsics",
    "save_extrinsics",
    "baseline",
    "compute_depth",
    "compute_disparity",
    "compute_disparity_mm",
    "stereo_transform",
]
