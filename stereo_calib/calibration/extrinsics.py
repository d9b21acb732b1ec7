"""
Stereo Extrinsic Calibration Module.

This module reads and writes the extrinsic calibration of a stereo pair,
stored next to the two monocular calibration files as
``<directory>/<name>_pose.yaml``.

Epipolar Geometry:
==================

The extrinsics relate the two camera frames with a rotation R (3x3) and a
translation T (3x1). Two derived matrices describe the same relation:

    Essential matrix (normalized coordinates):
        E = [T]x R

    Fundamental matrix (pixel coordinates):
        F = K_right^(-T) E K_left^(-1)

where [T]x is the skew-symmetric cross product matrix of T.

File Format (ROS stereo calibration layout):
============================================

    camera_name: stereo
    rotation_matrix:
      rows: 3
      cols: 3
      data: [9 values, row-major]
    translation_matrix:
      rows: 3
      cols: 1
      data: [3 values]
    essential_matrix:
      rows: 3
      cols: 3
      data: [9 values]
    fundamental_matrix:
      rows: 3
      cols: 3
      data: [9 values]

rotation_matrix and translation_matrix are required; essential_matrix and
fundamental_matrix may be omitted. A missing required block, or a block whose
shape is not the one above, makes the whole file malformed:
MalformedCalibrationError is raised rather than returning a partial result.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import numpy as np

from ..utils.logger import get_logger
from ..utils.yaml_io import read_yaml, write_yaml
from .errors import MalformedCalibrationError
from .matrix_io import check_shape, decode_matrix, encode_matrix

POSE_FILE_SUFFIX = "_pose.yaml"

# File block name -> (StereoExtrinsics field, expected shape)
EXTRINSIC_BLOCKS: Dict[str, Tuple[str, Tuple[int, int]]] = {
    "rotation_matrix": ("R", (3, 3)),
    "translation_matrix": ("T", (3, 1)),
    "essential_matrix": ("E", (3, 3)),
    "fundamental_matrix": ("F", (3, 3)),
}
REQUIRED_BLOCKS = ("rotation_matrix", "translation_matrix")


@dataclass(eq=False)
class StereoExtrinsics:
    """
    Contents of a stereo pose file.

    Attributes:
        camera_name: Stereo camera name stored in the file.
        R: Rotation matrix (3x3), or None.
        T: Translation vector (3x1), or None.
        E: Essential matrix (3x3), or None.
        F: Fundamental matrix (3x3), or None.
    """

    camera_name: str = ""
    R: Optional[np.ndarray] = None
    T: Optional[np.ndarray] = None
    E: Optional[np.ndarray] = None
    F: Optional[np.ndarray] = None

    def __post_init__(self):
        """Validate matrix shapes after initialization."""
        self.camera_name = "" if self.camera_name is None else str(self.camera_name)
        for field_name, shape in EXTRINSIC_BLOCKS.values():
            setattr(self, field_name, check_shape(getattr(self, field_name), shape, field_name))


def pose_file_path(directory: Union[str, Path], name: str) -> Path:
    """Path of the pose file for stereo camera ``name``."""
    return Path(directory) / f"{name}{POSE_FILE_SUFFIX}"


def skew(v: np.ndarray) -> np.ndarray:
    """
    Cross product matrix [v]x, such that [v]x @ w == cross(v, w).
    """
    x, y, z = np.asarray(v, dtype=np.float64).flatten()
    return np.array([
        [0, -z, y],
        [z, 0, -x],
        [-y, x, 0]
    ], dtype=np.float64)


def compute_essential(R: np.ndarray, T: np.ndarray) -> np.ndarray:
    """Essential matrix E = [T]x R."""
    return skew(T) @ np.asarray(R, dtype=np.float64)


def compute_fundamental(
    E: np.ndarray,
    K_left: np.ndarray,
    K_right: np.ndarray,
) -> np.ndarray:
    """Fundamental matrix F = K_right^(-T) E K_left^(-1)."""
    return np.linalg.inv(K_right).T @ E @ np.linalg.inv(K_left)


def load_extrinsics(
    directory: Union[str, Path],
    name: str,
    logger: Optional[logging.Logger] = None,
) -> Optional[StereoExtrinsics]:
    """
    Load the stereo pose file ``<directory>/<name>_pose.yaml``.

    Args:
        directory: Calibration directory.
        name: Stereo camera name.
        logger: Diagnostic sink (package logger if None).

    Returns:
        StereoExtrinsics, or None if the file does not exist. Missing E or F
        blocks decode to None.

    Raises:
        MalformedCalibrationError: If the rotation or translation block is
            missing, a block's data length isn't rows x cols, or its shape
            differs from the expected one.
    """
    logger = logger or get_logger(__name__)
    path = pose_file_path(directory, name)
    if not path.exists():
        return None

    logger.info(f"Reading stereo calibration file \"{path}\"")
    calib = read_yaml(path)

    matrices = {}
    for key, (field_name, shape) in EXTRINSIC_BLOCKS.items():
        matrices[field_name] = None
        if key in calib:
            matrices[field_name] = decode_matrix(calib[key], key, shape, path)
        elif key in REQUIRED_BLOCKS:
            raise MalformedCalibrationError(f"Missing \"{key}\" block", path)

    return StereoExtrinsics(camera_name=calib.get("camera_name", ""), **matrices)


def save_extrinsics(
    directory: Union[str, Path],
    name: str,
    extrinsics: StereoExtrinsics,
    logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Save the stereo pose file ``<directory>/<name>_pose.yaml``.

    ``camera_name`` in the file is ``name``. E and F are written only when
    set.

    Args:
        directory: Calibration directory.
        name: Stereo camera name.
        extrinsics: Extrinsics to write.
        logger: Diagnostic sink (package logger if None).

    Returns:
        bool: False (nothing written) if name, R or T is empty.
    """
    logger = logger or get_logger(__name__)
    if not name or extrinsics.R is None or extrinsics.T is None:
        return False

    path = pose_file_path(directory, name)
    logger.info(f"Saving stereo calibration to file \"{path}\"")

    calib = {"camera_name": name}
    for key, (field_name, _) in EXTRINSIC_BLOCKS.items():
        matrix = getattr(extrinsics, field_name)
        if matrix is not None:
            calib[key] = encode_matrix(matrix)

    write_yaml(calib, path)
    return True
