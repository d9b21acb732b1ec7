"""
Stereo Camera Model Module.

A calibrated stereo pair: two monocular models (left and right) plus the
extrinsics relating them (R, T, E, F).

Files for a stereo camera named ``X`` in directory ``D``:

    D/X_left.yaml    left camera (ROS camera_info layout)
    D/X_right.yaml   right camera
    D/X_pose.yaml    extrinsics (see extrinsics.py)

Loading or saving returns False when a file is missing and logs a warning;
malformed files raise MalformedCalibrationError. Depth/disparity conversions
are in stereo_geometry.py and are also available as methods here.

Not thread-safe: serialize load/save/scale calls on the same instance.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np

from ..utils.logger import LoggerMixin
from . import stereo_geometry
from .extrinsics import (
    StereoExtrinsics,
    compute_essential,
    compute_fundamental,
    load_extrinsics,
    pose_file_path,
    save_extrinsics,
)
from .intrinsics import CameraIntrinsics
from .matrix_io import check_shape
from .transform import RigidTransform

LEFT_SUFFIX = "_left"
RIGHT_SUFFIX = "_right"


class StereoCameraModel(LoggerMixin):
    """
    Calibration of a stereo camera pair.

    Attributes:
        name: Stereo camera name. Sub-models are named name_left/name_right.
        left: Left camera model.
        right: Right camera model.
        R: Rotation matrix (3x3), or None.
        T: Translation vector (3x1), or None.
        E: Essential matrix (3x3), or None.
        F: Fundamental matrix (3x3), or None.

    Example:
        >>> model = StereoCameraModel()
        >>> if model.load("calib", "zed"):
        ...     depth = model.compute_depth(42.0)
    """

    def __init__(
        self,
        name: str = "",
        left: Optional[CameraIntrinsics] = None,
        right: Optional[CameraIntrinsics] = None,
        R: Optional[np.ndarray] = None,
        T: Optional[np.ndarray] = None,
        E: Optional[np.ndarray] = None,
        F: Optional[np.ndarray] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize stereo model.

        Args:
            name: Stereo camera name; renames left/right when not empty.
            left: Left camera model, copied (empty model if None).
            right: Right camera model, copied (empty model if None).
            R: Rotation matrix (3x3).
            T: Translation vector (3x1 or (3,)).
            E: Essential matrix (3x3).
            F: Fundamental matrix (3x3).
            logger: Diagnostic sink, shared with the sub-models.

        Raises:
            MalformedCalibrationError: If a matrix has the wrong shape.
        """
        # Sub-models are owned; set_name and logger injection mutate them
        self.left = left.copy() if left is not None else CameraIntrinsics()
        self.right = right.copy() if right is not None else CameraIntrinsics()
        self.R = R
        self.T = T
        self.E = E
        self.F = F

        self.name = ""
        if name:
            self.set_name(name)

        if logger is not None:
            self.logger = logger
            self.left.logger = logger
            self.right.logger = logger

    # Matrix fields keep the shape invariant on every assignment

    @property
    def R(self) -> Optional[np.ndarray]:
        return self._R

    @R.setter
    def R(self, value: Optional[np.ndarray]) -> None:
        self._R = check_shape(value, (3, 3), "R")

    @property
    def T(self) -> Optional[np.ndarray]:
        return self._T

    @T.setter
    def T(self, value: Optional[np.ndarray]) -> None:
        self._T = check_shape(value, (3, 1), "T")

    @property
    def E(self) -> Optional[np.ndarray]:
        return self._E

    @E.setter
    def E(self, value: Optional[np.ndarray]) -> None:
        self._E = check_shape(value, (3, 3), "E")

    @property
    def F(self) -> Optional[np.ndarray]:
        return self._F

    @F.setter
    def F(self, value: Optional[np.ndarray]) -> None:
        self._F = check_shape(value, (3, 3), "F")

    @property
    def extrinsics(self) -> StereoExtrinsics:
        """Extrinsics as a pose file record."""
        return StereoExtrinsics(
            camera_name=self.name, R=self.R, T=self.T, E=self.E, F=self.F
        )

    def set_name(self, name: str) -> None:
        """Set the name and rename the sub-models name_left/name_right."""
        self.name = name
        self.left.set_name(name + LEFT_SUFFIX)
        self.right.set_name(name + RIGHT_SUFFIX)

    def is_valid(self) -> bool:
        """Whether both cameras are calibrated (extrinsics not required)."""
        return self.left.is_valid() and self.right.is_valid()

    def is_valid_for_rectification(self) -> bool:
        return self.is_valid() and self.R is not None and self.T is not None

    def load(
        self,
        directory: Union[str, Path],
        name: str,
        ignore_stereo_transform: bool = False,
    ) -> bool:
        """
        Load left, right and (unless ignored) extrinsic calibration.

        Args:
            directory: Calibration directory.
            name: Stereo camera name.
            ignore_stereo_transform: Skip the pose file.

        Returns:
            bool: False if a camera file is missing, or if the pose file is
            missing and not ignored. The sub-models may be loaded even then.

        Raises:
            MalformedCalibrationError: If a file is malformed.
        """
        self.name = name
        if not (
            self.left.load(directory, name + LEFT_SUFFIX)
            and self.right.load(directory, name + RIGHT_SUFFIX)
        ):
            return False

        if ignore_stereo_transform:
            return True

        self.R = None
        self.T = None

        extrinsics = load_extrinsics(directory, name, logger=self.logger)
        if extrinsics is None:
            self.logger.warning(
                f"Could not load stereo calibration file \"{pose_file_path(directory, name)}\"."
            )
            return False

        if extrinsics.camera_name and extrinsics.camera_name != name:
            self.logger.warning(
                f"Stereo calibration file names camera \"{extrinsics.camera_name}\", "
                f"expected \"{name}\"; keeping \"{name}\"."
            )

        self.R = extrinsics.R
        self.T = extrinsics.T
        self.E = extrinsics.E
        self.F = extrinsics.F
        return True

    def save(
        self,
        directory: Union[str, Path],
        ignore_stereo_transform: bool = False,
    ) -> bool:
        """
        Save left, right and (unless ignored) extrinsic calibration.

        Returns:
            bool: False if a camera could not be saved, or if the extrinsics
            are not ignored and name, R or T is empty.
        """
        if not (self.left.save(directory) and self.right.save(directory)):
            return False

        if ignore_stereo_transform:
            return True

        if not save_extrinsics(directory, self.name, self.extrinsics, logger=self.logger):
            self.logger.warning(
                f"Cannot save stereo calibration \"{self.name}\": name, R and T are required."
            )
            return False
        return True

    def scale(self, scale: float) -> "StereoCameraModel":
        """
        Get a copy of this model for images resized by ``scale``.

        Only the intrinsics change. R, T, E and F are metric and are copied
        unchanged.

        Args:
            scale: Resize factor.

        Returns:
            StereoCameraModel: New instance.
        """
        model = StereoCameraModel(
            left=self.left.scaled(scale),
            right=self.right.scaled(scale),
            R=self.R,
            T=self.T,
            E=self.E,
            F=self.F,
            logger=getattr(self, "_logger", None),
        )
        model.name = self.name
        return model

    def update_epipolar(self) -> bool:
        """
        Recompute E and F from R, T and the camera matrices.

        Returns:
            bool: False (nothing changed) if R/T are unset or the model is
            not valid.
        """
        if not self.is_valid_for_rectification():
            return False

        self.E = compute_essential(self.R, self.T)
        self.F = compute_fundamental(self.E, self.left.K, self.right.K)
        return True

    @classmethod
    def from_rectified(
        cls,
        fx: float,
        fy: float,
        cx: float,
        cy: float,
        baseline: float,
        width: int = 0,
        height: int = 0,
        name: str = "",
    ) -> "StereoCameraModel":
        """
        Create an already rectified pair sharing one set of intrinsics.

        The right camera's projection holds Tx = -fx * baseline, R is the
        identity and T = [-baseline, 0, 0].

        Args:
            fx, fy, cx, cy: Rectified intrinsics (pixels).
            baseline: Distance between optical centers (meters).
            width, height: Image size.
            name: Stereo camera name.
        """
        P_left = np.array([
            [fx, 0, cx, 0],
            [0, fy, cy, 0],
            [0, 0, 1, 0]
        ], dtype=np.float64)
        P_right = P_left.copy()
        P_right[0, 3] = -fx * baseline

        left = CameraIntrinsics.from_projection_matrix(P_left, width, height)
        right = CameraIntrinsics.from_projection_matrix(P_right, width, height)

        model = cls(
            name=name,
            left=left,
            right=right,
            R=np.eye(3),
            T=np.array([[-baseline], [0.0], [0.0]]),
        )
        model.update_epipolar()
        return model

    # Geometry

    def baseline(self) -> float:
        return stereo_geometry.baseline(self)

    def compute_depth(self, disparity):
        """See stereo_geometry.compute_depth."""
        return stereo_geometry.compute_depth(self, disparity)

    def compute_disparity(self, depth):
        """See stereo_geometry.compute_disparity (depth in meters)."""
        return stereo_geometry.compute_disparity(self, depth)

    def compute_disparity_mm(self, depth_mm):
        """See stereo_geometry.compute_disparity_mm (depth in millimeters)."""
        return stereo_geometry.compute_disparity_mm(self, depth_mm)

    def stereo_transform(self) -> RigidTransform:
        return stereo_geometry.stereo_transform(self)

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"StereoCameraModel(name={self.name!r}, "
            f"left={'valid' if self.left.is_valid() else 'invalid'}, "
            f"right={'valid' if self.right.is_valid() else 'invalid'}, "
            f"R={'set' if self.R is not None else 'None'}, "
            f"T={'set' if self.T is not None else 'None'})"
        )
