"""
Monocular Camera Model Module.

This module holds the calibration of a single camera: the intrinsic
parameters (focal length, principal point), lens distortion and the
rectified projection, together with their ROS camera-info YAML format.

Mathematical Background:
========================

The camera intrinsic matrix K maps 3D points in the camera frame to pixels:

    K = | fx   0  cx |
        |  0  fy  cy |
        |  0   0   1 |

After stereo rectification each camera also has a 3x4 projection matrix:

    P = | fx'  0   cx'  Tx |
        |  0   fy' cy'  Ty |
        |  0   0    1    0 |

For the right camera of a horizontal stereo pair Tx = -fx' * baseline, which
is how the stereo baseline is recovered from the rectified calibration.

Resolution Scaling:
===================
Resizing an image by a factor s multiplies all pixel quantities by s:

    fx, fy, cx, cy -> s * fx, s * fy, s * cx, s * cy

and the first two rows of P likewise (Tx scales with fx, so Tx / fx, the
metric baseline, is unchanged). Distortion coefficients are unit-less and
stay as they are.

File Format:
============
``<directory>/<name>.yaml`` in the ROS camera_info layout:

    image_width: 640
    image_height: 480
    camera_name: stereo_left
    camera_matrix: {rows: 3, cols: 3, data: [...]}
    distortion_model: plumb_bob
    distortion_coefficients: {rows: 1, cols: 5, data: [...]}
    rectification_matrix: {rows: 3, cols: 3, data: [...]}
    projection_matrix: {rows: 3, cols: 4, data: [...]}
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np

from ..utils.logger import LoggerMixin
from ..utils.yaml_io import read_yaml, write_yaml
from .matrix_io import check_shape, decode_matrix, encode_matrix


@dataclass(eq=False)
class CameraIntrinsics(LoggerMixin):
    """
    Calibration of a single (monocular) camera.

    Attributes:
        fx: Focal length in x direction (pixels).
        fy: Focal length in y direction (pixels).
        cx: Principal point x coordinate (pixels).
        cy: Principal point y coordinate (pixels).
        width: Image width in pixels.
        height: Image height in pixels.
        name: Camera name, also the calibration file stem.
        D: Distortion coefficients (1, N), or None.
        R_rect: Rectification rotation (3x3), or None.
        P: Rectified projection matrix (3x4), or None.
        distortion_model: ROS distortion model name.

    Example:
        >>> left = CameraIntrinsics(fx=721.5, fy=721.5, cx=609.5, cy=172.8,
        ...                         width=1242, height=375, name="kitti_left")
        >>> left.save("calib")
        True
        >>> half = left.scaled(0.5)
    """

    fx: float = 0.0
    fy: float = 0.0
    cx: float = 0.0
    cy: float = 0.0
    width: int = 0
    height: int = 0
    name: str = ""
    D: Optional[np.ndarray] = None
    R_rect: Optional[np.ndarray] = None
    P: Optional[np.ndarray] = None
    distortion_model: str = "plumb_bob"

    def __post_init__(self):
        """Validate matrix shapes after initialization."""
        self.fx = float(self.fx)
        self.fy = float(self.fy)
        self.cx = float(self.cx)
        self.cy = float(self.cy)
        self.width = int(self.width)
        self.height = int(self.height)

        if self.D is not None:
            self.D = np.asarray(self.D, dtype=np.float64).reshape(1, -1)
        self.R_rect = check_shape(self.R_rect, (3, 3), "R_rect")
        self.P = check_shape(self.P, (3, 4), "P")

    @property
    def Tx(self) -> float:
        """Projection x offset (P[0, 3]), 0 without a projection matrix."""
        if self.P is None:
            return 0.0
        return float(self.P[0, 3])

    @property
    def K(self) -> np.ndarray:
        """Alias for get_K_matrix()."""
        return self.get_K_matrix()

    def get_K_matrix(self) -> np.ndarray:
        """
        Get the 3x3 camera intrinsic (calibration) matrix.

        Returns:
            np.ndarray: 3x3 intrinsic matrix K with dtype float64.
        """
        return np.array([
            [self.fx, 0, self.cx],
            [0, self.fy, self.cy],
            [0, 0, 1]
        ], dtype=np.float64)

    def get_K_inverse(self) -> np.ndarray:
        """
        Get the inverse of the intrinsic matrix.

            K^(-1) = | 1/fx    0   -cx/fx |
                     |   0   1/fy  -cy/fy |
                     |   0     0      1   |

        Returns:
            np.ndarray: 3x3 inverse intrinsic matrix.
        """
        return np.array([
            [1/self.fx, 0, -self.cx/self.fx],
            [0, 1/self.fy, -self.cy/self.fy],
            [0, 0, 1]
        ], dtype=np.float64)

    def is_valid(self) -> bool:
        """Whether the intrinsics can be used for projection."""
        return self.fx > 0 and self.fy > 0 and self.cx > 0 and self.cy > 0

    def set_name(self, name: str) -> None:
        self.name = name

    def scaled(self, scale: float) -> "CameraIntrinsics":
        """
        Get a copy of this model for images resized by ``scale``.

        Args:
            scale: Resize factor (0.5 halves the resolution).

        Returns:
            CameraIntrinsics: New instance; distortion and rectification
            are copied unchanged.
        """
        P = None
        if self.P is not None:
            P = self.P.copy()
            P[:2, :] *= scale

        model = CameraIntrinsics(
            fx=self.fx * scale,
            fy=self.fy * scale,
            cx=self.cx * scale,
            cy=self.cy * scale,
            width=int(round(self.width * scale)),
            height=int(round(self.height * scale)),
            name=self.name,
            D=None if self.D is None else self.D.copy(),
            R_rect=None if self.R_rect is None else self.R_rect.copy(),
            P=P,
            distortion_model=self.distortion_model,
        )
        model.logger = getattr(self, "_logger", None)
        return model

    def copy(self) -> "CameraIntrinsics":
        """Get an independent copy of this model."""
        return self.scaled(1.0)

    @staticmethod
    def file_path(directory: Union[str, Path], name: str) -> Path:
        return Path(directory) / f"{name}.yaml"

    def load(self, directory: Union[str, Path], name: str) -> bool:
        """
        Load calibration from ``<directory>/<name>.yaml``.

        Args:
            directory: Calibration directory.
            name: Camera name (file stem).

        Returns:
            bool: False if the file doesn't exist.

        Raises:
            MalformedCalibrationError: If a matrix block is malformed.
        """
        path = self.file_path(directory, name)
        if not path.exists():
            self.logger.warning(f"Could not load calibration file \"{path}\".")
            return False

        self.logger.info(f"Reading calibration file \"{path}\"")
        calib = read_yaml(path)

        K = decode_matrix(calib.get("camera_matrix"), "camera_matrix", (3, 3), path)
        self.fx = float(K[0, 0])
        self.fy = float(K[1, 1])
        self.cx = float(K[0, 2])
        self.cy = float(K[1, 2])
        self.width = int(calib.get("image_width", 0))
        self.height = int(calib.get("image_height", 0))
        self.name = name
        self.distortion_model = calib.get("distortion_model", "plumb_bob")

        self.D = None
        if "distortion_coefficients" in calib:
            D = decode_matrix(
                calib["distortion_coefficients"], "distortion_coefficients", path=path
            )
            self.D = D.reshape(1, -1) if D.size else None

        self.R_rect = None
        if "rectification_matrix" in calib:
            self.R_rect = decode_matrix(
                calib["rectification_matrix"], "rectification_matrix", (3, 3), path
            )

        self.P = None
        if "projection_matrix" in calib:
            self.P = decode_matrix(
                calib["projection_matrix"], "projection_matrix", (3, 4), path
            )

        return True

    def save(self, directory: Union[str, Path]) -> bool:
        """
        Save calibration to ``<directory>/<name>.yaml``.

        Returns:
            bool: False (nothing written) if the model has no name or is not
            valid.
        """
        if not self.name or not self.is_valid():
            self.logger.warning(
                f"Cannot save calibration \"{self.name}\": name and valid intrinsics required."
            )
            return False

        path = self.file_path(directory, self.name)
        self.logger.info(f"Saving calibration to file \"{path}\"")

        calib = {
            "image_width": self.width,
            "image_height": self.height,
            "camera_name": self.name,
            "camera_matrix": encode_matrix(self.K),
            "distortion_model": self.distortion_model,
        }
        if self.D is not None:
            calib["distortion_coefficients"] = encode_matrix(self.D)
        if self.R_rect is not None:
            calib["rectification_matrix"] = encode_matrix(self.R_rect)
        if self.P is not None:
            calib["projection_matrix"] = encode_matrix(self.P)

        write_yaml(calib, path)
        return True

    @classmethod
    def from_matrix(
        cls,
        K: np.ndarray,
        width: int,
        height: int,
        name: str = "",
    ) -> "CameraIntrinsics":
        """
        Create intrinsics from a 3x3 intrinsic matrix.

        Example:
            >>> K = np.array([[721.5, 0, 609.5],
            ...               [0, 721.5, 172.8],
            ...               [0, 0, 1]])
            >>> intrinsics = CameraIntrinsics.from_matrix(K, 1242, 375)
        """
        return cls(
            fx=float(K[0, 0]),
            fy=float(K[1, 1]),
            cx=float(K[0, 2]),
            cy=float(K[1, 2]),
            width=width,
            height=height,
            name=name,
        )

    @classmethod
    def from_projection_matrix(
        cls,
        P: np.ndarray,
        width: int,
        height: int,
        name: str = "",
    ) -> "CameraIntrinsics":
        """
        Create a rectified camera from its 3x4 projection matrix.

        The first 3x3 block gives the intrinsics and P itself is kept, so the
        stereo offset Tx remains available.
        """
        P = np.asarray(P, dtype=np.float64)
        return cls(
            fx=float(P[0, 0]),
            fy=float(P[1, 1]),
            cx=float(P[0, 2]),
            cy=float(P[1, 2]),
            width=width,
            height=height,
            name=name,
            P=P,
        )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"CameraIntrinsics(name={self.name!r}, fx={self.fx:.2f}, fy={self.fy:.2f}, "
            f"cx={self.cx:.2f}, cy={self.cy:.2f}, "
            f"width={self.width}, height={self.height})"
        )
