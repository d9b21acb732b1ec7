"""
Rigid Body Transform Module.

A rigid body transformation consists of a rotation R (3x3 orthonormal matrix)
and translation t (3x1 vector). For a point P in frame A, its coordinates
in frame B are:

    P_B = R * P_A + t

or, as a 4x4 homogeneous matrix:

    T = | R   t |
        | 0   1 |

The inverse transformation (from B to A) is:

    T^(-1) = | R^T  -R^T * t |
             |  0       1    |

For a stereo pair, the stereo transform holds the rotation and translation
from the calibration's pose file, i.e. the pose relating the left and right
camera frames.
"""

from dataclasses import dataclass, field

import numpy as np
from scipy.spatial.transform import Rotation

from .errors import MalformedCalibrationError


@dataclass(eq=False)
class RigidTransform:
    """
    Rotation and translation between two camera frames.

    Attributes:
        R: Rotation matrix (3x3).
        t: Translation vector (3,).
        is_null: True for the identity returned when no extrinsics are set.

    Example:
        >>> R = np.eye(3)
        >>> t = np.array([-0.12, 0.0, 0.0])  # 12 cm baseline
        >>> transform = RigidTransform(R=R, t=t)
        >>> T = transform.get_transform_matrix()
    """

    R: np.ndarray = field(default_factory=lambda: np.eye(3))
    t: np.ndarray = field(default_factory=lambda: np.zeros(3))
    is_null: bool = False

    def __post_init__(self):
        """Validate inputs after initialization."""
        self.R = np.asarray(self.R, dtype=np.float64)
        self.t = np.asarray(self.t, dtype=np.float64).flatten()

        if self.R.shape != (3, 3):
            raise MalformedCalibrationError(f"R must be 3x3, got {self.R.shape}")
        if self.t.shape != (3,):
            raise MalformedCalibrationError(f"t must be (3,), got {self.t.shape}")

    @classmethod
    def identity(cls) -> "RigidTransform":
        """Identity transform, flagged as null (no extrinsics available)."""
        return cls(is_null=True)

    def is_identity(self, atol: float = 1e-12) -> bool:
        return bool(
            np.allclose(self.R, np.eye(3), atol=atol)
            and np.allclose(self.t, 0.0, atol=atol)
        )

    def get_transform_matrix(self) -> np.ndarray:
        """
        Get the 4x4 homogeneous transformation matrix.

        Returns:
            np.ndarray: 4x4 transformation matrix.

        Example:
            >>> transform = RigidTransform(R=np.eye(3), t=np.array([1, 2, 3]))
            >>> print(transform.get_transform_matrix())
            [[1. 0. 0. 1.]
             [0. 1. 0. 2.]
             [0. 0. 1. 3.]
             [0. 0. 0. 1.]]
        """
        T = np.eye(4, dtype=np.float64)
        T[:3, :3] = self.R
        T[:3, 3] = self.t
        return T

    def get_3x4_matrix(self) -> np.ndarray:
        """
        Get the 3x4 transformation matrix (without homogeneous row).

        Returns:
            np.ndarray: 3x4 matrix [R | t].
        """
        return np.hstack([self.R, self.t.reshape(3, 1)])

    def inverse(self) -> "RigidTransform":
        """
        Get the inverse transformation.

        Given: P_B = R @ P_A + t
        Solving for P_A:
            P_A = R^T @ P_B - R^T @ t

        Returns:
            RigidTransform: New instance representing the inverse transform.
        """
        R_inv = self.R.T
        t_inv = -R_inv @ self.t
        return RigidTransform(R=R_inv, t=t_inv, is_null=self.is_null)

    def transform_points(self, points: np.ndarray) -> np.ndarray:
        """
        Transform 3D points.

        Args:
            points: 3D points (N, 3) or (3,) in source frame.

        Returns:
            np.ndarray: Transformed points in target frame.
        """
        points = np.atleast_2d(points)
        transformed = points @ self.R.T + self.t
        return transformed.squeeze()

    def compose(self, other: "RigidTransform") -> "RigidTransform":
        """
        Chain transformations: applies this one first, then ``other``.

        Args:
            other: The transformation to apply after this one.

        Returns:
            RigidTransform: Combined transformation (other @ self).
        """
        R_combined = other.R @ self.R
        t_combined = other.R @ self.t + other.t
        return RigidTransform(
            R=R_combined, t=t_combined, is_null=self.is_null and other.is_null
        )

    def to_euler(self, degrees: bool = False) -> np.ndarray:
        """Roll, pitch, yaw ("xyz" extrinsic convention)."""
        return Rotation.from_matrix(self.R).as_euler("xyz", degrees=degrees)

    def rotation_vector(self) -> np.ndarray:
        """Axis-angle (Rodrigues) vector of the rotation."""
        return Rotation.from_matrix(self.R).as_rotvec()

    @classmethod
    def from_matrix(cls, T: np.ndarray) -> "RigidTransform":
        """
        Create from 4x4 or 3x4 transformation matrix.

        Args:
            T: 4x4 homogeneous or 3x4 transformation matrix.

        Returns:
            RigidTransform: Instance with extracted R and t.
        """
        T = np.asarray(T)
        if T.shape == (4, 4):
            return cls(R=T[:3, :3], t=T[:3, 3])
        elif T.shape == (3, 4):
            return cls(R=T[:, :3], t=T[:, 3])
        else:
            raise MalformedCalibrationError(f"Expected 4x4 or 3x4 matrix, got {T.shape}")

    def __repr__(self) -> str:
        if self.is_null:
            return "RigidTransform(null)"
        x, y, z = self.t
        roll, pitch, yaw = self.to_euler()
        return (
            f"RigidTransform(xyz=[{x:.4f}, {y:.4f}, {z:.4f}], "
            f"rpy=[{roll:.4f}, {pitch:.4f}, {yaw:.4f}])"
        )
