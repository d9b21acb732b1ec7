"""
Stereo depth/disparity conversions.

For a rectified stereo pair with baseline b (meters), left focal length fx
and principal points cx_left, cx_right (pixels):

    depth     = b * fx / (disparity + cx_right - cx_left)
    disparity = b * fx / depth - cx_right + cx_left

A zero input is a "no measurement" marker in disparity and depth images:
both directions map 0 to 0 without dividing.

The conversions require a valid stereo model (both cameras calibrated);
InvalidCalibrationError is raised otherwise. Baseline and focal length are
assumed positive and are not checked.

Functions accept scalars (returning float) or numpy arrays (element-wise),
so whole disparity or uint16 depth images convert in one call.
"""

from typing import TYPE_CHECKING, Union

import numpy as np

from .errors import InvalidCalibrationError
from .transform import RigidTransform

if TYPE_CHECKING:
    from .stereo_model import StereoCameraModel

ArrayOrScalar = Union[float, int, np.ndarray]


def _require_valid(model: "StereoCameraModel") -> None:
    if not model.is_valid():
        raise InvalidCalibrationError(
            f"Stereo model \"{model.name}\" is not valid "
            f"(left valid={model.left.is_valid()}, right valid={model.right.is_valid()})"
        )


def baseline(model: "StereoCameraModel") -> float:
    """
    Stereo baseline in meters.

    Taken from the rectified projection matrices when the right camera has
    one (Tx = -fx * baseline), otherwise from the x component of the
    translation vector. 0.0 when neither is available.
    """
    left, right = model.left, model.right
    if right.Tx != 0.0 and left.fx != 0.0 and right.fx != 0.0:
        return left.Tx / left.fx - right.Tx / right.fx
    if model.T is not None:
        return abs(float(model.T[0, 0]))
    return 0.0


def compute_depth(model: "StereoCameraModel", disparity: ArrayOrScalar):
    """
    Depth (meters) from disparity (pixels).

    Args:
        model: Valid stereo model.
        disparity: Disparity value or disparity image.

    Returns:
        Depth; 0 where disparity is 0.

    Raises:
        InvalidCalibrationError: If the model is not valid.
    """
    _require_valid(model)
    bf = baseline(model) * model.left.fx
    offset = model.right.cx - model.left.cx

    if np.ndim(disparity) == 0:
        if disparity == 0:
            return 0.0
        return float(bf / (float(disparity) + offset))

    disparity = np.asarray(disparity, dtype=np.float64)
    depth = np.zeros(disparity.shape, dtype=np.float64)
    valid = disparity != 0
    depth[valid] = bf / (disparity[valid] + offset)
    return depth


def compute_disparity(model: "StereoCameraModel", depth: ArrayOrScalar):
    """
    Disparity (pixels) from depth in meters.

    Returns:
        Disparity; 0 where depth is 0.

    Raises:
        InvalidCalibrationError: If the model is not valid.
    """
    _require_valid(model)
    bf = baseline(model) * model.left.fx
    offset = model.right.cx - model.left.cx

    # d = bf / z - offset
    if np.ndim(depth) == 0:
        if depth == 0:
            return 0.0
        return float(bf / float(depth) - offset)

    depth = np.asarray(depth, dtype=np.float64)
    disparity = np.zeros(depth.shape, dtype=np.float64)
    valid = depth != 0
    disparity[valid] = bf / depth[valid] - offset
    return disparity


def compute_disparity_mm(model: "StereoCameraModel", depth_mm: ArrayOrScalar):
    """
    Disparity (pixels) from depth in integer millimeters (e.g. uint16 images).

    Returns:
        Disparity; 0 where depth is 0.

    Raises:
        InvalidCalibrationError: If the model is not valid.
        ValueError: If a depth is not a whole number of millimeters.
    """
    _require_valid(model)
    depth_mm = np.asarray(depth_mm)
    if not np.issubdtype(depth_mm.dtype, np.integer) and np.any(depth_mm != np.round(depth_mm)):
        raise ValueError("Depth in millimeters must be integral")

    if depth_mm.ndim == 0:
        if depth_mm == 0:
            return 0.0
        return compute_disparity(model, int(depth_mm) / 1000.0)

    return compute_disparity(model, depth_mm.astype(np.float64) / 1000.0)


def stereo_transform(model: "StereoCameraModel") -> RigidTransform:
    """
    Rigid transform assembled from the model's R and T.

    Returns:
        RigidTransform with rotation R and translation T, or the null
        identity (``RigidTransform.identity()``) if either is unset.
    """
    if model.R is None or model.T is None:
        return RigidTransform.identity()

    R, T = model.R, model.T
    return RigidTransform(
        R=[[R[0, 0], R[0, 1], R[0, 2]],
           [R[1, 0], R[1, 1], R[1, 2]],
           [R[2, 0], R[2, 1], R[2, 2]]],
        t=[T[0, 0], T[1, 0], T[2, 0]],
    )
