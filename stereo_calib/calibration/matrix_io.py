"""
Matrix blocks in ROS calibration files.

Every matrix in a calibration file is stored as a nested mapping:

    rotation_matrix:
      rows: 3
      cols: 3
      data: [1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0]

with ``data`` holding rows x cols float64 values in row-major order.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

from .errors import MalformedCalibrationError


def encode_matrix(matrix: np.ndarray) -> Dict[str, Any]:
    """
    Encode a 2D array as a ``{rows, cols, data}`` block.

    Args:
        matrix: Array of shape (rows, cols). 1D arrays are treated as columns.

    Returns:
        Dictionary ready for YAML serialization (plain Python types).
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.ndim == 1:
        matrix = matrix.reshape(-1, 1)

    rows, cols = matrix.shape
    return {
        "rows": int(rows),
        "cols": int(cols),
        "data": [float(v) for v in matrix.ravel()],
    }


def decode_matrix(
    block: Dict[str, Any],
    key: str,
    shape: Optional[Tuple[int, int]] = None,
    path: Optional[Union[str, Path]] = None,
) -> np.ndarray:
    """
    Decode a ``{rows, cols, data}`` block into a float64 array.

    Args:
        block: Parsed block mapping.
        key: Block name, used in error messages.
        shape: Expected (rows, cols). None accepts any shape.
        path: Source file, used in error messages.

    Returns:
        np.ndarray: Array of shape (rows, cols).

    Raises:
        MalformedCalibrationError: If the block is incomplete, the data length
            is not rows x cols, or the shape differs from ``shape``.
    """
    if not isinstance(block, dict) or "rows" not in block or "cols" not in block:
        raise MalformedCalibrationError(f"'{key}' must contain rows and cols", path)

    rows = int(block["rows"])
    cols = int(block["cols"])
    data = block.get("data") or []

    if rows * cols != len(data):
        raise MalformedCalibrationError(
            f"'{key}' declares {rows}x{cols} but holds {len(data)} values", path
        )
    if shape is not None and (rows, cols) != tuple(shape):
        raise MalformedCalibrationError(
            f"'{key}' must be {shape[0]}x{shape[1]}, got {rows}x{cols}", path
        )

    return np.array(data, dtype=np.float64).reshape(rows, cols)


def check_shape(
    matrix: Optional[np.ndarray],
    shape: Tuple[int, int],
    name: str,
) -> Optional[np.ndarray]:
    """
    Coerce an optional matrix to float64 and verify its shape.

    ``None`` and zero-sized arrays mean "unset" and come back as None.

    Raises:
        MalformedCalibrationError: If the matrix is set with another shape.
    """
    if matrix is None:
        return None

    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.size == 0:
        return None

    # Translation vectors are often given flat
    if matrix.ndim == 1 and matrix.size == shape[0] * shape[1]:
        matrix = matrix.reshape(shape)

    if matrix.shape != tuple(shape):
        raise MalformedCalibrationError(
            f"{name} must be {shape[0]}x{shape[1]}, got {matrix.shape}"
        )
    return matrix.copy()
