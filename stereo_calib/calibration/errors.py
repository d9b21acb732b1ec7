"""
Calibration error types.

Missing calibration files are not errors: loaders return ``False`` (or
``None``) and log a warning. The exceptions below are reserved for the
unrecoverable cases:

    MalformedCalibrationError: a matrix block has the wrong shape, or its
        declared rows x cols disagrees with the number of data values.
    InvalidCalibrationError: a depth/disparity conversion was requested on a
        model whose left/right cameras are not valid.

Both derive from CalibrationError so callers can catch either one.
"""


class CalibrationError(Exception):
    """Base class for calibration errors."""


class MalformedCalibrationError(CalibrationError, ValueError):
    """Calibration data does not match the expected schema."""

    def __init__(self, message: str, path=None):
        self.path = path
        if path is not None:
            message = f"{message} (in {path})"
        super().__init__(message)


class InvalidCalibrationError(CalibrationError, RuntimeError):
    """Operation requires a valid stereo calibration."""
