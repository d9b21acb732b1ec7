"""YAML file helpers shared by the calibration readers and writers."""

from pathlib import Path
from typing import Any, Dict, Union

import yaml

# OpenCV FileStorage writes "%YAML:1.0", which is not a valid YAML directive.
OPENCV_YAML_HEADER = "%YAML:1.0"


def read_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a YAML mapping from file.

    Files produced by OpenCV's FileStorage are accepted: the leading
    ``%YAML:1.0`` line is dropped before parsing.

    Args:
        path: File path.

    Returns:
        Parsed mapping (empty dict for an empty file).

    Raises:
        FileNotFoundError: If the file doesn't exist.
    """
    path = Path(path)

    with open(path, "r") as f:
        text = f.read()

    if text.startswith(OPENCV_YAML_HEADER):
        text = text[len(OPENCV_YAML_HEADER):]

    data = yaml.safe_load(text)
    return data if data is not None else {}


def write_yaml(data: Dict[str, Any], path: Union[str, Path]) -> None:
    """
    Write a mapping to a YAML file, keeping key order.

    Args:
        data: Mapping to write.
        path: Output file path. Parent directories are created.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.safe_dump(data, f, default_flow_style=None, sort_keys=False)
