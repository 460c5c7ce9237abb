# utils.py
# Utility functions for resource paths and the numeric clamps used across the effect.

import math
import os
import sys


def get_project_root():
    """Returns the project root (two levels above this package)."""
    current_file_dir = os.path.dirname(os.path.abspath(__file__))
    project_root = os.path.dirname(os.path.dirname(current_file_dir))
    return project_root


def resource_path(relative_path):
    """
    Get the absolute path to a resource file, compatible with both
    development environments and PyInstaller bundled executables.

    When bundled by PyInstaller, resources are extracted to a temporary folder
    referenced by sys._MEIPASS.

    Args:
        relative_path (str): The relative path to the resource
                             (e.g., 'config/rain_config.json').

    Returns:
        str: The absolute path to the resource file.
    """
    base_path = getattr(sys, "_MEIPASS", None)
    if base_path is None:
        # Development or unbundled execution
        base_path = get_project_root()

    full_path = os.path.join(base_path, relative_path)
    return os.path.normpath(full_path)


def clamp(value, low, high):
    return max(low, min(high, value))


def is_number(value):
    """True for finite int/float values. bool is rejected even though it subclasses int."""
    if isinstance(value, bool):
        return False
    if not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints too large for a float
        return False
