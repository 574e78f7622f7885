"""Utility modules for xdir."""

from .file_filter import PathFilter
from .encodings import EncodingDetector
from .path_utils import PathUtils

__all__ = ["PathFilter", "EncodingDetector", "PathUtils"]
