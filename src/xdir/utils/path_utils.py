"""Path normalization utilities for cross-platform compatibility."""

import os
import posixpath
from typing import List, Optional


class PathUtils:
    """Utilities for consistent path handling across platforms."""

    @staticmethod
    def normalize_path(path: str) -> str:
        """
        Normalize path separators to forward slashes.

        Args:
            path: File path with potentially mixed separators

        Returns:
            Path with forward slashes only
        """
        return path.replace('\\\\', '/').replace('\\', '/')

    @staticmethod
    def normalize_and_split(path: str) -> List[str]:
        """
        Normalize path and split into non-empty components.

        Args:
            path: File path to split

        Returns:
            List of path components
        """
        return [part for part in PathUtils.normalize_path(path).split('/') if part]

    @staticmethod
    def relative_to(path: str, root: str) -> str:
        """
        Express an absolute path relative to root, with forward slashes.

        Raises:
            ValueError: If the path cannot be made relative (different drive).
        """
        return PathUtils.normalize_path(os.path.relpath(path, root))

    @staticmethod
    def join_under_root(raw_path: str) -> Optional[str]:
        """
        Join a raw import path onto the root and return it root-relative.

        Returns None when the result escapes the root.
        """
        joined = posixpath.normpath(posixpath.join('.', PathUtils.normalize_path(raw_path)))
        if joined == '.' or joined == '..' or joined.startswith('../') or joined.startswith('/'):
            return None
        return joined
