"""
File filtering utilities for xdir.

Two independent gates decide whether a walked entry ends up in the output:

- the exclusion gate drops paths with an excluded or hidden segment
  (disabled entirely in unsafe mode);
- the selection gate picks files by extension list, glob list or the
  built-in extension allow-list, in that priority order.
"""

import os
from fnmatch import fnmatchcase
from typing import Optional

from ..core.models import Config, clean_pattern
from .path_utils import PathUtils


class PathFilter:
    """Handles path exclusion and content selection."""

    def __init__(self, config: Config):
        self.config = config
        self._excluded = frozenset(config.excluded_paths)
        self._default_extensions = frozenset(config.default_extensions)

    def is_excluded(self, rel_path: str) -> bool:
        """
        Check if a path should be excluded from the walk.

        Args:
            rel_path: Path relative to the scanned root.

        Returns:
            True if any segment is an excluded name or a hidden entry,
            False otherwise or in unsafe mode.
        """
        if self.config.unsafe_mode:
            return False
        return self._exclusion_reason(rel_path) is not None

    def is_selected(self, path: str) -> bool:
        """
        Check if a file matches the content selection rules.

        Args:
            path: Path to the file (only the base name and extension are used).

        Returns:
            True if the first configured tier accepts the file.
        """
        name = os.path.basename(PathUtils.normalize_path(path).rstrip('/'))
        ext = clean_pattern(os.path.splitext(name)[1])

        if self.config.file_patterns:
            return ext in self.config.file_patterns

        if self.config.glob_patterns:
            return any(fnmatchcase(name, pattern) for pattern in self.config.glob_patterns)

        return ext in self._default_extensions

    def should_process(self, rel_path: str) -> bool:
        """Both gates must pass for a file to be collected."""
        return not self.is_excluded(rel_path) and self.is_selected(rel_path)

    def get_excluded_reason(self, rel_path: str, is_dir: bool = False) -> Optional[str]:
        """
        Get the reason why an entry would be skipped.

        Args:
            rel_path: Path relative to the scanned root.
            is_dir: Directories are only subject to the exclusion gate.

        Returns:
            Reason string if the entry would be skipped, None otherwise.
        """
        if not self.config.unsafe_mode:
            reason = self._exclusion_reason(rel_path)
            if reason:
                return reason
        if not is_dir and not self.is_selected(rel_path):
            return "No selection rule matched"
        return None

    def _exclusion_reason(self, rel_path: str) -> Optional[str]:
        for part in PathUtils.normalize_and_split(rel_path):
            if part in self._excluded:
                return f"Excluded path (matched {part})"
            if part.startswith('.') and part not in ('.', '..'):
                return f"Hidden file or directory ({part})"
        return None
