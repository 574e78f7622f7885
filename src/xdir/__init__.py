"""xdir - directory to XML converter for AI context."""

__version__ = "0.2.0"

from .core.models import Config, FileRecord, DependencyInfo, ImportEdge, Stats, ProcessResult
from .core.processor import DirectoryProcessor, process_directory

__all__ = [
    "Config",
    "FileRecord",
    "DependencyInfo",
    "ImportEdge",
    "Stats",
    "ProcessResult",
    "DirectoryProcessor",
    "process_directory",
]
