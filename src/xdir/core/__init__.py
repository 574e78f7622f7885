"""Core components for xdir."""

from .models import Config, FileRecord, DependencyInfo, ImportEdge, Stats, RecordSet, ProcessResult
from .errors import XdirError, SetupError, OutputError, CollectionError
from .tokenizer import TokenCounter
from .serializer import XmlSerializer
from .collector import ContentCollector
from .dependencies import DependencyAnalyzer

__all__ = [
    "Config",
    "FileRecord",
    "DependencyInfo",
    "ImportEdge",
    "Stats",
    "RecordSet",
    "ProcessResult",
    "XdirError",
    "SetupError",
    "OutputError",
    "CollectionError",
    "TokenCounter",
    "XmlSerializer",
    "ContentCollector",
    "DependencyAnalyzer",
]
