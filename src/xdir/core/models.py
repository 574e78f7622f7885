"""
Core data models for xdir.

This module contains the fundamental data structures used throughout
the pipeline for configuration, captured files, dependency edges and
processing statistics.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Literal, Optional, Tuple

from dotenv import load_dotenv

from .errors import DuplicateRecordError

# Load environment variables from .env file
load_dotenv()

ImportType = Literal['local', 'external', 'standard']

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB


def clean_pattern(pattern: str) -> str:
    """Normalize an extension pattern: trimmed, lower-case, leading dot."""
    pattern = pattern.strip().lower()
    if not pattern.startswith('.'):
        pattern = '.' + pattern
    return pattern


def _max_file_size_from_env() -> int:
    value = os.getenv('XDIR_MAX_FILE_SIZE', '')
    try:
        return int(value) if value else DEFAULT_MAX_FILE_SIZE
    except ValueError:
        return DEFAULT_MAX_FILE_SIZE


@dataclass(frozen=True)
class Config:
    """Run parameters for a single pipeline invocation."""

    target_dir: str = '.'
    output_file: str = 'output.xml'
    max_file_size: int = field(default_factory=_max_file_size_from_env)  # 0 = unlimited

    # Content selection
    file_patterns: Tuple[str, ...] = ()
    glob_patterns: Tuple[str, ...] = ()

    unsafe_mode: bool = False
    compress: bool = False
    want_dependency_graph: bool = False
    want_token_count: bool = False

    # Path segments that are never walked (unless unsafe_mode)
    excluded_paths: Tuple[str, ...] = ('node_modules', '.git', '.env', '.DS_Store')

    # Fallback allow-list when no patterns are configured
    default_extensions: Tuple[str, ...] = (
        '.c', '.cpp', '.css', '.go', '.h', '.hpp', '.html', '.java', '.js',
        '.json', '.jsx', '.md', '.mdx', '.php', '.py', '.rb', '.rs', '.sql',
        '.swift', '.ts', '.tsx', '.txt', '.xml', '.yaml', '.yml',
    )

    go_module: Optional[str] = None
    show_progress: bool = False

    def __post_init__(self):
        # Frozen dataclass: normalize through object.__setattr__
        patterns = tuple(
            p for p in (clean_pattern(raw) for raw in self.file_patterns) if p != '.'
        )
        globs = tuple(g.strip() for g in self.glob_patterns if g.strip())
        object.__setattr__(self, 'file_patterns', patterns)
        object.__setattr__(self, 'glob_patterns', globs)
        object.__setattr__(self, 'excluded_paths', tuple(self.excluded_paths))
        object.__setattr__(
            self, 'default_extensions',
            tuple(clean_pattern(ext) for ext in self.default_extensions)
        )

    @property
    def needs_full_document(self) -> bool:
        """Dependency linking and token naming both need every record before writing."""
        return self.want_dependency_graph or self.want_token_count


@dataclass
class ImportEdge:
    """A single import relationship as written in source."""

    path: str
    type: ImportType
    location: Optional[str] = None


@dataclass
class DependencyInfo:
    """Outbound imports and derived inbound (imported-by) edges of a file."""

    imports: List[ImportEdge] = field(default_factory=list)
    imported_by: List[ImportEdge] = field(default_factory=list)

    def reset_imported_by(self) -> None:
        self.imported_by = []

    def local_imports(self) -> List[ImportEdge]:
        return [edge for edge in self.imports if edge.type == 'local']


@dataclass
class FileRecord:
    """A captured file: root-relative path, byte size and decoded content."""

    path: str
    size: int
    content: str
    dependencies: Optional[DependencyInfo] = None

    @property
    def extension(self) -> str:
        return os.path.splitext(self.path)[1].lower()


@dataclass
class Stats:
    """Processing counters. Only ever incremented."""

    files_processed: int = 0
    bytes_processed: int = 0
    tokens: int = 0
    errors: int = 0

    def record_file(self, size: int) -> None:
        self.files_processed += 1
        self.bytes_processed += size

    def record_error(self) -> None:
        self.errors += 1

    def add_tokens(self, count: int) -> None:
        self.tokens += count

    @property
    def megabytes_processed(self) -> float:
        """Bytes processed, in MiB."""
        return self.bytes_processed / (1024 * 1024)


class RecordSet:
    """
    Ordered collection of FileRecords keyed by path.

    Keeps insertion order in a list and a path -> index map for
    constant-time lookups during dependency linking.
    """

    def __init__(self):
        self._records: List[FileRecord] = []
        self._index: Dict[str, int] = {}

    def add(self, record: FileRecord) -> None:
        """
        Register a record.

        Raises:
            DuplicateRecordError: If a record with the same path exists.
        """
        if record.path in self._index:
            raise DuplicateRecordError(record.path)
        self._index[record.path] = len(self._records)
        self._records.append(record)

    def get(self, path: str) -> Optional[FileRecord]:
        index = self._index.get(path)
        if index is None:
            return None
        return self._records[index]

    def sorted(self) -> List[FileRecord]:
        """Records ordered by path, the order used for linking and output."""
        return sorted(self._records, key=lambda r: r.path)

    def __contains__(self, path: object) -> bool:
        return path in self._index

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)


@dataclass
class ProcessResult:
    """Result of a pipeline run."""

    stats: Stats
    output_path: str
    file_paths: List[str] = field(default_factory=list)  # Emitted order
    errors: List[str] = field(default_factory=list)

    def has_errors(self) -> bool:
        """Check if any per-entry errors occurred."""
        return len(self.errors) > 0

    def get_error_summary(self) -> str:
        """Get a summary of all errors."""
        if not self.errors:
            return "No errors encountered."
        return f"{len(self.errors)} errors encountered:\n" + "\n".join(f"- {e}" for e in self.errors)
