"""Exception hierarchy for xdir.

Setup errors abort a run. Collection errors are per-entry: the processor
counts them and moves on to the next file.
"""


class XdirError(Exception):
    """Base class for all xdir errors."""


class SetupError(XdirError):
    """The root directory could not be resolved."""


class OutputError(XdirError):
    """The output destination could not be opened, written or renamed."""


class CollectionError(XdirError):
    """A single file could not be captured."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class FileTooLargeError(CollectionError):
    def __init__(self, path: str, size: int, limit: int):
        super().__init__(path, f"File too large ({size:,} bytes, limit {limit:,})")
        self.size = size
        self.limit = limit


class FileReadError(CollectionError):
    pass


class ContentEncodingError(CollectionError):
    pass


class DuplicateRecordError(XdirError):
    """Two walked entries mapped to the same relative path."""

    def __init__(self, path: str):
        super().__init__(f"Duplicate record path: {path}")
        self.path = path
