"""
Content collection for xdir.

This module turns a single walked file into a FileRecord:
- size check against the configured ceiling
- full read of the raw bytes
- decoding with fallbacks
- rejection of content an XML document cannot carry
"""

import os
import logging

from .errors import ContentEncodingError, FileReadError, FileTooLargeError
from .models import Config, FileRecord
from .serializer import has_invalid_xml_chars
from ..utils.encodings import EncodingDetector

logger = logging.getLogger(__name__)


class ContentCollector:
    """Reads files under the size ceiling into FileRecords."""

    def __init__(self, config: Config, encoding_detector: EncodingDetector = None):
        self.config = config
        self.encoding_detector = encoding_detector or EncodingDetector()

    def collect(self, abs_path: str, rel_path: str) -> FileRecord:
        """
        Capture a file's content.

        Args:
            abs_path: Absolute path used to open the file.
            rel_path: Root-relative path stored on the record.

        Returns:
            FileRecord with the decoded content and original byte size.

        Raises:
            FileTooLargeError: The file exceeds max_file_size.
            FileReadError: The file could not be opened or read.
            ContentEncodingError: The content cannot be embedded as text.
        """
        try:
            with open(abs_path, 'rb') as f:
                size = os.fstat(f.fileno()).st_size
                limit = self.config.max_file_size
                if limit > 0 and size > limit:
                    raise FileTooLargeError(rel_path, size, limit)
                raw_content = f.read()
        except PermissionError:
            raise FileReadError(rel_path, "Permission denied")
        except OSError as e:
            raise FileReadError(rel_path, f"Error reading file: {e}")

        content, encoding, error = self.encoding_detector.decode_bytes(raw_content, rel_path)
        if content is None:
            raise ContentEncodingError(rel_path, error)

        if has_invalid_xml_chars(content):
            raise ContentEncodingError(rel_path, "Binary content (characters not allowed in XML)")

        logger.debug(f"Collected {rel_path} ({size:,} bytes, {encoding})")
        return FileRecord(path=rel_path, size=size, content=content)
