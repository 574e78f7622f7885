"""
Encoding detection and handling utilities.

Captured files are embedded in a UTF-8 XML document, so raw bytes have to
become text first. Plain UTF-8 is always tried first: valid UTF-8 files
(including ones starting with a UTF-8 BOM) then survive the trip into the
document byte for byte.
"""

import logging
from typing import List, Optional, Tuple


# Encodings to try, ordered by likelihood
DEFAULT_ENCODINGS = [
    'utf-8',
    'cp1252',     # Windows-1252
    'latin-1',
]

# Wide encodings are only trusted when announced by a BOM
WIDE_BOMS = [
    (b'\xff\xfe\x00\x00', 'utf-32'),
    (b'\x00\x00\xfe\xff', 'utf-32'),
    (b'\xff\xfe', 'utf-16'),
    (b'\xfe\xff', 'utf-16'),
]

# Set up module logger
logger = logging.getLogger(__name__)


class EncodingDetector:
    """Handles encoding detection and text decoding."""

    def __init__(self, fallback_encodings: Optional[List[str]] = None):
        """
        Initialize the encoding detector.

        Args:
            fallback_encodings: List of encodings to try. If None, uses defaults.
        """
        self.encodings = fallback_encodings or DEFAULT_ENCODINGS

    def decode_bytes(self, content: bytes, file_path: Optional[str] = None) -> Tuple[Optional[str], Optional[str], Optional[str]]:
        """
        Attempt to decode bytes to string using multiple encodings.

        Args:
            content: Raw bytes to decode.
            file_path: Optional file path for better error messages.

        Returns:
            Tuple of (decoded_text, encoding_used, error_message).
            If successful: (text, encoding, None)
            If failed: (None, None, error_message)
        """
        bom_encoding = self.wide_bom_encoding(content)
        if bom_encoding:
            try:
                decoded = content.decode(bom_encoding)
                logger.debug(f"Decoded {file_path} using BOM-detected {bom_encoding}")
                return decoded, bom_encoding, None
            except UnicodeDecodeError as e:
                logger.debug(f"BOM decode failed for {file_path}: {e}")

        last_error = None
        for encoding in self.encodings:
            try:
                decoded = content.decode(encoding)
                if encoding != 'utf-8':
                    logger.debug(f"Decoded {file_path} using fallback {encoding}")
                return decoded, encoding, None
            except UnicodeDecodeError as e:
                last_error = e
                continue

        error_msg = f"Unable to decode file with available encodings ({', '.join(self.encodings)})"
        if last_error is not None:
            error_msg += f" - failed at byte {last_error.start}"

        logger.info(f"Encoding detection failed for {file_path}: tried {len(self.encodings)} encodings")
        return None, None, error_msg

    @staticmethod
    def wide_bom_encoding(content: bytes) -> Optional[str]:
        """
        Return the UTF-16/UTF-32 encoding announced by a leading BOM, if any.

        Args:
            content: Raw bytes to check.
        """
        for bom, encoding in WIDE_BOMS:
            if content.startswith(bom):
                return encoding
        return None
