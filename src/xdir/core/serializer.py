"""
XML document rendering for xdir.

The document is built from plain string pieces so that streaming mode can
write each file element as soon as it is collected. File content goes into
CDATA sections; the two sequences a CDATA section cannot carry verbatim are
handled by closing and reopening the section around them:

- ``]]>`` is split as ``]]]]><![CDATA[>``
- ``\\r`` is emitted as the character reference ``&#13;`` between sections,
  since parsers normalize raw carriage returns inside CDATA
"""

import re
from typing import Iterable, List

from .models import FileRecord, ImportEdge

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'
ROOT_TAG = 'files'

CDATA_OPEN = '<![CDATA['
CDATA_CLOSE = ']]>'

# Anything outside the XML 1.0 Char production
_INVALID_XML_CHARS = re.compile(
    r'[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]'
)


def has_invalid_xml_chars(text: str) -> bool:
    """Check if text holds characters that no XML 1.0 document may contain."""
    return _INVALID_XML_CHARS.search(text) is not None


def escape_cdata(text: str) -> str:
    """Make text safe to place between CDATA_OPEN and CDATA_CLOSE."""
    text = text.replace(']]>', ']]]]><![CDATA[>')
    return text.replace('\r', ']]>&#13;<![CDATA[')


def escape_attr(text: str) -> str:
    """Escape special XML characters for a double-quoted attribute value."""
    if not text:
        return ""
    return (text
            .replace("&", "&amp;")
            .replace("<", "&lt;")
            .replace(">", "&gt;")
            .replace('"', "&quot;")
            .replace("\t", "&#9;")
            .replace("\n", "&#10;")
            .replace("\r", "&#13;"))


class XmlSerializer:
    """Renders FileRecords into the xdir XML document."""

    def __init__(self, indent: str = '  '):
        self.indent = indent

    def render_header(self) -> str:
        return f'{XML_HEADER}<{ROOT_TAG}>\n'

    def render_footer(self) -> str:
        return f'</{ROOT_TAG}>\n'

    def render_file(self, record: FileRecord, include_dependencies: bool = False) -> str:
        """
        Render a single file element.

        Args:
            record: The record to render.
            include_dependencies: Emit the dependency section when the
                record carries dependency info.

        Returns:
            The element text, ending with a newline.
        """
        ind = self.indent
        lines = [
            f'{ind}<file name="{escape_attr(record.path)}" size="{record.size}">',
            f'{ind * 2}<content>{CDATA_OPEN}{escape_cdata(record.content)}{CDATA_CLOSE}</content>',
        ]

        if include_dependencies and record.dependencies is not None:
            deps = record.dependencies
            if not deps.imports and not deps.imported_by:
                lines.append(f'{ind * 2}<dependencies/>')
            else:
                lines.append(f'{ind * 2}<dependencies>')
                lines.extend(self._render_edges('imports', deps.imports))
                lines.extend(self._render_edges('imported_by', deps.imported_by))
                lines.append(f'{ind * 2}</dependencies>')

        lines.append(f'{ind}</file>')
        return '\n'.join(lines) + '\n'

    def serialize(self, records: Iterable[FileRecord], include_dependencies: bool = False) -> str:
        """Render a complete document for the records, in the given order."""
        parts = [self.render_header()]
        parts.extend(self.render_file(record, include_dependencies) for record in records)
        parts.append(self.render_footer())
        return ''.join(parts)

    def _render_edges(self, tag: str, edges: List[ImportEdge]) -> List[str]:
        if not edges:
            return []
        ind = self.indent
        lines = [f'{ind * 3}<{tag}>']
        for edge in edges:
            attrs = f'path="{escape_attr(edge.path)}" type="{edge.type}"'
            if edge.location:
                attrs += f' location="{escape_attr(edge.location)}"'
            lines.append(f'{ind * 4}<import {attrs}/>')
        lines.append(f'{ind * 3}</{tag}>')
        return lines
