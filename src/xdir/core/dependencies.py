"""
Dependency analysis for xdir.

Import relationships are extracted with line-based heuristics, not a
parser, so partial or malformed sources never stop the pipeline. Analysis
runs in two phases over the complete record set:

1. Extraction: each record's imports are classified as local, external or
   standard according to the rules of its language family.
2. Linking: every local import that resolves to another registered record
   adds a reciprocal imported-by edge on the target.
"""

import os
import re
import logging
from typing import Callable, Dict, List, Optional

from .models import Config, DependencyInfo, FileRecord, ImportEdge, ImportType, RecordSet
from ..utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

# Go
GO_SINGLE_IMPORT = re.compile(r'^\s*import\s+(?:[\w.]+\s+)?"([^"]+)"')
GO_BLOCK_START = re.compile(r'^\s*import\s*\((.*)$')
GO_BLOCK_ENTRY = re.compile(r'(?:^|;)\s*(?:[\w.]+\s+)?"([^"]+)"')
GO_MODULE_LINE = re.compile(r'^\s*module\s+(\S+)')

# JavaScript / TypeScript
JS_IMPORT_PATTERNS = [
    re.compile(r'import\s+.*\s+from\s+[\'"]([^\'"]+)[\'"]'),
    re.compile(r'require\(\s*[\'"]([^\'"]+)[\'"]\s*\)'),
    re.compile(r'import\s+[\'"]([^\'"]+)[\'"]'),
    re.compile(r'import\(\s*[\'"]([^\'"]+)[\'"]\s*\)'),
    re.compile(r'export\s+.*\s+from\s+[\'"]([^\'"]+)[\'"]'),
    # Closing line of a multi-line import/export clause
    re.compile(r'^\s*\}\s*from\s+[\'"]([^\'"]+)[\'"]'),
]

# Python
PY_IMPORT_PATTERNS = [
    re.compile(r'^import\s+(\w+)'),
    re.compile(r'^from\s+(\S+)\s+import'),
]

GO_EXTENSIONS = {'.go'}
JS_EXTENSIONS = {'.js', '.jsx', '.ts', '.tsx', '.mjs', '.cjs'}
PY_EXTENSIONS = {'.py'}


class DependencyAnalyzer:
    """Extracts imports per record and links them into imported-by edges."""

    def __init__(self, config: Config, root_dir: str):
        self.config = config
        self.root_dir = root_dir
        self.go_module = config.go_module or self._detect_go_module()

        self._extractors: Dict[str, Callable[[FileRecord], List[ImportEdge]]] = {}
        for ext in GO_EXTENSIONS:
            self._extractors[ext] = self._extract_go
        for ext in JS_EXTENSIONS:
            self._extractors[ext] = self._extract_js
        for ext in PY_EXTENSIONS:
            self._extractors[ext] = self._extract_python

    def analyze_all(self, records: RecordSet) -> List[str]:
        """
        Run extraction over every record, then link.

        Args:
            records: The complete set of registered records.

        Returns:
            Error messages for records whose extraction failed. Those records
            are left without dependency info; the rest are still linked.
        """
        errors = []
        for record in records.sorted():
            try:
                self.extract(record)
            except Exception as e:
                logger.warning(f"Dependency extraction failed for {record.path}: {e}")
                errors.append(f"{record.path}: dependency extraction failed ({e})")

        self.link(records)
        return errors

    def extract(self, record: FileRecord) -> Optional[DependencyInfo]:
        """
        Extract imports for a single record and attach them.

        Records of unsupported file types are left untouched.
        """
        extractor = self._extractors.get(record.extension)
        if extractor is None:
            return None

        record.dependencies = DependencyInfo(imports=extractor(record))
        logger.debug(f"{record.path}: {len(record.dependencies.imports)} imports")
        return record.dependencies

    def link(self, records: RecordSet) -> None:
        """Build imported-by edges from resolved local imports."""
        for record in records:
            if record.dependencies is not None:
                record.dependencies.reset_imported_by()

        for record in records.sorted():
            if record.dependencies is None:
                continue

            for edge in record.dependencies.local_imports():
                target = self.resolve(edge, records)
                if target is None:
                    continue
                edge.location = target.path
                if target.dependencies is None:
                    target.dependencies = DependencyInfo()
                target.dependencies.imported_by.append(
                    ImportEdge(path=record.path, type='local')
                )

    def resolve(self, edge: ImportEdge, records: RecordSet) -> Optional[FileRecord]:
        """Join the root with the import path and look it up by exact path."""
        candidate = PathUtils.join_under_root(edge.path)
        if candidate is None:
            return None
        return records.get(candidate)

    def _extract_go(self, record: FileRecord) -> List[ImportEdge]:
        edges = []
        in_block = False

        for line in record.content.splitlines():
            if in_block:
                body, closed = self._split_block_end(line)
                edges.extend(self._go_edge(path) for path in GO_BLOCK_ENTRY.findall(body))
                in_block = not closed
                continue

            block = GO_BLOCK_START.match(line)
            if block:
                body, closed = self._split_block_end(block.group(1))
                edges.extend(self._go_edge(path) for path in GO_BLOCK_ENTRY.findall(body))
                in_block = not closed
                continue

            single = GO_SINGLE_IMPORT.match(line)
            if single:
                edges.append(self._go_edge(single.group(1)))

        return edges

    @staticmethod
    def _split_block_end(text: str):
        # Comments may hold a stray ')', only code counts
        code = text.split('//', 1)[0]
        if ')' in code:
            return code.split(')', 1)[0], True
        return code, False

    def _go_edge(self, import_path: str) -> ImportEdge:
        return ImportEdge(path=import_path, type=self.classify_go(import_path))

    def classify_go(self, import_path: str) -> ImportType:
        root_prefix = self.config.target_dir
        if root_prefix and import_path.startswith(root_prefix):
            return 'local'
        if self.go_module and (
            import_path == self.go_module or import_path.startswith(self.go_module + '/')
        ):
            return 'local'
        if '.' in import_path or '/' in import_path:
            return 'external'
        return 'standard'

    def _extract_js(self, record: FileRecord) -> List[ImportEdge]:
        edges = []
        for line in record.content.splitlines():
            for pattern in JS_IMPORT_PATTERNS:
                for match in pattern.finditer(line):
                    import_path = match.group(1)
                    edges.append(ImportEdge(path=import_path, type=self.classify_js(import_path)))
        return edges

    @staticmethod
    def classify_js(import_path: str) -> ImportType:
        if import_path.startswith('.'):
            return 'local'
        if '/' in import_path:
            return 'external'
        return 'standard'

    def _extract_python(self, record: FileRecord) -> List[ImportEdge]:
        edges = []
        for line in record.content.splitlines():
            line = line.strip()
            for pattern in PY_IMPORT_PATTERNS:
                match = pattern.match(line)
                if match:
                    import_path = match.group(1)
                    edges.append(ImportEdge(path=import_path, type=self.classify_python(import_path)))
        return edges

    @staticmethod
    def classify_python(import_path: str) -> ImportType:
        return 'local' if '.' in import_path else 'standard'

    def _detect_go_module(self) -> Optional[str]:
        """Read the module path from go.mod at the root, if there is one."""
        go_mod = os.path.join(self.root_dir, 'go.mod')
        if not os.path.isfile(go_mod):
            return None
        try:
            with open(go_mod, 'r', encoding='utf-8', errors='replace') as f:
                for line in f:
                    match = GO_MODULE_LINE.match(line)
                    if match:
                        return match.group(1)
        except OSError as e:
            logger.warning(f"Could not read {go_mod}: {e}")
        return None
