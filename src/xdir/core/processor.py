"""Main directory processing orchestrator."""
import os
import re
import gzip
import logging
from contextlib import contextmanager
from typing import IO, Iterator, List, Optional, Tuple

from tqdm import tqdm

from .collector import ContentCollector
from .dependencies import DependencyAnalyzer
from .errors import CollectionError, DuplicateRecordError, OutputError, SetupError
from .models import Config, FileRecord, ProcessResult, RecordSet, Stats
from .serializer import XmlSerializer
from .tokenizer import TokenCounter
from ..utils.file_filter import PathFilter
from ..utils.path_utils import PathUtils

logger = logging.getLogger(__name__)


class DirectoryProcessor:
    """
    Walks a directory tree and writes the selected files as one XML document.

    Without dependency linking or token naming, records are streamed to the
    output as they are collected. Either feature switches to buffered mode:
    all records are gathered first, then the finished document is written.
    """

    def __init__(self, config: Config):
        """Initialize processor with configuration."""
        self.config = config
        self.path_filter = PathFilter(config)
        self.collector = ContentCollector(config)
        self.serializer = XmlSerializer()
        self.token_counter = TokenCounter()
        self.stats = Stats()
        self.errors: List[str] = []
        self.root_dir: Optional[str] = None
        self._output_abs: Optional[str] = None
        self._renamed_output: Optional[re.Pattern] = None

    def process(self) -> ProcessResult:
        """
        Run the pipeline once.

        Returns:
            ProcessResult with statistics, the final output path and the
            per-entry error messages.

        Raises:
            SetupError: The root directory cannot be resolved.
            OutputError: The output cannot be opened, written or renamed.
        """
        self.stats = Stats()
        self.errors = []
        self.token_counter.reset()

        self.root_dir = self._resolve_root()
        output_path = self._output_path()
        self._output_abs = os.path.abspath(output_path)
        self._renamed_output = self._renamed_output_pattern(self._output_abs)

        logger.info(f"Processing directory: {self.root_dir}")

        if self.config.needs_full_document:
            file_paths = self._process_buffered(output_path)
        else:
            file_paths = self._process_streaming(output_path)

        if self.config.want_token_count:
            output_path = self._rename_with_tokens(output_path)

        logger.info(
            f"Processed {self.stats.files_processed} files "
            f"({self.stats.megabytes_processed:.2f} MB), {self.stats.errors} errors"
        )

        return ProcessResult(
            stats=self.stats,
            output_path=output_path,
            file_paths=file_paths,
            errors=list(self.errors),
        )

    def _process_streaming(self, output_path: str) -> List[str]:
        """Write each record as soon as it is collected."""
        file_paths = []
        with self._open_output(output_path) as out:
            self._write(out, self.serializer.render_header())
            for abs_path, rel_path in self._iter_files():
                record = self._collect(abs_path, rel_path)
                if record is None:
                    continue
                self._write(out, self.serializer.render_file(record))
                self.stats.record_file(record.size)
                file_paths.append(record.path)
            self._write(out, self.serializer.render_footer())
        return file_paths

    def _process_buffered(self, output_path: str) -> List[str]:
        """Collect everything, analyze, then write the complete document."""
        records = RecordSet()
        for abs_path, rel_path in self._iter_files():
            record = self._collect(abs_path, rel_path)
            if record is None:
                continue
            try:
                records.add(record)
            except DuplicateRecordError as e:
                self._record_error(str(e))
                continue
            self.stats.record_file(record.size)

        if self.config.want_dependency_graph:
            analyzer = DependencyAnalyzer(self.config, self.root_dir)
            for message in analyzer.analyze_all(records):
                self._record_error(message)

        ordered = records.sorted()
        document = self.serializer.serialize(
            ordered, include_dependencies=self.config.want_dependency_graph
        )

        if self.config.want_token_count:
            self.stats.add_tokens(self.token_counter.count(document))

        with self._open_output(output_path) as out:
            self._write(out, document)

        return [record.path for record in ordered]

    def _iter_files(self) -> Iterator[Tuple[str, str]]:
        return tqdm(
            self._walk(self.root_dir),
            desc="Collecting files",
            unit="file",
            disable=not self.config.show_progress,
        )

    def _walk(self, directory: str) -> Iterator[Tuple[str, str]]:
        """
        Yield (absolute, relative) paths of files passing both filter gates.

        Entries are visited in name order. Excluded directories are never
        entered and symlinked directories are not followed.
        """
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            self._record_error(f"Error accessing path {directory}: {e}")
            return

        for entry in entries:
            rel_path = PathUtils.relative_to(entry.path, self.root_dir)

            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and entry.is_file()
            except OSError as e:
                self._record_error(f"Error accessing path {rel_path}: {e}")
                continue

            if is_dir:
                reason = self.path_filter.get_excluded_reason(rel_path, is_dir=True)
                if reason:
                    logger.debug(f"Skipping directory {rel_path}: {reason}")
                    continue
                yield from self._walk(entry.path)
                continue

            if not is_file:
                logger.debug(f"Skipping {rel_path}: not a regular file")
                continue

            if self._is_output(entry.path):
                logger.debug(f"Skipping {rel_path}: output file")
                continue

            reason = self.path_filter.get_excluded_reason(rel_path)
            if reason:
                logger.debug(f"Skipping {rel_path}: {reason}")
                continue

            yield entry.path, rel_path

    def _collect(self, abs_path: str, rel_path: str) -> Optional[FileRecord]:
        logger.debug(f"Processing: {rel_path}")
        try:
            record = self.collector.collect(abs_path, rel_path)
        except CollectionError as e:
            self._record_error(str(e))
            return None
        logger.debug(f"Processed: {rel_path} ({record.size / 1024:.2f} KB)")
        return record

    def _renamed_output_pattern(self, output_abs: str) -> Optional[re.Pattern]:
        if not self.config.want_token_count:
            return None
        base, ext = os.path.splitext(os.path.basename(output_abs))
        return re.compile(rf'\d+-{re.escape(base)}{re.escape(ext)}')

    def _is_output(self, path: str) -> bool:
        """Match the output file and, with token naming, earlier renamed copies of it."""
        path = os.path.abspath(path)
        if path == self._output_abs:
            return True
        if self._renamed_output is None:
            return False
        directory, name = os.path.split(path)
        return (directory == os.path.dirname(self._output_abs)
                and self._renamed_output.fullmatch(name) is not None)

    def _record_error(self, message: str) -> None:
        logger.warning(message)
        self.stats.record_error()
        self.errors.append(message)

    def _resolve_root(self) -> str:
        try:
            root = os.path.abspath(self.config.target_dir)
        except (OSError, ValueError) as e:
            raise SetupError(f"Error resolving target directory: {e}") from e
        if not os.path.isdir(root):
            raise SetupError(f"Path is not a directory: {self.config.target_dir}")
        return root

    def _output_path(self) -> str:
        path = self.config.output_file
        if self.config.compress and not path.endswith('.gz'):
            path += '.gz'
        return path

    @contextmanager
    def _open_output(self, path: str) -> Iterator[IO[str]]:
        try:
            directory = os.path.dirname(path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            if self.config.compress:
                out = gzip.open(path, 'wt', encoding='utf-8', newline='')
            else:
                out = open(path, 'w', encoding='utf-8', newline='')
        except OSError as e:
            raise OutputError(f"Error setting up output {path}: {e}") from e

        try:
            yield out
        finally:
            out.close()

    @staticmethod
    def _write(out: IO[str], text: str) -> None:
        try:
            out.write(text)
        except OSError as e:
            raise OutputError(f"Error writing output: {e}") from e

    def _rename_with_tokens(self, output_path: str) -> str:
        """Prefix the output file name with the token count."""
        directory, filename = os.path.split(output_path)
        base, ext = os.path.splitext(filename)
        new_path = os.path.join(directory, f"{self.stats.tokens}-{base}{ext}")
        try:
            os.replace(output_path, new_path)
        except OSError as e:
            raise OutputError(f"Error renaming output file: {e}") from e
        logger.info(f"Output renamed to {new_path}")
        return new_path


def process_directory(config: Config) -> ProcessResult:
    """Run the pipeline for a configuration."""
    return DirectoryProcessor(config).process()
