"""Command-line interface for xdir."""
import sys
import logging
from typing import List, Optional

import click
from rich.markup import escape

from . import __version__
from .core.errors import XdirError
from .core.models import Config
from .core.processor import DirectoryProcessor
from .utils.console import ConsoleManager, THEMES


def setup_logging(verbose: int) -> None:
    """Configure logging based on verbosity count."""
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format='[%(levelname)s] %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def split_list(value: Optional[str]) -> List[str]:
    """Split a comma-separated option value, dropping empty entries."""
    if not value:
        return []
    return [item.strip() for item in value.split(',') if item.strip()]


@click.command()
@click.argument('source_dir', required=False, default='.')
@click.argument('output_file', required=False, default='output.xml')
@click.option('--patterns', '-p', help='File extensions to include, comma-separated (e.g. js,ts,md)')
@click.option('--glob', '-g', 'glob_patterns', help="Glob patterns to match file names, comma-separated (e.g. '*.min.js')")
@click.option('--compress', is_flag=True, help='Gzip the output document')
@click.option('--max-size', '-m', type=int, help='Maximum file size in bytes, 0 for unlimited (default: 10MB)')
@click.option('--unsafe', is_flag=True, help='Allow processing of normally excluded paths')
@click.option('--deps/--no-deps', default=False, help='Include the import dependency graph')
@click.option('--tokens/--no-tokens', default=True, help='Prefix the output file name with the estimated token count')
@click.option('--go-module', help='Go module path treated as local (default: read from go.mod)')
@click.option('--progress', is_flag=True, help='Show a progress counter while walking')
@click.option('--theme', '-t', type=click.Choice(sorted(THEMES)), default='manhattan', help='Terminal color theme')
@click.option('--verbose', '-v', count=True, help='Increase log verbosity (-v info, -vv debug)')
@click.version_option(version=__version__)
def main(source_dir: str, output_file: str, patterns: Optional[str], glob_patterns: Optional[str],
         compress: bool, max_size: Optional[int], unsafe: bool, deps: bool, tokens: bool,
         go_module: Optional[str], progress: bool, theme: str, verbose: int) -> None:
    """
    Convert a directory tree into a single XML document for AI context.

    SOURCE_DIR defaults to the current directory and OUTPUT_FILE to
    output.xml.

    Examples:

        xdir

        xdir ./project context.xml --patterns py,md

        xdir . out.xml --glob '*.ts,*.tsx' --deps

        xdir src --compress --no-tokens
    """
    console = ConsoleManager(theme=theme)
    setup_logging(verbose)

    options = dict(
        target_dir=source_dir,
        output_file=output_file,
        file_patterns=split_list(patterns),
        glob_patterns=split_list(glob_patterns),
        unsafe_mode=unsafe,
        compress=compress,
        want_dependency_graph=deps,
        want_token_count=tokens,
        go_module=go_module,
        show_progress=progress,
    )
    if max_size is not None:
        options['max_file_size'] = max_size

    config = Config(**options)

    try:
        result = DirectoryProcessor(config).process()
    except XdirError as e:
        console.print_error(escape(str(e)))
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[error]> PROCESS TERMINATED BY USER[/error]")
        sys.exit(1)

    stats = result.stats
    console.print()
    console.print_separator()
    console.print_success("Processing complete:")
    console.print(f"- Files processed: [number]{stats.files_processed}[/number]")
    console.print(f"- Total size: [number]{stats.megabytes_processed:.2f}[/number] MB")
    if config.want_token_count:
        console.print(f"- Total tokens: [number]{stats.tokens:,}[/number]")
    console.print(f"- Errors: [number]{stats.errors}[/number]")

    if result.has_errors() and verbose:
        for error in result.errors[:5]:
            console.print(f"  [dim]>[/dim] {escape(error)}")
        if len(result.errors) > 5:
            console.print(f"  [dim]... +{len(result.errors) - 5} more[/dim]")
    elif result.has_errors():
        console.print_warning("Some entries were skipped, rerun with -v to list them")

    console.print()
    console.print_info(f"Output written to: [path]{escape(result.output_path)}[/path]")


if __name__ == '__main__':
    main()
