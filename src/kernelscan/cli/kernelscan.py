"""
kernelscan - Kernel Log Message Scanner Command-Line Interface
==============================================================

Scans C/C++ source for kernel logging calls and prints each one as a
single normalized line, grouped by source file, followed by a summary.

Usage Examples
--------------
Scan a single file:
    $ kernelscan drivers/acpi/osl.c

Scan a tree, weakening escape sequences:
    $ kernelscan -e -r drivers/

Read from standard input:
    $ cat drivers/pnp/pnpacpi/rsparser.c | kernelscan

Track an extra logging macro:
    $ kernelscan -r -f my_log fs/
"""

import codecs
import logging
from typing import Iterator

import click

from kernelscan import __version__
from kernelscan.cli.errors import handle_cli_exception
from kernelscan.functions import TRACKED_FUNCTIONS
from kernelscan.scanner import DECODE_ERRORS, FileReport, ScanOptions, ScanSession

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def validate_encoding(ctx: click.Context, param: click.Parameter, value: str) -> str:
    """Reject encodings Python does not know before any file is opened."""
    try:
        codecs.lookup(value)
    except LookupError:
        raise click.BadParameter(f"unknown encoding: {value}")
    return value


def echo_raw(text: str, encoding: str) -> None:
    """Write text in the source encoding, restoring undecodable bytes."""
    click.echo(text.encode(encoding, DECODE_ERRORS), nl=False)


def iter_reports(session: ScanSession, paths: tuple[str, ...]) -> Iterator[FileReport]:
    """Scan the given paths; no paths or "-" means standard input."""
    if not paths:
        paths = ("-",)

    for path in paths:
        if path == "-":
            yield session.scan_stdin()
        else:
            yield from session.scan_path(path)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument("paths", nargs=-1, type=click.Path(path_type=str))
@click.option(
    "-e", "--escape-strip",
    is_flag=True,
    help="Strip C escape sequences (\\n, \\t, ...) out of string literals",
)
@click.option(
    "-r", "--recursive",
    is_flag=True,
    help="Recursively scan directories",
)
@click.option(
    "-f", "--function",
    "functions",
    multiple=True,
    metavar="NAME",
    help="Also track calls to NAME (can be repeated)",
)
@click.option(
    "--encoding",
    default="utf-8",
    show_default=True,
    callback=validate_encoding,
    help="Encoding of the source files",
)
@click.option(
    "--summary/--no-summary",
    default=True,
    help="Print the files/lines/statements summary at the end",
)
@click.option(
    "--list-functions",
    is_flag=True,
    help="List the tracked function names and exit",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="kernelscan")
def main(
    paths: tuple[str, ...],
    escape_strip: bool,
    recursive: bool,
    functions: tuple[str, ...],
    encoding: str,
    summary: bool,
    list_functions: bool,
    verbose: bool,
) -> None:
    """
    Scan C source for kernel logging calls.

    PATHS are C source files (.c, .h, .cpp) or directories. With no
    PATHS, or with "-", standard input is scanned.

    Each call to a tracked function (printk, pr_err, dev_warn, ...) that
    has at least one string literal argument is printed on one line, with
    adjacent literals concatenated.

    \b
    Examples:
        kernelscan foo.c               # Scan one file
        kernelscan -r drivers/         # Scan a tree
        kernelscan -e -r drivers/      # Weaken \\n, \\t, ... to spaces
        cat foo.c | kernelscan         # Scan standard input
    """
    setup_logging(verbose)

    if list_functions:
        for name in sorted(set(TRACKED_FUNCTIONS) | set(functions)):
            click.echo(name)
        return

    options = ScanOptions(
        escape_strip=escape_strip,
        recursive=recursive,
        encoding=encoding,
        extra_functions=functions,
    )
    session = ScanSession(options)

    try:
        for report in iter_reports(session, paths):
            output = report.format()
            if output:
                echo_raw(output, encoding)

        if summary:
            click.echo(session.stats.format(), nl=False)

    except Exception as e:
        handle_cli_exception(e, verbose)

    # Path errors are advisory and do not change the exit code
    if session.errors:
        logger.debug(f"{len(session.errors)} path(s) could not be scanned")


if __name__ == "__main__":
    main()
