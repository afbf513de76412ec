"""
Kernel Message Scanner
======================

This module drives the lexer and statement extractor over files and
directory trees and keeps the run's counters.

    Path → traversal → file text → Lexer → tracked identifier?
         → StatementExtractor → Statement → FileReport

Usage
-----
Programmatic:
    >>> from kernelscan.scanner import ScanSession, ScanOptions
    >>> session = ScanSession(ScanOptions(recursive=True))
    >>> for report in session.scan_paths(["drivers/acpi"]):
    ...     print(report.format(), end="")
    >>> print(session.stats.format(), end="")

Scanning a string:
    >>> from kernelscan.scanner import scan_c
    >>> [str(s) for s in scan_c('dev_err(dev, "A" "B");')]
    ['dev_err(dev, "AB")']

Error Handling
--------------
Paths that cannot be accessed are logged, recorded in ``session.errors``
and skipped. A file that ends inside a logging call stops being scanned at
that point; statements found before it are kept.
"""

import logging
import os
import stat
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, TextIO

import click

from kernelscan.errors import IncompleteStatementError, ScanPathError
from kernelscan.extractor import Statement, StatementExtractor
from kernelscan.functions import FunctionNameMatcher
from kernelscan.lexer import Lexer
from kernelscan.stream import PushbackStream
from kernelscan.tokens import TokenType

logger = logging.getLogger(__name__)


# Source file suffixes scanned by default
DEFAULT_EXTENSIONS = (".c", ".h", ".cpp")

# Display name used for standard input
STDIN_NAME = "<stdin>"

# Undecodable bytes become lone surrogates on input and are written back
# unchanged on output, so messages keep their original bytes
DECODE_ERRORS = "surrogateescape"


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class ScanOptions:
    """
    Scanner configuration options.

    Attributes:
        escape_strip: Replace control-character escapes (\\n, \\t, ...) in
            literals with a space and \\? with ?
        recursive: Descend into directories instead of skipping them
        extensions: File name suffixes that are scanned
        encoding: Text encoding of the source files and standard input;
            undecodable bytes are carried through as surrogates instead of
            aborting the file
        extra_functions: Additional function names to track
    """
    escape_strip: bool = False
    recursive: bool = False
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    encoding: str = "utf-8"
    extra_functions: tuple[str, ...] = ()

    def __post_init__(self):
        self.extensions = tuple(self.extensions)
        self.extra_functions = tuple(self.extra_functions)


# =============================================================================
# Results
# =============================================================================

@dataclass
class ScanStats:
    """Counters accumulated over a scan session."""
    files: int = 0
    lines: int = 0
    statements: int = 0

    def format(self) -> str:
        """Format the end-of-run summary, preceded by a blank line."""
        return (
            f"\n{self.files} files scanned\n"
            f"{self.lines} lines scanned\n"
            f"{self.statements} statements found\n"
        )


@dataclass
class FileReport:
    """
    Statements found in one source file.

    Attributes:
        path: The file as it was named on input
        statements: Reported statements in source order
        lines: Number of newlines read from the file
        truncated: True if the file ended inside a logging call
    """
    path: str
    statements: list[Statement] = field(default_factory=list)
    lines: int = 0
    truncated: bool = False

    def format(self) -> str:
        """
        Format the report block: a Source header, one line per statement
        and a trailing blank line. Files without matches format to "".
        """
        if not self.statements:
            return ""
        lines = [f"Source: {self.path}"]
        lines.extend(s.text for s in self.statements)
        return "\n".join(lines) + "\n\n"


# =============================================================================
# Scan Session
# =============================================================================

class ScanSession:
    """
    Scans source files for kernel logging calls.

    One session owns the counters for a whole run; each file gets a fresh
    stream, lexer and extractor.

    Attributes:
        options: Scanner configuration
        matcher: Tracked function names
        stats: Files, lines and statements counted so far
        errors: Path errors encountered so far
    """

    def __init__(
        self,
        options: Optional[ScanOptions] = None,
        matcher: Optional[FunctionNameMatcher] = None,
    ):
        self.options = options or ScanOptions()
        self.matcher = matcher or FunctionNameMatcher(
            extra=self.options.extra_functions
        )
        self.stats = ScanStats()
        self.errors: list[ScanPathError] = []

    # =========================================================================
    # Single Sources
    # =========================================================================

    def scan_stream(self, stream: PushbackStream, path: str = "<input>") -> FileReport:
        """
        Scan one character stream and update the counters.

        Args:
            stream: Source characters
            path: Name used in the report and in diagnostics

        Returns:
            FileReport with the statements found
        """
        lexer = Lexer(
            stream,
            escape_strip=self.options.escape_strip,
            skip_whitespace=True,
        )
        extractor = StatementExtractor(lexer, path)
        report = FileReport(path)

        try:
            while (token := lexer.next_token()) is not None:
                if token.type != TokenType.IDENTIFIER:
                    continue
                if not self.matcher.is_tracked(token.text):
                    continue
                statement = extractor.extract(token)
                if statement is not None:
                    report.statements.append(statement)
        except IncompleteStatementError as e:
            logger.debug(f"Stopped scanning: {e}")
            report.truncated = True

        report.lines = stream.newlines
        self.stats.files += 1
        self.stats.lines += report.lines
        self.stats.statements += len(report.statements)
        return report

    def scan_source(self, source: str, path: str = "<input>") -> FileReport:
        """Scan a string of C source."""
        return self.scan_stream(PushbackStream(source), path)

    def scan_text_file(self, fp: TextIO, path: str) -> FileReport:
        """Scan an already open text file."""
        return self.scan_stream(PushbackStream.from_file(fp), path)

    def scan_stdin(self) -> FileReport:
        """Scan standard input, decoded like a file with the configured encoding."""
        stdin = click.get_text_stream(
            "stdin",
            encoding=self.options.encoding,
            errors=DECODE_ERRORS,
        )
        return self.scan_text_file(stdin, STDIN_NAME)

    # =========================================================================
    # Paths and Traversal
    # =========================================================================

    def is_source_file(self, path: str) -> bool:
        """Return True if the file name has one of the scanned suffixes."""
        return path.endswith(self.options.extensions)

    def scan_file(self, path: str) -> Optional[FileReport]:
        """
        Scan a regular file if its suffix is one of the scanned extensions.

        Returns:
            The FileReport, or None if the file was not a source file

        Raises:
            ScanPathError: If the file cannot be opened
        """
        if not self.is_source_file(path):
            logger.debug(f"Skipping {path}: not a C/C++ source file")
            return None

        logger.debug(f"Scanning {path}")
        try:
            with open(path, encoding=self.options.encoding, errors=DECODE_ERRORS) as fp:
                report = self.scan_text_file(fp, path)
        except OSError as e:
            raise ScanPathError(path, "open", e) from e

        logger.debug(
            f"Scanned {path}: {report.lines} lines, "
            f"{len(report.statements)} statements"
        )
        return report

    def scan_path(self, path: str | os.PathLike) -> Iterator[FileReport]:
        """
        Scan a file or directory.

        Directories are descended (entries in sorted order) only when the
        recursive option is set. Inaccessible paths are logged, recorded in
        self.errors and skipped.

        Yields:
            A FileReport for every source file scanned
        """
        path = os.fspath(path)
        try:
            yield from self._scan_path(path)
        except ScanPathError as e:
            logger.error(str(e))
            self.errors.append(e)

    def _scan_path(self, path: str) -> Iterator[FileReport]:
        try:
            mode = os.stat(path).st_mode
        except OSError as e:
            raise ScanPathError(path, "stat", e) from e

        if stat.S_ISDIR(mode):
            if not self.options.recursive:
                logger.info(f"Skipping directory {path} (use --recursive to scan it)")
                return
            yield from self._scan_directory(path)
        elif stat.S_ISREG(mode):
            report = self.scan_file(path)
            if report is not None:
                yield report

    def _scan_directory(self, path: str) -> Iterator[FileReport]:
        try:
            names = sorted(os.listdir(path))
        except OSError as e:
            raise ScanPathError(path, "open directory", e) from e

        for name in names:
            yield from self.scan_path(os.path.join(path, name))

    def scan_paths(self, paths: Iterable[str | os.PathLike]) -> Iterator[FileReport]:
        """Scan each path in turn."""
        for path in paths:
            yield from self.scan_path(path)


# =============================================================================
# Convenience Functions
# =============================================================================

def scan_c(source: str, options: Optional[ScanOptions] = None) -> list[Statement]:
    """
    Return the logging statements found in a string of C source.

    Args:
        source: C source text
        options: Scanner options (only escape_strip and extra_functions
            matter for strings)
    """
    session = ScanSession(options)
    return session.scan_source(source).statements
