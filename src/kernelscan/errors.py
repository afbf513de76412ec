"""
kernelscan Error Hierarchy
==========================

This module defines the exception hierarchy for kernelscan.
All exceptions inherit from KernelScanError, allowing callers to catch
every scanner-related error with a single except clause.

Exception Hierarchy
-------------------
KernelScanError (base)
├── ScanPathError - a path cannot be stat'ed, opened or listed
└── ScanSyntaxError - problems found while reading C source
    └── IncompleteStatementError - input ended inside a tracked statement

Error Message Format
--------------------
Errors that carry a source location follow this format:

    filename:line: error: description
    hint: suggestion (when available)

Path errors mirror the wording of the classic C tool so existing log
scrapers keep working:

    Cannot stat drivers/foo.c, errno=2 (No such file or directory)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class KernelScanError(Exception):
    """
    Base exception for all kernelscan errors.

        try:
            session.scan_path("drivers/")
        except KernelScanError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in a scanned source file.

    Attributes:
        filename: Path of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
    """
    filename: str
    line: int

    def __str__(self) -> str:
        """Format as 'filename:line' for error messages."""
        return f"{self.filename}:{self.line}"


# =============================================================================
# Path Errors
# =============================================================================

class ScanPathError(KernelScanError):
    """
    A path supplied for scanning could not be accessed.

    Raised for stat failures, unreadable files and directories that cannot
    be listed. These errors are advisory: the session reports them and
    carries on with the remaining inputs.

    Attributes:
        path: The offending path
        action: What was being attempted ("stat", "open", "open directory")
        errno: The OS error number, if known
        strerror: The OS error text, if known
    """

    def __init__(self, path: str, action: str, error: OSError):
        self.path = path
        self.action = action
        self.errno = error.errno
        self.strerror = error.strerror or str(error)
        super().__init__(
            f"Cannot {action} {path}, errno={self.errno} ({self.strerror})"
        )


# =============================================================================
# Source Errors
# =============================================================================

class ScanSyntaxError(KernelScanError):
    """
    Problem found while reading C source.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for the reader (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class IncompleteStatementError(ScanSyntaxError):
    """
    End of input reached inside a tracked call expression.

    The scan of the current file stops at this point and the partial
    statement is discarded.

    Example:
        printk("never closed",
    """

    def __init__(
        self,
        function: str,
        location: Optional[SourceLocation] = None,
    ):
        self.function = function
        super().__init__(
            f"input ended inside call to '{function}'",
            location=location,
            hint="the file is truncated or has an unterminated literal or comment",
        )
