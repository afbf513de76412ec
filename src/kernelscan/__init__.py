"""
kernelscan - Kernel Log Message Scanner
=======================================

This package scans C and C++ source trees for kernel logging calls
(``printk``, ``pr_err``, ``dev_warn``, ``ACPI_ERROR``, ...) and prints each
call as one normalized line, with adjacent string literals glued together
the way the compiler would glue them. The output is meant for auditing
log message text, for example to cross-reference it against a database of
known kernel messages.

Main Components
---------------
- **stream**: character source with unlimited pushback
- **lexer**: small C tokenizer (comments, literals, numbers, punctuation)
- **functions**: the set of tracked logging functions
- **extractor**: rebuilds a tracked call into one line
- **scanner**: file and directory traversal, counters and reports

Quick Start
-----------
Scan a string:
    >>> from kernelscan import scan_c
    >>> for statement in scan_c('pr_err("bad " "thing %d\\\\n", x);'):
    ...     print(statement)
    pr_err("bad thing %d\\n", x)

Or use the command-line tool:
    $ kernelscan -r drivers/acpi
    $ kernelscan -e -r drivers/ > messages.txt
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from kernelscan.errors import (
    KernelScanError,
    SourceLocation,
    ScanPathError,
    ScanSyntaxError,
    IncompleteStatementError,
)
from kernelscan.stream import PushbackStream
from kernelscan.tokens import Token, TokenType, TokenBuffer
from kernelscan.lexer import Lexer, tokenize
from kernelscan.functions import TRACKED_FUNCTIONS, FunctionNameMatcher
from kernelscan.extractor import Statement, StatementExtractor
from kernelscan.scanner import (
    ScanOptions,
    ScanStats,
    FileReport,
    ScanSession,
    scan_c,
)

__all__ = [
    # Version info
    "__version__",
    # Exception hierarchy
    "KernelScanError",
    "SourceLocation",
    "ScanPathError",
    "ScanSyntaxError",
    "IncompleteStatementError",
    # Lexical analysis
    "PushbackStream",
    "Token",
    "TokenType",
    "TokenBuffer",
    "Lexer",
    "tokenize",
    # Function names
    "TRACKED_FUNCTIONS",
    "FunctionNameMatcher",
    # Extraction
    "Statement",
    "StatementExtractor",
    # Scanning
    "ScanOptions",
    "ScanStats",
    "FileReport",
    "ScanSession",
    "scan_c",
]
