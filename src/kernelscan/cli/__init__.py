"""
kernelscan Command-Line Interface
=================================

- **kernelscan**: scan C source for kernel logging calls

The tool is a Click-based CLI application with help and error reporting.
"""

__all__ = ["kernelscan"]
