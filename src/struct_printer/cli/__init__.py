"""
Struct Printer Command-Line Interface
=====================================

- **structprint**: generate printer functions from a C header

The tool is a Click-based CLI application with help and error reporting.
"""

__all__ = ["structprint"]
