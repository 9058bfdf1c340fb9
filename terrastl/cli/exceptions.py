#!/usr/bin/env python3
"""
Custom exceptions for the terrastl CLI.

These wrap user-facing failures (bad input files, bad options) so the
command layer can report them without a traceback.
"""

class TerraSTLCliException(Exception):
    """Base exception for all terrastl CLI errors."""
    pass

class InputError(TerraSTLCliException):
    """Exception raised for invalid input parameters."""
    pass

class FileError(TerraSTLCliException):
    """Exception raised for file-related errors (not found, unreadable format, etc.)."""
    pass
