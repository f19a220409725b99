"""Exceptions raised while analyzing a Terraform module."""
from pathlib import Path
from typing import Optional


class TfUsageError(Exception):
    """Base class for all analysis failures."""


class LoadError(TfUsageError):
    """A module directory or one of its files could not be read.

    Args:
        path: Directory or file that failed to load
        reason: Human-readable cause (usually the OSError message)
    """

    def __init__(self, path: str | Path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class ParseError(TfUsageError):
    """Module source does not conform to the HCL grammar.

    Line and column are 1-based and point at the first offending node of the
    concatenated module text.
    """

    def __init__(self, path: str | Path, line: Optional[int] = None,
                 column: Optional[int] = None, detail: str = "invalid HCL syntax"):
        self.path = str(path)
        self.line = line
        self.column = column
        self.detail = detail
        location = f":{line}:{column}" if line is not None else ""
        super().__init__(f"{self.path}{location}: {detail}")


class InvalidDisplayTypeError(ValueError):
    """Requested report axis is not one of all/variables/locals."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"{value} is an invalid display type")
