from __future__ import annotations

from typing import Any, Optional


class EdaError(Exception):
    """Base class for every error raised by eda_report."""


class DatasetIOError(EdaError, OSError):
    """Raised when the source file cannot be opened or decoded."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read dataset '{path}': {reason}")


class FormatError(EdaError, ValueError):
    """Raised when the source is not a well-formed table.

    `row_index` is the zero-based data row (header excluded) and
    `line_number` the physical line reported by the CSV reader. Both are
    None for file-level problems such as a missing header.
    """

    def __init__(
        self,
        message: str,
        *,
        row_index: Optional[int] = None,
        line_number: Optional[int] = None,
        expected: Optional[int] = None,
        actual: Optional[int] = None,
    ) -> None:
        self.row_index = row_index
        self.line_number = line_number
        self.expected = expected
        self.actual = actual
        super().__init__(message)


class TypeMismatchError(EdaError, ValueError):
    """A non-numeric value was found in a numeric column.

    Only raised in strict mode; otherwise the value is recorded as a
    TypeMismatch and treated as missing.
    """

    def __init__(self, column: str, row_index: int, value: Any) -> None:
        self.column = column
        self.row_index = row_index
        self.value = value
        super().__init__(
            f"Non-numeric value {value!r} in numeric column '{column}' at row {row_index}."
        )


class TargetColumnError(EdaError, ValueError):
    """Raised when the requested target column is unknown or not numeric."""
