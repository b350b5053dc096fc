# ========================
# src/wrangler/errors.py
# ========================

"""
Wrangler Errors

Every failure raised by the wrangling operations derives from WranglerError.
Each error also subclasses the closest built-in exception so callers that
already catch FileNotFoundError, ValueError, etc. keep working.
"""

from typing import Iterable, Optional


class WranglerError(Exception):
    """Base class for all table wrangling errors."""


class NotFoundError(WranglerError, FileNotFoundError):
    """The source file does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"File '{path}' was not found")

    def __str__(self) -> str:
        return self.args[0]


class ParseError(WranglerError, ValueError):
    """The delimited source is malformed."""

    def __init__(self, message: str, path: Optional[str] = None, line_number: Optional[int] = None):
        self.path = path
        self.line_number = line_number
        location = ""
        if path is not None:
            location = f"{path}"
            if line_number is not None:
                location += f":{line_number}"
            location += ": "
        super().__init__(f"{location}{message}")


class UnknownColumnError(WranglerError, LookupError):
    """One or more referenced columns are not part of the table."""

    def __init__(self, columns: Iterable[str], available: Iterable[str]):
        self.columns = list(columns)
        self.available = list(available)
        super().__init__(
            f"Unknown column(s) {self.columns}; available columns: {self.available}"
        )


class DuplicateColumnError(WranglerError, ValueError):
    """A column name is already present in the table."""

    def __init__(self, column: str):
        self.column = column
        super().__init__(f"Column '{column}' already exists")


class EmptyColumnError(WranglerError, ValueError):
    """Every value of the column is missing, so no fill value can be computed."""

    def __init__(self, column: str):
        self.column = column
        super().__init__(f"Column '{column}' has no non-missing values")


class ColumnTypeError(WranglerError, TypeError):
    """A numeric operation was applied to non-numeric values."""

    def __init__(self, column: str, operation: str, value=None):
        self.column = column
        self.operation = operation
        self.value = value
        super().__init__(
            f"Cannot apply '{operation}' to column '{column}': "
            f"non-numeric value {value!r}"
        )


class RowShapeError(WranglerError, ValueError):
    """A row does not carry exactly the table's columns."""

    def __init__(self, row_index: int, missing: Iterable[str], extra: Iterable[str]):
        self.row_index = row_index
        self.missing = sorted(missing)
        self.extra = sorted(extra)
        super().__init__(
            f"Row {row_index} does not match the table header "
            f"(missing: {self.missing}, unexpected: {self.extra})"
        )
