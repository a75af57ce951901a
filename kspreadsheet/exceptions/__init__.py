"""
Custom exceptions for spreadsheet operations.

Provides type-safe, descriptive exceptions for error handling throughout
the library.
"""

from kspreadsheet.exceptions.spreadsheet_exceptions import (
    CellRangeError,
    CreateError,
    InvalidFileFormatError,
    ReadError,
    SheetExistsError,
    SheetNotFoundError,
    SpreadsheetError,
    UnsupportedOperationError,
    WriteError,
)

__all__ = [
    "SpreadsheetError",
    "ReadError",
    "InvalidFileFormatError",
    "CreateError",
    "WriteError",
    "SheetNotFoundError",
    "SheetExistsError",
    "CellRangeError",
    "UnsupportedOperationError",
]
