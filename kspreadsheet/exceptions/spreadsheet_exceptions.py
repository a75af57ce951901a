"""
Custom exceptions for spreadsheet operations.

This module defines a hierarchy of exceptions for the error conditions
raised while creating, opening, reading and saving workbooks. All exceptions
inherit from SpreadsheetError for consistent error handling.

Malformed input is always reported as a ReadError (InvalidFileFormatError
is a ReadError), so callers can catch one category whatever the format.

Example:
    try:
        workbook = open_workbook("report", stream, SpreadsheetType.OOXML)
    except InvalidFileFormatError as e:
        print(f"Not an OOXML workbook: {e.reason}")
    except ReadError as e:
        print(f"Could not read: {e.message}")
"""


class SpreadsheetError(Exception):
    """
    Base exception for all spreadsheet errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Optional additional context about the error.
    """

    def __init__(
        self,
        message: str,
        error_code: str = "SPREADSHEET_ERROR",
        details: dict | None = None,
    ) -> None:
        """
        Initialize the SpreadsheetError.

        Args:
            message: Human-readable error description.
            error_code: Machine-readable error code.
            details: Optional additional context about the error.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict:
        """
        Convert exception to a dictionary.

        Returns:
            Dictionary containing error_code, message, and details.
        """
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ReadError(SpreadsheetError):
    """
    Raised when a workbook cannot be read from its input stream.

    Covers empty or oversized input, I/O failures and text decoding
    failures. Subclassed by InvalidFileFormatError.

    Attributes:
        workbook_name: Name of the workbook being opened.
        operation: The specific read operation that failed.
        reason: Specific reason for the failure.
    """

    def __init__(
        self,
        workbook_name: str,
        operation: str = "read",
        reason: str | None = None,
        error_code: str = "READ_ERROR",
        details: dict | None = None,
    ) -> None:
        self.workbook_name = workbook_name
        self.operation = operation
        self.reason = reason

        message = f"Failed to {operation} workbook: {workbook_name}"
        if reason:
            message += f" - {reason}"

        super().__init__(
            message=message,
            error_code=error_code,
            details={
                "workbook_name": workbook_name,
                "operation": operation,
                "reason": reason,
                **(details or {}),
            },
        )


class InvalidFileFormatError(ReadError):
    """
    Raised when the input is not a valid document of the requested format.

    The underlying codec rejected the bytes: corrupt file, wrong format or
    a package of another document type.

    Attributes:
        workbook_name: Name of the workbook being opened.
        spreadsheet_type: Format the caller asked for.
        reason: Specific reason for the format error.
    """

    def __init__(
        self,
        workbook_name: str,
        spreadsheet_type: str,
        reason: str | None = None,
    ) -> None:
        self.spreadsheet_type = spreadsheet_type
        super().__init__(
            workbook_name=workbook_name,
            operation=f"decode {spreadsheet_type}",
            reason=reason,
            error_code="INVALID_FILE_FORMAT",
            details={"spreadsheet_type": spreadsheet_type},
        )


class CreateError(SpreadsheetError):
    """
    Raised when a codec cannot allocate a new document.

    Attributes:
        workbook_name: Name of the workbook being created.
        spreadsheet_type: Format of the workbook being created.
    """

    def __init__(
        self,
        workbook_name: str,
        spreadsheet_type: str,
        reason: str | None = None,
    ) -> None:
        self.workbook_name = workbook_name
        self.spreadsheet_type = spreadsheet_type
        self.reason = reason

        message = f"Failed to create {spreadsheet_type} workbook: {workbook_name}"
        if reason:
            message += f" - {reason}"

        super().__init__(
            message=message,
            error_code="CREATE_ERROR",
            details={
                "workbook_name": workbook_name,
                "spreadsheet_type": spreadsheet_type,
                "reason": reason,
            },
        )


class WriteError(SpreadsheetError):
    """
    Raised when a workbook cannot be serialized.

    Covers codec failures during save and XLSX export.

    Attributes:
        workbook_name: Name of the workbook being written.
        operation: The specific write operation that failed.
    """

    def __init__(
        self,
        workbook_name: str,
        operation: str = "write",
        reason: str | None = None,
    ) -> None:
        self.workbook_name = workbook_name
        self.operation = operation
        self.reason = reason

        message = f"Failed to {operation} workbook: {workbook_name}"
        if reason:
            message += f" - {reason}"

        super().__init__(
            message=message,
            error_code="WRITE_ERROR",
            details={
                "workbook_name": workbook_name,
                "operation": operation,
                "reason": reason,
            },
        )


class SheetNotFoundError(SpreadsheetError):
    """
    Raised when the specified sheet does not exist in the workbook.

    Attributes:
        sheet_name: Name of the sheet that was not found.
        available_sheets: List of sheets available in the workbook.
    """

    def __init__(
        self,
        sheet_name: str,
        available_sheets: list[str] | None = None,
    ) -> None:
        self.sheet_name = sheet_name
        self.available_sheets = available_sheets or []

        message = f"Sheet not found: {sheet_name}"
        if available_sheets:
            message += f". Available sheets: {', '.join(available_sheets)}"

        super().__init__(
            message=message,
            error_code="SHEET_NOT_FOUND",
            details={
                "sheet_name": sheet_name,
                "available_sheets": self.available_sheets,
            },
        )


class SheetExistsError(SpreadsheetError):
    """Raised when adding a sheet whose name is already taken."""

    def __init__(self, sheet_name: str) -> None:
        self.sheet_name = sheet_name
        super().__init__(
            message=f"Sheet already exists: {sheet_name}",
            error_code="SHEET_EXISTS",
            details={"sheet_name": sheet_name},
        )


class CellRangeError(SpreadsheetError):
    """
    Raised when an invalid cell reference is specified.

    Attributes:
        cell_range: The invalid cell reference string.
        reason: Specific reason why the reference is invalid.
    """

    def __init__(
        self,
        cell_range: str,
        reason: str | None = None,
    ) -> None:
        self.cell_range = cell_range
        self.reason = reason

        message = f"Invalid cell range: {cell_range}"
        if reason:
            message += f" - {reason}"

        super().__init__(
            message=message,
            error_code="INVALID_CELL_RANGE",
            details={
                "cell_range": cell_range,
                "reason": reason,
            },
        )


class UnsupportedOperationError(SpreadsheetError):
    """
    Raised when a format cannot perform the requested operation.

    For example, a CSV workbook holds exactly one table and cannot
    gain a second sheet.
    """

    def __init__(self, spreadsheet_type: str, operation: str) -> None:
        self.spreadsheet_type = spreadsheet_type
        self.operation = operation
        super().__init__(
            message=f"Operation '{operation}' is not supported for {spreadsheet_type} workbooks",
            error_code="UNSUPPORTED_OPERATION",
            details={
                "spreadsheet_type": spreadsheet_type,
                "operation": operation,
            },
        )
