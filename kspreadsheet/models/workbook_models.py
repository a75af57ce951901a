"""
Pydantic models describing workbooks and their contents.

These models are the format-independent views returned by Workbook
adapters and by the SpreadsheetService. All models use Pydantic v2.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class CellRange(BaseModel):
    """
    Represents a cell range specification.

    Attributes:
        start_row: Starting row index (0-based).
        end_row: Ending row index (0-based, inclusive).
        start_col: Starting column index (0-based).
        end_col: Ending column index (0-based, inclusive).
        a1_notation: Optional A1 notation string (e.g., "A1:C10").
    """

    start_row: int = Field(
        ge=0,
        description="Starting row index (0-based)",
    )
    end_row: int = Field(
        ge=0,
        description="Ending row index (0-based, inclusive)",
    )
    start_col: int = Field(
        ge=0,
        description="Starting column index (0-based)",
    )
    end_col: int = Field(
        ge=0,
        description="Ending column index (0-based, inclusive)",
    )
    a1_notation: str | None = Field(
        default=None,
        description="Optional A1 notation string (e.g., 'A1:C10')",
    )

    @field_validator("end_row")
    @classmethod
    def validate_end_row(cls, v: int, info) -> int:
        """Ensure end_row is greater than or equal to start_row."""
        if "start_row" in info.data and v < info.data["start_row"]:
            raise ValueError("end_row must be >= start_row")
        return v

    @field_validator("end_col")
    @classmethod
    def validate_end_col(cls, v: int, info) -> int:
        """Ensure end_col is greater than or equal to start_col."""
        if "start_col" in info.data and v < info.data["start_col"]:
            raise ValueError("end_col must be >= start_col")
        return v

    @property
    def is_single_cell(self) -> bool:
        return self.start_row == self.end_row and self.start_col == self.end_col


class SheetInfo(BaseModel):
    """
    Metadata about a single sheet.

    Attributes:
        name: The name of the sheet.
        index: The 0-based index of the sheet in the workbook.
        row_count: Number of rows with data.
        column_count: Number of columns in the widest row.
    """

    name: str = Field(
        description="The name of the sheet",
    )
    index: int = Field(
        ge=0,
        description="The 0-based index of the sheet in the workbook",
    )
    row_count: int = Field(
        default=0,
        ge=0,
        description="Number of rows with data",
    )
    column_count: int = Field(
        default=0,
        ge=0,
        description="Number of columns in the widest row",
    )


class WorkbookInfo(BaseModel):
    """
    Metadata about an open workbook.

    Attributes:
        name: The workbook name given at create/open time.
        spreadsheet_type: Format tag of the workbook.
        sheet_count: Number of sheets in the workbook.
        sheets: List of sheet metadata.
    """

    name: str = Field(
        description="The workbook name given at create/open time",
    )
    spreadsheet_type: str = Field(
        description="Format tag of the workbook (e.g. 'ooxml', 'csv_comma')",
    )
    sheet_count: int = Field(
        ge=0,
        description="Number of sheets in the workbook",
    )
    sheets: list[SheetInfo] = Field(
        default_factory=list,
        description="List of sheet metadata",
    )


class SheetData(BaseModel):
    """
    Data from a single sheet.

    Attributes:
        sheet_name: Name of the sheet.
        rows: List of rows, where each row is a list of cell values.
        row_count: Number of rows in the data.
        column_count: Number of columns in the widest row.
        headers: Optional list of column headers (first row if requested).
    """

    sheet_name: str = Field(
        description="Name of the sheet",
    )
    rows: list[list[Any]] = Field(
        default_factory=list,
        description="List of rows, where each row is a list of cell values",
    )
    row_count: int = Field(
        ge=0,
        description="Number of rows in the data",
    )
    column_count: int = Field(
        ge=0,
        description="Number of columns in the widest row",
    )
    headers: list[str] | None = Field(
        default=None,
        description="Optional list of column headers",
    )


class ExportResult(BaseModel):
    """
    Result of exporting a workbook to another byte stream.

    Attributes:
        workbook_name: Name of the exported workbook.
        sheets_written: Number of sheets written.
        total_rows_written: Number of rows written across all sheets.
        size_bytes: Number of bytes written to the output stream.
    """

    workbook_name: str = Field(
        description="Name of the exported workbook",
    )
    sheets_written: int = Field(
        ge=0,
        description="Number of sheets written",
    )
    total_rows_written: int = Field(
        ge=0,
        description="Number of rows written across all sheets",
    )
    size_bytes: int = Field(
        ge=0,
        description="Number of bytes written to the output stream",
    )
