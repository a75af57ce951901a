"""
XlsxWriter adapter for exporting any workbook to OOXML.

XlsxWriter streams cells into a new .xlsx package without building a
document model, which makes it the cheapest way to convert a workbook of
any format (legacy Excel, ODS, CSV) into an OOXML byte stream.

Features:
    - All sheets of the source workbook, in order
    - Auto-formatting of column widths
    - Date formatting and formula passthrough

Example:
    adapter = XlsxWriterAdapter()
    result = adapter.write_workbook(workbook, stream, header_row=True)
    print(f"Wrote {result['total_rows_written']} rows")
"""

import io
from datetime import date, datetime
from typing import Any, BinaryIO

import xlsxwriter
from xlsxwriter.format import Format
from xlsxwriter.worksheet import Worksheet

from kspreadsheet.adapters.base import Workbook
from kspreadsheet.exceptions.spreadsheet_exceptions import SpreadsheetError, WriteError


class XlsxWriterAdapter:
    """
    Adapter for XlsxWriter export operations.

    Attributes:
        DEFAULT_COLUMN_WIDTH: Default column width in characters.
        MAX_COLUMN_WIDTH: Maximum column width in characters.
    """

    DEFAULT_COLUMN_WIDTH = 10
    MAX_COLUMN_WIDTH = 50

    def _calculate_column_widths(self, rows: list[list[Any]]) -> list[int]:
        """
        Calculate optimal column widths based on content.

        Args:
            rows: Data rows.

        Returns:
            List of column widths.
        """
        if not rows:
            return []

        max_cols = max(len(row) for row in rows)
        widths = [self.DEFAULT_COLUMN_WIDTH] * max_cols

        for row in rows:
            for col_idx, cell in enumerate(row):
                if cell is not None:
                    cell_width = min(len(str(cell)) + 2, self.MAX_COLUMN_WIDTH)
                    widths[col_idx] = max(widths[col_idx], cell_width)

        return widths

    def _write_cell(
        self,
        worksheet: Worksheet,
        row: int,
        col: int,
        value: Any,
        cell_format: Format | None = None,
    ) -> None:
        """
        Write a value to a cell with appropriate type handling.

        Args:
            worksheet: The worksheet to write to.
            row: Row index (0-based).
            col: Column index (0-based).
            value: Value to write.
            cell_format: Optional format to apply.
        """
        if value is None:
            worksheet.write_blank(row, col, None, cell_format)
        elif isinstance(value, bool):
            worksheet.write_boolean(row, col, value, cell_format)
        elif isinstance(value, (int, float)):
            worksheet.write_number(row, col, value, cell_format)
        elif isinstance(value, (datetime, date)):
            worksheet.write_datetime(row, col, value, cell_format)
        elif isinstance(value, str):
            if value.startswith("="):
                worksheet.write_formula(row, col, value, cell_format)
            else:
                worksheet.write_string(row, col, value, cell_format)
        else:
            worksheet.write(row, col, str(value), cell_format)

    def write_workbook(
        self,
        workbook: Workbook,
        stream: BinaryIO,
        header_row: bool = False,
        auto_format: bool = True,
    ) -> dict[str, Any]:
        """
        Write every sheet of a workbook to an OOXML byte stream.

        Args:
            workbook: Source workbook of any format.
            stream: Binary stream receiving the .xlsx package. Not closed.
            header_row: Whether to format the first row of each sheet as a header.
            auto_format: Whether to auto-format column widths.

        Returns:
            Dictionary containing:
                - workbook_name: Name of the exported workbook
                - sheets_written: Number of sheets written
                - total_rows_written: Total number of rows written
                - size_bytes: Number of bytes written to the stream

        Raises:
            WriteError: If writing fails.
        """
        buffer = io.BytesIO()

        try:
            output = xlsxwriter.Workbook(buffer, {"in_memory": True})

            header_format = output.add_format({
                "bold": True,
                "bg_color": "#4F81BD",
                "font_color": "white",
                "border": 1,
            })
            date_format = output.add_format({
                "num_format": "yyyy-mm-dd hh:mm:ss",
            })

            total_rows_written = 0
            sheets_written = 0

            for index, sheet_name in enumerate(workbook.sheet_names()):
                rows = workbook.read_rows(sheet_index=index)
                worksheet = output.add_worksheet(sheet_name)

                for row_idx, row_data in enumerate(rows):
                    for col_idx, value in enumerate(row_data):
                        cell_format = None
                        if header_row and row_idx == 0:
                            cell_format = header_format
                        elif isinstance(value, (datetime, date)):
                            cell_format = date_format

                        self._write_cell(worksheet, row_idx, col_idx, value, cell_format)
                    total_rows_written += 1

                if auto_format:
                    for col_idx, width in enumerate(self._calculate_column_widths(rows)):
                        worksheet.set_column(col_idx, col_idx, width)

                sheets_written += 1

            output.close()

        except SpreadsheetError:
            raise
        except Exception as e:
            raise WriteError(
                workbook_name=workbook.name,
                operation="export",
                reason=str(e),
            ) from e

        payload = buffer.getvalue()
        try:
            stream.write(payload)
        except OSError as e:
            raise WriteError(
                workbook_name=workbook.name,
                operation="export",
                reason=str(e),
            ) from e

        return {
            "workbook_name": workbook.name,
            "sheets_written": sheets_written,
            "total_rows_written": total_rows_written,
            "size_bytes": len(payload),
        }
