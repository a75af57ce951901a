"""
OOXML Excel (.xlsx) adapter.

Wraps an openpyxl Workbook. openpyxl reads and writes the format itself,
so every operation delegates straight to the wrapped document.

Supported formats:
    - .xlsx (Excel 2007+)
    - .xlsm (Excel Macro-Enabled)
"""

from typing import Any, BinaryIO

from openpyxl import Workbook as OpenpyxlWorkbook

from kspreadsheet.adapters.base import Workbook
from kspreadsheet.exceptions.spreadsheet_exceptions import SheetExistsError, WriteError


class OOXMLWorkbook(Workbook):
    """
    Workbook adapter for openpyxl documents.

    Example:
        workbook = OOXMLWorkbook("report", openpyxl.Workbook())
        workbook.set_cell_value("A1", "Name")
    """

    SPREADSHEET_TYPE = "ooxml"

    @property
    def native(self) -> OpenpyxlWorkbook:
        return self._native

    def sheet_names(self) -> list[str]:
        return list(self._native.sheetnames)

    def _add_sheet(self, sheet_name: str) -> None:
        self._native.create_sheet(title=sheet_name)

    def _rename_sheet(self, index: int, new_name: str) -> None:
        worksheet = self._native.worksheets[index]
        # openpyxl suffixes a title that matches any sheet ignoring case, its own included.
        if worksheet.title.casefold() == new_name.casefold():
            worksheet.title = f"~{index}"
        worksheet.title = new_name
        if worksheet.title != new_name:
            raise SheetExistsError(new_name)

    def _read_sheet_rows(self, index: int) -> list[list[Any]]:
        worksheet = self._native.worksheets[index]
        return [
            [self._normalize_value(value) for value in row]
            for row in worksheet.iter_rows(values_only=True)
        ]

    def _write_sheet_rows(self, index: int, rows: list[list[Any]]) -> None:
        worksheet = self._native.worksheets[index]
        worksheet.delete_rows(1, worksheet.max_row)

        for row_idx, row in enumerate(rows, start=1):
            for col_idx, value in enumerate(row, start=1):
                if value is not None:
                    worksheet.cell(row=row_idx, column=col_idx, value=value)

    def set_cell_value(
        self,
        cell: str,
        value: Any,
        sheet_name: str | None = None,
        sheet_index: int | None = None,
    ) -> None:
        row, col = self._parse_cell_reference(cell)
        index = self._resolve_sheet_index(sheet_name, sheet_index)
        self._native.worksheets[index].cell(row=row + 1, column=col + 1, value=value)

    def save(self, stream: BinaryIO) -> None:
        try:
            self._native.save(stream)
        except Exception as e:
            raise WriteError(
                workbook_name=self.name,
                operation="save",
                reason=str(e),
            ) from e

    def _release(self) -> None:
        self._native.close()
