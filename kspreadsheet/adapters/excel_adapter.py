"""
Legacy binary Excel (.xls) adapter.

The BIFF format has no single read/write codec in Python: xlrd decodes it
and xlwt encodes it. An ExcelWorkbook therefore always wraps an xlrd Book.
New documents are encoded by xlwt and decoded by xlrd, and every mutation
re-encodes the current values through xlwt and decodes the result, which
replaces the wrapped Book.

Cell formatting other than dates is not carried through a re-encode.

Example:
    workbook = SpreadsheetType.EXCEL.open_workbook("legacy", stream)
    rows = workbook.read_rows(sheet_name="Data")
"""

import io
import logging
from datetime import date, datetime
from typing import Any, BinaryIO

import xlrd
import xlwt
from xlrd.xldate import xldate_as_datetime

from kspreadsheet.adapters.base import Workbook
from kspreadsheet.exceptions.spreadsheet_exceptions import WriteError

logger = logging.getLogger(__name__)


class _XlrdLog:
    """File-like sink routing xlrd's diagnostic output to the logger."""

    def write(self, text: str) -> None:
        text = text.strip()
        if text:
            logger.debug("xlrd: %s", text)


class ExcelWorkbook(Workbook):
    """
    Workbook adapter for the legacy binary Excel format.

    Attributes:
        DATE_FORMAT: Number format given to date cells when encoding.
    """

    SPREADSHEET_TYPE = "excel"
    DATE_FORMAT = "YYYY-MM-DD HH:MM:SS"

    # ==================== CODEC ====================

    @staticmethod
    def decode(data: bytes) -> xlrd.Book:
        """Decode BIFF bytes into an xlrd Book."""
        return xlrd.open_workbook(file_contents=data, logfile=_XlrdLog())

    @classmethod
    def encode(cls, sheets: list[tuple[str, list[list[Any]]]], stream: BinaryIO) -> None:
        """
        Encode sheets of values to BIFF with xlwt.

        Args:
            sheets: (sheet name, rows) pairs in workbook order.
            stream: Binary stream receiving the document.
        """
        book = xlwt.Workbook(encoding="utf-8")
        date_style = xlwt.easyxf(num_format_str=cls.DATE_FORMAT)

        for sheet_name, rows in sheets:
            sheet = book.add_sheet(sheet_name, cell_overwrite_ok=True)
            for row_idx, row in enumerate(rows):
                for col_idx, value in enumerate(row):
                    if value is None:
                        continue
                    if isinstance(value, (datetime, date)):
                        sheet.write(row_idx, col_idx, value, date_style)
                    elif isinstance(value, (str, bool, int, float)):
                        sheet.write(row_idx, col_idx, value)
                    else:
                        sheet.write(row_idx, col_idx, str(value))

        book.save(stream)

    @classmethod
    def new_document(cls, sheet_name: str) -> xlrd.Book:
        """Allocate a Book holding one empty sheet."""
        buffer = io.BytesIO()
        cls.encode([(sheet_name, [])], buffer)
        return cls.decode(buffer.getvalue())

    # ==================== FORMAT PRIMITIVES ====================

    def sheet_names(self) -> list[str]:
        return self._native.sheet_names()

    def _add_sheet(self, sheet_name: str) -> None:
        self._rebuild(self._snapshot() + [(sheet_name, [])], "add sheet")

    def _rename_sheet(self, index: int, new_name: str) -> None:
        sheets = self._snapshot()
        sheets[index] = (new_name, sheets[index][1])
        self._rebuild(sheets, "rename sheet")

    def _read_sheet_rows(self, index: int) -> list[list[Any]]:
        sheet = self._native.sheet_by_index(index)
        return [
            [self._cell_value(sheet.cell(row_idx, col_idx)) for col_idx in range(sheet.row_len(row_idx))]
            for row_idx in range(sheet.nrows)
        ]

    def _write_sheet_rows(self, index: int, rows: list[list[Any]]) -> None:
        sheets = self._snapshot()
        sheets[index] = (sheets[index][0], rows)
        self._rebuild(sheets, "write rows")

    def save(self, stream: BinaryIO) -> None:
        try:
            self.encode(self._snapshot(), stream)
        except Exception as e:
            raise WriteError(
                workbook_name=self.name,
                operation="save",
                reason=str(e),
            ) from e

    def _release(self) -> None:
        self._native.release_resources()

    # ==================== HELPERS ====================

    def _cell_value(self, cell: xlrd.sheet.Cell) -> Any:
        if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
            return None
        if cell.ctype == xlrd.XL_CELL_BOOLEAN:
            return bool(cell.value)
        if cell.ctype == xlrd.XL_CELL_DATE:
            return xldate_as_datetime(cell.value, self._native.datemode)
        return self._normalize_value(cell.value)

    def _snapshot(self) -> list[tuple[str, list[list[Any]]]]:
        return [
            (sheet_name, self._read_sheet_rows(index))
            for index, sheet_name in enumerate(self.sheet_names())
        ]

    def _rebuild(self, sheets: list[tuple[str, list[list[Any]]]], operation: str) -> None:
        """Re-encode sheets and swap the decoded Book in as the native document."""
        logger.debug("Re-encoding excel workbook %r to %s", self.name, operation)
        buffer = io.BytesIO()
        try:
            self.encode(sheets, buffer)
        except Exception as e:
            raise WriteError(
                workbook_name=self.name,
                operation=operation,
                reason=str(e),
            ) from e

        previous = self._native
        self._native = self.decode(buffer.getvalue())
        previous.release_resources()
