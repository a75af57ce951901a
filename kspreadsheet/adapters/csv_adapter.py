"""
Delimited text (CSV) adapter.

A CSV workbook holds exactly one sheet backed by a CSVDocument. Every
field is a string; values written to the sheet are stored as their text.
"""

import csv
import io
from datetime import date, datetime, time
from typing import Any, BinaryIO

from kspreadsheet.adapters.base import Workbook
from kspreadsheet.config import Settings
from kspreadsheet.exceptions.spreadsheet_exceptions import (
    ReadError,
    UnsupportedOperationError,
    WriteError,
)
from kspreadsheet.separator import CSVDocument, CSVInitializer, SeparatorStrategy


class CSVWorkbook(Workbook):
    """
    Workbook adapter for delimited text.

    The format tag depends on the initializer's separator: "csv_comma" or
    "csv_semicolon".
    """

    SPREADSHEET_TYPE = "csv"

    def __init__(
        self,
        name: str,
        initializer: CSVInitializer,
        settings: Settings | None = None,
    ) -> None:
        """
        Initialize the CSVWorkbook from an initializer.

        Raises:
            ReadError: If the initializer cannot decode or tokenize its input.
        """
        self.settings = settings or initializer.settings
        self._separator = initializer.separator
        self._sheet_name = self.settings.default_sheet_name

        try:
            document = initializer.initialize()
        except (ValueError, csv.Error) as e:
            raise ReadError(
                workbook_name=name,
                operation="parse CSV",
                reason=str(e),
            ) from e

        super().__init__(name, document)

    @property
    def native(self) -> CSVDocument:
        return self._native

    @property
    def separator(self) -> SeparatorStrategy:
        return self._separator

    @property
    def spreadsheet_type(self) -> str:
        return f"csv_{self._separator.name.lower()}"

    # ==================== FORMAT PRIMITIVES ====================

    def sheet_names(self) -> list[str]:
        return [self._sheet_name]

    def _add_sheet(self, sheet_name: str) -> None:
        raise UnsupportedOperationError(self.spreadsheet_type, "create sheet")

    def _rename_sheet(self, index: int, new_name: str) -> None:
        self._sheet_name = new_name

    def _read_sheet_rows(self, index: int) -> list[list[Any]]:
        return [list(row) for row in self._native.rows]

    def _write_sheet_rows(self, index: int, rows: list[list[Any]]) -> None:
        self._native.rows = [[self._format_value(value) for value in row] for row in rows]

    def save(self, stream: BinaryIO) -> None:
        buffer = io.StringIO(newline="")
        writer = csv.writer(
            buffer,
            delimiter=self._native.delimiter,
            quotechar=self.settings.csv_quotechar,
            lineterminator=self.settings.csv_line_terminator,
        )
        try:
            writer.writerows(self._native.rows)
            stream.write(buffer.getvalue().encode(self.settings.csv_encoding))
        except (csv.Error, UnicodeEncodeError, OSError) as e:
            raise WriteError(
                workbook_name=self.name,
                operation="save",
                reason=str(e),
            ) from e

    # ==================== HELPERS ====================

    @staticmethod
    def _format_value(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, (datetime, date, time)):
            return value.isoformat()
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)
