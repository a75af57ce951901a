"""
OpenDocument Spreadsheet (.ods) adapter.

Wraps an odfpy OpenDocumentSpreadsheet. Each sheet is a table:table
element under the office:spreadsheet body.

ODF compresses runs of identical rows and cells with the
number-rows-repeated and number-columns-repeated attributes. Reading
expands those runs; runs of empty cells or rows at the end of a row or
table are dropped, since office suites pad every sheet to its full width.
"""

from datetime import date, datetime
from typing import Any, BinaryIO

from odf import teletype
from odf.element import Element
from odf.namespaces import TABLENS
from odf.opendocument import OpenDocumentSpreadsheet
from odf.table import Table, TableCell, TableColumn, TableRow
from odf.text import P

from kspreadsheet.adapters.base import Workbook
from kspreadsheet.exceptions.spreadsheet_exceptions import WriteError

SPREADSHEET_MIMETYPE = "application/vnd.oasis.opendocument.spreadsheet"

_TABLE = (TABLENS, "table")
_CELLS = ((TABLENS, "table-cell"), (TABLENS, "covered-table-cell"))
_NUMERIC_VALUE_TYPES = ("float", "percentage", "currency")


class OpenDocumentWorkbook(Workbook):
    """Workbook adapter for odfpy spreadsheet documents."""

    SPREADSHEET_TYPE = "opendocument"

    @staticmethod
    def new_document(sheet_name: str) -> OpenDocumentSpreadsheet:
        """Allocate a spreadsheet document holding one empty table."""
        document = OpenDocumentSpreadsheet()
        table = Table(name=sheet_name)
        OpenDocumentWorkbook._fill_table(table, [])
        document.spreadsheet.addElement(table)
        return document

    # ==================== FORMAT PRIMITIVES ====================

    def sheet_names(self) -> list[str]:
        return [table.getAttribute("name") for table in self._tables()]

    def _add_sheet(self, sheet_name: str) -> None:
        table = Table(name=sheet_name)
        self._fill_table(table, [])
        self._native.spreadsheet.addElement(table)

    def _rename_sheet(self, index: int, new_name: str) -> None:
        self._tables()[index].setAttribute("name", new_name)

    def _read_sheet_rows(self, index: int) -> list[list[Any]]:
        table = self._tables()[index]
        rows: list[list[Any]] = []
        pending_empty = 0

        for row in table.getElementsByType(TableRow):
            repeat = int(row.getAttribute("numberrowsrepeated") or 1)
            values = self._read_row(row)
            if not values:
                pending_empty += repeat
                continue

            rows.extend([] for _ in range(pending_empty))
            pending_empty = 0
            rows.extend(list(values) for _ in range(repeat))

        return rows

    def _write_sheet_rows(self, index: int, rows: list[list[Any]]) -> None:
        table = self._tables()[index]
        for child in list(table.childNodes):
            table.removeChild(child)
        self._fill_table(table, rows)

    def save(self, stream: BinaryIO) -> None:
        try:
            self._native.write(stream)
        except Exception as e:
            raise WriteError(
                workbook_name=self.name,
                operation="save",
                reason=str(e),
            ) from e

    # ==================== HELPERS ====================

    def _tables(self) -> list[Element]:
        return [node for node in self._native.spreadsheet.childNodes if getattr(node, "qname", None) == _TABLE]

    def _read_row(self, row: Element) -> list[Any]:
        values: list[Any] = []
        pending_empty = 0

        for cell in row.childNodes:
            if getattr(cell, "qname", None) not in _CELLS:
                continue
            repeat = int(cell.getAttribute("numbercolumnsrepeated") or 1)
            value = self._cell_value(cell)
            if value is None:
                pending_empty += repeat
                continue

            values.extend([None] * pending_empty)
            pending_empty = 0
            values.extend([value] * repeat)

        return values

    def _cell_value(self, cell: Element) -> Any:
        value_type = cell.getAttribute("valuetype")

        if value_type in _NUMERIC_VALUE_TYPES:
            return self._normalize_value(float(cell.getAttribute("value")))
        if value_type == "boolean":
            return cell.getAttribute("booleanvalue") == "true"
        if value_type == "date":
            return datetime.fromisoformat(cell.getAttribute("datevalue"))

        text = "\n".join(teletype.extractText(paragraph) for paragraph in cell.getElementsByType(P))
        if text or value_type == "string":
            return text
        return None

    @staticmethod
    def _make_cell(value: Any) -> TableCell:
        if value is None:
            return TableCell()

        if isinstance(value, bool):
            cell = TableCell(valuetype="boolean", booleanvalue=str(value).lower())
            text = str(value).upper()
        elif isinstance(value, (int, float)):
            cell = TableCell(valuetype="float", value=str(value))
            text = str(value)
        elif isinstance(value, (datetime, date)):
            cell = TableCell(valuetype="date", datevalue=value.isoformat())
            text = value.isoformat()
        else:
            text = str(value)
            cell = TableCell(valuetype="string")

        cell.addElement(P(text=text))
        return cell

    @classmethod
    def _fill_table(cls, table: Table, rows: list[list[Any]]) -> None:
        # The schema requires at least one column and one row per table.
        width = max((len(row) for row in rows), default=0)
        table.addElement(TableColumn(numbercolumnsrepeated=str(max(width, 1))))

        for row in rows or [[]]:
            table_row = TableRow()
            for value in row:
                table_row.addElement(cls._make_cell(value))
            if not row:
                table_row.addElement(TableCell())
            table.addElement(table_row)
