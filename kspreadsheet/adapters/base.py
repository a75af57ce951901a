"""
Common Workbook contract shared by every format adapter.

A Workbook wraps exactly one native document produced by a third-party
codec and exposes the same capability surface whatever the format. Format
adapters implement a handful of primitives (sheet listing, reading and
writing the rows of one sheet, adding and renaming sheets, saving); sheet
lookup, A1 references and the pydantic views are implemented once here.

Example:
    with SpreadsheetType.OOXML.create_workbook("report") as workbook:
        workbook.write_rows([["Name", "Age"], ["Alice", 30]])
        workbook.set_cell_value("B2", 31)
        workbook.save(stream)
"""

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from datetime import date, datetime, time, timedelta
from typing import Any, BinaryIO

from kspreadsheet.exceptions.spreadsheet_exceptions import (
    CellRangeError,
    SheetExistsError,
    SheetNotFoundError,
)
from kspreadsheet.models.workbook_models import CellRange, SheetData, SheetInfo, WorkbookInfo

logger = logging.getLogger(__name__)


class Workbook(ABC):
    """
    Abstract spreadsheet document.

    Subclasses own one native document for their whole lifetime and only
    delegate to it; they do not validate, transform or cache its content.

    Attributes:
        SPREADSHEET_TYPE: Format tag value of the adapter.
    """

    SPREADSHEET_TYPE: str = ""

    def __init__(self, name: str, native: Any) -> None:
        """
        Initialize the Workbook.

        Args:
            name: Label of the workbook. Not required to be a path.
            native: Native document returned by the format's codec.

        Raises:
            ValueError: If native is None.
        """
        if native is None:
            raise ValueError(f"Workbook {name!r} requires a native document")
        self._name = name
        self._native = native
        self._closed = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def native(self) -> Any:
        """The wrapped codec document."""
        return self._native

    @property
    def spreadsheet_type(self) -> str:
        return self.SPREADSHEET_TYPE

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def sheet_count(self) -> int:
        return len(self.sheet_names())

    # ==================== FORMAT PRIMITIVES ====================

    @abstractmethod
    def sheet_names(self) -> list[str]:
        """Return the sheet names in workbook order."""

    @abstractmethod
    def _add_sheet(self, sheet_name: str) -> None:
        """Append an empty sheet to the native document."""

    @abstractmethod
    def _rename_sheet(self, index: int, new_name: str) -> None:
        """Rename the sheet at index in the native document."""

    @abstractmethod
    def _read_sheet_rows(self, index: int) -> list[list[Any]]:
        """Return the raw rows of the sheet at index."""

    @abstractmethod
    def _write_sheet_rows(self, index: int, rows: list[list[Any]]) -> None:
        """Replace the content of the sheet at index with rows."""

    @abstractmethod
    def save(self, stream: BinaryIO) -> None:
        """
        Serialize the workbook to a binary stream with its own codec.

        The stream is written to but never closed.

        Raises:
            WriteError: If the codec fails to serialize the document.
        """

    def _release(self) -> None:
        """Release resources held by the native document."""

    # ==================== SHEET OPERATIONS ====================

    def create_sheet(self, sheet_name: str) -> None:
        """
        Add an empty sheet at the end of the workbook.

        Sheet names are compared ignoring case, as Excel and openpyxl do.

        Raises:
            SheetExistsError: If a sheet with this name already exists.
        """
        if self._name_taken(sheet_name):
            raise SheetExistsError(sheet_name)
        logger.debug("Adding sheet %r to %s workbook %r", sheet_name, self.spreadsheet_type, self.name)
        self._add_sheet(sheet_name)

    def rename_sheet(self, sheet_name: str, new_name: str) -> None:
        """
        Rename an existing sheet.

        A rename that only changes the case of the name is allowed.

        Raises:
            SheetNotFoundError: If sheet_name does not exist.
            SheetExistsError: If new_name is taken by another sheet.
        """
        index = self._resolve_sheet_index(sheet_name=sheet_name)
        if new_name == sheet_name:
            return
        if self._name_taken(new_name, ignore_index=index):
            raise SheetExistsError(new_name)
        self._rename_sheet(index, new_name)

    def _name_taken(self, sheet_name: str, ignore_index: int | None = None) -> bool:
        folded = sheet_name.casefold()
        return any(
            name.casefold() == folded
            for index, name in enumerate(self.sheet_names())
            if index != ignore_index
        )

    def _resolve_sheet_index(
        self,
        sheet_name: str | None = None,
        sheet_index: int | None = None,
    ) -> int:
        """
        Resolve a sheet reference to its 0-based index.

        Looks up by name first, then by index, then falls back to the
        first sheet.

        Raises:
            SheetNotFoundError: If the sheet cannot be found.
        """
        names = self.sheet_names()

        if sheet_name is not None:
            if sheet_name not in names:
                raise SheetNotFoundError(sheet_name=sheet_name, available_sheets=names)
            return names.index(sheet_name)

        if sheet_index is not None:
            if not 0 <= sheet_index < len(names):
                raise SheetNotFoundError(
                    sheet_name=f"index {sheet_index}",
                    available_sheets=names,
                )
            return sheet_index

        if not names:
            raise SheetNotFoundError(sheet_name="(first sheet)", available_sheets=[])
        return 0

    # ==================== ROW OPERATIONS ====================

    def read_rows(
        self,
        sheet_name: str | None = None,
        sheet_index: int | None = None,
    ) -> list[list[Any]]:
        """
        Read all cell values of a sheet.

        Trailing empty cells of each row and trailing empty rows are not
        returned, so rows may have different lengths.

        Args:
            sheet_name: Name of the sheet. Takes precedence over sheet_index.
            sheet_index: 0-based index of the sheet.

        Returns:
            List of rows, each a list of cell values.

        Raises:
            SheetNotFoundError: If the sheet does not exist.
        """
        index = self._resolve_sheet_index(sheet_name, sheet_index)
        return self._trim_rows(self._read_sheet_rows(index))

    def write_rows(
        self,
        rows: Iterable[Sequence[Any]],
        sheet_name: str | None = None,
        sheet_index: int | None = None,
    ) -> int:
        """
        Replace the content of a sheet, starting at A1.

        Returns:
            Number of rows written.

        Raises:
            SheetNotFoundError: If the sheet does not exist.
        """
        index = self._resolve_sheet_index(sheet_name, sheet_index)
        materialized = [list(row) for row in rows]
        self._write_sheet_rows(index, materialized)
        return len(materialized)

    def get_cell_value(
        self,
        cell: str,
        sheet_name: str | None = None,
        sheet_index: int | None = None,
    ) -> Any:
        """
        Get the value of a single cell.

        Args:
            cell: Cell reference in A1 notation (e.g., "B3").

        Returns:
            The cell value, or None for an empty cell.

        Raises:
            CellRangeError: If the reference is not a single cell.
            SheetNotFoundError: If the sheet does not exist.
        """
        row, col = self._parse_cell_reference(cell)
        rows = self.read_rows(sheet_name, sheet_index)
        if row < len(rows) and col < len(rows[row]):
            return rows[row][col]
        return None

    def set_cell_value(
        self,
        cell: str,
        value: Any,
        sheet_name: str | None = None,
        sheet_index: int | None = None,
    ) -> None:
        """
        Set the value of a single cell.

        Raises:
            CellRangeError: If the reference is not a single cell.
            SheetNotFoundError: If the sheet does not exist.
        """
        row, col = self._parse_cell_reference(cell)
        index = self._resolve_sheet_index(sheet_name, sheet_index)
        rows = self._trim_rows(self._read_sheet_rows(index))

        while len(rows) <= row:
            rows.append([])
        target = rows[row]
        if len(target) <= col:
            target.extend([None] * (col + 1 - len(target)))
        target[col] = value

        self._write_sheet_rows(index, rows)

    def read_range(
        self,
        cell_range: str,
        sheet_name: str | None = None,
        sheet_index: int | None = None,
    ) -> SheetData:
        """
        Read a rectangular cell range from a sheet.

        Rows beyond the data are not returned; cells beyond the end of an
        existing row are returned as None.

        Raises:
            CellRangeError: If the range notation is invalid.
            SheetNotFoundError: If the sheet does not exist.
        """
        parsed = self._parse_a1_notation(cell_range)
        index = self._resolve_sheet_index(sheet_name, sheet_index)
        rows = self.read_rows(sheet_index=index)
        width = parsed.end_col - parsed.start_col + 1

        selected = []
        for row in rows[parsed.start_row : parsed.end_row + 1]:
            values = row[parsed.start_col : parsed.end_col + 1]
            selected.append(values + [None] * (width - len(values)))

        return SheetData(
            sheet_name=self.sheet_names()[index],
            rows=selected,
            row_count=len(selected),
            column_count=width if selected else 0,
        )

    # ==================== VIEWS ====================

    def read_sheet(
        self,
        sheet_name: str | None = None,
        sheet_index: int | None = None,
        skip_empty_rows: bool = False,
    ) -> SheetData:
        """
        Read a sheet into a SheetData model.

        Args:
            sheet_name: Name of the sheet. Takes precedence over sheet_index.
            sheet_index: 0-based index of the sheet.
            skip_empty_rows: Whether to drop rows without any value.

        Raises:
            SheetNotFoundError: If the sheet does not exist.
        """
        index = self._resolve_sheet_index(sheet_name, sheet_index)
        rows = self.read_rows(sheet_index=index)
        if skip_empty_rows:
            rows = [row for row in rows if not self._is_empty_row(row)]

        return SheetData(
            sheet_name=self.sheet_names()[index],
            rows=rows,
            row_count=len(rows),
            column_count=max((len(row) for row in rows), default=0),
        )

    def get_info(self) -> WorkbookInfo:
        """Describe the workbook and each of its sheets."""
        sheets = []
        for index, sheet_name in enumerate(self.sheet_names()):
            rows = self.read_rows(sheet_index=index)
            sheets.append(
                SheetInfo(
                    name=sheet_name,
                    index=index,
                    row_count=len(rows),
                    column_count=max((len(row) for row in rows), default=0),
                )
            )

        return WorkbookInfo(
            name=self.name,
            spreadsheet_type=self.spreadsheet_type,
            sheet_count=len(sheets),
            sheets=sheets,
        )

    # ==================== LIFECYCLE ====================

    def close(self) -> None:
        """Release the native document. Calling close twice is a no-op."""
        if self._closed:
            return
        self._release()
        self._closed = True

    def __enter__(self) -> "Workbook":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, spreadsheet_type={self.spreadsheet_type!r})"

    # ==================== HELPERS ====================

    @staticmethod
    def _normalize_value(value: Any) -> Any:
        """
        Normalize a codec value to a plain Python type.

        Integral floats become ints since most codecs store every number
        as a double. Dates, times and durations are passed through.
        """
        if value is None:
            return None

        if isinstance(value, float):
            if value.is_integer():
                return int(value)
            return value

        if isinstance(value, (str, int, bool, datetime, date, time, timedelta)):
            return value

        return str(value)

    @staticmethod
    def _is_empty_row(row: Sequence[Any]) -> bool:
        return all(value is None for value in row)

    @classmethod
    def _trim_rows(cls, rows: list[list[Any]]) -> list[list[Any]]:
        trimmed = []
        for row in rows:
            end = len(row)
            while end and row[end - 1] is None:
                end -= 1
            trimmed.append(list(row[:end]))

        while trimmed and not trimmed[-1]:
            trimmed.pop()
        return trimmed

    def _parse_cell_reference(self, cell: str) -> tuple[int, int]:
        parsed = self._parse_a1_notation(cell)
        if not parsed.is_single_cell:
            raise CellRangeError(cell_range=cell, reason="Expected a single cell reference like 'B3'")
        return parsed.start_row, parsed.start_col

    def _parse_a1_notation(self, a1_range: str) -> CellRange:
        """
        Parse A1 notation range string into CellRange.

        Supports formats like:
        - "A1" (single cell)
        - "A1:C10" (range)

        Raises:
            CellRangeError: If the range notation is invalid.
        """
        a1_range = a1_range.strip().upper()

        single_cell_pattern = r"^([A-Z]+)([1-9]\d*)$"
        range_pattern = r"^([A-Z]+)([1-9]\d*):([A-Z]+)([1-9]\d*)$"

        single_match = re.match(single_cell_pattern, a1_range)
        if single_match:
            col = self._column_letter_to_index(single_match.group(1))
            row = int(single_match.group(2)) - 1
            return CellRange(
                start_row=row,
                end_row=row,
                start_col=col,
                end_col=col,
                a1_notation=a1_range,
            )

        range_match = re.match(range_pattern, a1_range)
        if range_match:
            start_col = self._column_letter_to_index(range_match.group(1))
            start_row = int(range_match.group(2)) - 1
            end_col = self._column_letter_to_index(range_match.group(3))
            end_row = int(range_match.group(4)) - 1

            if start_row > end_row or start_col > end_col:
                raise CellRangeError(
                    cell_range=a1_range,
                    reason="Start position must be before end position",
                )

            return CellRange(
                start_row=start_row,
                end_row=end_row,
                start_col=start_col,
                end_col=end_col,
                a1_notation=a1_range,
            )

        raise CellRangeError(
            cell_range=a1_range,
            reason="Invalid A1 notation format. Expected format: 'A1' or 'A1:C10'",
        )

    @staticmethod
    def _column_letter_to_index(column_letter: str) -> int:
        """
        Convert column letter(s) to 0-based index.

        Args:
            column_letter: Column letter(s) like "A", "B", "AA", "AB".

        Returns:
            0-based column index.
        """
        result = 0
        for char in column_letter.upper():
            result = result * 26 + (ord(char) - ord("A") + 1)
        return result - 1
