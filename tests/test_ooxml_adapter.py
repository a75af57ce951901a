"""
Tests for the OOXMLWorkbook adapter.

Tests reading, writing, ranges and sheet handling over openpyxl documents.
"""

import io
from datetime import datetime, time, timedelta

import pytest
from openpyxl import load_workbook

from kspreadsheet.adapters.base import Workbook
from kspreadsheet.adapters.ooxml_adapter import OOXMLWorkbook
from kspreadsheet.config import Settings
from kspreadsheet.exceptions.spreadsheet_exceptions import (
    CellRangeError,
    SheetExistsError,
    SheetNotFoundError,
)
from kspreadsheet.factory import SpreadsheetType


@pytest.fixture
def ooxml_workbook(settings: Settings, users_rows: list[list]) -> OOXMLWorkbook:
    """Create an OOXML workbook holding the users rows."""
    workbook = SpreadsheetType.OOXML.create_workbook("users", settings=settings)
    workbook.write_rows(users_rows)
    return workbook


class TestOOXMLWorkbookSheetOperations:
    """Tests for sheet listing and naming."""

    def test_get_sheet_names_multiple_sheets(self, multi_sheet_workbook: Workbook) -> None:
        """Test that sheets are listed in workbook order."""
        assert multi_sheet_workbook.sheet_names() == ["Users", "Products", "Orders"]
        assert multi_sheet_workbook.sheet_count == 3

    def test_sheet_not_found_raises_error(self, multi_sheet_workbook: Workbook) -> None:
        """Test that a missing sheet raises SheetNotFoundError."""
        with pytest.raises(SheetNotFoundError) as exc_info:
            multi_sheet_workbook.read_rows(sheet_name="NonExistent")

        assert "Users" in exc_info.value.message

    def test_sheet_index_out_of_range(self, multi_sheet_workbook: Workbook) -> None:
        """Test that an index past the last sheet raises SheetNotFoundError."""
        with pytest.raises(SheetNotFoundError):
            multi_sheet_workbook.read_rows(sheet_index=3)

    def test_rename_to_taken_name(self, multi_sheet_workbook: Workbook) -> None:
        """Test that renaming onto another sheet's name is refused."""
        with pytest.raises(SheetExistsError):
            multi_sheet_workbook.rename_sheet("Users", "Orders")

        assert multi_sheet_workbook.sheet_names() == ["Users", "Products", "Orders"]


class TestOOXMLWorkbookReadOperations:
    """Tests for reading sheets."""

    def test_read_sheet_by_name(self, multi_sheet_workbook: Workbook) -> None:
        """Test reading a specific sheet by name."""
        sheet_data = multi_sheet_workbook.read_sheet(sheet_name="Products")

        assert sheet_data.sheet_name == "Products"
        assert sheet_data.rows == [["Widget", 10.99], ["Gadget", 24.99]]
        assert sheet_data.row_count == 2
        assert sheet_data.column_count == 2

    def test_read_first_sheet_by_default(self, multi_sheet_workbook: Workbook) -> None:
        """Test that the first sheet is read when none is named."""
        sheet_data = multi_sheet_workbook.read_sheet()

        assert sheet_data.sheet_name == "Users"

    def test_read_sheet_skip_empty_rows(self, ooxml_workbook: OOXMLWorkbook) -> None:
        """Test that skip_empty_rows drops rows without values."""
        ooxml_workbook.write_rows([["a"], [None, None], ["b"]])

        assert ooxml_workbook.read_sheet().row_count == 3
        assert ooxml_workbook.read_sheet(skip_empty_rows=True).rows == [["a"], ["b"]]

    def test_read_mixed_types(self, settings: Settings, sample_rows: list[list]) -> None:
        """Test that typed values keep their Python types."""
        workbook = SpreadsheetType.OOXML.create_workbook("types", settings=settings)
        workbook.write_rows(sample_rows)

        row = workbook.read_rows()[1]

        assert row == ["Alice", 30, 91.5, True, datetime(2024, 1, 5, 10, 30)]
        assert isinstance(row[3], bool)

    def test_get_workbook_info(self, multi_sheet_workbook: Workbook) -> None:
        """Test that get_info describes every sheet."""
        info = multi_sheet_workbook.get_info()

        assert info.name == "multi"
        assert info.spreadsheet_type == "ooxml"
        assert info.sheet_count == 3
        assert [(s.name, s.index, s.row_count, s.column_count) for s in info.sheets] == [
            ("Users", 0, 3, 2),
            ("Products", 1, 2, 2),
            ("Orders", 2, 3, 2),
        ]


class TestOOXMLWorkbookRangeOperations:
    """Tests for A1 ranges and single cells."""

    def test_read_range(self, ooxml_workbook: OOXMLWorkbook) -> None:
        """Test reading a range wider than the data pads with None."""
        range_data = ooxml_workbook.read_range("A1:C2")

        assert range_data.rows == [["Name", "Age", None], ["Alice", 30, None]]
        assert range_data.row_count == 2
        assert range_data.column_count == 3

    def test_read_range_beyond_data(self, ooxml_workbook: OOXMLWorkbook) -> None:
        """Test that a range below the data is empty."""
        range_data = ooxml_workbook.read_range("D10:E12")

        assert range_data.rows == []
        assert range_data.row_count == 0
        assert range_data.column_count == 0

    def test_get_cell_value(self, ooxml_workbook: OOXMLWorkbook) -> None:
        """Test getting single cell values."""
        assert ooxml_workbook.get_cell_value("A1") == "Name"
        assert ooxml_workbook.get_cell_value("b3") == 25
        assert ooxml_workbook.get_cell_value("Z99") is None

    def test_set_cell_value_writes_native_cell(self, ooxml_workbook: OOXMLWorkbook) -> None:
        """Test that set_cell_value lands on the openpyxl worksheet."""
        ooxml_workbook.set_cell_value("B2", 31)

        assert ooxml_workbook.native.active["B2"].value == 31
        assert ooxml_workbook.get_cell_value("B2") == 31

    @pytest.mark.parametrize("cell_range", ["invalid", "A0", "1A", "C3:A1", ""])
    def test_invalid_range_format(self, ooxml_workbook: OOXMLWorkbook, cell_range: str) -> None:
        """Test that malformed references raise CellRangeError."""
        with pytest.raises(CellRangeError):
            ooxml_workbook.read_range(cell_range)

    def test_set_cell_value_rejects_ranges(self, ooxml_workbook: OOXMLWorkbook) -> None:
        """Test that set_cell_value needs a single cell."""
        with pytest.raises(CellRangeError) as exc_info:
            ooxml_workbook.set_cell_value("A1:A2", 1)

        assert exc_info.value.error_code == "INVALID_CELL_RANGE"

    @pytest.mark.parametrize(
        ("letters", "index"),
        [("A", 0), ("Z", 25), ("AA", 26), ("AZ", 51), ("ba", 52)],
    )
    def test_column_letter_to_index(self, letters: str, index: int) -> None:
        """Test converting column letters to 0-based indexes."""
        assert Workbook._column_letter_to_index(letters) == index


class TestOOXMLWorkbookWrite:
    """Tests for replacing sheet content and saving."""

    def test_write_rows_replaces_wider_content(self, ooxml_workbook: OOXMLWorkbook) -> None:
        """Test that writing fewer rows and columns leaves nothing behind."""
        ooxml_workbook.write_rows([["a", "b", "c", "d"], [1, 2, 3, 4], [5, 6, 7, 8]])

        written = ooxml_workbook.write_rows([["only"]])

        assert written == 1
        assert ooxml_workbook.read_rows() == [["only"]]

    def test_write_empty_rows_clears_sheet(self, ooxml_workbook: OOXMLWorkbook) -> None:
        """Test that writing no rows empties the sheet."""
        assert ooxml_workbook.write_rows([]) == 0
        assert ooxml_workbook.read_rows() == []

    def test_save_is_readable_by_openpyxl(self, multi_sheet_workbook: Workbook) -> None:
        """Test that save produces an .xlsx package openpyxl loads."""
        stream = io.BytesIO()

        multi_sheet_workbook.save(stream)

        stream.seek(0)
        book = load_workbook(stream)
        assert book.sheetnames == ["Users", "Products", "Orders"]
        assert book["Orders"]["B3"].value == "Bob"

    def test_context_manager_closes(self, settings: Settings) -> None:
        """Test that leaving the with block closes the workbook."""
        with SpreadsheetType.OOXML.create_workbook("scoped", settings=settings) as workbook:
            assert not workbook.closed

        assert workbook.closed


class TestOOXMLWorkbookSheetNameCase:
    """Tests for sheet names that differ only in case."""

    def test_create_sheet_ignores_case(self, multi_sheet_workbook: Workbook) -> None:
        """Test that a name matching an existing sheet ignoring case is refused."""
        with pytest.raises(SheetExistsError):
            multi_sheet_workbook.create_sheet("users")

        assert multi_sheet_workbook.sheet_names() == ["Users", "Products", "Orders"]

    def test_rename_changes_case_only(self, multi_sheet_workbook: Workbook) -> None:
        """Test that a case-only rename keeps the requested title."""
        multi_sheet_workbook.rename_sheet("Users", "USERS")

        assert multi_sheet_workbook.sheet_names() == ["USERS", "Products", "Orders"]
        assert multi_sheet_workbook.read_rows(sheet_name="USERS")[0] == ["Name", "Age"]

    def test_rename_onto_other_sheet_ignoring_case(self, multi_sheet_workbook: Workbook) -> None:
        """Test that renaming onto another sheet's name in other case is refused."""
        with pytest.raises(SheetExistsError):
            multi_sheet_workbook.rename_sheet("Users", "orders")


class TestOOXMLWorkbookTimeValues:
    """Tests for time of day and duration cells."""

    def test_time_and_timedelta_keep_their_types(self, ooxml_workbook: OOXMLWorkbook) -> None:
        """Test that time and timedelta values are not turned into strings."""
        ooxml_workbook.write_rows([[time(10, 30), timedelta(hours=2, minutes=15)]])

        assert ooxml_workbook.read_rows() == [[time(10, 30), timedelta(hours=2, minutes=15)]]
