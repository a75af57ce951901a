"""
Tests for the SpreadsheetService.

Tests the service layer over the factory: metadata, header extraction,
format conversion and OOXML export.
"""

import io
from datetime import datetime

import pytest
from openpyxl import load_workbook

from kspreadsheet.adapters.base import Workbook
from kspreadsheet.adapters.xlsxwriter_adapter import XlsxWriterAdapter
from kspreadsheet.config import Settings
from kspreadsheet.exceptions.spreadsheet_exceptions import ReadError, SheetNotFoundError
from kspreadsheet.factory import SpreadsheetType
from kspreadsheet.models.workbook_models import ExportResult, WorkbookInfo
from kspreadsheet.services.spreadsheet_service import SpreadsheetService


class TestSpreadsheetServiceInit:
    """Tests for service construction."""

    def test_init_with_defaults(self) -> None:
        """Test creating the service with default settings and exporter."""
        service = SpreadsheetService()

        assert service.settings.default_sheet_name == "Sheet1"
        assert isinstance(service.exporter, XlsxWriterAdapter)

    def test_init_with_custom_exporter(self, settings: Settings) -> None:
        """Test that a given exporter is used."""
        exporter = XlsxWriterAdapter()

        service = SpreadsheetService(settings=settings, exporter=exporter)

        assert service.exporter is exporter


class TestSpreadsheetServiceOpen:
    """Tests for create, open and metadata."""

    def test_create_uses_service_settings(self) -> None:
        """Test that created workbooks use the service's settings."""
        service = SpreadsheetService(settings=Settings(_env_file=None, default_sheet_name="Data"))

        workbook = service.create("report", SpreadsheetType.OPENDOCUMENT)

        assert workbook.sheet_names() == ["Data"]

    def test_open_and_get_info(
        self,
        spreadsheet_service: SpreadsheetService,
        multi_sheet_workbook: Workbook,
        save_bytes,
    ) -> None:
        """Test opening saved bytes and describing the workbook."""
        workbook = spreadsheet_service.open("copy", save_bytes(multi_sheet_workbook), SpreadsheetType.OOXML)

        info = spreadsheet_service.get_workbook_info(workbook)

        assert isinstance(info, WorkbookInfo)
        assert info.name == "copy"
        assert [sheet.name for sheet in info.sheets] == ["Users", "Products", "Orders"]

    def test_open_empty_stream(self, spreadsheet_service: SpreadsheetService) -> None:
        """Test that empty input raises ReadError."""
        with pytest.raises(ReadError):
            spreadsheet_service.open("empty", io.BytesIO(), SpreadsheetType.CSV_COMMA)


class TestSpreadsheetServiceReadSheet:
    """Tests for read_sheet."""

    def test_read_sheet_with_headers(
        self,
        spreadsheet_service: SpreadsheetService,
        multi_sheet_workbook: Workbook,
    ) -> None:
        """Test that the first row becomes the headers."""
        data = spreadsheet_service.read_sheet(multi_sheet_workbook, sheet_name="Orders", include_headers=True)

        assert data.headers == ["OrderID", "Customer"]
        assert data.rows == [[1, "Alice"], [2, "Bob"]]
        assert data.row_count == 2

    def test_read_sheet_without_headers(
        self,
        spreadsheet_service: SpreadsheetService,
        multi_sheet_workbook: Workbook,
    ) -> None:
        """Test that all rows are returned by default."""
        data = spreadsheet_service.read_sheet(multi_sheet_workbook, sheet_index=1)

        assert data.headers is None
        assert data.sheet_name == "Products"
        assert data.row_count == 2

    def test_headers_stringify_values(
        self,
        spreadsheet_service: SpreadsheetService,
        settings: Settings,
    ) -> None:
        """Test that non-string header cells become strings."""
        workbook = SpreadsheetType.OOXML.create_workbook("years", settings=settings)
        workbook.write_rows([[2024, None, "Total"], [1, 2, 3]])

        data = spreadsheet_service.read_sheet(workbook, include_headers=True)

        assert data.headers == ["2024", "", "Total"]

    def test_read_missing_sheet(
        self,
        spreadsheet_service: SpreadsheetService,
        multi_sheet_workbook: Workbook,
    ) -> None:
        """Test that a missing sheet raises SheetNotFoundError."""
        with pytest.raises(SheetNotFoundError):
            spreadsheet_service.read_sheet(multi_sheet_workbook, sheet_name="Missing")


class TestSpreadsheetServiceConvert:
    """Tests for converting between formats."""

    def test_convert_keeps_sheets_and_values(
        self,
        spreadsheet_service: SpreadsheetService,
        multi_sheet_workbook: Workbook,
    ) -> None:
        """Test converting OOXML to ODS keeps every sheet."""
        converted = spreadsheet_service.convert(multi_sheet_workbook, SpreadsheetType.OPENDOCUMENT)

        assert converted.spreadsheet_type == "opendocument"
        assert converted.name == "multi"
        assert converted.sheet_names() == ["Users", "Products", "Orders"]
        for sheet_name in converted.sheet_names():
            assert converted.read_rows(sheet_name=sheet_name) == multi_sheet_workbook.read_rows(sheet_name=sheet_name)

    def test_convert_to_legacy_excel(
        self,
        spreadsheet_service: SpreadsheetService,
        settings: Settings,
        sample_rows: list[list],
    ) -> None:
        """Test converting typed values into the legacy binary format."""
        source = SpreadsheetType.OPENDOCUMENT.create_workbook("typed", settings=settings)
        source.write_rows(sample_rows)

        converted = spreadsheet_service.convert(source, SpreadsheetType.EXCEL, name="typed.xls")

        assert converted.name == "typed.xls"
        assert converted.read_rows() == sample_rows

    def test_convert_to_csv_copies_first_sheet(
        self,
        spreadsheet_service: SpreadsheetService,
        multi_sheet_workbook: Workbook,
    ) -> None:
        """Test that a CSV target gets the first sheet as text."""
        converted = spreadsheet_service.convert(multi_sheet_workbook, SpreadsheetType.CSV_SEMICOLON)

        assert converted.sheet_names() == ["Users"]
        assert converted.read_rows() == [["Name", "Age"], ["Alice", "30"], ["Bob", "25"]]

        stream = io.BytesIO()
        converted.save(stream)
        assert stream.getvalue().decode("utf-8-sig").splitlines()[1] == "Alice;30"

    def test_convert_dates_to_csv(
        self,
        spreadsheet_service: SpreadsheetService,
        settings: Settings,
    ) -> None:
        """Test that dates are written to CSV in ISO format."""
        source = SpreadsheetType.OOXML.create_workbook("dates", settings=settings)
        source.write_rows([[datetime(2025, 1, 5, 9, 15)]])

        converted = spreadsheet_service.convert(source, SpreadsheetType.CSV_COMMA)

        assert converted.read_rows() == [["2025-01-05T09:15:00"]]

    @pytest.mark.parametrize(
        "target_type",
        [SpreadsheetType.OOXML, SpreadsheetType.EXCEL, SpreadsheetType.CSV_COMMA],
    )
    def test_convert_sheet_name_differing_only_in_case(
        self,
        spreadsheet_service: SpreadsheetService,
        settings: Settings,
        target_type: SpreadsheetType,
    ) -> None:
        """Test converting a first sheet named like the default sheet in other case."""
        source = SpreadsheetType.OPENDOCUMENT.create_workbook("lower", settings=settings)
        source.rename_sheet("Sheet1", "sheet1")
        source.write_rows([["a", "b"]])

        converted = spreadsheet_service.convert(source, target_type)

        assert converted.sheet_names() == ["sheet1"]
        assert converted.read_rows(sheet_name="sheet1") == [["a", "b"]]


class TestSpreadsheetServiceExport:
    """Tests for export_xlsx."""

    def test_export_returns_result_model(
        self,
        spreadsheet_service: SpreadsheetService,
        settings: Settings,
    ) -> None:
        """Test exporting a CSV workbook to OOXML."""
        workbook = SpreadsheetType.CSV_COMMA.open_workbook("people", b"Name,Age\nAlice,30\n", settings=settings)
        stream = io.BytesIO()

        result = spreadsheet_service.export_xlsx(workbook, stream, header_row=True)

        assert isinstance(result, ExportResult)
        assert result.workbook_name == "people"
        assert result.sheets_written == 1
        assert result.total_rows_written == 2
        assert result.size_bytes == len(stream.getvalue())

        stream.seek(0)
        sheet = load_workbook(stream).active
        assert sheet.title == "Sheet1"
        assert sheet["B2"].value == "30"
