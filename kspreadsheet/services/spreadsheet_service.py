"""
Core spreadsheet service layer.

This module provides the SpreadsheetService class, a single entry point
over the factory and the adapters. It returns pydantic models for workbook
metadata and sheet contents, and adds the operations that span two formats:
conversion and OOXML export.

Example:
    service = SpreadsheetService()

    with open("legacy.xls", "rb") as stream:
        workbook = service.open("legacy", stream, SpreadsheetType.EXCEL)

    info = service.get_workbook_info(workbook)
    data = service.read_sheet(workbook, include_headers=True)

    as_ods = service.convert(workbook, SpreadsheetType.OPENDOCUMENT)
"""

import logging
from typing import BinaryIO

from kspreadsheet.adapters.base import Workbook
from kspreadsheet.adapters.xlsxwriter_adapter import XlsxWriterAdapter
from kspreadsheet.config import Settings, get_settings
from kspreadsheet.factory import Spreadsheet, SpreadsheetType, StreamInput, create_workbook, open_workbook
from kspreadsheet.models.workbook_models import ExportResult, SheetData, WorkbookInfo

logger = logging.getLogger(__name__)


class SpreadsheetService:
    """
    Service layer for workbook operations.

    Attributes:
        settings: Settings passed to built-in spreadsheet types.
        exporter: XlsxWriterAdapter used by export_xlsx.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        exporter: XlsxWriterAdapter | None = None,
    ) -> None:
        """
        Initialize the SpreadsheetService.

        Args:
            settings: Optional Settings. If None, uses get_settings().
            exporter: Optional XlsxWriterAdapter instance.
                      If None, creates a new instance.
        """
        self.settings = settings or get_settings()
        self.exporter = exporter or XlsxWriterAdapter()

    def create(self, name: str, spreadsheet_type: Spreadsheet) -> Workbook:
        """
        Create a new, empty workbook.

        Raises:
            CreateError: If the codec cannot allocate a new document.
        """
        return create_workbook(name, spreadsheet_type, settings=self.settings)

    def open(self, name: str, stream: StreamInput, spreadsheet_type: Spreadsheet) -> Workbook:
        """
        Open a workbook from a byte stream.

        Raises:
            ReadError: If the stream is empty or not a valid document.
        """
        return open_workbook(name, stream, spreadsheet_type, settings=self.settings)

    def get_workbook_info(self, workbook: Workbook) -> WorkbookInfo:
        """Get metadata about a workbook and each of its sheets."""
        return workbook.get_info()

    def read_sheet(
        self,
        workbook: Workbook,
        sheet_name: str | None = None,
        sheet_index: int | None = None,
        include_headers: bool = False,
        skip_empty_rows: bool = False,
    ) -> SheetData:
        """
        Read a sheet with optional header extraction.

        Args:
            workbook: Workbook to read from.
            sheet_name: Name of the sheet. If None and sheet_index is None,
                       reads the first sheet.
            sheet_index: Index of the sheet (0-based). Used if sheet_name is None.
            include_headers: Whether to treat the first row as headers.
            skip_empty_rows: Whether to skip empty rows.

        Returns:
            SheetData containing the sheet contents.

        Raises:
            SheetNotFoundError: If the specified sheet does not exist.
        """
        sheet_data = workbook.read_sheet(
            sheet_name=sheet_name,
            sheet_index=sheet_index,
            skip_empty_rows=skip_empty_rows,
        )

        if include_headers and sheet_data.rows:
            first_row = sheet_data.rows[0]
            sheet_data.headers = [str(cell) if cell is not None else "" for cell in first_row]
            sheet_data.rows = sheet_data.rows[1:]
            sheet_data.row_count = len(sheet_data.rows)

        return sheet_data

    def convert(
        self,
        workbook: Workbook,
        target_type: SpreadsheetType,
        name: str | None = None,
    ) -> Workbook:
        """
        Copy a workbook's values into a new workbook of another format.

        Sheet names and order are kept. A CSV target holds a single table,
        so only the first sheet is copied into it.

        Args:
            workbook: Source workbook.
            target_type: Format of the new workbook.
            name: Name of the new workbook. Defaults to the source name.

        Returns:
            The new workbook.
        """
        target = self.create(name or workbook.name, target_type)
        sheet_names = workbook.sheet_names()
        if target_type.separator is not None:
            sheet_names = sheet_names[:1]

        logger.debug(
            "Converting %s workbook %r to %s (%d sheets)",
            workbook.spreadsheet_type,
            workbook.name,
            target_type.value,
            len(sheet_names),
        )

        for index, sheet_name in enumerate(sheet_names):
            if index == 0:
                target.rename_sheet(target.sheet_names()[0], sheet_name)
            else:
                target.create_sheet(sheet_name)
            target.write_rows(workbook.read_rows(sheet_index=index), sheet_index=index)

        return target

    def export_xlsx(
        self,
        workbook: Workbook,
        stream: BinaryIO,
        header_row: bool = False,
        auto_format: bool = True,
    ) -> ExportResult:
        """
        Export a workbook of any format to an OOXML byte stream.

        Raises:
            WriteError: If writing fails.
        """
        result = self.exporter.write_workbook(
            workbook,
            stream,
            header_row=header_row,
            auto_format=auto_format,
        )
        return ExportResult(**result)
