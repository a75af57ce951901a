"""
Data models for workbooks.

Contains Pydantic models for the format-independent views of a workbook.
"""

from kspreadsheet.models.workbook_models import (
    CellRange,
    ExportResult,
    SheetData,
    SheetInfo,
    WorkbookInfo,
)

__all__ = [
    "CellRange",
    "SheetInfo",
    "WorkbookInfo",
    "SheetData",
    "ExportResult",
]
