"""
Service layer for workbook operations.

Contains the format-independent operations built on top of the factory,
decoupled from any caller.
"""

from kspreadsheet.services.spreadsheet_service import SpreadsheetService

__all__ = [
    "SpreadsheetService",
]
