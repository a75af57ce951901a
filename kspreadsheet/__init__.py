"""
KSpreadsheet: one workbook interface over several spreadsheet formats.

This package creates and opens workbooks in legacy binary Excel, OOXML
Excel, OpenDocument Spreadsheet and delimited CSV text through a single
factory, and wraps each codec's native document in a common Workbook
adapter.

Architecture:
    - SpreadsheetType: closed set of formats dispatched to (create, open) pairs
    - Adapters: xlrd/xlwt, openpyxl, odfpy and csv behind one Workbook contract
    - SpreadsheetService: info, sheet reading, conversion and XlsxWriter export
"""

from kspreadsheet.adapters.base import Workbook
from kspreadsheet.factory import Spreadsheet, SpreadsheetType, create_workbook, open_workbook
from kspreadsheet.separator import SeparatorStrategy

__version__ = "0.1.0"

__all__ = [
    "Workbook",
    "Spreadsheet",
    "SpreadsheetType",
    "SeparatorStrategy",
    "create_workbook",
    "open_workbook",
]
