"""
Workbook adapters, one per spreadsheet format.

Implements the adapter pattern over third-party codecs:
- ExcelWorkbook: legacy binary Excel via xlrd (decode) and xlwt (encode)
- OOXMLWorkbook: Excel 2007+ via openpyxl
- OpenDocumentWorkbook: OpenDocument Spreadsheet via odfpy
- CSVWorkbook: delimited text via the csv module
- XlsxWriterAdapter: OOXML export of any workbook via XlsxWriter
"""

from kspreadsheet.adapters.base import Workbook
from kspreadsheet.adapters.csv_adapter import CSVWorkbook
from kspreadsheet.adapters.excel_adapter import ExcelWorkbook
from kspreadsheet.adapters.ooxml_adapter import OOXMLWorkbook
from kspreadsheet.adapters.opendocument_adapter import OpenDocumentWorkbook
from kspreadsheet.adapters.xlsxwriter_adapter import XlsxWriterAdapter

__all__ = [
    "Workbook",
    "ExcelWorkbook",
    "OOXMLWorkbook",
    "OpenDocumentWorkbook",
    "CSVWorkbook",
    "XlsxWriterAdapter",
]
