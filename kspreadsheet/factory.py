"""
Factory which creates or opens workbooks of any supported format.

SpreadsheetType is the closed set of built-in formats. Each member maps,
through a dispatch table, to a pair of functions: one allocating a new
native document, one decoding a byte stream. Both wrap the result in the
format's Workbook adapter.

create_workbook and open_workbook also accept any object implementing the
Spreadsheet protocol, so callers can plug in their own formats.

Example:
    workbook = create_workbook("report", SpreadsheetType.OOXML)

    with open("legacy.xls", "rb") as stream:
        legacy = open_workbook("legacy", stream, SpreadsheetType.EXCEL)
"""

import io
import logging
from collections.abc import Callable
from enum import Enum
from functools import partial
from typing import BinaryIO, Protocol, runtime_checkable

from odf import opendocument
from openpyxl import Workbook as OpenpyxlWorkbook
from openpyxl import load_workbook

from kspreadsheet.adapters.base import Workbook
from kspreadsheet.adapters.csv_adapter import CSVWorkbook
from kspreadsheet.adapters.excel_adapter import ExcelWorkbook
from kspreadsheet.adapters.ooxml_adapter import OOXMLWorkbook
from kspreadsheet.adapters.opendocument_adapter import SPREADSHEET_MIMETYPE, OpenDocumentWorkbook
from kspreadsheet.config import Settings, get_settings
from kspreadsheet.exceptions.spreadsheet_exceptions import (
    CreateError,
    InvalidFileFormatError,
    ReadError,
    SpreadsheetError,
)
from kspreadsheet.separator import SeparatorStrategy

logger = logging.getLogger(__name__)

StreamInput = BinaryIO | bytes | bytearray | memoryview


@runtime_checkable
class Spreadsheet(Protocol):
    """A format able to create and open workbooks."""

    def create_workbook(self, name: str) -> Workbook: ...

    def open_workbook(self, name: str, stream: StreamInput) -> Workbook: ...


class SpreadsheetType(str, Enum):
    """Built-in spreadsheet formats."""

    EXCEL = "excel"
    OOXML = "ooxml"
    OPENDOCUMENT = "opendocument"
    CSV_COMMA = "csv_comma"
    CSV_SEMICOLON = "csv_semicolon"

    def create_workbook(self, name: str, settings: Settings | None = None) -> Workbook:
        """
        Create a new, empty workbook of this format.

        The workbook holds one empty sheet named after
        Settings.default_sheet_name.

        Raises:
            CreateError: If the codec cannot allocate a new document.
        """
        settings = settings or get_settings()
        create, _ = _DISPATCH[self]
        logger.debug("Creating %s workbook %r", self.value, name)

        try:
            return create(name, settings)
        except SpreadsheetError:
            raise
        except Exception as e:
            raise CreateError(
                workbook_name=name,
                spreadsheet_type=self.value,
                reason=str(e),
            ) from e

    def open_workbook(
        self,
        name: str,
        stream: StreamInput,
        settings: Settings | None = None,
    ) -> Workbook:
        """
        Open a workbook of this format from a byte stream.

        The stream is read to the end but not closed.

        Raises:
            ReadError: If the stream is empty, too large or cannot be read.
            InvalidFileFormatError: If the bytes are not a valid document of this format.
        """
        settings = settings or get_settings()
        data = _read_input(name, stream, settings)
        _, open_ = _DISPATCH[self]
        logger.debug("Opening %s workbook %r from %d bytes", self.value, name, len(data))

        try:
            return open_(name, data, settings)
        except SpreadsheetError:
            raise
        except Exception as e:
            raise InvalidFileFormatError(
                workbook_name=name,
                spreadsheet_type=self.value,
                reason=str(e),
            ) from e

    @property
    def separator(self) -> SeparatorStrategy | None:
        """Separator strategy of a CSV format, None for the others."""
        return _SEPARATORS.get(self)


def create_workbook(
    name: str,
    spreadsheet: Spreadsheet,
    settings: Settings | None = None,
) -> Workbook:
    """
    Create a new workbook of the given type.

    Args:
        name: Label of the new workbook.
        spreadsheet: A SpreadsheetType or any Spreadsheet implementation.
        settings: Optional settings for built-in types.

    Raises:
        CreateError: If the codec cannot allocate a new document.
    """
    if isinstance(spreadsheet, SpreadsheetType):
        return spreadsheet.create_workbook(name, settings=settings)
    return spreadsheet.create_workbook(name)


def open_workbook(
    name: str,
    stream: StreamInput,
    spreadsheet: Spreadsheet,
    settings: Settings | None = None,
) -> Workbook:
    """
    Open a workbook of the given type from a byte stream.

    The format is never guessed: the caller must know it in advance.

    Args:
        name: Label of the workbook.
        stream: Binary stream or bytes holding the document.
        spreadsheet: A SpreadsheetType or any Spreadsheet implementation.
        settings: Optional settings for built-in types.

    Raises:
        ReadError: If the input cannot be read or is not a valid document.
    """
    if isinstance(spreadsheet, SpreadsheetType):
        return spreadsheet.open_workbook(name, stream, settings=settings)
    return spreadsheet.open_workbook(name, stream)


def _read_input(name: str, stream: StreamInput, settings: Settings) -> bytes:
    limit = settings.max_input_size_bytes

    if isinstance(stream, (bytes, bytearray, memoryview)):
        data = bytes(stream)
    else:
        data = _read_stream(name, stream, limit + 1)

    if not data:
        raise ReadError(workbook_name=name, reason="input stream is empty")
    if len(data) > limit:
        raise ReadError(
            workbook_name=name,
            reason=f"input exceeds {settings.max_input_size_mb} MB",
        )
    return data


def _read_stream(name: str, stream: BinaryIO, size: int) -> bytes:
    """Read up to size bytes, looping over short reads until EOF."""
    buffer = bytearray()
    try:
        while len(buffer) < size:
            chunk = stream.read(size - len(buffer))
            if isinstance(chunk, str):
                raise ReadError(workbook_name=name, reason="expected a binary stream, got text")
            if not chunk:
                break
            buffer += chunk
    except (OSError, ValueError) as e:
        raise ReadError(workbook_name=name, reason=str(e)) from e
    return bytes(buffer)


# ==================== FORMAT FUNCTIONS ====================


def _create_excel(name: str, settings: Settings) -> ExcelWorkbook:
    return ExcelWorkbook(name, ExcelWorkbook.new_document(settings.default_sheet_name))


def _open_excel(name: str, data: bytes, settings: Settings) -> ExcelWorkbook:
    return ExcelWorkbook(name, ExcelWorkbook.decode(data))


def _create_ooxml(name: str, settings: Settings) -> OOXMLWorkbook:
    book = OpenpyxlWorkbook()
    book.active.title = settings.default_sheet_name
    return OOXMLWorkbook(name, book)


def _open_ooxml(name: str, data: bytes, settings: Settings) -> OOXMLWorkbook:
    return OOXMLWorkbook(name, load_workbook(io.BytesIO(data)))


def _create_opendocument(name: str, settings: Settings) -> OpenDocumentWorkbook:
    return OpenDocumentWorkbook(name, OpenDocumentWorkbook.new_document(settings.default_sheet_name))


def _open_opendocument(name: str, data: bytes, settings: Settings) -> OpenDocumentWorkbook:
    document = opendocument.load(io.BytesIO(data))
    if document.mimetype != SPREADSHEET_MIMETYPE:
        raise InvalidFileFormatError(
            workbook_name=name,
            spreadsheet_type=SpreadsheetType.OPENDOCUMENT.value,
            reason=f"package is {document.mimetype}, not a spreadsheet",
        )
    return OpenDocumentWorkbook(name, document)


def _create_csv(separator: SeparatorStrategy, name: str, settings: Settings) -> CSVWorkbook:
    return CSVWorkbook(name, separator.create_initializer(settings=settings), settings)


def _open_csv(separator: SeparatorStrategy, name: str, data: bytes, settings: Settings) -> CSVWorkbook:
    return CSVWorkbook(name, separator.create_initializer(io.BytesIO(data), settings), settings)


CreateFunction = Callable[[str, Settings], Workbook]
OpenFunction = Callable[[str, bytes, Settings], Workbook]

_SEPARATORS: dict[SpreadsheetType, SeparatorStrategy] = {
    SpreadsheetType.CSV_COMMA: SeparatorStrategy.COMMA,
    SpreadsheetType.CSV_SEMICOLON: SeparatorStrategy.SEMICOLON,
}

_DISPATCH: dict[SpreadsheetType, tuple[CreateFunction, OpenFunction]] = {
    SpreadsheetType.EXCEL: (_create_excel, _open_excel),
    SpreadsheetType.OOXML: (_create_ooxml, _open_ooxml),
    SpreadsheetType.OPENDOCUMENT: (_create_opendocument, _open_opendocument),
    **{
        spreadsheet_type: (partial(_create_csv, separator), partial(_open_csv, separator))
        for spreadsheet_type, separator in _SEPARATORS.items()
    },
}
