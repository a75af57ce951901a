"""
CSV separator strategies.

A SeparatorStrategy fixes the field delimiter of a CSV workbook and builds
the CSVInitializer that produces its native CSVDocument, either empty or
tokenized from an input byte stream.

Example:
    initializer = SeparatorStrategy.SEMICOLON.create_initializer(stream)
    document = initializer.initialize()
    document.rows  # [["a", "b"], ["1", "2"]]
"""

import csv
import io
import logging
from enum import Enum
from typing import BinaryIO

from kspreadsheet.config import Settings, get_settings

logger = logging.getLogger(__name__)


class CSVDocument:
    """
    In-memory delimited table.

    Attributes:
        delimiter: Single-character field delimiter.
        rows: Rows of string fields.
    """

    def __init__(self, delimiter: str, rows: list[list[str]] | None = None) -> None:
        self.delimiter = delimiter
        self.rows = rows if rows is not None else []

    def __repr__(self) -> str:
        return f"CSVDocument(delimiter={self.delimiter!r}, rows={len(self.rows)})"


class CSVInitializer:
    """
    Builds a CSVDocument bound to one separator.

    Without a stream the document starts empty. With a stream the whole
    stream is decoded and tokenized by initialize().
    """

    def __init__(
        self,
        separator: "SeparatorStrategy",
        stream: BinaryIO | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.separator = separator
        self.stream = stream
        self.settings = settings or get_settings()

    def initialize(self) -> CSVDocument:
        """
        Produce the CSVDocument.

        Raises:
            ValueError: If the stream is empty.
            UnicodeDecodeError: If the stream is not valid in the configured encoding.
            csv.Error: If the tokenizer rejects the input.
        """
        if self.stream is None:
            return CSVDocument(self.separator.delimiter)

        data = self.stream.read()
        if not data:
            raise ValueError("input stream is empty")

        text = data.decode(self.settings.csv_encoding)
        reader = csv.reader(
            io.StringIO(text, newline=""),
            delimiter=self.separator.delimiter,
            quotechar=self.settings.csv_quotechar,
        )
        rows = [list(row) for row in reader]
        logger.debug("Tokenized %d CSV rows on %r", len(rows), self.separator.delimiter)
        return CSVDocument(self.separator.delimiter, rows)


class SeparatorStrategy(str, Enum):
    """Delimiter policy of a CSV workbook."""

    COMMA = ","
    SEMICOLON = ";"

    @property
    def delimiter(self) -> str:
        return self.value

    def create_initializer(
        self,
        stream: BinaryIO | None = None,
        settings: Settings | None = None,
    ) -> CSVInitializer:
        """
        Create an initializer for an empty table, or for parsing stream.

        Args:
            stream: Optional binary stream holding delimited text.
            settings: Optional settings overriding encoding and quoting.
        """
        return CSVInitializer(self, stream, settings)
