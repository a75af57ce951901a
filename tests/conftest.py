"""
Test fixtures and utilities for the kspreadsheet tests.

This module provides shared fixtures including settings, sample rows,
and pre-built workbooks of every format.
"""

import io
import os
from collections.abc import Callable, Generator
from datetime import datetime
from unittest.mock import patch

import pytest

from kspreadsheet.adapters.base import Workbook
from kspreadsheet.config import Settings, get_settings
from kspreadsheet.factory import SpreadsheetType
from kspreadsheet.services.spreadsheet_service import SpreadsheetService


@pytest.fixture(autouse=True)
def clean_environment() -> Generator[None, None, None]:
    """
    Isolate tests from KSPREADSHEET_* variables and the cached settings.

    Yields:
        None.
    """
    env = {key: value for key, value in os.environ.items() if not key.startswith("KSPREADSHEET_")}
    with patch.dict(os.environ, env, clear=True):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """
    Create default Settings without reading a .env file.

    Returns:
        Settings instance.
    """
    return Settings(_env_file=None)


@pytest.fixture
def spreadsheet_service(settings: Settings) -> SpreadsheetService:
    """
    Create a SpreadsheetService instance for testing.

    Returns:
        SpreadsheetService instance.
    """
    return SpreadsheetService(settings=settings)


@pytest.fixture
def sample_rows() -> list[list]:
    """
    Return sample rows with a header and mixed value types.

    Returns:
        List of rows.
    """
    return [
        ["Name", "Age", "Score", "Active", "Joined"],
        ["Alice", 30, 91.5, True, datetime(2024, 1, 5, 10, 30)],
        ["Bob", 25, 78.25, False, datetime(2023, 11, 20, 8, 0)],
        ["Charlie", 35, 88, True, datetime(2022, 6, 1, 0, 0)],
    ]


@pytest.fixture
def users_rows() -> list[list]:
    """
    Return string and integer rows that every format preserves.

    Returns:
        List of rows.
    """
    return [
        ["Name", "Age"],
        ["Alice", 30],
        ["Bob", 25],
    ]


def _save_to_bytes(workbook: Workbook) -> bytes:
    stream = io.BytesIO()
    workbook.save(stream)
    return stream.getvalue()


@pytest.fixture
def save_bytes() -> Callable[[Workbook], bytes]:
    """
    Return a helper serializing a workbook with its own codec.

    Returns:
        Function mapping a Workbook to its saved bytes.
    """
    return _save_to_bytes


@pytest.fixture
def multi_sheet_workbook(settings: Settings, users_rows: list[list]) -> Workbook:
    """
    Create an OOXML workbook with three sheets.

    Returns:
        OOXML Workbook with sheets Users, Products and Orders.
    """
    workbook = SpreadsheetType.OOXML.create_workbook("multi", settings=settings)
    workbook.rename_sheet("Sheet1", "Users")
    workbook.write_rows(users_rows, sheet_name="Users")
    workbook.create_sheet("Products")
    workbook.write_rows([["Widget", 10.99], ["Gadget", 24.99]], sheet_name="Products")
    workbook.create_sheet("Orders")
    workbook.write_rows(
        [["OrderID", "Customer"], [1, "Alice"], [2, "Bob"]],
        sheet_name="Orders",
    )
    return workbook
