"""Configuration management for KSpreadsheet.

Settings are loaded with pydantic-settings. Every option can be set through
an environment variable with the KSPREADSHEET_ prefix, or through a .env file
in the working directory.

Environment Variables:
    KSPREADSHEET_DEFAULT_SHEET_NAME: Name of the first sheet of new workbooks (default: Sheet1)
    KSPREADSHEET_CSV_ENCODING: Text encoding of CSV streams (default: utf-8-sig)
    KSPREADSHEET_CSV_LINE_TERMINATOR: Line terminator used when saving CSV (default: \\r\\n)
    KSPREADSHEET_CSV_QUOTECHAR: Quote character for CSV fields (default: ")
    KSPREADSHEET_MAX_INPUT_SIZE_MB: Largest stream accepted by open_workbook (default: 100)
    KSPREADSHEET_LOG_LEVEL: Level of the kspreadsheet logger (default: WARNING)
"""

import logging
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings loaded from environment variables.

    Example .env file:
        KSPREADSHEET_DEFAULT_SHEET_NAME=Data
        KSPREADSHEET_CSV_ENCODING=cp1252
        KSPREADSHEET_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="KSPREADSHEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # Workbook Settings
    # =========================================================================

    default_sheet_name: str = "Sheet1"
    """Name given to the single sheet of a newly created workbook."""

    max_input_size_mb: int = 100
    """Largest input stream, in megabytes, that open_workbook will read."""

    # =========================================================================
    # CSV Settings
    # =========================================================================

    csv_encoding: str = "utf-8-sig"
    """Encoding used to decode and encode CSV byte streams."""

    csv_line_terminator: str = "\r\n"
    """Line terminator written by CSVWorkbook.save."""

    csv_quotechar: str = '"'
    """Quote character for CSV fields."""

    # =========================================================================
    # Logging Settings
    # =========================================================================

    log_level: str = "WARNING"
    """Level applied to the kspreadsheet logger by configure_logging."""

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("default_sheet_name")
    @classmethod
    def validate_sheet_name(cls, v: str) -> str:
        """Validate the sheet name is usable by every supported format."""
        v = v.strip()
        if not v:
            raise ValueError("default_sheet_name must be a non-empty string")
        if len(v) > 31:
            raise ValueError(f"default_sheet_name must be at most 31 characters, got {len(v)}")
        return v

    @field_validator("max_input_size_mb")
    @classmethod
    def validate_input_size(cls, v: int) -> int:
        """Validate input size limit is positive."""
        if v < 1:
            raise ValueError(f"max_input_size_mb must be at least 1, got {v}")
        return v

    @field_validator("csv_quotechar")
    @classmethod
    def validate_quotechar(cls, v: str) -> str:
        """Validate the quote character is a single character."""
        if len(v) != 1:
            raise ValueError(f"csv_quotechar must be a single character, got {v!r}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(sorted(valid_levels))}"
            )
        return upper_v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def max_input_size_bytes(self) -> int:
        """Get max input size in bytes."""
        return self.max_input_size_mb * 1024 * 1024

    @property
    def log_level_int(self) -> int:
        """Get log level as integer for logging module."""
        level: int = getattr(logging, self.log_level)
        return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide Settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """
    Apply the configured log level to the kspreadsheet logger.

    Handlers are left to the application.
    """
    settings = settings or get_settings()
    logging.getLogger("kspreadsheet").setLevel(settings.log_level_int)
