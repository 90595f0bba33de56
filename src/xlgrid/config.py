from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_COLUMN_WIDTH = 9.140625
CUSTOM_NUMBER_FORMAT_BASE = 164
RESERVED_DATE_FORMAT_ID = 14
DATE_FORMAT_CODE = "mm-dd-yy"
DEFAULT_FONT_NAME = "Calibri"
DEFAULT_FONT_SIZE = 11.0
DEFAULT_PAPER_SIZE = 9


class EngineConfig(BaseModel):
    """Configuration shared by a document and the writers bound to it."""

    default_column_width: float = Field(
        default=DEFAULT_COLUMN_WIDTH,
        gt=0,
        description="Width given to a column range created on first access.",
    )
    custom_number_format_base: int = Field(
        default=CUSTOM_NUMBER_FORMAT_BASE,
        ge=0,
        description="First id handed out to custom number formats.",
    )
    reserved_date_format_id: int = Field(
        default=RESERVED_DATE_FORMAT_ID,
        ge=0,
        description="Built-in number format used for unstyled dates.",
    )
    date_format_code: str = Field(
        default=DATE_FORMAT_CODE,
        description="Format code applied to styled dates.",
    )
    default_font_name: str = Field(
        default=DEFAULT_FONT_NAME, description="Font of the seeded default style."
    )
    default_font_size: float = Field(
        default=DEFAULT_FONT_SIZE, gt=0, description="Size of the seeded default font."
    )
    default_paper_size: int = Field(
        default=DEFAULT_PAPER_SIZE,
        ge=1,
        description="Paper size added with a print area when a sheet has no page setup.",
    )
    log_level: str = Field(default="INFO", description="Logging level.")
    log_file: Path | None = Field(default=None, description="Optional log file path.")


def configure_logging(config: EngineConfig) -> None:
    """Configure logging for processes embedding the engine.

    Args:
        config: Engine configuration.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.log_file is not None:
        handlers.append(logging.FileHandler(config.log_file))
    logging.basicConfig(
        level=config.log_level.upper(),
        handlers=handlers,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
