"""Edit spreadsheet documents through A1 references."""

from __future__ import annotations

from .config import EngineConfig, configure_logging
from .container import load_document, new_document, save_document_as
from .core import (
    Cell,
    CellRef,
    ColumnRange,
    Document,
    RangeRef,
    Row,
    StyleDescriptor,
    Worksheet,
    parse_cell_ref,
    parse_range,
)
from .errors import (
    InvalidAddressError,
    MissingSharedStringTableError,
    StructuralInconsistencyError,
    WorksheetNotFoundError,
    XlGridError,
)
from .workbook import (
    get_worksheet,
    insert_worksheet,
    remove_worksheet,
    save_document,
    set_page_setup,
    set_print_area,
)
from .writer import WorksheetWriter

__all__ = [
    "Cell",
    "CellRef",
    "ColumnRange",
    "Document",
    "EngineConfig",
    "InvalidAddressError",
    "MissingSharedStringTableError",
    "RangeRef",
    "Row",
    "StructuralInconsistencyError",
    "StyleDescriptor",
    "Worksheet",
    "WorksheetNotFoundError",
    "WorksheetWriter",
    "XlGridError",
    "configure_logging",
    "get_worksheet",
    "insert_worksheet",
    "load_document",
    "new_document",
    "parse_cell_ref",
    "parse_range",
    "remove_worksheet",
    "save_document",
    "save_document_as",
    "set_page_setup",
    "set_print_area",
]
