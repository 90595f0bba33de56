"""Cell addressing, grid editing, style interning and derived metadata."""

from __future__ import annotations

from .a1 import CellRef, RangeRef, parse_cell_ref, parse_range
from .model import (
    Cell,
    ColumnRange,
    DefinedName,
    Document,
    MergeRegion,
    PageSetup,
    Row,
    SharedStringTable,
    Worksheet,
)
from .styles import StyleDescriptor, Stylesheet

__all__ = [
    "Cell",
    "CellRef",
    "ColumnRange",
    "DefinedName",
    "Document",
    "MergeRegion",
    "PageSetup",
    "RangeRef",
    "Row",
    "SharedStringTable",
    "StyleDescriptor",
    "Stylesheet",
    "Worksheet",
    "parse_cell_ref",
    "parse_range",
]
