from __future__ import annotations

from .a1 import RangeRef, column_index_to_label
from .grid import find_cell, find_or_create_cell, find_or_create_cell_at, find_or_create_row
from .model import Cell, Document, Worksheet
from .styles import StyleDescriptor, default_style, descriptor_at, resolve_cell_format


def cell_style(
    document: Document, sheet: Worksheet, reference: str
) -> StyleDescriptor | None:
    """Return the style of an existing, styled cell, or None."""
    cell = find_cell(sheet, reference)
    if cell is None or cell.style_index is None:
        return None
    return descriptor_at(document.stylesheet, cell.style_index)


def cell_style_with_default(
    document: Document, sheet: Worksheet, reference: str
) -> StyleDescriptor:
    """Return the cell style, falling back to the document default style."""
    style = cell_style(document, sheet, reference)
    if style is None:
        return default_style(document.stylesheet)
    return style


def resolve_style(document: Document, style: StyleDescriptor) -> int:
    """Intern ``style`` into the document stylesheet and return its index."""
    return resolve_cell_format(
        document.stylesheet,
        style,
        number_format_base=document.config.custom_number_format_base,
    )


def set_cell_style(
    document: Document, sheet: Worksheet, reference: str, style: StyleDescriptor
) -> Cell:
    """Apply ``style`` to one cell, creating the cell when needed."""
    cell = find_or_create_cell_at(sheet, reference)
    cell.style_index = resolve_style(document, style)
    return cell


def set_range_style(
    document: Document, sheet: Worksheet, region: RangeRef, style: StyleDescriptor
) -> None:
    """Apply ``style`` to every cell of ``region``; corners may be reversed."""
    style_index = resolve_style(document, style)
    min_col, min_row, max_col, max_row = region.bounds()
    for row_index in range(min_row, max_row + 1):
        row = find_or_create_row(sheet, row_index)
        for col_index in range(min_col, max_col + 1):
            cell = find_or_create_cell(row, column_index_to_label(col_index))
            cell.style_index = style_index
