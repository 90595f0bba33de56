"""Directional borders around rectangular regions.

Each edge is composited onto the cell's current style, so fills, fonts and
number formats already on the cell survive. Where two drawn rectangles share a
cell edge the later call wins.
"""

from __future__ import annotations

from collections.abc import Callable
import logging

from ..types import BorderSide, BorderStyleType
from .a1 import RangeRef, column_index_to_label
from .formatting import cell_style_with_default, set_cell_style
from .model import Document, Worksheet
from .styles import StyleDescriptor

logger = logging.getLogger(__name__)

EdgeUpdate = Callable[[StyleDescriptor, BorderSide], StyleDescriptor]


def draw_border(
    document: Document,
    sheet: Worksheet,
    region: RangeRef,
    color: str,
    style: BorderStyleType,
) -> None:
    """Draw an outline around ``region``.

    Args:
        document: Document owning the stylesheet.
        sheet: Worksheet containing the region.
        region: Rectangle to outline; corners may be given in any order.
        color: Edge color as ``RRGGBB`` or ``AARRGGBB``.
        style: Edge line style.
    """

    def _set(descriptor: StyleDescriptor, side: BorderSide) -> StyleDescriptor:
        return descriptor.with_border_edge(side, color, style)

    _apply_outline(document, sheet, region, _set)
    logger.debug("Drew %s border around %s in %r.", style, region, sheet.name)


def clear_border(document: Document, sheet: Worksheet, region: RangeRef) -> None:
    """Clear the outline edges of ``region`` without touching inner edges."""

    def _clear(descriptor: StyleDescriptor, side: BorderSide) -> StyleDescriptor:
        return descriptor.without_border_edge(side)

    _apply_outline(document, sheet, region, _clear)
    logger.debug("Cleared border around %s in %r.", region, sheet.name)


def _apply_outline(
    document: Document, sheet: Worksheet, region: RangeRef, update: EdgeUpdate
) -> None:
    min_col, min_row, max_col, max_row = region.bounds()
    first_column = column_index_to_label(min_col)
    last_column = column_index_to_label(max_col)
    for row_index in range(min_row, max_row + 1):
        if row_index in (min_row, max_row):
            for col_index in range(min_col, max_col + 1):
                reference = f"{column_index_to_label(col_index)}{row_index}"
                if row_index == min_row:
                    _update_edge(document, sheet, reference, "top", update)
                if row_index == max_row:
                    _update_edge(document, sheet, reference, "bottom", update)
        _update_edge(document, sheet, f"{first_column}{row_index}", "left", update)
        _update_edge(document, sheet, f"{last_column}{row_index}", "right", update)


def _update_edge(
    document: Document,
    sheet: Worksheet,
    reference: str,
    side: BorderSide,
    update: EdgeUpdate,
) -> None:
    current = cell_style_with_default(document, sheet, reference)
    set_cell_style(document, sheet, reference, update(current, side))
