from __future__ import annotations

import logging

from .a1 import column_index_to_label, parse_cell_ref
from .grid import validate_worksheet
from .model import Worksheet

logger = logging.getLogger(__name__)

EMPTY_DIMENSION = "A1"


def recompute_row_spans(sheet: Worksheet) -> None:
    """Set ``first:last`` column span hints on every non-empty row."""
    for row in sheet.rows:
        if not row.cells:
            continue
        first = parse_cell_ref(row.cells[0].reference).column_index
        last = parse_cell_ref(row.cells[-1].reference).column_index
        row.spans = f"{first}:{last}"


def recompute_sheet_dimension(sheet: Worksheet) -> str:
    """Recompute and store the bounding reference of all cells in the sheet.

    Returns:
        ``"A1"`` for an empty sheet, a single reference when one cell is
        used, otherwise ``"TL:BR"``.
    """
    min_col: int | None = None
    max_col: int | None = None
    min_row: int | None = None
    max_row: int | None = None
    for row in sheet.rows:
        if not row.cells:
            continue
        first = parse_cell_ref(row.cells[0].reference).column_index
        last = parse_cell_ref(row.cells[-1].reference).column_index
        min_col = first if min_col is None else min(min_col, first)
        max_col = last if max_col is None else max(max_col, last)
        min_row = row.index if min_row is None else min(min_row, row.index)
        max_row = row.index if max_row is None else max(max_row, row.index)

    if min_col is None or max_col is None or min_row is None or max_row is None:
        sheet.dimension = EMPTY_DIMENSION
        return sheet.dimension

    start = f"{column_index_to_label(min_col)}{min_row}"
    end = f"{column_index_to_label(max_col)}{max_row}"
    sheet.dimension = start if start == end else f"{start}:{end}"
    return sheet.dimension


def refresh_worksheet(sheet: Worksheet) -> str:
    """Validate a sheet and recompute its cached span and dimension hints."""
    validate_worksheet(sheet)
    recompute_row_spans(sheet)
    dimension = recompute_sheet_dimension(sheet)
    logger.debug("Worksheet %r dimension recomputed as %s.", sheet.name, dimension)
    return dimension
