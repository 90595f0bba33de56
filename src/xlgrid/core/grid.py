from __future__ import annotations

from bisect import bisect_left
import logging

from ..config import DEFAULT_COLUMN_WIDTH
from ..errors import InvalidAddressError, StructuralInconsistencyError
from .a1 import column_index_to_label, column_label_to_index, parse_cell_ref
from .model import Cell, ColumnRange, Row, Worksheet

logger = logging.getLogger(__name__)


def find_row(sheet: Worksheet, row_index: int) -> Row | None:
    """Return the row at ``row_index`` or None when it does not exist."""
    position = bisect_left(sheet.rows, row_index, key=_row_key)
    if position < len(sheet.rows) and sheet.rows[position].index == row_index:
        return sheet.rows[position]
    return None


def find_or_create_row(sheet: Worksheet, row_index: int) -> Row:
    """Return the row at ``row_index``, inserting it in order when missing.

    Raises:
        InvalidAddressError: If ``row_index`` is not positive.
        StructuralInconsistencyError: If the rows are not strictly ascending.
    """
    _require_positive_row(row_index)
    _check_row_order(sheet)
    position = bisect_left(sheet.rows, row_index, key=_row_key)
    if position < len(sheet.rows) and sheet.rows[position].index == row_index:
        return sheet.rows[position]
    row = Row(index=row_index)
    sheet.rows.insert(position, row)
    return row


def find_cell(sheet: Worksheet, reference: str) -> Cell | None:
    """Return the cell at ``reference`` or None when it does not exist."""
    ref = parse_cell_ref(reference)
    row = find_row(sheet, ref.row)
    if row is None:
        return None
    return _cell_in_row(row, ref.coordinate)


def find_or_create_cell(row: Row, column: str) -> Cell:
    """Return the cell in ``row`` at ``column``, inserting it in column order.

    The insert position is decided by column index so that ``AA`` sorts after
    ``Z``. The label is normalized, so ``$b`` and ``B`` name the same cell.

    Raises:
        InvalidAddressError: If ``column`` is not a column label.
        StructuralInconsistencyError: If the row's cells are not strictly
            ascending.
    """
    column_index = column_label_to_index(column)
    reference = f"{column_index_to_label(column_index)}{row.index}"
    _check_cell_order(row)
    existing = _cell_in_row(row, reference)
    if existing is not None:
        return existing
    cell = Cell(reference=reference)
    for position, candidate in enumerate(row.cells):
        if parse_cell_ref(candidate.reference).column_index > column_index:
            row.cells.insert(position, cell)
            return cell
    row.cells.append(cell)
    return cell


def find_or_create_cell_at(sheet: Worksheet, reference: str) -> Cell:
    """Resolve ``reference`` to a cell, creating its row and cell as needed."""
    ref = parse_cell_ref(reference)
    return find_or_create_cell(find_or_create_row(sheet, ref.row), ref.column)


def insert_rows(sheet: Worksheet, at_index: int, count: int) -> None:
    """Shift rows at or below ``at_index`` down by ``count``.

    Cell references move with their rows. Formula text is left as is, so
    formulas pointing at shifted cells keep their old targets.
    """
    _require_positive_row(at_index)
    if count < 0:
        raise InvalidAddressError(f"Row count must not be negative, got {count}.")
    if count == 0:
        return
    _validate_rows(sheet)
    moved = 0
    for row in sheet.rows:
        if row.index >= at_index:
            _renumber_row(row, row.index + count)
            moved += 1
    logger.debug(
        "Inserted %d row(s) at %d in %r; %d row(s) moved.",
        count,
        at_index,
        sheet.name,
        moved,
    )


def delete_rows(sheet: Worksheet, at_index: int, count: int) -> None:
    """Remove rows in ``[at_index, at_index + count)`` and close the gap.

    Deleting rows that do not exist only renumbers the rows below them.
    """
    _require_positive_row(at_index)
    if count < 0:
        raise InvalidAddressError(f"Row count must not be negative, got {count}.")
    if count == 0:
        return
    _validate_rows(sheet)
    end_index = at_index + count
    kept = [row for row in sheet.rows if not at_index <= row.index < end_index]
    removed = len(sheet.rows) - len(kept)
    for row in kept:
        if row.index >= end_index:
            _renumber_row(row, row.index - count)
    sheet.rows[:] = kept
    logger.debug(
        "Deleted %d row(s) at %d in %r; %d row(s) removed.",
        count,
        at_index,
        sheet.name,
        removed,
    )


def find_column_range(sheet: Worksheet, column_index: int) -> ColumnRange | None:
    """Return the isolated range for ``column_index`` or None when undefined.

    A wider range containing the column is split so the returned range covers
    exactly that column.
    """
    if sheet.columns is None:
        return None
    _validate_column_ranges(sheet)
    for position, current in enumerate(sheet.columns):
        if current.contains(column_index):
            return _isolate_column(sheet.columns, position, column_index)
    return None


def find_or_create_column_range(
    sheet: Worksheet,
    column_index: int,
    default_width: float = DEFAULT_COLUMN_WIDTH,
) -> ColumnRange:
    """Return a range covering exactly ``column_index``.

    Creates the column structure when the sheet has none. An enclosing range is
    split into before/target/after ranges that keep its width; otherwise a new
    single-column range with ``default_width`` is inserted in order.
    """
    if column_index < 1:
        raise InvalidAddressError(f"Column index must be positive, got {column_index}.")
    if sheet.columns is None:
        sheet.columns = []
        logger.info("Created column structure for %r.", sheet.name)
    found = find_column_range(sheet, column_index)
    if found is not None:
        return found
    created = ColumnRange(min=column_index, max=column_index, width=default_width)
    position = sum(1 for current in sheet.columns if current.max < column_index)
    sheet.columns.insert(position, created)
    return created


def set_column_width(
    sheet: Worksheet,
    column_index: int,
    width: float,
    default_width: float = DEFAULT_COLUMN_WIDTH,
) -> ColumnRange:
    """Set the width of a single column, isolating it from its range."""
    column = find_or_create_column_range(sheet, column_index, default_width)
    column.width = width
    column.custom_width = True
    return column


def validate_worksheet(sheet: Worksheet) -> None:
    """Check row, cell and column-range invariants.

    Raises:
        StructuralInconsistencyError: If rows or cells are unsorted or
            duplicated, a cell reference disagrees with its row, or column
            ranges overlap.
    """
    _validate_rows(sheet)
    _validate_column_ranges(sheet)


def _isolate_column(
    columns: list[ColumnRange], position: int, column_index: int
) -> ColumnRange:
    current = columns[position]
    if current.min < column_index:
        before = current.model_copy(update={"max": column_index - 1})
        columns.insert(position, before)
        position += 1
        current.min = column_index
    if current.max > column_index:
        after = current.model_copy(update={"min": column_index + 1})
        columns.insert(position + 1, after)
        current.max = column_index
    return current


def _renumber_row(row: Row, new_index: int) -> None:
    row.index = new_index
    for cell in row.cells:
        cell.reference = f"{parse_cell_ref(cell.reference).column}{new_index}"


def _cell_in_row(row: Row, reference: str) -> Cell | None:
    for cell in row.cells:
        if cell.reference == reference:
            return cell
    return None


def _row_key(row: Row) -> int:
    return row.index


def _check_row_order(sheet: Worksheet) -> None:
    for previous, current in zip(sheet.rows, sheet.rows[1:]):
        if current.index <= previous.index:
            raise StructuralInconsistencyError(
                f"Rows in {sheet.name!r} are not strictly ascending at row {current.index}."
            )


def _check_cell_order(row: Row) -> None:
    indexes = [parse_cell_ref(cell.reference).column_index for cell in row.cells]
    for previous, current in zip(indexes, indexes[1:]):
        if current <= previous:
            raise StructuralInconsistencyError(
                f"Cells in row {row.index} are not strictly ascending."
            )


def _require_positive_row(row_index: int) -> None:
    if row_index < 1:
        raise InvalidAddressError(f"Row index must be positive, got {row_index}.")


def _validate_rows(sheet: Worksheet) -> None:
    previous: int | None = None
    for row in sheet.rows:
        if previous is not None and row.index <= previous:
            raise StructuralInconsistencyError(
                f"Rows in {sheet.name!r} are not strictly ascending at row {row.index}."
            )
        previous = row.index
        _validate_cells(sheet, row)


def _validate_cells(sheet: Worksheet, row: Row) -> None:
    previous: int | None = None
    for cell in row.cells:
        ref = parse_cell_ref(cell.reference)
        if ref.row != row.index:
            raise StructuralInconsistencyError(
                f"Cell {cell.reference} in {sheet.name!r} is stored in row {row.index}."
            )
        if previous is not None and ref.column_index <= previous:
            raise StructuralInconsistencyError(
                f"Cells in row {row.index} of {sheet.name!r} are not strictly ascending."
            )
        previous = ref.column_index


def _validate_column_ranges(sheet: Worksheet) -> None:
    if sheet.columns is None:
        return
    previous_max = 0
    for current in sheet.columns:
        if current.min > current.max:
            raise StructuralInconsistencyError(
                f"Column range {current.min}:{current.max} in {sheet.name!r} is inverted."
            )
        if current.min <= previous_max:
            raise StructuralInconsistencyError(
                f"Column ranges in {sheet.name!r} overlap or are unsorted at "
                f"{current.min}:{current.max}."
            )
        previous_max = current.max
