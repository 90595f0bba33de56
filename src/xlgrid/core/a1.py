from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field

from ..errors import InvalidAddressError

_CELL_PATTERN = re.compile(
    r"^(?P<col_abs>\$?)(?P<column>[A-Za-z]+)(?P<row_abs>\$?)(?P<row>[0-9]+)$"
)
_COLUMN_LABEL_PATTERN = re.compile(r"^[A-Za-z]+$")
_PLAIN_SHEET_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")


class CellRef(BaseModel):
    """One cell reference in A1 notation."""

    model_config = ConfigDict(frozen=True)

    column: str
    row: int = Field(ge=1)
    column_absolute: bool = False
    row_absolute: bool = False

    @property
    def column_index(self) -> int:
        return column_label_to_index(self.column)

    @property
    def coordinate(self) -> str:
        """Reference text without absolute markers."""
        return f"{self.column}{self.row}"

    def __str__(self) -> str:
        return format_cell_ref(
            self.column,
            self.row,
            column_absolute=self.column_absolute,
            row_absolute=self.row_absolute,
        )


class RangeRef(BaseModel):
    """Rectangular range between two cell references."""

    model_config = ConfigDict(frozen=True)

    start: CellRef
    end: CellRef

    @property
    def is_single_cell(self) -> bool:
        return self.start.coordinate == self.end.coordinate

    def normalized(self) -> RangeRef:
        """Return the range with start at top-left and end at bottom-right."""
        min_col, min_row, max_col, max_row = self.bounds()
        return RangeRef(
            start=CellRef(column=column_index_to_label(min_col), row=min_row),
            end=CellRef(column=column_index_to_label(max_col), row=max_row),
        )

    def bounds(self) -> tuple[int, int, int, int]:
        """Return range boundaries in (min_col, min_row, max_col, max_row)."""
        start_col = self.start.column_index
        end_col = self.end.column_index
        return (
            min(start_col, end_col),
            min(self.start.row, self.end.row),
            max(start_col, end_col),
            max(self.start.row, self.end.row),
        )

    def __str__(self) -> str:
        if self.start == self.end:
            return str(self.start)
        return f"{self.start}:{self.end}"


def column_label_to_index(label: str) -> int:
    """Convert Excel-style column label (A/AA) to 1-based index.

    Args:
        label: Column letters, optionally prefixed with ``$``.

    Returns:
        1-based column index.

    Raises:
        InvalidAddressError: If the label is empty or contains non-letters.
    """
    normalized = label.strip().upper().removeprefix("$")
    if not _COLUMN_LABEL_PATTERN.match(normalized):
        raise InvalidAddressError(f"Invalid column label: {label!r}")
    index = 0
    for char in normalized:
        index = index * 26 + (ord(char) - ord("A") + 1)
    return index


def column_index_to_label(index: int) -> str:
    """Convert 1-based column index to Excel-style column label."""
    if index < 1:
        raise InvalidAddressError(f"Column index must be positive, got {index}.")
    chunks: list[str] = []
    current = index
    while current > 0:
        current -= 1
        chunks.append(chr(ord("A") + (current % 26)))
        current //= 26
    return "".join(reversed(chunks))


def shift_column(label: str, delta: int) -> str:
    """Return the column ``delta`` positions away from ``label``.

    Raises:
        InvalidAddressError: If the shifted column would fall before ``A``.
    """
    target = column_label_to_index(label) + delta
    if target < 1:
        raise InvalidAddressError(
            f"Shifting column {label!r} by {delta} moves before column A."
        )
    return column_index_to_label(target)


def compare_columns(left: str, right: str) -> int:
    """Compare two column labels by index; returns -1, 0 or 1."""
    left_index = column_label_to_index(left)
    right_index = column_label_to_index(right)
    return (left_index > right_index) - (left_index < right_index)


def parse_cell_ref(text: str) -> CellRef:
    """Parse ``[$]letters[$]digits`` into a CellRef.

    Raises:
        InvalidAddressError: If the column or row portion is missing or malformed.
    """
    match = _CELL_PATTERN.match(text.strip())
    if match is None:
        raise InvalidAddressError(f"Invalid cell reference: {text!r}")
    row = int(match.group("row"))
    if row < 1:
        raise InvalidAddressError(f"Row must be positive in cell reference: {text!r}")
    return CellRef(
        column=match.group("column").upper(),
        row=row,
        column_absolute=bool(match.group("col_abs")),
        row_absolute=bool(match.group("row_abs")),
    )


def parse_range(text: str) -> RangeRef:
    """Parse ``A1:B2`` (or a single ``A1``) into a RangeRef.

    A leading ``Sheet!`` qualifier is ignored.
    """
    candidate = _strip_sheet_qualifier(text.strip())
    parts = candidate.split(":")
    if len(parts) == 1:
        ref = parse_cell_ref(parts[0])
        return RangeRef(start=ref, end=ref)
    if len(parts) != 2:
        raise InvalidAddressError(f"Invalid range reference: {text!r}")
    return RangeRef(start=parse_cell_ref(parts[0]), end=parse_cell_ref(parts[1]))


def reference_from_range(text: str) -> str:
    """Return the start reference of a range, keeping absolute markers."""
    return str(parse_range(text).start)


def column_from_reference(text: str) -> str:
    """Return the column letters of a cell reference."""
    return parse_cell_ref(text).column


def row_from_reference(text: str) -> int:
    """Return the 1-based row of a cell reference."""
    return parse_cell_ref(text).row


def format_cell_ref(
    column: str,
    row: int,
    *,
    column_absolute: bool = False,
    row_absolute: bool = False,
) -> str:
    """Compose A1 reference text from its parts."""
    if row < 1:
        raise InvalidAddressError(f"Row must be positive, got {row}.")
    label = column_index_to_label(column_label_to_index(column))
    col_marker = "$" if column_absolute else ""
    row_marker = "$" if row_absolute else ""
    return f"{col_marker}{label}{row_marker}{row}"


def format_range(
    min_col: int, min_row: int, max_col: int, max_row: int, *, absolute: bool = False
) -> str:
    """Compose range text from 1-based boundaries; single cells have no colon."""
    start = format_cell_ref(
        column_index_to_label(min_col),
        min_row,
        column_absolute=absolute,
        row_absolute=absolute,
    )
    end = format_cell_ref(
        column_index_to_label(max_col),
        max_row,
        column_absolute=absolute,
        row_absolute=absolute,
    )
    return start if start == end else f"{start}:{end}"


def normalize_range(text: str) -> str:
    """Validate and normalize range text into upper-case ``TL:BR`` form."""
    min_col, min_row, max_col, max_row = parse_range(text).bounds()
    start = f"{column_index_to_label(min_col)}{min_row}"
    end = f"{column_index_to_label(max_col)}{max_row}"
    return f"{start}:{end}"


def iter_range_coordinates(region: RangeRef) -> list[list[str]]:
    """Expand a range into row-major coordinate lists."""
    min_col, min_row, max_col, max_row = region.bounds()
    return [
        [f"{column_index_to_label(col)}{row}" for col in range(min_col, max_col + 1)]
        for row in range(min_row, max_row + 1)
    ]


def quote_sheet_name(name: str) -> str:
    """Quote a sheet name for use in a qualified reference when required."""
    if _PLAIN_SHEET_NAME_PATTERN.match(name):
        return name
    return "'" + name.replace("'", "''") + "'"


def _strip_sheet_qualifier(text: str) -> str:
    if "!" not in text:
        return text
    return text.rsplit("!", maxsplit=1)[1]
