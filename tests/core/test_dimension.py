from __future__ import annotations

import pytest

from xlgrid.core.dimension import (
    recompute_row_spans,
    recompute_sheet_dimension,
    refresh_worksheet,
)
from xlgrid.core.grid import find_or_create_cell_at, find_or_create_row
from xlgrid.core.model import Cell, Row, Worksheet
from xlgrid.errors import StructuralInconsistencyError


def test_dimension_of_empty_sheet() -> None:
    sheet = Worksheet(name="Sheet1", sheet_id=1)
    assert recompute_sheet_dimension(sheet) == "A1"


def test_dimension_tracks_written_cells() -> None:
    sheet = Worksheet(name="Sheet1", sheet_id=1)
    find_or_create_cell_at(sheet, "B2")
    assert recompute_sheet_dimension(sheet) == "B2"
    find_or_create_cell_at(sheet, "D10")
    assert recompute_sheet_dimension(sheet) == "B2:D10"
    assert sheet.dimension == "B2:D10"


def test_dimension_uses_column_index_order() -> None:
    sheet = Worksheet(name="Sheet1", sheet_id=1)
    find_or_create_cell_at(sheet, "Z1")
    find_or_create_cell_at(sheet, "AA3")
    assert recompute_sheet_dimension(sheet) == "Z1:AA3"


def test_dimension_ignores_empty_rows() -> None:
    sheet = Worksheet(name="Sheet1", sheet_id=1)
    find_or_create_row(sheet, 1)
    find_or_create_cell_at(sheet, "C5")
    assert recompute_sheet_dimension(sheet) == "C5"


def test_row_spans() -> None:
    sheet = Worksheet(name="Sheet1", sheet_id=1)
    find_or_create_cell_at(sheet, "B1")
    find_or_create_cell_at(sheet, "AA1")
    find_or_create_cell_at(sheet, "C2")
    find_or_create_row(sheet, 3)
    recompute_row_spans(sheet)
    assert [row.spans for row in sheet.rows] == ["2:27", "3:3", None]


def test_refresh_worksheet_validates_first() -> None:
    sheet = Worksheet(
        name="Sheet1",
        sheet_id=1,
        rows=[Row(index=2, cells=[Cell(reference="A2")]), Row(index=2)],
    )
    with pytest.raises(StructuralInconsistencyError):
        refresh_worksheet(sheet)
    assert sheet.dimension == "A1"
