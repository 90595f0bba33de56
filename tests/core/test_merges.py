from __future__ import annotations

import pytest

from xlgrid.core.a1 import parse_range
from xlgrid.core.merges import find_merge, merge_cells
from xlgrid.core.model import Worksheet


def test_merge_list_created_lazily(debug_logs: pytest.LogCaptureFixture) -> None:
    sheet = Worksheet(name="Sheet1", sheet_id=1)
    assert sheet.merges is None
    assert find_merge(sheet, parse_range("A1:B1")) is None
    merge = merge_cells(sheet, parse_range("A1:B1"))
    assert sheet.merges == [merge]
    assert "Created merge list" in debug_logs.text


def test_merge_cells_is_idempotent() -> None:
    sheet = Worksheet(name="Sheet1", sheet_id=1)
    first = merge_cells(sheet, parse_range("A1:B1"))
    second = merge_cells(sheet, parse_range("A1:B1"))
    assert first is second
    assert len(sheet.merges or []) == 1


def test_merge_reference_is_normalized() -> None:
    sheet = Worksheet(name="Sheet1", sheet_id=1)
    merge = merge_cells(sheet, parse_range("c3:a1"))
    assert merge.reference == "A1:C3"
    assert merge_cells(sheet, parse_range("$A$1:$C$3")) is merge
    assert find_merge(sheet, parse_range("A1:C3")) is merge


def test_distinct_merges_are_appended() -> None:
    sheet = Worksheet(name="Sheet1", sheet_id=1)
    merge_cells(sheet, parse_range("A1:B1"))
    merge_cells(sheet, parse_range("A2:B2"))
    assert [merge.reference for merge in sheet.merges or []] == ["A1:B1", "A2:B2"]
