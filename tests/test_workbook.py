from __future__ import annotations

import pytest

from xlgrid.core.a1 import parse_range
from xlgrid.core.model import Cell, DefinedName, Document, Row
from xlgrid.errors import StructuralInconsistencyError, WorksheetNotFoundError
from xlgrid.workbook import (
    PRINT_AREA_NAME,
    find_print_area,
    get_worksheet,
    insert_worksheet,
    remove_worksheet,
    save_document,
    set_page_setup,
    set_print_area,
)


def test_get_worksheet(document: Document) -> None:
    assert get_worksheet(document, "Sheet1") is document.worksheets[0]
    with pytest.raises(WorksheetNotFoundError, match="Available sheets"):
        get_worksheet(document, "Nope")


def test_insert_worksheet_generates_names(document: Document) -> None:
    second = insert_worksheet(document)
    third = insert_worksheet(document)
    assert (second.name, second.sheet_id) == ("Sheet2", 2)
    assert (third.name, third.sheet_id) == ("Sheet3", 3)
    assert document.sheet_names == ["Sheet1", "Sheet2", "Sheet3"]


def test_insert_worksheet_returns_existing(document: Document) -> None:
    named = insert_worksheet(document, "Data")
    assert insert_worksheet(document, "Data") is named
    assert insert_worksheet(document, "Sheet1") is document.worksheets[0]
    assert len(document.worksheets) == 2


def test_insert_worksheet_skips_taken_generated_name(document: Document) -> None:
    insert_worksheet(document, "Sheet3")
    generated = insert_worksheet(document)
    assert generated.sheet_id == 3
    assert generated.name == "Sheet4"


def test_insert_worksheet_logs(
    document: Document, debug_logs: pytest.LogCaptureFixture
) -> None:
    insert_worksheet(document, "Report")
    assert "Inserted worksheet 'Report'" in debug_logs.text


def test_remove_worksheet(document: Document) -> None:
    insert_worksheet(document, "Data")
    assert remove_worksheet(document, "Sheet1") is True
    assert remove_worksheet(document, "Sheet1") is False
    assert document.sheet_names == ["Data"]


def test_remove_worksheet_drops_and_shifts_scoped_names(document: Document) -> None:
    insert_worksheet(document, "Second")
    set_print_area(document, "Sheet1", parse_range("A1:B2"))
    second_area = set_print_area(document, "Second", parse_range("C1:D2"))
    remove_worksheet(document, "Sheet1")
    assert document.defined_names == [second_area]
    assert second_area.local_sheet_id == 0


def test_set_print_area_creates_name_and_page_setup(document: Document) -> None:
    defined = set_print_area(document, "Sheet1", parse_range("D10:A1"))
    assert defined == DefinedName(
        name=PRINT_AREA_NAME, text="Sheet1!$A$1:$D$10", local_sheet_id=0
    )
    sheet = document.worksheets[0]
    assert sheet.page_setup is not None
    assert sheet.page_setup.paper_size == 9
    assert sheet.page_setup.orientation == "default"


def test_set_print_area_updates_existing(document: Document) -> None:
    set_page_setup(document.worksheets[0], paper_size=1, orientation="landscape")
    first = set_print_area(document, "Sheet1", parse_range("A1:B2"))
    second = set_print_area(document, "Sheet1", parse_range("A1:C3"))
    assert first is second
    assert second.text == "Sheet1!$A$1:$C$3"
    assert len(document.defined_names) == 1
    page_setup = document.worksheets[0].page_setup
    assert page_setup is not None
    assert (page_setup.paper_size, page_setup.orientation) == (1, "landscape")


def test_set_print_area_quotes_sheet_name(document: Document) -> None:
    insert_worksheet(document, "Q1 Report")
    defined = set_print_area(document, "Q1 Report", parse_range("B2"))
    assert defined.text == "'Q1 Report'!$B$2"
    assert defined.local_sheet_id == 1
    assert find_print_area(document, 1) is defined
    assert find_print_area(document, 0) is None


def test_set_print_area_unknown_sheet(document: Document) -> None:
    with pytest.raises(WorksheetNotFoundError):
        set_print_area(document, "Missing", parse_range("A1"))


def test_save_document_refreshes_every_sheet(document: Document) -> None:
    other = insert_worksheet(document, "Other")
    other.rows.append(Row(index=3, cells=[Cell(reference="C3", value="x")]))
    save_document(document)
    assert document.worksheets[0].dimension == "A1"
    assert other.dimension == "C3"
    assert other.rows[0].spans == "3:3"


def test_save_document_rejects_inconsistent_sheet(document: Document) -> None:
    document.worksheets[0].rows.append(Row(index=1, cells=[Cell(reference="B2")]))
    with pytest.raises(StructuralInconsistencyError):
        save_document(document)
