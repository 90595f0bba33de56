from __future__ import annotations

from xlgrid.core.a1 import parse_range
from xlgrid.core.formatting import (
    cell_style,
    cell_style_with_default,
    set_cell_style,
    set_range_style,
)
from xlgrid.core.grid import find_cell, find_or_create_cell_at
from xlgrid.core.model import Document
from xlgrid.core.styles import StyleDescriptor


def test_cell_style_soft_not_found(document: Document) -> None:
    sheet = document.worksheets[0]
    assert cell_style(document, sheet, "A1") is None
    find_or_create_cell_at(sheet, "A1")
    assert cell_style(document, sheet, "A1") is None


def test_cell_style_with_default_falls_back(document: Document) -> None:
    sheet = document.worksheets[0]
    style = cell_style_with_default(document, sheet, "Z99")
    assert style == StyleDescriptor()
    assert find_cell(sheet, "Z99") is None


def test_set_cell_style_creates_cell(document: Document) -> None:
    sheet = document.worksheets[0]
    bold = StyleDescriptor().with_font(bold=True)
    cell = set_cell_style(document, sheet, "C3", bold)
    assert cell.reference == "C3"
    assert cell_style(document, sheet, "C3") == bold


def test_set_range_style_shares_one_index(document: Document) -> None:
    sheet = document.worksheets[0]
    fill = StyleDescriptor().with_fill_color("DDEEFF")
    set_range_style(document, sheet, parse_range("B3:A1"), fill)
    indexes = {
        find_cell(sheet, reference).style_index
        for reference in ["A1", "B1", "A2", "B2", "A3", "B3"]
    }
    assert len(indexes) == 1
    assert len(document.stylesheet.cell_formats) == 2


def test_custom_number_format_base_from_config(document: Document) -> None:
    document.config.custom_number_format_base = 300
    sheet = document.worksheets[0]
    set_cell_style(document, sheet, "A1", StyleDescriptor().with_number_format("0.0000"))
    assert document.stylesheet.number_formats[0].format_id == 300
