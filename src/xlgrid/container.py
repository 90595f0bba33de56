"""Load and save documents as ``.xlsx`` files through openpyxl.

openpyxl owns the package plumbing (parts, relationships, shared-string and
style serialization). This module only maps between its object model and the
document tree.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, time
import logging
from pathlib import Path
from typing import Any
import warnings

from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import MergedCell
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from .config import EngineConfig
from .core.a1 import parse_range
from .core.formatting import resolve_style
from .core.grid import find_or_create_cell, find_or_create_row
from .core.merges import merge_cells
from .core.model import Cell, ColumnRange, Document, SharedStringTable, Worksheet
from .core.styles import (
    AlignmentRecord,
    BorderEdge,
    BorderRecord,
    FillRecord,
    FontRecord,
    StyleDescriptor,
    Stylesheet,
    descriptor_at,
)
from .core.values import serial_date, to_xml_boolean, to_xml_numeric
from .errors import StructuralInconsistencyError
from .workbook import PRINT_AREA_NAME, save_document, set_page_setup, set_print_area

logger = logging.getLogger(__name__)

_BORDER_SIDES = ("left", "right", "top", "bottom")


@contextmanager
def openpyxl_workbook(file_path: Path) -> Iterator[Any]:
    """Open an openpyxl workbook for editing and ensure it is closed.

    Args:
        file_path: Workbook path.

    Yields:
        openpyxl workbook instance.
    """
    with warnings.catch_warnings():
        warnings.filterwarnings(
            "ignore",
            message="Unknown extension is not supported and will be removed",
            category=UserWarning,
            module="openpyxl",
        )
        warnings.filterwarnings(
            "ignore",
            message="Cannot parse header or footer so it will be ignored",
            category=UserWarning,
            module="openpyxl",
        )
        wb = load_workbook(file_path, data_only=False)
    try:
        yield wb
    finally:
        wb.close()


def new_document(config: EngineConfig | None = None) -> Document:
    """Create a blank document with one worksheet named ``Sheet1``."""
    config = config or EngineConfig()
    return Document(
        worksheets=[Worksheet(name="Sheet1", sheet_id=1)],
        stylesheet=Stylesheet.seeded(
            font_name=config.default_font_name, font_size=config.default_font_size
        ),
        shared_strings=SharedStringTable(),
        config=config,
    )


def load_document(path: Path, config: EngineConfig | None = None) -> Document:
    """Read an ``.xlsx`` file into a document tree.

    Text is loaded as inline strings, so the returned document starts with an
    empty shared-string table. Styles are interned into a fresh stylesheet.
    Time-of-day values load as date cells holding the fraction of a day.
    Underline variants such as double and singleAccounting load as plain
    underline, and are saved back as single underline.

    Args:
        path: Workbook path.
        config: Engine configuration for the new document.

    Returns:
        Loaded document with refreshed span and dimension hints.
    """
    document = new_document(config)
    document.worksheets.clear()
    with openpyxl_workbook(path) as wb:
        for position, ws in enumerate(wb.worksheets):
            sheet = Worksheet(name=ws.title, sheet_id=position + 1)
            document.worksheets.append(sheet)
            _read_cells(document, sheet, ws)
            _read_columns(sheet, ws)
            for merged in ws.merged_cells.ranges:
                merge_cells(sheet, parse_range(merged.coord))
            _read_page_setup(sheet, ws)
            print_area = ws.print_area
            if print_area:
                set_print_area(document, sheet.name, parse_range(print_area.split(",")[0]))
    save_document(document)
    logger.info("Loaded %d worksheet(s) from %s.", len(document.worksheets), path)
    return document


def save_document_as(document: Document, path: Path) -> None:
    """Refresh the document and write it to ``path`` as ``.xlsx``.

    Raises:
        StructuralInconsistencyError: If a worksheet violates an invariant.
    """
    save_document(document)
    wb = Workbook()
    wb.remove(wb.active)
    for position, sheet in enumerate(document.worksheets):
        ws = wb.create_sheet(title=sheet.name)
        _write_cells(document, sheet, ws)
        _write_columns(sheet, ws)
        for merge in sheet.merges or []:
            ws.merge_cells(merge.reference)
        _write_print_settings(document, sheet, position, ws)
    skipped = [
        defined.name
        for defined in document.defined_names
        if defined.name != PRINT_AREA_NAME
    ]
    if skipped:
        logger.warning("Defined names not written: %s", ", ".join(skipped))
    wb.save(path)
    logger.info("Saved %d worksheet(s) to %s.", len(document.worksheets), path)


def _read_cells(document: Document, sheet: Worksheet, ws: Any) -> None:
    for ws_row in ws.iter_rows():
        for ws_cell in ws_row:
            if isinstance(ws_cell, MergedCell):
                continue
            if ws_cell.value is None and not ws_cell.has_style:
                continue
            row = find_or_create_row(sheet, ws_cell.row)
            cell = find_or_create_cell(row, ws_cell.column_letter)
            _read_value(cell, ws_cell)
            if ws_cell.has_style:
                cell.style_index = resolve_style(
                    document, _descriptor_from_openpyxl(document, ws_cell)
                )
    for index, dimension in ws.row_dimensions.items():
        if dimension.height is None:
            continue
        row = find_or_create_row(sheet, index)
        row.height = dimension.height


def _read_value(cell: Cell, ws_cell: Any) -> None:
    value = ws_cell.value
    if value is None:
        return
    if ws_cell.data_type == "f":
        cell.formula = str(getattr(value, "text", value)).removeprefix("=")
        return
    if isinstance(value, bool):
        cell.value, cell.kind = to_xml_boolean(value), "boolean"
    elif isinstance(value, (int, float)):
        cell.value, cell.kind = to_xml_numeric(value), "number"
    elif isinstance(value, (date, datetime)):
        cell.value, cell.kind = serial_date(value), "date"
    elif isinstance(value, time):
        cell.value, cell.kind = _day_fraction(value), "date"
    else:
        cell.value, cell.kind = str(value), "string"


def _day_fraction(value: time) -> str:
    seconds = value.hour * 3600 + value.minute * 60 + value.second
    return to_xml_numeric((seconds + value.microsecond / 1_000_000) / 86400)


def _descriptor_from_openpyxl(document: Document, ws_cell: Any) -> StyleDescriptor:
    config = document.config
    font = ws_cell.font
    fill = ws_cell.fill
    alignment = ws_cell.alignment
    border = ws_cell.border
    number_format = ws_cell.number_format
    return StyleDescriptor(
        font=FontRecord(
            name=font.name or config.default_font_name,
            size=font.sz or config.default_font_size,
            bold=bool(font.b),
            italic=bool(font.i),
            underline=bool(font.u),
            color=_rgb(font.color),
        ),
        fill=_fill_record(fill),
        border=BorderRecord(
            **{side: _border_edge(getattr(border, side)) for side in _BORDER_SIDES}
        ),
        alignment=(
            AlignmentRecord(
                horizontal=alignment.horizontal, wrap=bool(alignment.wrap_text)
            )
            if alignment.horizontal or alignment.wrap_text
            else None
        ),
        number_format=None if number_format == "General" else number_format,
    )


def _fill_record(fill: Any) -> FillRecord:
    pattern = getattr(fill, "fill_type", None)
    if pattern is None or pattern == "none":
        return FillRecord()
    if pattern == "gray125":
        return FillRecord(pattern="gray125")
    if pattern != "solid":
        logger.debug("Fill pattern %r read as solid.", pattern)
    return FillRecord(pattern="solid", color=_rgb(fill.fgColor))


def _border_edge(side: Any) -> BorderEdge:
    if side is None or side.style is None:
        return BorderEdge()
    return BorderEdge(style=side.style, color=_rgb(side.color))


def _rgb(color: Any) -> str | None:
    """Return ``AARRGGBB`` for explicit RGB colors; theme and indexed colors are dropped."""
    if color is None or getattr(color, "type", None) != "rgb":
        return None
    value = color.rgb
    return value if isinstance(value, str) else None


def _read_columns(sheet: Worksheet, ws: Any) -> None:
    ranges: list[ColumnRange] = []
    for dimension in ws.column_dimensions.values():
        if not dimension.customWidth or not dimension.width:
            continue
        if dimension.min is None or dimension.max is None:
            continue
        ranges.append(
            ColumnRange(
                min=dimension.min,
                max=dimension.max,
                width=dimension.width,
                custom_width=True,
            )
        )
    if ranges:
        sheet.columns = sorted(ranges, key=lambda column: column.min)


def _read_page_setup(sheet: Worksheet, ws: Any) -> None:
    paper_size = ws.page_setup.paperSize
    orientation = ws.page_setup.orientation or "default"
    if paper_size is None and orientation == "default":
        return
    set_page_setup(
        sheet,
        paper_size=int(paper_size) if paper_size is not None else None,
        orientation=orientation,
    )


def _write_cells(document: Document, sheet: Worksheet, ws: Any) -> None:
    for row in sheet.rows:
        if row.height is not None:
            ws.row_dimensions[row.index].height = row.height
        for cell in row.cells:
            ws_cell = ws.cell(row=row.index, column=cell.column_index)
            _write_value(document, cell, ws_cell)
            if cell.style_index is not None:
                _write_style(descriptor_at(document.stylesheet, cell.style_index), ws_cell)


def _write_value(document: Document, cell: Cell, ws_cell: Any) -> None:
    if cell.formula is not None:
        ws_cell.value = f"={cell.formula}"
        return
    if cell.value is None:
        return
    if cell.kind in ("number", "date"):
        ws_cell.value = _number(cell.value)
    elif cell.kind == "boolean":
        ws_cell.value = cell.value == "1"
    elif cell.kind == "shared_string":
        ws_cell.value = _shared_text(document, cell)
        ws_cell.data_type = "s"
    else:
        ws_cell.value = cell.value
        ws_cell.data_type = "s"


def _shared_text(document: Document, cell: Cell) -> str:
    table = document.shared_strings
    index = int(cell.value or "0")
    if table is None or not 0 <= index < len(table.items):
        raise StructuralInconsistencyError(
            f"Cell {cell.reference} references shared string {index}, "
            "which is not in the shared-string table."
        )
    return table.items[index]


def _number(text: str) -> int | float:
    try:
        return int(text)
    except ValueError:
        return float(text)


def _write_style(descriptor: StyleDescriptor, ws_cell: Any) -> None:
    font = descriptor.font
    ws_cell.font = Font(
        name=font.name,
        sz=font.size,
        b=font.bold,
        i=font.italic,
        u="single" if font.underline else None,
        color=font.color,
    )
    fill = descriptor.fill
    if fill.pattern == "solid":
        ws_cell.fill = PatternFill(
            fill_type="solid", start_color=fill.color, end_color=fill.color
        )
    elif fill.pattern == "gray125":
        ws_cell.fill = PatternFill(fill_type="gray125")
    edges = {side: getattr(descriptor.border, side) for side in _BORDER_SIDES}
    ws_cell.border = Border(
        **{side: Side(style=edge.style, color=edge.color) for side, edge in edges.items()}
    )
    if descriptor.alignment is not None:
        ws_cell.alignment = Alignment(
            horizontal=descriptor.alignment.horizontal,
            wrap_text=descriptor.alignment.wrap or None,
        )
    ws_cell.number_format = descriptor.number_format or "General"


def _write_columns(sheet: Worksheet, ws: Any) -> None:
    for column in sheet.columns or []:
        dimension = ws.column_dimensions[get_column_letter(column.min)]
        dimension.min = column.min
        dimension.max = column.max
        dimension.width = column.width


def _write_print_settings(
    document: Document, sheet: Worksheet, position: int, ws: Any
) -> None:
    for defined in document.defined_names:
        if defined.name == PRINT_AREA_NAME and defined.local_sheet_id == position:
            region = parse_range(defined.text).normalized()
            ws.print_area = str(region)
    if sheet.page_setup is None:
        return
    if sheet.page_setup.paper_size is not None:
        ws.page_setup.paperSize = sheet.page_setup.paper_size
    if sheet.page_setup.orientation != "default":
        ws.page_setup.orientation = sheet.page_setup.orientation
