"""Object facade for editing one worksheet of a document.

``WorksheetWriter`` binds a document and one of its worksheets and takes A1
text for every address. Each paste replaces the cell's value and formula; the
cell keeps its current style unless a style is passed.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date, datetime
from decimal import Decimal
import logging
from pathlib import Path

from .container import save_document_as
from .core.a1 import (
    column_index_to_label,
    column_label_to_index,
    parse_cell_ref,
    parse_range,
)
from .core.borders import clear_border, draw_border
from .core.formatting import (
    cell_style,
    cell_style_with_default,
    resolve_style,
    set_cell_style,
    set_range_style,
)
from .core.grid import (
    delete_rows,
    find_cell,
    find_or_create_cell_at,
    find_or_create_column_range,
    find_row,
    insert_rows,
    set_column_width,
)
from .core.merges import merge_cells
from .core.model import Cell, ColumnRange, DefinedName, Document, MergeRegion, Row, Worksheet
from .core.styles import StyleDescriptor, resolve_reserved_format
from .core.values import (
    infer_kind,
    serial_date,
    shared_string_index,
    to_cell_text,
    to_xml_boolean,
    to_xml_numeric,
)
from .errors import MissingSharedStringTableError
from .types import BorderStyleType, CellValueKind
from .workbook import get_worksheet, save_document
from .workbook import set_print_area as set_document_print_area

logger = logging.getLogger(__name__)

Number = int | float | Decimal


class WorksheetWriter:
    """Edit one worksheet through A1 references.

    Args:
        document: Document owning the worksheet and the stylesheet.
        sheet: Worksheet instance or worksheet name.

    Raises:
        WorksheetNotFoundError: If ``sheet`` is a name the document lacks.
    """

    def __init__(self, document: Document, sheet: Worksheet | str) -> None:
        self.document = document
        self.sheet = get_worksheet(document, sheet) if isinstance(sheet, str) else sheet

    # Lookup

    def find_cell(self, reference: str) -> Cell | None:
        return find_cell(self.sheet, reference)

    def find_row(self, row_index: int) -> Row | None:
        return find_row(self.sheet, row_index)

    def find_column(self, column: str | int) -> ColumnRange:
        """Return the range covering exactly ``column``, creating it if needed."""
        return find_or_create_column_range(
            self.sheet,
            _column_index(column),
            self.document.config.default_column_width,
        )

    def cell_style(self, reference: str) -> StyleDescriptor | None:
        return cell_style(self.document, self.sheet, reference)

    def cell_style_with_default(self, reference: str) -> StyleDescriptor:
        return cell_style_with_default(self.document, self.sheet, reference)

    # Values

    def paste_text(
        self, reference: str, text: str, style: StyleDescriptor | None = None
    ) -> Cell:
        """Write inline text."""
        return self._write(reference, text, "string", style)

    def paste_shared_text(
        self, reference: str, text: str, style: StyleDescriptor | None = None
    ) -> Cell:
        """Write text through the shared-string table.

        Raises:
            MissingSharedStringTableError: If the document has no table.
            InvalidAddressError: If ``reference`` is malformed; the table is
                left unchanged.
        """
        table = self.document.shared_strings
        if table is None:
            raise MissingSharedStringTableError(
                f"Cannot write shared text to {reference}: "
                "the document has no shared-string table."
            )
        parse_cell_ref(reference)
        index = shared_string_index(table, text)
        return self._write(reference, str(index), "shared_string", style)

    def paste_number(
        self, reference: str, value: Number | str, style: StyleDescriptor | None = None
    ) -> Cell:
        """Write a number; numeric text such as ``"12.50"`` is kept as written.

        Raises:
            ValueError: If ``value`` is not finite or is text that is not a number.
        """
        return self._write(reference, to_xml_numeric(value), "number", style)

    def paste_boolean(
        self, reference: str, value: object, style: StyleDescriptor | None = None
    ) -> Cell:
        return self._write(reference, to_xml_boolean(value), "boolean", style)

    def paste_date(
        self,
        reference: str,
        value: date | datetime,
        style: StyleDescriptor | None = None,
    ) -> Cell:
        """Write a date as a serial number with a date number format.

        Without ``style`` the cell uses the reserved built-in date format;
        otherwise ``style`` is applied with the configured date format code.
        """
        cell = self._write(reference, serial_date(value), "date", None)
        cell.style_index = self._date_style_index(style)
        return cell

    def paste_value(
        self,
        reference: str,
        value: object,
        kind: CellValueKind | None = None,
        style: StyleDescriptor | None = None,
    ) -> Cell:
        """Write ``value`` as ``kind``, inferred from its Python type when omitted."""
        resolved = kind or infer_kind(value)
        if resolved == "shared_string":
            return self.paste_shared_text(reference, str(value), style)
        if resolved == "date" and isinstance(value, (date, datetime)):
            return self.paste_date(reference, value, style)
        return self._write(reference, to_cell_text(value, resolved), resolved, style)

    def paste_formula(
        self, reference: str, formula: str, style: StyleDescriptor | None = None
    ) -> Cell:
        """Write a formula; a leading ``=`` is dropped and no value is cached."""
        cell = find_or_create_cell_at(self.sheet, reference)
        cell.formula = formula.removeprefix("=")
        cell.value = None
        cell.kind = None
        if style is not None:
            cell.style_index = resolve_style(self.document, style)
        return cell

    def paste_text_range(
        self, region: str, text: str, style: StyleDescriptor | None = None
    ) -> Cell:
        return self.paste_text(_start_of(region), text, style)

    def paste_shared_text_range(
        self, region: str, text: str, style: StyleDescriptor | None = None
    ) -> Cell:
        return self.paste_shared_text(_start_of(region), text, style)

    def paste_number_range(
        self, region: str, value: Number, style: StyleDescriptor | None = None
    ) -> Cell:
        return self.paste_number(_start_of(region), value, style)

    def paste_date_range(
        self,
        region: str,
        value: date | datetime,
        style: StyleDescriptor | None = None,
    ) -> Cell:
        return self.paste_date(_start_of(region), value, style)

    def paste_value_range(
        self,
        region: str,
        value: object,
        kind: CellValueKind | None = None,
        style: StyleDescriptor | None = None,
    ) -> Cell:
        return self.paste_value(_start_of(region), value, kind, style)

    def paste_values(
        self,
        reference: str,
        values: Sequence[object],
        kind: CellValueKind | None = None,
        style: StyleDescriptor | None = None,
    ) -> str:
        """Write ``values`` left to right starting at ``reference``.

        Returns:
            Column label just after the last written cell.
        """
        ref = parse_cell_ref(reference)
        column_index = ref.column_index
        for value in values:
            self.paste_value(
                f"{column_index_to_label(column_index)}{ref.row}", value, kind, style
            )
            column_index += 1
        return column_index_to_label(column_index)

    def paste_table(
        self,
        reference: str,
        records: Sequence[Mapping[str, object]],
        columns: Sequence[str] | None = None,
        style: StyleDescriptor | None = None,
    ) -> int:
        """Write one row per record starting at ``reference``, without a header.

        Args:
            reference: Top-left cell of the table.
            records: Rows to write; values are typed from their Python type.
            columns: Keys to write, in order. Defaults to the keys of the first
                record.
            style: Style for every written cell; dates get it with the date
                format code.

        Returns:
            Index of the row just after the table.
        """
        ref = parse_cell_ref(reference)
        keys = list(columns) if columns is not None else _record_keys(records)
        row_index = ref.row
        for record in records:
            column_index = ref.column_index
            for key in keys:
                value = record.get(key)
                if value is not None:
                    self.paste_value(
                        f"{column_index_to_label(column_index)}{row_index}",
                        value,
                        style=style,
                    )
                column_index += 1
            row_index += 1
        logger.debug(
            "Pasted %d record(s) x %d column(s) at %s in %r.",
            len(records),
            len(keys),
            reference,
            self.sheet.name,
        )
        return row_index

    def insert_table(
        self,
        reference: str,
        records: Sequence[Mapping[str, object]],
        columns: Sequence[str] | None = None,
        style: StyleDescriptor | None = None,
    ) -> int:
        """Insert one row per record at ``reference``, then paste the table."""
        insert_rows(self.sheet, parse_cell_ref(reference).row, len(records))
        return self.paste_table(reference, records, columns, style)

    # Styles and structure

    def set_style(self, target: str, style: StyleDescriptor) -> None:
        """Apply ``style`` to a cell or to every cell of a range."""
        region = parse_range(target)
        if region.is_single_cell:
            set_cell_style(self.document, self.sheet, region.start.coordinate, style)
        else:
            set_range_style(self.document, self.sheet, region, style)

    def insert_rows(self, at_index: int, count: int) -> None:
        insert_rows(self.sheet, at_index, count)

    def delete_rows(self, at_index: int, count: int) -> None:
        delete_rows(self.sheet, at_index, count)

    def draw_border(
        self, region: str, color: str = "000000", style: BorderStyleType = "thin"
    ) -> None:
        draw_border(self.document, self.sheet, parse_range(region), color, style)

    def clear_border(self, region: str) -> None:
        clear_border(self.document, self.sheet, parse_range(region))

    def merge_cells(self, region: str) -> MergeRegion:
        return merge_cells(self.sheet, parse_range(region))

    def set_column_width(self, column: str | int, width: float) -> ColumnRange:
        return set_column_width(
            self.sheet,
            _column_index(column),
            width,
            self.document.config.default_column_width,
        )

    def set_print_area(self, region: str) -> DefinedName:
        return set_document_print_area(self.document, self.sheet.name, parse_range(region))

    def save(self, path: Path | None = None) -> None:
        """Refresh derived metadata, and write an ``.xlsx`` file when ``path`` is set."""
        if path is None:
            save_document(self.document)
            return
        save_document_as(self.document, path)

    def _write(
        self,
        reference: str,
        value: str,
        kind: CellValueKind,
        style: StyleDescriptor | None,
    ) -> Cell:
        cell = find_or_create_cell_at(self.sheet, reference)
        cell.value = value
        cell.kind = kind
        cell.formula = None
        if style is not None:
            cell.style_index = resolve_style(self.document, style)
        return cell

    def _date_style_index(self, style: StyleDescriptor | None) -> int:
        config = self.document.config
        if style is None:
            return resolve_reserved_format(
                self.document.stylesheet, config.reserved_date_format_id
            )
        return resolve_style(self.document, style.with_number_format(config.date_format_code))


def _start_of(region: str) -> str:
    return parse_range(region).start.coordinate


def _column_index(column: str | int) -> int:
    if isinstance(column, int):
        return column
    return column_label_to_index(column)


def _record_keys(records: Sequence[Mapping[str, object]]) -> list[str]:
    if not records:
        return []
    return list(records[0].keys())
