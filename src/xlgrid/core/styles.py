from __future__ import annotations

import logging
import re
from typing import TypeVar

from openpyxl.styles.numbers import BUILTIN_FORMATS, BUILTIN_FORMATS_REVERSE
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config import CUSTOM_NUMBER_FORMAT_BASE, DEFAULT_FONT_NAME, DEFAULT_FONT_SIZE
from ..errors import StructuralInconsistencyError
from ..types import (
    BorderSide,
    BorderStyleType,
    FillPatternType,
    HorizontalAlignType,
)

logger = logging.getLogger(__name__)

_HEX_COLOR_PATTERN = re.compile(r"^#?(?:[0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})$")

TRecord = TypeVar("TRecord", bound=BaseModel)


def normalize_hex_color(value: str) -> str:
    """Normalize ``RRGGBB``/``AARRGGBB`` input (``#`` optional) into ``AARRGGBB``.

    Raises:
        ValueError: If the value is not valid HEX color text.
    """
    text = value.strip().upper()
    if not _HEX_COLOR_PATTERN.match(text):
        raise ValueError(
            f"Invalid color {value!r}. Use 'RRGGBB', 'AARRGGBB', "
            "'#RRGGBB', or '#AARRGGBB'."
        )
    raw = text.removeprefix("#")
    return raw if len(raw) == 8 else f"FF{raw}"


class _ColorRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    color: str | None = None

    @field_validator("color")
    @classmethod
    def _validate_color(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return normalize_hex_color(value)


class FontRecord(_ColorRecord):
    """Font entry of the stylesheet."""

    name: str = DEFAULT_FONT_NAME
    size: float = DEFAULT_FONT_SIZE
    bold: bool = False
    italic: bool = False
    underline: bool = False


class FillRecord(_ColorRecord):
    """Fill entry; ``color`` is the foreground of a solid pattern."""

    pattern: FillPatternType = "none"


class BorderEdge(_ColorRecord):
    """One side of a border; an empty edge has neither style nor color."""

    style: BorderStyleType | None = None

    @property
    def is_empty(self) -> bool:
        return self.style is None and self.color is None


class BorderRecord(BaseModel):
    """Border entry with one edge per side."""

    model_config = ConfigDict(frozen=True)

    left: BorderEdge = Field(default_factory=BorderEdge)
    right: BorderEdge = Field(default_factory=BorderEdge)
    top: BorderEdge = Field(default_factory=BorderEdge)
    bottom: BorderEdge = Field(default_factory=BorderEdge)

    def with_edge(self, side: BorderSide, edge: BorderEdge) -> BorderRecord:
        return self.model_copy(update={side: edge})


class AlignmentRecord(BaseModel):
    """Alignment stored inline on a cell format."""

    model_config = ConfigDict(frozen=True)

    horizontal: HorizontalAlignType | None = None
    wrap: bool = False


class NumberFormatRecord(BaseModel):
    """Custom number format; built-in formats are never stored."""

    model_config = ConfigDict(frozen=True)

    format_id: int = Field(ge=0)
    code: str


class CellFormatRecord(BaseModel):
    """Composite cell format referencing the other tables by index."""

    model_config = ConfigDict(frozen=True)

    font_id: int = 0
    fill_id: int = 0
    border_id: int = 0
    number_format_id: int = 0
    alignment: AlignmentRecord | None = None
    apply_font: bool = False
    apply_fill: bool = False
    apply_border: bool = False
    apply_number_format: bool = False
    apply_alignment: bool = False


class StyleDescriptor(BaseModel):
    """Complete visual style of a cell, independent of any stylesheet.

    Descriptors are immutable; the ``with_*`` helpers return updated copies.
    Two descriptors built separately from the same values compare equal and
    intern to the same cell format.
    """

    model_config = ConfigDict(frozen=True)

    font: FontRecord = Field(default_factory=FontRecord)
    fill: FillRecord = Field(default_factory=FillRecord)
    border: BorderRecord = Field(default_factory=BorderRecord)
    alignment: AlignmentRecord | None = None
    number_format: str | None = None

    def with_font(self, **changes: object) -> StyleDescriptor:
        """Return a copy with font fields replaced (bold, italic, color, ...)."""
        font = FontRecord.model_validate({**self.font.model_dump(), **changes})
        return self.model_copy(update={"font": font})

    def with_fill_color(self, color: str | None) -> StyleDescriptor:
        """Return a copy with a solid background, or no fill for ``None``."""
        if color is None:
            return self.model_copy(update={"fill": FillRecord()})
        return self.model_copy(
            update={"fill": FillRecord(pattern="solid", color=color)}
        )

    def with_border(self, color: str, style: BorderStyleType) -> StyleDescriptor:
        """Return a copy with the same edge on all four sides."""
        edge = BorderEdge(style=style, color=color)
        border = BorderRecord(left=edge, right=edge, top=edge, bottom=edge)
        return self.model_copy(update={"border": border})

    def with_border_edge(
        self, side: BorderSide, color: str | None, style: BorderStyleType | None
    ) -> StyleDescriptor:
        edge = BorderEdge(style=style, color=color)
        return self.model_copy(update={"border": self.border.with_edge(side, edge)})

    def without_border_edge(self, side: BorderSide) -> StyleDescriptor:
        return self.model_copy(
            update={"border": self.border.with_edge(side, BorderEdge())}
        )

    def with_alignment(
        self,
        horizontal: HorizontalAlignType | None = None,
        wrap: bool = False,
    ) -> StyleDescriptor:
        """Return a copy with inline alignment set."""
        return self.model_copy(
            update={"alignment": AlignmentRecord(horizontal=horizontal, wrap=wrap)}
        )

    def with_number_format(self, code: str | None) -> StyleDescriptor:
        return self.model_copy(update={"number_format": code})


def _default_fonts() -> list[FontRecord]:
    return [FontRecord()]


def _default_fills() -> list[FillRecord]:
    # Excel reserves the first two fills.
    return [FillRecord(pattern="none"), FillRecord(pattern="gray125")]


def _default_borders() -> list[BorderRecord]:
    return [BorderRecord()]


def _default_cell_formats() -> list[CellFormatRecord]:
    return [CellFormatRecord()]


class Stylesheet(BaseModel):
    """Document-wide, append-only style tables."""

    fonts: list[FontRecord] = Field(default_factory=_default_fonts)
    fills: list[FillRecord] = Field(default_factory=_default_fills)
    borders: list[BorderRecord] = Field(default_factory=_default_borders)
    number_formats: list[NumberFormatRecord] = Field(default_factory=list)
    cell_formats: list[CellFormatRecord] = Field(default_factory=_default_cell_formats)

    @classmethod
    def seeded(cls, *, font_name: str, font_size: float) -> Stylesheet:
        """Build a stylesheet whose default font uses the given name and size."""
        return cls(fonts=[FontRecord(name=font_name, size=font_size)])


def intern_font(stylesheet: Stylesheet, font: FontRecord) -> int:
    """Return the index of an equal font, appending it when missing."""
    return _intern(stylesheet.fonts, font, "font")


def intern_fill(stylesheet: Stylesheet, fill: FillRecord) -> int:
    """Return the index of an equal fill, appending it when missing."""
    return _intern(stylesheet.fills, fill, "fill")


def intern_border(stylesheet: Stylesheet, border: BorderRecord) -> int:
    """Return the index of an equal border, appending it when missing."""
    return _intern(stylesheet.borders, border, "border")


def intern_number_format(
    stylesheet: Stylesheet,
    code: str,
    *,
    base: int = CUSTOM_NUMBER_FORMAT_BASE,
) -> int:
    """Return the number format id for ``code``.

    Built-in codes map to their reserved id. Custom codes are looked up by
    exact text and otherwise appended with the next id at or above ``base``.
    """
    builtin_id = BUILTIN_FORMATS_REVERSE.get(code)
    if builtin_id is not None:
        return int(builtin_id)
    for record in stylesheet.number_formats:
        if record.code == code:
            return record.format_id
    next_id = max([base] + [record.format_id + 1 for record in stylesheet.number_formats])
    stylesheet.number_formats.append(NumberFormatRecord(format_id=next_id, code=code))
    logger.debug("Added number format %d: %r", next_id, code)
    return next_id


def resolve_cell_format(
    stylesheet: Stylesheet,
    descriptor: StyleDescriptor,
    *,
    number_format_base: int = CUSTOM_NUMBER_FORMAT_BASE,
) -> int:
    """Return the cell format index matching ``descriptor``, creating it if needed.

    Args:
        stylesheet: Document stylesheet to search and extend.
        descriptor: Style to resolve.
        number_format_base: First id for custom number formats.

    Returns:
        Index into ``stylesheet.cell_formats``.
    """
    font_id = intern_font(stylesheet, descriptor.font)
    fill_id = intern_fill(stylesheet, descriptor.fill)
    border_id = intern_border(stylesheet, descriptor.border)
    number_format_id = 0
    if descriptor.number_format is not None:
        number_format_id = intern_number_format(
            stylesheet, descriptor.number_format, base=number_format_base
        )

    for index, cell_format in enumerate(stylesheet.cell_formats):
        if (
            cell_format.font_id == font_id
            and cell_format.fill_id == fill_id
            and cell_format.border_id == border_id
            and cell_format.number_format_id == number_format_id
            and cell_format.alignment == descriptor.alignment
        ):
            return index

    stylesheet.cell_formats.append(
        CellFormatRecord(
            font_id=font_id,
            fill_id=fill_id,
            border_id=border_id,
            number_format_id=number_format_id,
            alignment=descriptor.alignment,
            apply_font=True,
            apply_fill=fill_id > 0,
            apply_border=border_id > 0,
            apply_number_format=number_format_id > 0,
            apply_alignment=descriptor.alignment is not None,
        )
    )
    index = len(stylesheet.cell_formats) - 1
    logger.debug(
        "Added cell format %d (font=%d fill=%d border=%d numFmt=%d).",
        index,
        font_id,
        fill_id,
        border_id,
        number_format_id,
    )
    return index


def resolve_reserved_format(stylesheet: Stylesheet, number_format_id: int) -> int:
    """Return a cell format that only references a built-in number format.

    The first cell format using ``number_format_id`` is reused regardless of
    its font, fill or border.
    """
    for index, cell_format in enumerate(stylesheet.cell_formats):
        if cell_format.number_format_id == number_format_id:
            return index
    stylesheet.cell_formats.append(
        CellFormatRecord(number_format_id=number_format_id, apply_number_format=True)
    )
    return len(stylesheet.cell_formats) - 1


def number_format_code(stylesheet: Stylesheet, number_format_id: int) -> str | None:
    """Return the format code for an id, or None for ``General``."""
    if number_format_id == 0:
        return None
    for record in stylesheet.number_formats:
        if record.format_id == number_format_id:
            return record.code
    return BUILTIN_FORMATS.get(number_format_id)


def descriptor_at(stylesheet: Stylesheet, index: int) -> StyleDescriptor:
    """Rebuild the style descriptor of cell format ``index``.

    Raises:
        StructuralInconsistencyError: If the format or one of its parts is
            missing from the stylesheet.
    """
    cell_format = _entry(stylesheet.cell_formats, index, "cell format")
    return StyleDescriptor(
        font=_entry(stylesheet.fonts, cell_format.font_id, "font"),
        fill=_entry(stylesheet.fills, cell_format.fill_id, "fill"),
        border=_entry(stylesheet.borders, cell_format.border_id, "border"),
        alignment=cell_format.alignment,
        number_format=number_format_code(stylesheet, cell_format.number_format_id),
    )


def default_style(stylesheet: Stylesheet) -> StyleDescriptor:
    """Return the descriptor of the document default cell format."""
    return descriptor_at(stylesheet, 0)


def _intern(table: list[TRecord], record: TRecord, label: str) -> int:
    for index, existing in enumerate(table):
        if existing == record:
            return index
    table.append(record)
    logger.debug("Added %s %d.", label, len(table) - 1)
    return len(table) - 1


def _entry(table: list[TRecord], index: int, label: str) -> TRecord:
    if not 0 <= index < len(table):
        raise StructuralInconsistencyError(
            f"Stylesheet has no {label} at index {index} ({len(table)} defined)."
        )
    return table[index]
