from __future__ import annotations

import pytest

from xlgrid.core.styles import (
    BorderEdge,
    FillRecord,
    FontRecord,
    StyleDescriptor,
    Stylesheet,
    default_style,
    descriptor_at,
    intern_fill,
    intern_font,
    intern_number_format,
    normalize_hex_color,
    resolve_cell_format,
    resolve_reserved_format,
)
from xlgrid.errors import StructuralInconsistencyError


def test_normalize_hex_color() -> None:
    assert normalize_hex_color("ff0000") == "FFFF0000"
    assert normalize_hex_color("#80112233") == "80112233"


def test_normalize_hex_color_rejects_invalid() -> None:
    with pytest.raises(ValueError, match="Invalid color"):
        normalize_hex_color("red")


def test_new_stylesheet_is_seeded() -> None:
    stylesheet = Stylesheet.seeded(font_name="Arial", font_size=10.0)
    assert stylesheet.fonts == [FontRecord(name="Arial", size=10.0)]
    assert [fill.pattern for fill in stylesheet.fills] == ["none", "gray125"]
    assert len(stylesheet.borders) == 1
    assert len(stylesheet.cell_formats) == 1
    assert stylesheet.number_formats == []


def test_intern_returns_existing_index() -> None:
    stylesheet = Stylesheet()
    bold = FontRecord(bold=True, color="FF0000")
    first = intern_font(stylesheet, bold)
    second = intern_font(stylesheet, FontRecord(bold=True, color="#FFFF0000"))
    assert first == second == 1
    assert len(stylesheet.fonts) == 2
    assert intern_fill(stylesheet, FillRecord(pattern="gray125")) == 1


def test_equal_descriptors_resolve_to_same_index() -> None:
    stylesheet = Stylesheet()
    first = StyleDescriptor().with_font(bold=True).with_fill_color("FFFF00")
    second = StyleDescriptor().with_fill_color("ffff00").with_font(bold=True)
    assert first == second
    index = resolve_cell_format(stylesheet, first)
    sizes = (len(stylesheet.fonts), len(stylesheet.fills), len(stylesheet.cell_formats))
    assert resolve_cell_format(stylesheet, second) == index
    assert resolve_cell_format(stylesheet, first) == index
    assert sizes == (
        len(stylesheet.fonts),
        len(stylesheet.fills),
        len(stylesheet.cell_formats),
    )


def test_default_descriptor_resolves_to_default_format() -> None:
    stylesheet = Stylesheet()
    assert resolve_cell_format(stylesheet, StyleDescriptor()) == 0
    assert len(stylesheet.cell_formats) == 1


def test_resolve_sets_apply_flags() -> None:
    stylesheet = Stylesheet()
    plain_font = resolve_cell_format(stylesheet, StyleDescriptor().with_font(italic=True))
    cell_format = stylesheet.cell_formats[plain_font]
    assert cell_format.apply_font is True
    assert cell_format.apply_fill is False
    assert cell_format.apply_border is False
    assert cell_format.apply_number_format is False
    assert cell_format.apply_alignment is False

    rich = (
        StyleDescriptor()
        .with_fill_color("00FF00")
        .with_border("000000", "thin")
        .with_number_format("0.00")
        .with_alignment(horizontal="center", wrap=True)
    )
    cell_format = stylesheet.cell_formats[resolve_cell_format(stylesheet, rich)]
    assert cell_format.apply_fill is True
    assert cell_format.apply_border is True
    assert cell_format.apply_number_format is True
    assert cell_format.apply_alignment is True


def test_alignment_distinguishes_formats() -> None:
    stylesheet = Stylesheet()
    left = resolve_cell_format(stylesheet, StyleDescriptor().with_alignment("left"))
    right = resolve_cell_format(stylesheet, StyleDescriptor().with_alignment("right"))
    assert left != right


def test_intern_number_format_custom_codes_start_at_base() -> None:
    stylesheet = Stylesheet()
    first = intern_number_format(stylesheet, "yyyy/mm/dd")
    second = intern_number_format(stylesheet, "0.000%")
    assert (first, second) == (164, 165)
    assert intern_number_format(stylesheet, "yyyy/mm/dd") == 164
    assert len(stylesheet.number_formats) == 2


def test_intern_number_format_builtin_codes_use_reserved_id() -> None:
    stylesheet = Stylesheet()
    assert intern_number_format(stylesheet, "0.00") == 2
    assert intern_number_format(stylesheet, "mm-dd-yy") == 14
    assert stylesheet.number_formats == []


def test_intern_number_format_custom_base() -> None:
    stylesheet = Stylesheet()
    assert intern_number_format(stylesheet, "#,##0.0", base=200) == 200


def test_resolve_reserved_format_reuses_first_match() -> None:
    stylesheet = Stylesheet()
    styled = StyleDescriptor().with_font(bold=True).with_number_format("mm-dd-yy")
    styled_index = resolve_cell_format(stylesheet, styled)
    assert resolve_reserved_format(stylesheet, 14) == styled_index


def test_resolve_reserved_format_creates_plain_format() -> None:
    stylesheet = Stylesheet()
    index = resolve_reserved_format(stylesheet, 14)
    assert index == 1
    cell_format = stylesheet.cell_formats[index]
    assert (cell_format.font_id, cell_format.fill_id, cell_format.border_id) == (0, 0, 0)
    assert cell_format.number_format_id == 14
    assert resolve_reserved_format(stylesheet, 14) == index


def test_descriptor_at_rebuilds_style() -> None:
    stylesheet = Stylesheet()
    style = (
        StyleDescriptor()
        .with_font(underline=True, size=14.0)
        .with_border_edge("left", "0000FF", "dashed")
        .with_number_format("0.0%")
    )
    index = resolve_cell_format(stylesheet, style)
    rebuilt = descriptor_at(stylesheet, index)
    assert rebuilt == style
    assert rebuilt.border.left == BorderEdge(style="dashed", color="FF0000FF")
    assert rebuilt.border.right.is_empty


def test_descriptor_at_rejects_missing_format() -> None:
    stylesheet = Stylesheet()
    with pytest.raises(StructuralInconsistencyError, match="cell format at index 3"):
        descriptor_at(stylesheet, 3)


def test_default_style_matches_seeded_font() -> None:
    stylesheet = Stylesheet.seeded(font_name="Meiryo", font_size=9.0)
    assert default_style(stylesheet).font.name == "Meiryo"
    assert default_style(stylesheet).number_format is None
