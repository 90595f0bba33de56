from __future__ import annotations

import logging

from .core.a1 import RangeRef, format_range, quote_sheet_name
from .core.dimension import refresh_worksheet
from .core.model import DefinedName, Document, PageSetup, Worksheet
from .errors import WorksheetNotFoundError
from .types import OrientationType

logger = logging.getLogger(__name__)

PRINT_AREA_NAME = "_xlnm.Print_Area"


def get_worksheet(document: Document, name: str) -> Worksheet:
    """Return the worksheet called ``name``.

    Raises:
        WorksheetNotFoundError: If the document has no such worksheet.
    """
    for sheet in document.worksheets:
        if sheet.name == name:
            return sheet
    raise WorksheetNotFoundError(
        f"Sheet not found: {name}. Available sheets: {document.sheet_names}"
    )


def insert_worksheet(document: Document, name: str = "") -> Worksheet:
    """Append a worksheet, or return the existing one with the same name.

    Args:
        document: Target document.
        name: Sheet name. When empty, ``Sheet{n}`` is generated from the next
            free sheet id.

    Returns:
        The new or existing worksheet.
    """
    if name:
        for sheet in document.worksheets:
            if sheet.name == name:
                return sheet
    sheet_id = max((sheet.sheet_id for sheet in document.worksheets), default=0) + 1
    if not name:
        name = _generated_sheet_name(document, sheet_id)
    sheet = Worksheet(name=name, sheet_id=sheet_id)
    document.worksheets.append(sheet)
    logger.info("Inserted worksheet %r (sheet id %d).", name, sheet_id)
    return sheet


def remove_worksheet(document: Document, name: str) -> bool:
    """Remove a worksheet and the defined names scoped to it.

    Returns:
        True when a worksheet was removed, False when none had that name.
    """
    for position, sheet in enumerate(document.worksheets):
        if sheet.name == name:
            break
    else:
        return False
    del document.worksheets[position]
    kept: list[DefinedName] = []
    for defined in document.defined_names:
        if defined.local_sheet_id == position:
            continue
        if defined.local_sheet_id is not None and defined.local_sheet_id > position:
            defined.local_sheet_id -= 1
        kept.append(defined)
    document.defined_names[:] = kept
    logger.info("Removed worksheet %r.", name)
    return True


def set_page_setup(
    sheet: Worksheet,
    paper_size: int | None = None,
    orientation: OrientationType = "default",
) -> PageSetup:
    """Replace the page setup of ``sheet``."""
    sheet.page_setup = PageSetup(paper_size=paper_size, orientation=orientation)
    return sheet.page_setup


def set_print_area(document: Document, sheet_name: str, region: RangeRef) -> DefinedName:
    """Create or update the print area of a worksheet.

    The print area is the ``_xlnm.Print_Area`` defined name scoped to the
    sheet's position, with absolute text such as ``Sheet1!$A$1:$D$10``. A
    sheet without page setup gets one with the configured paper size.

    Raises:
        WorksheetNotFoundError: If ``sheet_name`` does not exist.
    """
    sheet = get_worksheet(document, sheet_name)
    position = document.worksheets.index(sheet)
    min_col, min_row, max_col, max_row = region.bounds()
    text = (
        f"{quote_sheet_name(sheet.name)}!"
        f"{format_range(min_col, min_row, max_col, max_row, absolute=True)}"
    )
    defined = find_print_area(document, position)
    if defined is None:
        defined = DefinedName(name=PRINT_AREA_NAME, text=text, local_sheet_id=position)
        document.defined_names.append(defined)
    else:
        defined.text = text
    if sheet.page_setup is None:
        set_page_setup(sheet, paper_size=document.config.default_paper_size)
    logger.debug("Print area of %r set to %s.", sheet.name, text)
    return defined


def find_print_area(document: Document, position: int) -> DefinedName | None:
    """Return the print area defined for the sheet at ``position``, if any."""
    for defined in document.defined_names:
        if defined.name == PRINT_AREA_NAME and defined.local_sheet_id == position:
            return defined
    return None


def save_document(document: Document) -> None:
    """Validate every worksheet and recompute its span and dimension hints.

    Raises:
        StructuralInconsistencyError: If a worksheet violates an invariant.
    """
    for sheet in document.worksheets:
        refresh_worksheet(sheet)


def _generated_sheet_name(document: Document, sheet_id: int) -> str:
    taken = set(document.sheet_names)
    candidate = sheet_id
    while f"Sheet{candidate}" in taken:
        candidate += 1
    return f"Sheet{candidate}"
