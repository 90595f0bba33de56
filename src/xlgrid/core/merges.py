from __future__ import annotations

import logging

from .a1 import RangeRef, format_range
from .model import MergeRegion, Worksheet

logger = logging.getLogger(__name__)


def merge_reference(region: RangeRef) -> str:
    """Return the canonical upper-case ``TL:BR`` text of ``region``."""
    min_col, min_row, max_col, max_row = region.bounds()
    start = format_range(min_col, min_row, min_col, min_row)
    end = format_range(max_col, max_row, max_col, max_row)
    return f"{start}:{end}"


def find_merge(sheet: Worksheet, region: RangeRef) -> MergeRegion | None:
    """Return the merge declared for exactly ``region``, if any."""
    if sheet.merges is None:
        return None
    reference = merge_reference(region)
    for merge in sheet.merges:
        if merge.reference.upper() == reference:
            return merge
    return None


def merge_cells(sheet: Worksheet, region: RangeRef) -> MergeRegion:
    """Declare ``region`` as merged; an identical declaration is returned as is."""
    if sheet.merges is None:
        sheet.merges = []
        logger.info("Created merge list for %r.", sheet.name)
    existing = find_merge(sheet, region)
    if existing is not None:
        return existing
    merge = MergeRegion(reference=merge_reference(region))
    sheet.merges.append(merge)
    logger.debug("Merged %s in %r.", merge.reference, sheet.name)
    return merge
