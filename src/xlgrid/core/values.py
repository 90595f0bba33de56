from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
import logging

from ..types import CellValueKind
from .model import SharedStringTable

logger = logging.getLogger(__name__)

_EPOCH = datetime(1900, 1, 1)
# The 1900 date system counts from day 1 and includes the phantom 1900-02-29.
_SERIAL_OFFSET_DAYS = 2
_SECONDS_IN_DAY = 24 * 3600


def to_xml_numeric(value: int | float | Decimal | str) -> str:
    """Format a number as culture-invariant XML text.

    Raises:
        TypeError: If ``value`` is a boolean.
        ValueError: If ``value`` is NaN, infinite or text that is not a number.
    """
    if isinstance(value, bool):
        raise TypeError("Booleans are written with to_xml_boolean, not as numbers.")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Cannot write non-finite number {value}.")
        return str(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            raise ValueError(f"Cannot write non-finite number {value}.")
        if value.is_integer():
            return str(int(value))
        return repr(value)
    try:
        parsed = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Cannot write {value!r} as a number.") from exc
    return to_xml_numeric(parsed)


def to_xml_boolean(value: object) -> str:
    """Return ``"1"`` or ``"0"``; strings must read ``true`` to count as true."""
    if isinstance(value, str):
        return "1" if value.strip().lower() == "true" else "0"
    return "1" if bool(value) else "0"


def serial_date(value: date | datetime) -> str:
    """Convert a date to its 1900 date-system serial number text.

    The whole part is the day count since 1900-01-01 plus two; the fraction is
    the time of day in seconds divided by 86400.
    """
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    days = (value.replace(tzinfo=None) - _EPOCH).days + _SERIAL_OFFSET_DAYS
    seconds = value.hour * 3600 + value.minute * 60 + value.second
    return to_xml_numeric(days + seconds / _SECONDS_IN_DAY)


def shared_string_index(table: SharedStringTable, text: str) -> int:
    """Return the index of ``text`` in the table, appending it when missing."""
    for index, item in enumerate(table.items):
        if item == text:
            return index
    table.items.append(text)
    table.count = len(table.items)
    table.unique_count = len(table.items)
    logger.debug("Added shared string %d.", len(table.items) - 1)
    return len(table.items) - 1


def infer_kind(value: object) -> CellValueKind:
    """Map a Python value to the cell value kind used when pasting records."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float, Decimal)):
        return "number"
    if isinstance(value, (date, datetime)):
        return "date"
    return "string"


def to_cell_text(value: object, kind: CellValueKind) -> str:
    """Render ``value`` as the raw text stored for ``kind``.

    Raises:
        TypeError: If ``kind`` is ``date`` and ``value`` is not a date.
        ValueError: If ``kind`` is ``number`` and ``value`` is not numeric.
    """
    if kind == "boolean":
        return to_xml_boolean(value)
    if kind == "number":
        if isinstance(value, (int, float, Decimal)):
            return to_xml_numeric(value)
        return to_xml_numeric(str(value))
    if kind == "date":
        if isinstance(value, (date, datetime)):
            return serial_date(value)
        raise TypeError(f"Cannot write {value!r} as a date.")
    return "" if value is None else str(value)
