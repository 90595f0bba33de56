from __future__ import annotations


class XlGridError(Exception):
    """Base class for xlgrid errors."""


class InvalidAddressError(XlGridError, ValueError):
    """Raised for malformed column, row or range references."""


class MissingSharedStringTableError(XlGridError):
    """Raised when shared text is written to a document without a shared-string table."""


class StructuralInconsistencyError(XlGridError):
    """Raised when a worksheet violates an ordering or overlap invariant."""


class WorksheetNotFoundError(XlGridError, KeyError):
    """Raised when a worksheet name does not exist in the document."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""
