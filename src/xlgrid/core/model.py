from __future__ import annotations

from pydantic import BaseModel, Field

from ..config import EngineConfig
from ..types import CellValueKind, OrientationType
from .a1 import parse_cell_ref
from .styles import Stylesheet


class Cell(BaseModel):
    """One cell node; ``reference`` always matches its row and column."""

    reference: str
    value: str | None = None
    kind: CellValueKind | None = None
    formula: str | None = None
    style_index: int | None = None

    @property
    def column(self) -> str:
        return parse_cell_ref(self.reference).column

    @property
    def column_index(self) -> int:
        return parse_cell_ref(self.reference).column_index

    @property
    def row_index(self) -> int:
        return parse_cell_ref(self.reference).row


class Row(BaseModel):
    """Row node owning its cells in ascending column order."""

    index: int = Field(ge=1)
    cells: list[Cell] = Field(default_factory=list)
    spans: str | None = None
    height: float | None = None


class ColumnRange(BaseModel):
    """Inclusive span of columns sharing one width."""

    min: int = Field(ge=1)
    max: int = Field(ge=1)
    width: float
    custom_width: bool = False

    def contains(self, column_index: int) -> bool:
        return self.min <= column_index <= self.max


class MergeRegion(BaseModel):
    """Merged region in normalized ``TL:BR`` form."""

    reference: str


class PageSetup(BaseModel):
    """Print settings for one worksheet."""

    paper_size: int | None = None
    orientation: OrientationType = "default"


class Worksheet(BaseModel):
    """Worksheet tree: rows, column ranges, merges and cached hints.

    ``columns`` and ``merges`` stay ``None`` until first written so a sheet
    without them does not serialize empty containers.
    """

    name: str
    sheet_id: int = Field(ge=1)
    rows: list[Row] = Field(default_factory=list)
    columns: list[ColumnRange] | None = None
    merges: list[MergeRegion] | None = None
    dimension: str = "A1"
    page_setup: PageSetup | None = None


class SharedStringTable(BaseModel):
    """De-duplicated text values referenced by index."""

    items: list[str] = Field(default_factory=list)
    count: int = 0
    unique_count: int = 0


class DefinedName(BaseModel):
    """Workbook defined name, optionally scoped to one sheet position."""

    name: str
    text: str
    local_sheet_id: int | None = None


class Document(BaseModel):
    """In-memory spreadsheet document."""

    worksheets: list[Worksheet] = Field(default_factory=list)
    stylesheet: Stylesheet = Field(default_factory=Stylesheet)
    shared_strings: SharedStringTable | None = None
    defined_names: list[DefinedName] = Field(default_factory=list)
    config: EngineConfig = Field(default_factory=EngineConfig)

    @property
    def sheet_names(self) -> list[str]:
        return [sheet.name for sheet in self.worksheets]
