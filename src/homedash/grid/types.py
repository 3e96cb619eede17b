from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from homedash.models import TabKind

# Pin key for absent data. strip() and lower() leave it unchanged and no
# rendered cell value can produce it, so it never collides with "".
NULL_PIN_KEY = "\x00null"


class CellKind(Enum):
    TEXT = "text"
    MONEY = "money"
    READONLY = "readonly"
    DATE = "date"
    STATUS = "status"
    DRILLDOWN = "drilldown"  # count that opens a detail view
    WARRANTY = "warranty"
    URGENCY = "urgency"
    NOTES = "notes"


class Align(Enum):
    LEFT = "left"
    RIGHT = "right"


class SortDir(Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class ColumnLink:
    target_tab: TabKind


@dataclass
class ColumnSpec:
    title: str
    min: int = 0
    max: int = 0  # 0 = unbounded
    flex: bool = False
    align: Align = Align.LEFT
    kind: CellKind = CellKind.TEXT
    link: Optional[ColumnLink] = None
    fixed_values: tuple[str, ...] = ()
    hide_order: int = 0  # 0 = visible; higher = hidden more recently

    @property
    def hidden(self) -> bool:
        return self.hide_order > 0


@dataclass(frozen=True)
class Cell:
    value: str = ""
    kind: CellKind = CellKind.TEXT
    null: bool = False
    link_id: int = 0


@dataclass(frozen=True)
class RowMeta:
    id: int
    deleted: bool = False
    dimmed: bool = False


@dataclass(frozen=True)
class SortEntry:
    col: int
    dir: SortDir = SortDir.ASC


@dataclass
class FilterPin:
    col: int  # index into Tab.specs, never the visible projection
    values: dict[str, None] = field(default_factory=dict)  # insertion-ordered set


@dataclass
class Tab:
    kind: TabKind
    name: str
    specs: list[ColumnSpec]
    rows: list[RowMeta] = field(default_factory=list)
    cell_rows: list[list[Cell]] = field(default_factory=list)
    full_meta: list[RowMeta] = field(default_factory=list)
    full_cell_rows: list[list[Cell]] = field(default_factory=list)
    pins: list[FilterPin] = field(default_factory=list)
    filter_active: bool = False
    filter_inverted: bool = False
    col_cursor: int = 0
    row_cursor: int = 0
    view_offset: int = 0  # first visible-projection column of the last window
    sorts: list[SortEntry] = field(default_factory=list)
    show_deleted: bool = False
    stale: bool = False
