from __future__ import annotations

import math
from typing import Sequence

from homedash.grid.types import NULL_PIN_KEY, Cell, CellKind, Tab
from homedash.models import format_cents

MAG_ARROW = "\U0001F821"  # 🠡

_NUMERIC_KINDS = {CellKind.MONEY, CellKind.DRILLDOWN}


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def mag_format(cell: Cell, include_unit: bool = False) -> str:
    """Order-of-magnitude form of a numeric cell; other values pass through.

    Plain text is left alone even when it looks numeric: phone, serial and
    model numbers live in text columns.
    """
    value = cell.value.strip()
    if value in {"", "—"}:
        return value
    if cell.kind not in _NUMERIC_KINDS:
        return value

    sign = ""
    number = value
    if number.startswith("-$"):
        sign = "-"
        number = number[2:]
    elif number.startswith("$"):
        number = number[1:]
    number = number.replace(",", "")
    try:
        parsed = float(number)
    except ValueError:
        return value
    if math.isnan(parsed) or math.isinf(parsed):
        return value
    if parsed < 0:
        sign = "-"

    unit = "$ " if include_unit and cell.kind == CellKind.MONEY else ""
    if parsed == 0:
        return f"{sign}{unit}{MAG_ARROW}0"
    return f"{sign}{unit}{MAG_ARROW}{_round_half_away(math.log10(abs(parsed)))}"


def mag_cents(cents: int) -> str:
    return mag_format(Cell(value=format_cents(cents), kind=CellKind.MONEY), include_unit=True)


def mag_transform_cells(rows: Sequence[Sequence[Cell]]) -> list[list[Cell]]:
    return [
        [Cell(value=mag_format(cell), kind=cell.kind, null=cell.null, link_id=cell.link_id) for cell in row]
        for row in rows
    ]


def cell_display_value(cell: Cell, mag_mode: bool) -> str:
    """Key a cell is matched by: NULL sentinel, magnitude bucket, or raw value."""
    if cell.null:
        return NULL_PIN_KEY
    if mag_mode:
        return mag_format(cell).strip().lower()
    return cell.value.strip().lower()


def translate_pins(tab: Tab, now_mag_mode: bool) -> None:
    """Re-derive pin values after a magnitude-mode switch.

    Values are rebuilt from ``tab.full_cell_rows`` because the raw -> bucket
    mapping is many-to-one: a round trip can widen a pin to every raw value
    sharing the bucket. A pin whose rebuilt set would be empty is left as is.
    """
    for pin in tab.pins:
        rebuilt: dict[str, None] = {}
        for row in tab.full_cell_rows:
            if pin.col < 0 or pin.col >= len(row):
                continue
            cell = row[pin.col]
            if cell_display_value(cell, not now_mag_mode) not in pin.values:
                continue
            rebuilt[cell_display_value(cell, now_mag_mode)] = None
        if NULL_PIN_KEY in pin.values:
            rebuilt[NULL_PIN_KEY] = None
        if rebuilt:
            pin.values = rebuilt
