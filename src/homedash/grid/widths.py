"""Column width allocation.

Widths start from each column's natural (content-driven) width floored at
``min``. When the natural widths fit they are kept and the slack goes to flex
columns. Otherwise columns are capped at ``max``; leftover room first widens
truncated columns back toward their natural width, then flex columns. If the
capped widths still overflow, flex columns shrink toward ``min``.
"""

from __future__ import annotations

from typing import Sequence

from rich.cells import cell_len

from homedash.grid.types import Cell, CellKind, ColumnSpec

LINK_ARROW = "→"
DRILLDOWN_ARROW = "↘"


def header_title_width(spec: ColumnSpec) -> int:
    """Header width including the link/drilldown glyph.

    Sort indicators render inside the existing width, so sorting never moves
    the layout.
    """
    width = cell_len(spec.title)
    if spec.link is not None:
        width += 1 + cell_len(LINK_ARROW)
    elif spec.kind == CellKind.DRILLDOWN:
        width += 1 + cell_len(DRILLDOWN_ARROW)
    return width


def natural_widths(specs: Sequence[ColumnSpec], rows: Sequence[Sequence[Cell]]) -> list[int]:
    widths: list[int] = []
    for index, spec in enumerate(specs):
        width = header_title_width(spec)
        for fixed in spec.fixed_values:
            width = max(width, cell_len(fixed))
        for row in rows:
            if index >= len(row):
                continue
            value = row[index].value.strip()
            if value:
                width = max(width, cell_len(value))
        widths.append(max(width, spec.min))
    return widths


def column_widths(
    specs: Sequence[ColumnSpec],
    rows: Sequence[Sequence[Cell]],
    width: int,
    separator_width: int,
) -> list[int]:
    count = len(specs)
    if count == 0:
        return []
    available = max(width - separator_width * (count - 1), count)
    natural = natural_widths(specs, rows)
    flex = flex_columns(specs) or all_columns(specs)

    if sum(natural) <= available:
        widths = list(natural)
        distribute(widths, specs, flex, available - sum(widths), grow=True)
        return widths

    widths = [
        min(w, spec.max) if spec.max > 0 else w
        for w, spec in zip(natural, specs)
    ]
    total = sum(widths)
    if total <= available:
        extra = widen_truncated(widths, natural, available - total)
        distribute(widths, specs, flex, extra, grow=True)
        return widths

    distribute(widths, specs, flex, total - available, grow=False)
    return widths


def widen_truncated(widths: list[int], natural: Sequence[int], extra: int) -> int:
    """Grow columns below their natural width one unit at a time; return what is left."""
    while extra > 0:
        changed = False
        for index in range(len(widths)):
            if extra == 0:
                break
            if widths[index] < natural[index]:
                widths[index] += 1
                extra -= 1
                changed = True
        if not changed:
            break
    return extra


def distribute(
    widths: list[int],
    specs: Sequence[ColumnSpec],
    indices: Sequence[int],
    amount: int,
    grow: bool,
) -> None:
    """Round-robin ``amount`` units into (or out of) the columns in ``indices``.

    Growth stops at ``max``, shrinking at ``min``. Stops early when no column
    can move.
    """
    if amount <= 0 or not indices:
        return
    while amount > 0:
        changed = False
        for index in indices:
            if index >= len(widths):
                continue
            spec = specs[index]
            if grow:
                if spec.max > 0 and widths[index] >= spec.max:
                    continue
                widths[index] += 1
            else:
                if widths[index] <= spec.min:
                    continue
                widths[index] -= 1
            amount -= 1
            changed = True
            if amount == 0:
                break
        if not changed:
            return


def flex_columns(specs: Sequence[ColumnSpec]) -> list[int]:
    return [index for index, spec in enumerate(specs) if spec.flex]


def all_columns(specs: Sequence[ColumnSpec]) -> list[int]:
    return list(range(len(specs)))


def safe_width(widths: Sequence[int], index: int) -> int:
    if index >= len(widths):
        return 1
    return max(widths[index], 1)
