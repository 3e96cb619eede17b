from __future__ import annotations

from datetime import date

import pytest

from homedash.config import AppConfig
from homedash.data import DataManager
from homedash.grid.magnitude import MAG_ARROW
from homedash.grid.types import NULL_PIN_KEY, Tab
from homedash.grid.viewport import compute_table_viewport
from homedash.models import TabKind
from homedash.services import grid_commands
from homedash.services.tables import new_tab

TODAY = date(2026, 10, 16)


async def _loaded(kind: TabKind) -> Tab:
    dm = DataManager(AppConfig())
    await dm.initialize()
    tab = new_tab(kind)
    dm.reload_tab(tab, False, TODAY)
    return tab


def _column(tab: Tab, title: str) -> int:
    return [spec.title for spec in tab.specs].index(title)


def _ids(tab: Tab) -> list[int]:
    return [meta.id for meta in tab.rows]


@pytest.mark.asyncio
async def test_toggle_pin_at_cursor_pins_displayed_value() -> None:
    tab = await _loaded(TabKind.PROJECTS)
    tab.col_cursor = _column(tab, "Status")
    tab.row_cursor = 0

    ok, message = grid_commands.toggle_pin_at_cursor(tab, False)
    assert (ok, message) == (True, "Pinned.")
    assert list(tab.pins[0].values) == ["planned"]
    assert {meta.id for meta in tab.rows if meta.dimmed} == {2, 3, 4, 5, 6, 7}

    ok, message = grid_commands.toggle_pin_at_cursor(tab, False)
    assert (ok, message) == (True, "Unpinned.")
    assert tab.pins == []


@pytest.mark.asyncio
async def test_toggle_pin_at_cursor_pins_bucket_in_magnitude_mode() -> None:
    tab = await _loaded(TabKind.PROJECTS)
    tab.col_cursor = _column(tab, "Budget")
    tab.row_cursor = 1

    grid_commands.toggle_pin_at_cursor(tab, True)

    assert list(tab.pins[0].values) == [f"{MAG_ARROW}3"]


@pytest.mark.asyncio
async def test_toggle_pin_at_cursor_pins_null_sentinel() -> None:
    tab = await _loaded(TabKind.PROJECTS)
    tab.col_cursor = _column(tab, "Budget")
    tab.row_cursor = 4

    grid_commands.toggle_pin_at_cursor(tab, False)
    grid_commands.toggle_filter_activation(tab, False)

    assert list(tab.pins[0].values) == [NULL_PIN_KEY]
    assert _ids(tab) == [5]


@pytest.mark.asyncio
async def test_armed_filter_applies_on_first_pin() -> None:
    tab = await _loaded(TabKind.PROJECTS)

    ok, message = grid_commands.toggle_filter_activation(tab, False)
    assert ok is True
    assert tab.filter_active is True
    assert len(tab.rows) == 7

    tab.col_cursor = _column(tab, "Type")
    tab.row_cursor = 0
    grid_commands.toggle_pin_at_cursor(tab, False)

    assert _ids(tab) == [1]


@pytest.mark.asyncio
async def test_toggle_filter_invert_twice_restores_rows() -> None:
    tab = await _loaded(TabKind.PROJECTS)
    tab.col_cursor = _column(tab, "Status")
    grid_commands.toggle_pin_at_cursor(tab, False)
    grid_commands.toggle_filter_activation(tab, False)
    before = _ids(tab)

    grid_commands.toggle_filter_invert(tab, False)
    assert _ids(tab) == [2, 3, 4, 5, 6, 7]

    grid_commands.toggle_filter_invert(tab, False)
    assert _ids(tab) == before == [1]


@pytest.mark.asyncio
async def test_clear_all_pins_reports_when_nothing_to_clear() -> None:
    tab = await _loaded(TabKind.VENDORS)

    assert grid_commands.clear_all_pins(tab, False) == (False, "No pins to clear.")

    grid_commands.toggle_pin_at_cursor(tab, False)
    assert grid_commands.clear_all_pins(tab, False) == (True, "Pins cleared.")
    assert tab.pins == []


@pytest.mark.asyncio
async def test_hide_current_column_moves_cursor_and_drops_pins() -> None:
    tab = await _loaded(TabKind.VENDORS)
    tab.col_cursor = _column(tab, "Contact")
    grid_commands.toggle_pin_at_cursor(tab, False)
    grid_commands.toggle_filter_activation(tab, False)
    assert len(tab.rows) == 1

    ok, message = grid_commands.hide_current_column(tab, False)

    assert ok is True
    assert message == "Hidden: Contact. Press C to show all."
    assert tab.pins == []
    assert tab.filter_active is False
    assert len(tab.rows) == 3
    assert tab.col_cursor == _column(tab, "Email")


@pytest.mark.asyncio
async def test_hide_current_column_falls_back_to_previous_column() -> None:
    tab = await _loaded(TabKind.VENDORS)
    last = len(tab.specs) - 1
    tab.col_cursor = last

    grid_commands.hide_current_column(tab, False)

    assert tab.col_cursor == last - 1


@pytest.mark.asyncio
async def test_hide_current_column_refuses_last_visible_column() -> None:
    tab = await _loaded(TabKind.VENDORS)
    for spec in tab.specs[1:]:
        spec.hide_order = 1
    tab.col_cursor = 0

    assert grid_commands.hide_current_column(tab, False) == (False, "Cannot hide the last visible column.")
    assert tab.specs[0].hide_order == 0


@pytest.mark.asyncio
async def test_unhide_all_columns() -> None:
    tab = await _loaded(TabKind.VENDORS)

    assert grid_commands.unhide_all_columns(tab) == (False, "No hidden columns.")
    grid_commands.hide_current_column(tab, False)
    assert grid_commands.unhide_all_columns(tab) == (True, "All columns visible.")


@pytest.mark.asyncio
async def test_toggle_mag_mode_translates_pins() -> None:
    tab = await _loaded(TabKind.PROJECTS)
    tab.col_cursor = _column(tab, "Budget")
    tab.row_cursor = 1
    grid_commands.toggle_pin_at_cursor(tab, False)
    grid_commands.toggle_filter_activation(tab, False)
    assert _ids(tab) == [2]

    grid_commands.toggle_mag_mode(tab, True)
    assert list(tab.pins[0].values) == [f"{MAG_ARROW}3"]
    assert _ids(tab) == [2, 4]

    grid_commands.toggle_mag_mode(tab, False)
    assert set(tab.pins[0].values) == {"$1,000.00", "$2,000.00"}
    assert _ids(tab) == [2, 4]


@pytest.mark.asyncio
async def test_toggle_settled_filter_hides_and_shows_settled_projects() -> None:
    tab = await _loaded(TabKind.PROJECTS)

    assert grid_commands.toggle_settled_filter(tab, False) == (True, "Settled hidden.")
    assert _ids(tab) == [1, 2, 3, 5, 7]

    assert grid_commands.toggle_settled_filter(tab, False) == (True, "Settled shown.")
    assert len(tab.rows) == 7
    assert tab.pins == []


@pytest.mark.asyncio
async def test_toggle_settled_filter_only_on_projects() -> None:
    tab = await _loaded(TabKind.VENDORS)

    ok, _ = grid_commands.toggle_settled_filter(tab, False)

    assert ok is False


@pytest.mark.asyncio
async def test_cursor_commands() -> None:
    tab = await _loaded(TabKind.VENDORS)
    tab.specs[1].hide_order = 1

    assert grid_commands.move_column_cursor(tab, True) == (True, "")
    assert tab.col_cursor == 2
    assert grid_commands.move_column_cursor(tab, False) == (True, "")
    assert tab.col_cursor == 0
    assert grid_commands.move_column_cursor(tab, False)[0] is False

    grid_commands.jump_column_edge(tab, True)
    assert tab.col_cursor == len(tab.specs) - 1

    grid_commands.move_row_cursor(tab, 10)
    assert tab.row_cursor == 2
    grid_commands.move_row_cursor(tab, -10)
    assert tab.row_cursor == 0


@pytest.mark.asyncio
async def test_sort_commands() -> None:
    tab = await _loaded(TabKind.VENDORS)
    tab.col_cursor = 1

    assert grid_commands.toggle_sort_at_cursor(tab) == (True, "Sorted by Name.")
    assert _ids(tab) == [2, 1, 3]

    grid_commands.clear_all_sorts(tab, False)
    assert _ids(tab) == [1, 2, 3]


@pytest.mark.asyncio
async def test_update_tab_viewport_keeps_cursor_in_window() -> None:
    tab = await _loaded(TabKind.APPLIANCES)
    tab.col_cursor = len(tab.specs) - 1

    grid_commands.update_tab_viewport(tab, 60)

    assert tab.view_offset > 0
    viewport = compute_table_viewport(tab, 60)
    assert viewport.cursor >= 0
    assert viewport.vis_to_full[viewport.cursor] == tab.col_cursor

    tab.col_cursor = 0
    grid_commands.update_tab_viewport(tab, 60)
    assert tab.view_offset == 0
