from __future__ import annotations

from types import SimpleNamespace

import pytest

from homedash import cli, logging_setup
from homedash.config import AppConfig
from homedash.services.tables import new_tab
from homedash.models import TabKind


def _grid_args(tab: str, **overrides) -> SimpleNamespace:
    values = dict(
        tab=tab,
        width=200,
        mag=False,
        pin=[],
        filter=False,
        invert=False,
        hide=[],
        cursor=None,
        deleted=False,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def test_find_column_by_title_or_index() -> None:
    specs = new_tab(TabKind.VENDORS).specs

    assert cli.find_column(specs, "name") == 1
    assert cli.find_column(specs, "0") == 0
    assert cli.find_column(specs, "99") == -1
    assert cli.find_column(specs, "Nope") == -1


def test_parse_pin() -> None:
    assert cli.parse_pin("Status=planned") == ("Status", "planned")
    assert cli.parse_pin("Budget=∅") == ("Budget", None)
    assert cli.parse_pin("Notes=") == ("Notes", "")
    with pytest.raises(ValueError):
        cli.parse_pin("Status")


@pytest.mark.asyncio
async def test_grid_rejects_unknown_tab(capsys) -> None:
    code = await cli.grid(_grid_args("garage"), AppConfig())
    out = capsys.readouterr().out

    assert code == 2
    assert "❌ Unknown tab: garage" in out


@pytest.mark.asyncio
async def test_grid_prints_filtered_rows_and_pins(capsys) -> None:
    args = _grid_args("projects", pin=["Status=planned"], filter=True)

    code = await cli.grid(args, AppConfig())
    out = capsys.readouterr().out

    assert code == 0
    assert "Pins: Status: planned" in out
    assert "1 of 7 rows" in out
    assert "Status" in out.splitlines()[0]


@pytest.mark.asyncio
async def test_grid_hides_columns(capsys) -> None:
    args = _grid_args("vendors", hide=["Phone", "Email"])

    code = await cli.grid(args, AppConfig())
    out = capsys.readouterr().out

    assert code == 0
    assert "Phone" not in out.splitlines()[0]
    assert "⋯" in out
    assert "3 of 3 rows" in out


@pytest.mark.asyncio
async def test_grid_rejects_unknown_pin_column(capsys) -> None:
    code = await cli.grid(_grid_args("vendors", pin=["Colour=red"]), AppConfig())
    out = capsys.readouterr().out

    assert code == 2
    assert "❌ Unknown column: Colour" in out


@pytest.mark.asyncio
async def test_grid_rejects_hidden_cursor_column(capsys) -> None:
    args = _grid_args("vendors", hide=["Phone"], cursor="phone")

    code = await cli.grid(args, AppConfig())
    out = capsys.readouterr().out

    assert code == 2
    assert "❌ Unknown or hidden column: phone" in out


@pytest.mark.asyncio
async def test_stats_prints_counts(capsys) -> None:
    await cli.stats(AppConfig())
    out = capsys.readouterr().out

    assert "📊 HomeDash Stats" in out
    assert "  Projects    : 7" in out
    assert "  Vendors     : 4" in out


def test_main_dispatches_to_stats(monkeypatch, capsys) -> None:
    configured: list[AppConfig] = []
    monkeypatch.setattr("sys.argv", ["hd", "stats"])
    monkeypatch.setenv("HD_CONFIG_PATH", "non-existent-config-file.json")
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)
    monkeypatch.setattr(logging_setup, "configure", lambda config: configured.append(config))

    cli.main()
    out = capsys.readouterr().out

    assert len(configured) == 1
    assert "📊 HomeDash Stats" in out


def test_main_grid_exits_with_grid_code(monkeypatch) -> None:
    monkeypatch.setattr("sys.argv", ["hd", "grid", "garage"])
    monkeypatch.setenv("HD_CONFIG_PATH", "non-existent-config-file.json")
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)
    monkeypatch.setattr(logging_setup, "configure", lambda config: None)

    with pytest.raises(SystemExit) as raised:
        cli.main()

    assert raised.value.code == 2
