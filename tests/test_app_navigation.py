from __future__ import annotations

from homedash.app import HomeDash
from homedash.config import AppConfig


class _FakeTableView:
    def __init__(self, result: tuple[bool, str] = (True, "")) -> None:
        self.result = result
        self.calls: list[tuple] = []
        self.mag_modes: list[bool] = []

    def __getattr__(self, name: str):
        def command(*args):
            self.calls.append((name, *args))
            return self.result

        return command

    def set_mag_mode(self, mag_mode: bool) -> tuple[bool, str]:
        self.mag_modes.append(mag_mode)
        return True, f"Magnitude mode {'on' if mag_mode else 'off'}."


def _app(monkeypatch, view) -> tuple[HomeDash, list[tuple[bool, str]]]:
    app = HomeDash(config=AppConfig())
    published: list[tuple[bool, str]] = []
    monkeypatch.setattr(app, "_active_table_view", lambda: view)
    monkeypatch.setattr(app, "_publish_action_result", lambda ok, message: published.append((ok, message)))
    return app, published


def test_pin_action_publishes_view_result(monkeypatch) -> None:
    view = _FakeTableView((True, "Pinned."))
    app, published = _app(monkeypatch, view)

    app.action_toggle_pin()

    assert view.calls == [("toggle_pin",)]
    assert published == [(True, "Pinned.")]


def test_failed_action_publishes_error(monkeypatch) -> None:
    view = _FakeTableView((False, "Cannot hide the last visible column."))
    app, published = _app(monkeypatch, view)

    app.action_hide_column()

    assert published == [(False, "Cannot hide the last visible column.")]


def test_cursor_moves_are_quiet_unless_they_fail(monkeypatch) -> None:
    view = _FakeTableView((True, "ignored"))
    app, published = _app(monkeypatch, view)

    app.action_column_right()
    app.action_row_up()
    app.action_column_last()

    assert view.calls == [("move_column", True), ("move_selection", -1), ("jump_column", True)]
    assert published == []

    view.result = (False, "")
    app.action_column_left()
    assert published == []


def test_actions_without_active_view_do_nothing(monkeypatch) -> None:
    app, published = _app(monkeypatch, None)

    app.action_toggle_sort()

    assert published == []


def test_mag_toggle_updates_every_table_view(monkeypatch) -> None:
    views = [_FakeTableView(), _FakeTableView()]
    app, published = _app(monkeypatch, views[0])
    monkeypatch.setattr(app, "_table_views", lambda: views)

    app.action_toggle_mag_mode()
    app.action_toggle_mag_mode()

    assert [view.mag_modes for view in views] == [[True, False], [True, False]]
    assert published == [(True, "Magnitude mode on."), (True, "Magnitude mode off.")]
