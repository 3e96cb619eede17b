import logging

from dotenv import load_dotenv
from textual.app import App, ComposeResult
from textual.css.query import NoMatches
from textual.widgets import ContentSwitcher, Footer, Static, Tab, Tabs

from homedash import logging_setup
from homedash.config import AppConfig
from homedash.data import DataManager
from homedash.models import TabKind
from homedash.views.table_view import TableView

logger = logging.getLogger(__name__)


class HomeDash(App):
    CSS_PATH = "homedash.tcss"

    BINDINGS = [
        ("1", "switch_tab('projects')", "Projects"),
        ("2", "switch_tab('quotes')", "Quotes"),
        ("3", "switch_tab('maintenance')", "Maintenance"),
        ("4", "switch_tab('appliances')", "Appliances"),
        ("5", "switch_tab('vendors')", "Vendors"),
        ("tab", "next_tab", "Next Tab"),
        ("shift+tab", "prev_tab", "Prev Tab"),
        ("h", "column_left", "Left"),
        ("l", "column_right", "Right"),
        ("j", "row_down", "Down"),
        ("k", "row_up", "Up"),
        ("circumflex_accent", "column_first", "First Column"),
        ("dollar_sign", "column_last", "Last Column"),
        ("s", "toggle_sort", "Sort"),
        ("S", "clear_sorts", "Clear Sorts"),
        ("n", "toggle_pin", "Pin"),
        ("N", "toggle_filter", "Filter"),
        ("exclamation_mark", "toggle_invert", "Invert"),
        ("ctrl+n", "clear_pins", "Clear Pins"),
        ("c", "hide_column", "Hide Column"),
        ("C", "show_columns", "Show Columns"),
        ("ctrl+o", "toggle_mag_mode", "Magnitude"),
        ("t", "toggle_settled", "Settled"),
        ("x", "toggle_show_deleted", "Deleted"),
        ("q", "quit", "Quit"),
    ]

    def __init__(self, config: AppConfig | None = None, **kwargs):
        super().__init__(**kwargs)
        self.config = config or AppConfig.from_env()
        self.data_manager = DataManager(self.config)
        self.tab_ids = [kind.value for kind in TabKind]
        self.mag_mode = self.config.mag_mode
        self.last_ui_error: str | None = None

    async def on_mount(self) -> None:
        await self.data_manager.initialize()
        self.refresh_views()
        self.update_app_status()

    def compose(self) -> ComposeResult:
        yield Static("HOME DASHBOARD — v0.1", id="app-header")
        yield Tabs(*(Tab(kind.label, id=kind.value) for kind in TabKind), active=self.config.default_tab)
        yield Static("Status: initializing...", id="app-status")
        with ContentSwitcher(initial=self.config.default_tab):
            for kind in TabKind:
                yield TableView(kind, show_deleted=self.config.show_deleted, id=kind.value)
        yield Footer()

    def refresh_views(self) -> None:
        errors: list[str] = []
        for view in self._table_views():
            try:
                view.refresh_view()
            except Exception as e:
                logger.exception("refresh failed for %s", view.kind.value)
                errors.append(f"{view.kind.value}: {e}")
        if errors:
            self.last_ui_error = errors[0]
            self.update_app_status()
            self._notify("View refresh error", severity="error")
        else:
            self.last_ui_error = None

    def update_app_status(self, override_message: str | None = None) -> None:
        mag_label = "on" if self.mag_mode else "off"
        ui_error = f" | UI error: {self.last_ui_error}" if self.last_ui_error else ""
        status_text = override_message or (
            f"Data: {self.data_manager.counts_summary()} | Mag: {mag_label} | "
            f"Config: {self.config.config_source}{ui_error}"
        )
        try:
            self.query_one("#app-status", Static).update(status_text)
        except NoMatches:
            pass

    def _notify(self, message: str, severity: str = "information") -> None:
        try:
            self.notify(message, severity=severity)
        except Exception:
            self.update_app_status(message)

    def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        self.query_one(ContentSwitcher).current = event.tab.id
        self.update_app_status()

    def action_switch_tab(self, tab_id: str) -> None:
        self.query_one(Tabs).active = tab_id

    def action_next_tab(self) -> None:
        tabs = self.query_one(Tabs)
        current_index = self.tab_ids.index(tabs.active)
        tabs.active = self.tab_ids[(current_index + 1) % len(self.tab_ids)]

    def action_prev_tab(self) -> None:
        tabs = self.query_one(Tabs)
        current_index = self.tab_ids.index(tabs.active)
        tabs.active = self.tab_ids[(current_index - 1) % len(self.tab_ids)]

    def action_column_left(self) -> None:
        self._dispatch("move_column", False, quiet=True)

    def action_column_right(self) -> None:
        self._dispatch("move_column", True, quiet=True)

    def action_row_down(self) -> None:
        self._dispatch("move_selection", 1, quiet=True)

    def action_row_up(self) -> None:
        self._dispatch("move_selection", -1, quiet=True)

    def action_column_first(self) -> None:
        self._dispatch("jump_column", False, quiet=True)

    def action_column_last(self) -> None:
        self._dispatch("jump_column", True, quiet=True)

    def action_toggle_sort(self) -> None:
        self._dispatch("toggle_sort")

    def action_clear_sorts(self) -> None:
        self._dispatch("clear_sorts")

    def action_toggle_pin(self) -> None:
        self._dispatch("toggle_pin")

    def action_toggle_filter(self) -> None:
        self._dispatch("toggle_filter")

    def action_toggle_invert(self) -> None:
        self._dispatch("toggle_invert")

    def action_clear_pins(self) -> None:
        self._dispatch("clear_pins")

    def action_hide_column(self) -> None:
        self._dispatch("hide_column")

    def action_show_columns(self) -> None:
        self._dispatch("show_columns")

    def action_toggle_settled(self) -> None:
        self._dispatch("toggle_settled")

    def action_toggle_show_deleted(self) -> None:
        self._dispatch("toggle_show_deleted")

    def action_toggle_mag_mode(self) -> None:
        self.mag_mode = not self.mag_mode
        # Every tab translates its own pins; the status line reports once.
        message = ""
        for view in self._table_views():
            _, message = view.set_mag_mode(self.mag_mode)
        self._publish_action_result(True, message or f"Magnitude mode {'on' if self.mag_mode else 'off'}.")

    def _dispatch(self, method: str, *args, quiet: bool = False) -> None:
        view = self._active_table_view()
        if view is None:
            return
        ok, message = getattr(view, method)(*args)
        if quiet and ok:
            return
        if message:
            self._publish_action_result(ok, message)

    def _active_table_view(self) -> TableView | None:
        try:
            switcher = self.query_one(ContentSwitcher)
        except NoMatches:
            return None
        if switcher.current is None:
            return None
        view = switcher.query_one(f"#{switcher.current}")
        return view if isinstance(view, TableView) else None

    def _table_views(self) -> list[TableView]:
        return list(self.query(TableView))

    def _publish_action_result(self, ok: bool, message: str) -> None:
        logger.debug("action result ok=%s message=%s", ok, message)
        self.update_app_status(message)
        self._notify(message, severity="information" if ok else "error")


def run(config: AppConfig | None = None) -> None:
    load_dotenv()
    config = config or AppConfig.from_env()
    logging_setup.configure(config)
    app = HomeDash(config)
    app.run()


if __name__ == "__main__":
    run()
