import argparse
import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console

from homedash import logging_setup
from homedash.config import AppConfig
from homedash.data import DataManager
from homedash.grid.pins import apply_row_filter, pin_summary, set_filter_active, set_filter_inverted, toggle_pin
from homedash.grid.projection import first_visible_col, hide_column, visible_count
from homedash.grid.sorting import apply_sorts
from homedash.grid.types import ColumnSpec
from homedash.models import TabKind
from homedash.services import grid_commands
from homedash.services.tables import new_tab
from homedash.widgets.grid_table import render_tab

NULL_LABEL = "∅"


def main():
    load_dotenv()
    parser = argparse.ArgumentParser(description="HomeDash CLI")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("doctor", help="Check setup and environment")
    subparsers.add_parser("stats", help="Show row counts per tab")
    grid_parser = subparsers.add_parser("grid", help="Print a rendered grid")
    grid_parser.add_argument("tab", help="projects, quotes, maintenance, appliances or vendors")
    grid_parser.add_argument("--width", type=int, default=None, help="Terminal width to lay out for")
    grid_parser.add_argument("--mag", action="store_true", help="Show money in order-of-magnitude form")
    grid_parser.add_argument("--pin", action="append", default=[], metavar="COL=VALUE", help="Pin a value")
    grid_parser.add_argument("--filter", action="store_true", help="Hide non-matching rows")
    grid_parser.add_argument("--invert", action="store_true", help="Invert the pin filter")
    grid_parser.add_argument("--hide", action="append", default=[], metavar="COL", help="Hide a column")
    grid_parser.add_argument("--cursor", default=None, metavar="COL", help="Put the column cursor on COL")
    grid_parser.add_argument("--deleted", action="store_true", help="Include deleted rows")

    args = parser.parse_args()
    config = AppConfig.from_env()
    logging_setup.configure(config)

    if args.command == "doctor":
        doctor(config)
    elif args.command == "stats":
        asyncio.run(stats(config))
    elif args.command == "grid":
        sys.exit(asyncio.run(grid(args, config)))
    else:
        # Default: run the TUI
        from homedash.app import run
        run(config)


def doctor(config: AppConfig):
    """Check for the files and settings the app reads."""
    print("🩺 Running HomeDash Doctor...")

    env_exists = Path(".env").exists()
    print(f"[{'✓' if env_exists else '✕'}] .env file")

    config_path = Path(os.getenv("HD_CONFIG_PATH", "homedash.config.json"))
    print(f"[{'✓' if config_path.exists() else '✕'}] config file ({config_path})")
    print(f"    source: {config.config_source}")

    runtime = logging_setup.get_runtime()
    if runtime is not None:
        print(f"[✓] log file {runtime.file_path} ({runtime.level_name})")
    else:
        print("[✕] logging not configured")

    print(f"    default tab: {config.default_tab}  grid width: {config.grid_width}")
    print(f"    magnitude mode: {'on' if config.mag_mode else 'off'}  demo data: {'on' if config.seed_demo_data else 'off'}")

    print("\nDoctor check complete.")


async def stats(config: AppConfig):
    """Row counts per tab."""
    print("📊 HomeDash Stats")
    dm = DataManager(config)
    await dm.initialize()

    for kind, count in dm.counts().items():
        print(f"  {kind.label:12}: {count}")


def find_column(specs: list[ColumnSpec], name: str) -> int:
    """Column index by title (case-insensitive) or by number; -1 if unknown."""
    text = name.strip()
    if text.isdigit():
        index = int(text)
        return index if 0 <= index < len(specs) else -1
    for index, spec in enumerate(specs):
        if spec.title.casefold() == text.casefold():
            return index
    return -1


def parse_pin(raw: str) -> tuple[str, str | None]:
    column, sep, value = raw.partition("=")
    if not sep:
        raise ValueError(f"pin must look like COL=VALUE: {raw}")
    return column, None if value == NULL_LABEL else value


async def grid(args, config: AppConfig) -> int:
    """Render one tab to stdout. Returns the process exit code."""
    kind = TabKind.parse(args.tab)
    if kind is None:
        print(f"❌ Unknown tab: {args.tab}. Choose from: {', '.join(k.value for k in TabKind)}")
        return 2

    dm = DataManager(config)
    await dm.initialize()
    mag_mode = args.mag or config.mag_mode
    tab = new_tab(kind, show_deleted=args.deleted or config.show_deleted)
    dm.reload_tab(tab, mag_mode)

    for name in args.hide:
        col = find_column(tab.specs, name)
        if col < 0:
            print(f"❌ Unknown column: {name}")
            return 2
        if visible_count(tab.specs) <= 1:
            print("❌ Cannot hide the last visible column.")
            return 2
        hide_column(tab, col)

    for raw in args.pin:
        try:
            name, value = parse_pin(raw)
        except ValueError as e:
            print(f"❌ {e}")
            return 2
        col = find_column(tab.specs, name)
        if col < 0:
            print(f"❌ Unknown column: {name}")
            return 2
        toggle_pin(tab, col, value)
    set_filter_active(tab, args.filter)
    set_filter_inverted(tab, args.invert)
    apply_row_filter(tab, mag_mode)
    apply_sorts(tab)

    tab.col_cursor = first_visible_col(tab.specs)
    if args.cursor is not None:
        col = find_column(tab.specs, args.cursor)
        if col < 0 or tab.specs[col].hidden:
            print(f"❌ Unknown or hidden column: {args.cursor}")
            return 2
        tab.col_cursor = col

    width = max(20, args.width) if args.width else config.grid_width
    grid_commands.update_tab_viewport(tab, width, config.column_separator)
    text = render_tab(tab, width, 0, mag_mode, config.column_separator, config.collapsed_separator)

    console = Console(width=width, highlight=False, markup=False)
    console.print(text, overflow="crop", no_wrap=True)
    if tab.pins:
        console.print(f"Pins: {pin_summary(tab)}")
    console.print(f"{len(tab.rows)} of {len(tab.full_meta)} rows")
    return 0


if __name__ == "__main__":
    main()
