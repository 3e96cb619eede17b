from __future__ import annotations

import logging
from collections import Counter
from datetime import date
from typing import List

from homedash.config import AppConfig
from homedash.grid.pins import apply_row_filter
from homedash.grid.sorting import apply_sorts
from homedash.grid.types import Tab
from homedash.models import (
    Appliance,
    MaintenanceItem,
    Project,
    Quote,
    ServiceLogEntry,
    TabKind,
    Vendor,
)
from homedash.services.tables import row_source

logger = logging.getLogger(__name__)


class DataManager:
    def __init__(self, config: AppConfig | None = None):
        self.config = config or AppConfig.from_env()
        self.projects: List[Project] = []
        self.quotes: List[Quote] = []
        self.vendors: List[Vendor] = []
        self.appliances: List[Appliance] = []
        self.maintenance_items: List[MaintenanceItem] = []
        self.service_log: List[ServiceLogEntry] = []
        self.is_initialized = False
        self.reload_count = 0

    async def initialize(self):
        """Loads the initial household snapshot."""
        if self.config.seed_demo_data and not self.projects:
            await self.seed_demo_data()
        self.is_initialized = True
        logger.info("data initialized: %s", self.counts_summary())

    async def seed_demo_data(self):
        """Seeds a small demo household."""
        self.vendors = [
            Vendor(1, "Bob's Plumbing", "Bob", "bob@plumbing.example", "555-0101", "bobsplumbing.example"),
            Vendor(2, "Alice Electric", "Alice", "alice@electric.example", "555-0102"),
            Vendor(3, "Greenway Roofing", "Dana", phone="555-0103", website="greenway.example"),
            Vendor(4, "Old Hardware Co", deleted=True),
        ]
        self.projects = [
            Project(1, "Kitchen", "Replace countertops", "planned", 450000, None, "2026-03-01", None),
            Project(2, "Bathroom", "Fix leaky shower valve", "underway", 100000, 85000, "2026-01-10", None),
            Project(3, "Exterior", "Reroof north side", "quoted", 1200000, None, None, None),
            Project(4, "Electrical", "Add garage circuit", "completed", 200000, 210000, "2025-09-01", "2025-09-20"),
            Project(5, "Garden", "Raised beds", "ideating", None, None, None, None),
            Project(6, "Interior", "Paint hallway", "abandoned", 30000, 0, "2025-05-02", "2025-05-03"),
            Project(7, "Basement", "Dehumidifier drain", "delayed", 2500, None, "2026-02-14", None),
        ]
        self.quotes = [
            Quote(1, 2, 1, 100000, 60000, 40000, None, "2026-01-05"),
            Quote(2, 2, 1, 200000, 120000, 70000, 10000, "2026-01-06"),
            Quote(3, 3, 3, 1150000, 700000, 450000, None, "2026-02-01"),
            Quote(4, 4, 2, 210000, 150000, 60000, None, "2025-08-20"),
            Quote(5, 1, 4, 390000, None, None, None, None, deleted=True),
        ]
        self.appliances = [
            Appliance(1, "Water Heater", "Rheem", "XE50", "RH-99812", "Basement", "2019-06-15", "2025-06-15", 89900),
            Appliance(2, "Furnace", "Carrier", "59SC5", "CA-40021", "Basement", "2021-10-01", "2031-10-01", 420000),
            Appliance(3, "Dishwasher", "Bosch", "SHX878", "", "Kitchen", "2023-03-12", "2026-03-12", 109900),
            Appliance(4, "Fridge", "LG", "LRFVS", "LG-7781", "Kitchen", None, None, None),
        ]
        self.maintenance_items = [
            MaintenanceItem(1, "Flush water heater", "Plumbing", 1, "2025-06-01", 12),
            MaintenanceItem(2, "Replace furnace filter", "HVAC", 2, "2025-12-01", 3),
            MaintenanceItem(3, "Clean gutters", "Exterior", None, "2025-10-15", 6),
            MaintenanceItem(4, "Test smoke detectors", "Safety", None, None, 6),
            MaintenanceItem(5, "Clean dishwasher filter", "Appliance", 3, "2026-01-20", 1),
        ]
        self.service_log = [
            ServiceLogEntry(1, 1, "2025-06-01", 1, 15000, "Sediment was heavy"),
            ServiceLogEntry(2, 1, "2024-06-03", None, None, "Self"),
            ServiceLogEntry(3, 2, "2025-12-01", None, 2500),
            ServiceLogEntry(4, 3, "2025-10-15", 3, 22500),
        ]

    def reload_tab(self, tab: Tab, mag_mode: bool, today: date | None = None) -> None:
        """Replace the tab's full snapshot and re-derive its displayed rows."""
        meta, cells = row_source(tab.kind).load(self, tab.show_deleted, today or date.today())
        tab.full_meta = meta
        tab.full_cell_rows = cells
        apply_row_filter(tab, mag_mode)
        apply_sorts(tab)
        tab.stale = False
        tab.row_cursor = max(0, min(tab.row_cursor, len(tab.rows) - 1))
        self.reload_count += 1
        logger.info("reloaded %s: %d rows (%d displayed)", tab.name, len(meta), len(tab.rows))

    def quote_counts_by_project(self) -> dict[int, int]:
        return Counter(quote.project_id for quote in self.quotes if not quote.deleted)

    def quote_counts_by_vendor(self) -> dict[int, int]:
        return Counter(quote.vendor_id for quote in self.quotes if not quote.deleted)

    def job_counts_by_vendor(self) -> dict[int, int]:
        return Counter(entry.vendor_id for entry in self.service_log if entry.vendor_id is not None)

    def service_log_counts(self) -> dict[int, int]:
        return Counter(entry.maintenance_id for entry in self.service_log)

    def maintenance_counts_by_appliance(self) -> dict[int, int]:
        return Counter(
            item.appliance_id
            for item in self.maintenance_items
            if item.appliance_id is not None and not item.deleted
        )

    def counts(self) -> dict[TabKind, int]:
        return {
            TabKind.PROJECTS: len(self.projects),
            TabKind.QUOTES: len(self.quotes),
            TabKind.MAINTENANCE: len(self.maintenance_items),
            TabKind.APPLIANCES: len(self.appliances),
            TabKind.VENDORS: len(self.vendors),
        }

    def counts_summary(self) -> str:
        return " ".join(f"{kind.value}:{count}" for kind, count in self.counts().items())
