from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

DATE_LAYOUT = "%Y-%m-%d"

PROJECT_STATUSES = (
    "ideating",
    "planned",
    "quoted",
    "underway",
    "delayed",
    "completed",
    "abandoned",
)

# Statuses that stay visible when settled projects are filtered out.
ACTIVE_PROJECT_STATUSES = ("ideating", "planned", "quoted", "underway", "delayed")


class TabKind(Enum):
    PROJECTS = "projects"
    QUOTES = "quotes"
    MAINTENANCE = "maintenance"
    APPLIANCES = "appliances"
    VENDORS = "vendors"

    @property
    def label(self) -> str:
        return self.value.title()

    @classmethod
    def parse(cls, name: str) -> "TabKind | None":
        text = str(name).strip().casefold()
        for kind in cls:
            if kind.value == text:
                return kind
        return None


@dataclass
class Vendor:
    id: int
    name: str
    contact_name: str = ""
    email: str = ""
    phone: str = ""
    website: str = ""
    deleted: bool = False


@dataclass
class Project:
    id: int
    project_type: str
    title: str
    status: str
    budget_cents: Optional[int] = None
    actual_cents: Optional[int] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    deleted: bool = False


@dataclass
class Quote:
    id: int
    project_id: int
    vendor_id: int
    total_cents: int
    labor_cents: Optional[int] = None
    materials_cents: Optional[int] = None
    other_cents: Optional[int] = None
    received_date: Optional[str] = None
    deleted: bool = False


@dataclass
class Appliance:
    id: int
    name: str
    brand: str = ""
    model_number: str = ""
    serial_number: str = ""
    location: str = ""
    purchase_date: Optional[str] = None
    warranty_expiry: Optional[str] = None
    cost_cents: Optional[int] = None
    deleted: bool = False


@dataclass
class MaintenanceItem:
    id: int
    name: str
    category: str
    appliance_id: Optional[int] = None
    last_serviced: Optional[str] = None
    interval_months: int = 0
    deleted: bool = False


@dataclass
class ServiceLogEntry:
    id: int
    maintenance_id: int
    serviced_at: str
    vendor_id: Optional[int] = None
    cost_cents: Optional[int] = None
    notes: str = ""


def format_cents(cents: int) -> str:
    sign = "-" if cents < 0 else ""
    dollars, remainder = divmod(abs(cents), 100)
    return f"{sign}${dollars:,}.{remainder:02d}"


def format_optional_cents(cents: Optional[int]) -> str:
    if cents is None:
        return ""
    return format_cents(cents)


def format_interval(months: int) -> str:
    """Compact interval string: "3m", "1y", "2y 6m"."""
    if months <= 0:
        return ""
    years, rest = divmod(months, 12)
    if years == 0:
        return f"{rest}m"
    if rest == 0:
        return f"{years}y"
    return f"{years}y {rest}m"
