from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Callable, Iterable, Optional, Protocol, TypeVar

from homedash.grid.types import Align, Cell, CellKind, ColumnLink, ColumnSpec, RowMeta, Tab
from homedash.models import (
    DATE_LAYOUT,
    PROJECT_STATUSES,
    TabKind,
    format_interval,
    format_optional_cents,
)

if TYPE_CHECKING:
    from homedash.data import DataManager

T = TypeVar("T")

LoadedRows = tuple[list[RowMeta], list[list[Cell]]]


class RowSource(Protocol):
    kind: TabKind

    def column_specs(self) -> list[ColumnSpec]: ...

    def load(self, data: "DataManager", show_deleted: bool, today: date) -> LoadedRows: ...


def id_spec() -> ColumnSpec:
    return ColumnSpec("ID", min=4, max=6, align=Align.RIGHT, kind=CellKind.READONLY)


def id_cell(item_id: int) -> Cell:
    return Cell(str(item_id), CellKind.READONLY)


def text_cell(value: Optional[str], kind: CellKind = CellKind.TEXT, link_id: int = 0) -> Cell:
    if value is None:
        return Cell("", kind, null=True, link_id=link_id)
    return Cell(value, kind, link_id=link_id)


def money_cell(cents: Optional[int]) -> Cell:
    return Cell(format_optional_cents(cents), CellKind.MONEY, null=cents is None)


def count_cell(count: int) -> Cell:
    return Cell(str(count) if count > 0 else "", CellKind.DRILLDOWN)


def build_rows(
    items: Iterable[T],
    to_row: Callable[[T], tuple[int, bool, list[Cell]]],
    show_deleted: bool,
) -> LoadedRows:
    meta: list[RowMeta] = []
    cells: list[list[Cell]] = []
    for item in items:
        item_id, deleted, row = to_row(item)
        if deleted and not show_deleted:
            continue
        meta.append(RowMeta(id=item_id, deleted=deleted))
        cells.append(row)
    return meta, cells


def add_months(value: date, months: int) -> date:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    # Clamp to the last day of the target month.
    for day in (value.day, 30, 29, 28):
        try:
            return value.replace(year=year, month=month, day=day)
        except ValueError:
            continue
    return value.replace(year=year, month=month, day=28)


def parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), DATE_LAYOUT).date()
    except ValueError:
        return None


def next_due(last_serviced: Optional[str], interval_months: int) -> Optional[str]:
    last = parse_date(last_serviced)
    if last is None or interval_months <= 0:
        return None
    return add_months(last, interval_months).strftime(DATE_LAYOUT)


def appliance_age(purchased: Optional[str], today: date) -> str:
    bought = parse_date(purchased)
    if bought is None:
        return ""
    years = today.year - bought.year
    months = today.month - bought.month
    if today.day < bought.day:
        months -= 1
    if months < 0:
        years -= 1
        months += 12
    if years < 0:
        return ""
    if years == 0:
        return f"{months}m" if months > 0 else "<1m"
    if months == 0:
        return f"{years}y"
    return f"{years}y {months}m"


class ProjectRows:
    kind = TabKind.PROJECTS

    def column_specs(self) -> list[ColumnSpec]:
        return [
            id_spec(),
            ColumnSpec("Type", min=8, max=14, flex=True),
            ColumnSpec("Title", min=14, max=32, flex=True),
            ColumnSpec("Status", min=6, max=10, kind=CellKind.STATUS, fixed_values=PROJECT_STATUSES),
            ColumnSpec("Budget", min=10, max=14, align=Align.RIGHT, kind=CellKind.MONEY),
            ColumnSpec("Actual", min=10, max=14, align=Align.RIGHT, kind=CellKind.MONEY),
            ColumnSpec("Start", min=10, max=12, kind=CellKind.DATE),
            ColumnSpec("End", min=10, max=12, kind=CellKind.DATE),
            ColumnSpec("Quotes", min=6, max=8, align=Align.RIGHT, kind=CellKind.DRILLDOWN),
        ]

    def load(self, data: "DataManager", show_deleted: bool, today: date) -> LoadedRows:
        quote_counts = data.quote_counts_by_project()
        return build_rows(
            data.projects,
            lambda p: (
                p.id,
                p.deleted,
                [
                    id_cell(p.id),
                    text_cell(p.project_type),
                    text_cell(p.title),
                    text_cell(p.status, CellKind.STATUS),
                    money_cell(p.budget_cents),
                    money_cell(p.actual_cents),
                    text_cell(p.start_date, CellKind.DATE),
                    text_cell(p.end_date, CellKind.DATE),
                    count_cell(quote_counts.get(p.id, 0)),
                ],
            ),
            show_deleted,
        )


class QuoteRows:
    kind = TabKind.QUOTES

    def column_specs(self) -> list[ColumnSpec]:
        return [
            id_spec(),
            ColumnSpec("Project", min=12, max=24, flex=True, link=ColumnLink(TabKind.PROJECTS)),
            ColumnSpec("Vendor", min=12, max=20, flex=True, link=ColumnLink(TabKind.VENDORS)),
            ColumnSpec("Total", min=10, max=14, align=Align.RIGHT, kind=CellKind.MONEY),
            ColumnSpec("Labor", min=10, max=14, align=Align.RIGHT, kind=CellKind.MONEY),
            ColumnSpec("Mat", min=8, max=12, align=Align.RIGHT, kind=CellKind.MONEY),
            ColumnSpec("Other", min=8, max=12, align=Align.RIGHT, kind=CellKind.MONEY),
            ColumnSpec("Recv", min=10, max=12, kind=CellKind.DATE),
        ]

    def load(self, data: "DataManager", show_deleted: bool, today: date) -> LoadedRows:
        projects = {project.id: project for project in data.projects}
        vendors = {vendor.id: vendor for vendor in data.vendors}

        def to_row(q):
            project = projects.get(q.project_id)
            vendor = vendors.get(q.vendor_id)
            return (
                q.id,
                q.deleted,
                [
                    id_cell(q.id),
                    text_cell(project.title if project else None, link_id=q.project_id),
                    text_cell(vendor.name if vendor else None, link_id=q.vendor_id),
                    money_cell(q.total_cents),
                    money_cell(q.labor_cents),
                    money_cell(q.materials_cents),
                    money_cell(q.other_cents),
                    text_cell(q.received_date, CellKind.DATE),
                ],
            )

        return build_rows(data.quotes, to_row, show_deleted)


class MaintenanceRows:
    kind = TabKind.MAINTENANCE

    def column_specs(self) -> list[ColumnSpec]:
        return [
            id_spec(),
            ColumnSpec("Item", min=12, max=26, flex=True),
            ColumnSpec("Category", min=10, max=14),
            ColumnSpec("Appliance", min=10, max=18, flex=True, link=ColumnLink(TabKind.APPLIANCES)),
            ColumnSpec("Last", min=10, max=12, kind=CellKind.DATE),
            ColumnSpec("Next", min=10, max=12, kind=CellKind.URGENCY),
            ColumnSpec("Every", min=6, max=10),
            ColumnSpec("Log", min=4, max=6, align=Align.RIGHT, kind=CellKind.DRILLDOWN),
        ]

    def load(self, data: "DataManager", show_deleted: bool, today: date) -> LoadedRows:
        appliances = {appliance.id: appliance for appliance in data.appliances}
        log_counts = data.service_log_counts()

        def to_row(item):
            appliance = appliances.get(item.appliance_id) if item.appliance_id else None
            return (
                item.id,
                item.deleted,
                [
                    id_cell(item.id),
                    text_cell(item.name),
                    text_cell(item.category),
                    text_cell(appliance.name if appliance else None, link_id=item.appliance_id or 0),
                    text_cell(item.last_serviced, CellKind.DATE),
                    text_cell(next_due(item.last_serviced, item.interval_months), CellKind.URGENCY),
                    text_cell(format_interval(item.interval_months)),
                    count_cell(log_counts.get(item.id, 0)),
                ],
            )

        return build_rows(data.maintenance_items, to_row, show_deleted)


class ApplianceRows:
    kind = TabKind.APPLIANCES

    def column_specs(self) -> list[ColumnSpec]:
        return [
            id_spec(),
            ColumnSpec("Name", min=12, max=24, flex=True),
            ColumnSpec("Brand", min=8, max=16, flex=True),
            ColumnSpec("Model", min=8, max=16),
            ColumnSpec("Serial", min=8, max=14),
            ColumnSpec("Location", min=8, max=14),
            ColumnSpec("Purchased", min=10, max=12, kind=CellKind.DATE),
            ColumnSpec("Age", min=5, max=8, kind=CellKind.READONLY),
            ColumnSpec("Warranty", min=10, max=12, kind=CellKind.WARRANTY),
            ColumnSpec("Cost", min=8, max=12, align=Align.RIGHT, kind=CellKind.MONEY),
            ColumnSpec("Maint", min=5, max=6, align=Align.RIGHT, kind=CellKind.DRILLDOWN),
        ]

    def load(self, data: "DataManager", show_deleted: bool, today: date) -> LoadedRows:
        maint_counts = data.maintenance_counts_by_appliance()
        return build_rows(
            data.appliances,
            lambda a: (
                a.id,
                a.deleted,
                [
                    id_cell(a.id),
                    text_cell(a.name),
                    text_cell(a.brand),
                    text_cell(a.model_number),
                    text_cell(a.serial_number),
                    text_cell(a.location),
                    text_cell(a.purchase_date, CellKind.DATE),
                    Cell(appliance_age(a.purchase_date, today), CellKind.READONLY),
                    text_cell(a.warranty_expiry, CellKind.WARRANTY),
                    money_cell(a.cost_cents),
                    count_cell(maint_counts.get(a.id, 0)),
                ],
            ),
            show_deleted,
        )


class VendorRows:
    kind = TabKind.VENDORS

    def column_specs(self) -> list[ColumnSpec]:
        return [
            id_spec(),
            ColumnSpec("Name", min=14, max=24, flex=True),
            ColumnSpec("Contact", min=10, max=20, flex=True),
            ColumnSpec("Email", min=12, max=24, flex=True),
            ColumnSpec("Phone", min=12, max=16),
            ColumnSpec("Website", min=12, max=28, flex=True),
            ColumnSpec("Quotes", min=6, max=8, align=Align.RIGHT, kind=CellKind.DRILLDOWN),
            ColumnSpec("Jobs", min=5, max=8, align=Align.RIGHT, kind=CellKind.DRILLDOWN),
        ]

    def load(self, data: "DataManager", show_deleted: bool, today: date) -> LoadedRows:
        quote_counts = data.quote_counts_by_vendor()
        job_counts = data.job_counts_by_vendor()
        return build_rows(
            data.vendors,
            lambda v: (
                v.id,
                v.deleted,
                [
                    id_cell(v.id),
                    text_cell(v.name),
                    text_cell(v.contact_name),
                    text_cell(v.email),
                    text_cell(v.phone),
                    text_cell(v.website),
                    count_cell(quote_counts.get(v.id, 0)),
                    count_cell(job_counts.get(v.id, 0)),
                ],
            ),
            show_deleted,
        )


ROW_SOURCES: dict[TabKind, RowSource] = {
    source.kind: source
    for source in (ProjectRows(), QuoteRows(), MaintenanceRows(), ApplianceRows(), VendorRows())
}


def row_source(kind: TabKind) -> RowSource:
    return ROW_SOURCES[kind]


def new_tab(kind: TabKind, show_deleted: bool = False) -> Tab:
    return Tab(
        kind=kind,
        name=kind.label,
        specs=row_source(kind).column_specs(),
        show_deleted=show_deleted,
    )


def new_tabs(show_deleted: bool = False) -> list[Tab]:
    return [new_tab(kind, show_deleted) for kind in TabKind]
