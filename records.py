"""
Immutable record types handed to the engine, and update functions that return
new records instead of mutating existing ones.

The store adapter (database_manager) converts ORM rows to these records; the
engine modules never see a session.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime

from durations import hours_between, man_hours, resolve_crew
from errors import ValidationError
from pricing import CATEGORIES, Category, row_totals

UNKNOWN_COMPONENT = "Unknown Component"
UNKNOWN_USER = "Unknown"


@dataclass(frozen=True)
class TimeEntryRecord:
    id: int | None
    job_id: int
    component_id: int | None
    user_id: int | None
    start_time: datetime
    end_time: datetime | None
    total_hours: float
    crew_count: int = 1
    worker_names: tuple[str, ...] = ()
    is_manual: bool = False
    notes: str = ""

    @property
    def is_clock_in(self) -> bool:
        return self.component_id is None

    @property
    def man_hours(self) -> float:
        return man_hours(self.total_hours, self.crew_count, self.worker_names)


@dataclass(frozen=True)
class ComponentRecord:
    id: int
    job_id: int
    name: str
    is_active: bool = True
    is_task: bool = False


@dataclass(frozen=True)
class FinancialRowRecord:
    id: int | None
    job_id: int
    category: Category
    description: str
    quantity: float
    unit_cost: float
    markup_percent: float
    total_cost: float
    selling_price: float
    order_index: float
    notes: str = ""


@dataclass(frozen=True)
class LaborPricingRecord:
    job_id: int
    hourly_rate: float
    billable_rate: float


@dataclass(frozen=True)
class MaterialItemRecord:
    id: int | None
    sheet_id: int
    category: str
    material_name: str
    quantity: float
    cost_per_unit: float | None = None
    price_per_unit: float | None = None


@dataclass(frozen=True)
class MaterialSheetLaborRecord:
    id: int | None
    sheet_id: int
    description: str = "Labor & Installation"
    estimated_hours: float = 0.0
    hourly_rate: float = 0.0
    notes: str = ""

    @property
    def total_labor_cost(self) -> float:
        return float(self.estimated_hours or 0.0) * float(self.hourly_rate or 0.0)


@dataclass(frozen=True)
class MaterialSheetRecord:
    id: int
    sheet_name: str
    order_index: float = 0.0
    items: tuple[MaterialItemRecord, ...] = field(default_factory=tuple)
    labor: MaterialSheetLaborRecord | None = None


@dataclass(frozen=True)
class SubcontractorEstimateRecord:
    id: int | None
    job_id: int
    company_name: str
    total_amount: float
    markup_percent: float = 0.0
    order_index: float = 0.0

    @property
    def selling_price(self) -> float:
        return float(self.total_amount or 0.0) * (1 + float(self.markup_percent or 0.0) / 100)


# --- time entry updates ---


def retime_entry(entry: TimeEntryRecord, start: datetime, end: datetime) -> TimeEntryRecord:
    """New entry with edited timestamps; total_hours is re-derived (quarter hour)."""
    hours = hours_between(start, end)
    return replace(entry, start_time=start, end_time=end, total_hours=hours)


def set_entry_hours(entry: TimeEntryRecord, total_hours: float) -> TimeEntryRecord:
    """New entry with a typed duration; timestamps are left as they were."""
    if total_hours is None or total_hours < 0:
        raise ValidationError("Duration must be non-negative.")
    return replace(entry, total_hours=float(total_hours), is_manual=True)


def recrew_entry(
    entry: TimeEntryRecord,
    crew_count: int | None = None,
    worker_names=None,
    *,
    select_workers: bool = False,
) -> TimeEntryRecord:
    count, names = resolve_crew(crew_count, worker_names, select_workers=select_workers)
    return replace(entry, crew_count=count, worker_names=tuple(names))


# --- financial row updates ---


def _require_number(value, label: str) -> float:
    if value is None or value == "":
        raise ValidationError(f"{label} is required.")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a number.") from None


def validate_row_inputs(category: str, quantity, unit_cost, markup_percent) -> tuple[float, float, float]:
    if category not in CATEGORIES:
        raise ValidationError(f"Unknown category: {category!r}.")
    qty = _require_number(quantity, "Quantity")
    cost = _require_number(unit_cost, "Unit cost")
    markup = float(markup_percent or 0.0)
    return qty, cost, markup


def new_financial_row(
    job_id: int,
    category: Category,
    description: str,
    quantity,
    unit_cost,
    markup_percent=0.0,
    *,
    order_index: float,
    notes: str = "",
) -> FinancialRowRecord:
    """Build an unsaved row with its derived totals filled in."""
    qty, cost, markup = validate_row_inputs(category, quantity, unit_cost, markup_percent)
    total_cost, selling_price = row_totals(qty, cost, markup, category)
    return FinancialRowRecord(
        id=None,
        job_id=job_id,
        category=category,
        description=description or "",
        quantity=qty,
        unit_cost=cost,
        markup_percent=markup,
        total_cost=total_cost,
        selling_price=selling_price,
        order_index=float(order_index),
        notes=notes or "",
    )


def edit_financial_row(row: FinancialRowRecord, **changes) -> FinancialRowRecord:
    """Apply edits and recompute totals. order_index is never changed here."""
    if "order_index" in changes:
        raise ValidationError("Editing a row cannot change its position.")
    unknown = set(changes) - {"category", "description", "quantity", "unit_cost", "markup_percent", "notes"}
    if unknown:
        raise ValidationError(f"Unknown field(s): {', '.join(sorted(unknown))}.")
    merged = replace(row, **changes)
    qty, cost, markup = validate_row_inputs(
        merged.category, merged.quantity, merged.unit_cost, merged.markup_percent
    )
    total_cost, selling_price = row_totals(qty, cost, markup, merged.category)
    return replace(
        merged,
        quantity=qty,
        unit_cost=cost,
        markup_percent=markup,
        total_cost=total_cost,
        selling_price=selling_price,
    )
