"""
Rollup composer: combines material sheets, financial rows, subcontractor
estimates and labor into the internal cost breakdown and the client-facing
proposal.

The cost breakdown uses each row's own markup. The proposal applies one
job-wide markup plus sales tax on top of each section's already-priced figure,
so material sheets (priced per unit upstream) are marked up a second time.
Labor, whether a labor row or the labor priced with a sheet, enters at cost
and is never taxed.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from ordering import sort_rows
from pricing import CATEGORIES, LABOR, is_labor, margin_percent, price_for

UNCATEGORIZED = "Uncategorized"

SECTION_MATERIAL_SHEET = "material_sheet"
SECTION_SHEET_LABOR = "sheet_labor"
SECTION_FINANCIAL_ROW = "financial_row"
SECTION_SUBCONTRACTOR = "subcontractor"
_SECTION_RANK = {
    SECTION_MATERIAL_SHEET: 0,
    SECTION_SHEET_LABOR: 1,
    SECTION_FINANCIAL_ROW: 2,
    SECTION_SUBCONTRACTOR: 3,
}


# --- material sheets ---


@dataclass
class CategoryBreakdown:
    category: str
    item_count: int = 0
    total_cost: float = 0.0
    total_price: float = 0.0


@dataclass
class SheetBreakdown:
    sheet_id: int
    sheet_name: str
    order_index: float
    categories: list[CategoryBreakdown] = field(default_factory=list)
    # Installation labor priced with the sheet; never part of the material totals.
    labor_description: str = ""
    labor_hours: float = 0.0
    labor_cost: float = 0.0

    @property
    def item_count(self) -> int:
        return sum(c.item_count for c in self.categories)

    @property
    def total_cost(self) -> float:
        return sum(c.total_cost for c in self.categories)

    @property
    def total_price(self) -> float:
        return sum(c.total_price for c in self.categories)


@dataclass
class MaterialBreakdown:
    sheets: list[SheetBreakdown]

    @property
    def total_cost(self) -> float:
        return sum(s.total_cost for s in self.sheets)

    @property
    def total_price(self) -> float:
        return sum(s.total_price for s in self.sheets)

    @property
    def labor_hours(self) -> float:
        return sum(s.labor_hours for s in self.sheets)

    @property
    def labor_cost(self) -> float:
        return sum(s.labor_cost for s in self.sheets)


def material_sheet_breakdown(sheets: Iterable) -> MaterialBreakdown:
    """Sheet -> category -> {count, cost, price} from the sheets' items, plus sheet labor."""
    result = []
    for sheet in sorted(sheets, key=lambda s: (s.order_index, s.sheet_name.lower(), s.id)):
        by_category: dict[str, CategoryBreakdown] = {}
        for item in sheet.items:
            name = (item.category or "").strip() or UNCATEGORIZED
            cat = by_category.get(name)
            if cat is None:
                cat = by_category[name] = CategoryBreakdown(name)
            qty = float(item.quantity or 0.0)
            cat.item_count += 1
            cat.total_cost += qty * float(item.cost_per_unit or 0.0)
            cat.total_price += qty * float(item.price_per_unit or 0.0)
        labor = sheet.labor
        result.append(
            SheetBreakdown(
                sheet_id=sheet.id,
                sheet_name=sheet.sheet_name,
                order_index=sheet.order_index,
                categories=sorted(by_category.values(), key=lambda c: c.category.lower()),
                labor_description=labor.description if labor is not None else "",
                labor_hours=float(labor.estimated_hours or 0.0) if labor is not None else 0.0,
                labor_cost=labor.total_labor_cost if labor is not None else 0.0,
            )
        )
    return MaterialBreakdown(result)


# --- cost breakdown ---


@dataclass
class CategoryTotal:
    category: str
    rows: list = field(default_factory=list)
    total_cost: float = 0.0
    selling_price: float = 0.0

    @property
    def row_count(self) -> int:
        return len(self.rows)


@dataclass
class CostBreakdown:
    materials: MaterialBreakdown
    categories: list[CategoryTotal]
    subcontractor_estimates: list
    materials_cost: float
    materials_price: float
    financial_rows_cost: float
    financial_rows_price: float
    labor_cost: float
    labor_price: float
    budgeted_labor_hours: float
    actual_labor_hours: float
    actual_labor_cost: float
    total_cost: float
    total_price: float
    profit: float
    margin_percent: float


def budgeted_labor_hours(rows: Iterable) -> float:
    """Sum of quantity (hours) over labor-category rows."""
    return sum(float(r.quantity or 0.0) for r in rows if is_labor(r.category))


def group_rows_by_category(rows: Iterable) -> list[CategoryTotal]:
    """Rows grouped by category (known categories first, in their fixed order)."""
    groups: dict[str, CategoryTotal] = defaultdict(lambda: CategoryTotal(""))
    for row in sort_rows(list(rows)):
        group = groups[row.category]
        group.category = row.category
        group.rows.append(row)
        group.total_cost += float(row.total_cost or 0.0)
        group.selling_price += float(row.selling_price or 0.0)

    def rank(cat: CategoryTotal):
        if cat.category in CATEGORIES:
            return (CATEGORIES.index(cat.category), "")
        return (len(CATEGORIES), cat.category)

    return sorted(groups.values(), key=rank)


def cost_breakdown(
    sheets: Iterable = (),
    rows: Iterable = (),
    subcontractor_estimates: Iterable = (),
    labor_pricing=None,
    clocked_man_hours: float = 0.0,
) -> CostBreakdown:
    """Internal view: category totals, grand totals, profit and margin."""
    rows = list(rows)
    estimates = sort_rows(list(subcontractor_estimates))
    materials = material_sheet_breakdown(sheets)
    categories = group_rows_by_category(rows)

    # Sheet labor is billed at cost, like labor rows.
    labor_cost = sum(c.total_cost for c in categories if c.category == LABOR) + materials.labor_cost
    labor_price = sum(c.selling_price for c in categories if c.category == LABOR) + materials.labor_cost
    other_cost = sum(c.total_cost for c in categories if c.category != LABOR)
    other_price = sum(c.selling_price for c in categories if c.category != LABOR)
    other_cost += sum(float(e.total_amount or 0.0) for e in estimates)
    other_price += sum(e.selling_price for e in estimates)

    total_cost = materials.total_cost + other_cost + labor_cost
    total_price = materials.total_price + other_price + labor_price
    profit = total_price - total_cost

    hourly_rate = float(labor_pricing.hourly_rate or 0.0) if labor_pricing is not None else 0.0
    actual_hours = float(clocked_man_hours or 0.0)
    return CostBreakdown(
        materials=materials,
        categories=categories,
        subcontractor_estimates=estimates,
        materials_cost=materials.total_cost,
        materials_price=materials.total_price,
        financial_rows_cost=other_cost,
        financial_rows_price=other_price,
        labor_cost=labor_cost,
        labor_price=labor_price,
        budgeted_labor_hours=budgeted_labor_hours(rows) + materials.labor_hours,
        actual_labor_hours=actual_hours,
        actual_labor_cost=actual_hours * hourly_rate,
        total_cost=total_cost,
        total_price=total_price,
        profit=profit,
        margin_percent=margin_percent(profit, total_price),
    )


# --- proposal ---


@dataclass(frozen=True)
class ProposalLine:
    section: str
    source_id: int | None
    description: str
    category: str
    order_index: float
    base_amount: float
    price: float
    tax: float
    total: float


@dataclass
class Proposal:
    markup_percent: float
    lines: list[ProposalLine]
    subtotal: float
    total_tax: float
    grand_total: float


def _line(section, source_id, description, category, order_index, base, markup) -> ProposalLine:
    # Labor rows enter at cost; their own markup and the job markup are both ignored.
    priced = price_for(base, category, markup)
    return ProposalLine(
        section=section,
        source_id=source_id,
        description=description,
        category=category,
        order_index=float(order_index or 0.0),
        base_amount=priced.cost,
        price=priced.price,
        tax=priced.tax,
        total=priced.total,
    )


def proposal_lines(
    sheets: Iterable = (),
    rows: Iterable = (),
    subcontractor_estimates: Iterable = (),
    markup_percent: float = 0.0,
) -> list[ProposalLine]:
    lines = []
    for sheet in material_sheet_breakdown(sheets).sheets:
        lines.append(
            _line(SECTION_MATERIAL_SHEET, sheet.sheet_id, sheet.sheet_name, "materials",
                  sheet.order_index, sheet.total_price, markup_percent)
        )
        if sheet.labor_cost:
            lines.append(
                _line(SECTION_SHEET_LABOR, sheet.sheet_id,
                      " - ".join(filter(None, (sheet.sheet_name, sheet.labor_description))), LABOR,
                      sheet.order_index, sheet.labor_cost, markup_percent)
            )
    for row in rows:
        base = row.total_cost if is_labor(row.category) else row.selling_price
        lines.append(
            _line(SECTION_FINANCIAL_ROW, row.id, row.description, row.category,
                  row.order_index, base, markup_percent)
        )
    for est in subcontractor_estimates:
        lines.append(
            _line(SECTION_SUBCONTRACTOR, est.id, est.company_name, "subcontractor",
                  est.order_index, est.selling_price, markup_percent)
        )
    lines.sort(
        key=lambda ln: (
            ln.order_index,
            _SECTION_RANK[ln.section],
            ln.source_id if ln.source_id is not None else float("inf"),
        )
    )
    return lines


def summarize_proposal(lines: Sequence[ProposalLine], markup_percent: float = 0.0) -> Proposal:
    return Proposal(
        markup_percent=float(markup_percent or 0.0),
        lines=list(lines),
        subtotal=sum(ln.price for ln in lines),
        total_tax=sum(ln.tax for ln in lines),
        grand_total=sum(ln.total for ln in lines),
    )


def build_proposal(
    sheets: Iterable = (),
    rows: Iterable = (),
    subcontractor_estimates: Iterable = (),
    markup_percent: float = 0.0,
) -> Proposal:
    """Client-facing totals with one job-wide markup and the fixed tax rate."""
    lines = proposal_lines(sheets, rows, subcontractor_estimates, markup_percent)
    return summarize_proposal(lines, markup_percent)
