"""
Pricing calculator: markup and sales tax for cost lines. Labor is never marked
up or taxed.
"""
from dataclasses import dataclass
from typing import Literal, get_args

Category = Literal["labor", "subcontractor", "materials", "equipment", "other"]

LABOR: Category = "labor"
CATEGORIES: tuple[Category, ...] = get_args(Category)

# Fixed sales tax rate applied to everything except labor.
TAX_RATE = 0.07


@dataclass(frozen=True)
class PriceBreakdown:
    cost: float
    price: float
    tax: float
    total: float


def is_labor(category: str | None) -> bool:
    return (category or "").strip().lower() == LABOR


def apply_markup(cost: float, markup_percent: float | None) -> float:
    return float(cost or 0.0) * (1 + float(markup_percent or 0.0) / 100)


def price_for(cost: float, category: Category, markup_percent: float | None = 0.0) -> PriceBreakdown:
    """
    Price a cost figure. Labor: price == cost, no tax, markup ignored.
    Everything else: price = cost * (1 + markup/100), tax = price * TAX_RATE.
    """
    cost = float(cost or 0.0)
    if is_labor(category):
        return PriceBreakdown(cost=cost, price=cost, tax=0.0, total=cost)
    price = apply_markup(cost, markup_percent)
    tax = price * TAX_RATE
    return PriceBreakdown(cost=cost, price=price, tax=tax, total=price + tax)


def row_totals(quantity: float, unit_cost: float, markup_percent: float | None, category: Category) -> tuple[float, float]:
    """(total_cost, selling_price) for a financial row; labor rows carry no markup."""
    total_cost = float(quantity) * float(unit_cost)
    if is_labor(category):
        return total_cost, total_cost
    return total_cost, apply_markup(total_cost, markup_percent)


def margin_percent(profit: float, price: float) -> float:
    """profit / price * 100, or 0 when price is 0."""
    if not price:
        return 0.0
    return profit / price * 100


__all__ = [
    "Category",
    "CATEGORIES",
    "LABOR",
    "TAX_RATE",
    "PriceBreakdown",
    "is_labor",
    "apply_markup",
    "price_for",
    "row_totals",
    "margin_percent",
]
