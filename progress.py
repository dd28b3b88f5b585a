"""Progress tracker: clocked man-hours against an estimated-hours budget."""
from dataclasses import dataclass


@dataclass(frozen=True)
class BudgetProgress:
    clocked_hours: float
    estimated_hours: float | None
    # None when there is no budget to compare against.
    progress_percent: float | None
    is_over_budget: bool
    remaining_hours: float | None


def budget_progress(clocked_hours: float, estimated_hours: float | None) -> BudgetProgress:
    """Displayed percentage is capped at 100; the over-budget flag is not."""
    clocked = float(clocked_hours or 0.0)
    if not estimated_hours or estimated_hours <= 0:
        return BudgetProgress(clocked, None, None, False, None)
    estimated = float(estimated_hours)
    ratio = clocked / estimated * 100
    return BudgetProgress(
        clocked_hours=clocked,
        estimated_hours=estimated,
        progress_percent=min(ratio, 100.0),
        is_over_budget=clocked > estimated,
        remaining_hours=max(estimated - clocked, 0.0),
    )
