"""
Regression tests for the worked scenarios: crew man-hours on a shared date,
a marked-up subcontractor row through the proposal, and an over-budget job.
"""
from datetime import datetime, timedelta

import pytest

from database_manager import DatabaseManager

MONDAY = datetime(2024, 6, 3, 7, 0)


class TestCrewManHours:
    """Two entries on the same date: a counted crew and a named crew."""

    def test_same_date_man_hours(self, db_crew: DatabaseManager, job_id: int):
        """8h x crew 3 = 24, 4h x [Alice, Bob] = 8 (stored count ignored); 32 for the date."""
        first = db_crew.add_time_entry(job_id, start_time=MONDAY, total_hours=8, crew_count=3)
        second = db_crew.add_time_entry(
            job_id, start_time=MONDAY + timedelta(hours=2), total_hours=4,
            crew_count=5, worker_names=["Alice", "Bob"],
        )
        assert first.man_hours == 24.0
        assert second.man_hours == 8.0
        summary = db_crew.get_time_summary(job_id)
        assert len(summary.date_groups) == 1
        day = summary.date_groups[0]
        assert day.total_man_hours == 32.0
        assert day.entry_count == 2


class TestSubcontractorProposal:
    """A subcontractor row at 20% markup, proposed at a 15% job-wide markup."""

    def test_row_and_proposal_totals(self, db_office: DatabaseManager, job_id: int):
        row = db_office.add_financial_row(job_id, "subcontractor", "Framing crew", 10, 60, 20)
        assert row.total_cost == 600.0
        assert row.selling_price == pytest.approx(720.0)
        proposal = db_office.get_proposal(job_id, markup_percent=15)
        line = proposal.lines[0]
        assert line.price == pytest.approx(828.0)
        assert line.tax == pytest.approx(57.96)
        assert line.total == pytest.approx(885.96)
        assert proposal.subtotal == pytest.approx(828.0)
        assert proposal.total_tax == pytest.approx(57.96)
        assert proposal.grand_total == pytest.approx(885.96)


class TestOverBudget:
    """120 clocked man-hours against a 100 hour estimate."""

    def test_progress_capped_and_flagged(self, db_crew: DatabaseManager, job_id: int):
        db_crew.add_time_entry(job_id, start_time=MONDAY, total_hours=10, crew_count=4)
        db_crew.add_time_entry(job_id, start_time=MONDAY + timedelta(days=1), total_hours=10, crew_count=8)
        progress = db_crew.get_budget_progress(job_id)
        assert progress.clocked_hours == 120.0
        assert progress.progress_percent == 100.0
        assert progress.is_over_budget is True
