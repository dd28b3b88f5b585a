"""
Tests for records: immutable updates to time entries and financial rows.
"""
from datetime import datetime

import pytest

from conftest import make_entry
from errors import ValidationError
from records import edit_financial_row, new_financial_row, recrew_entry, retime_entry, set_entry_hours


class TestTimeEntryUpdates:
    def test_retime_recomputes_hours_and_leaves_source_untouched(self):
        entry = make_entry(datetime(2024, 6, 3, 7, 0), 8)
        edited = retime_entry(entry, datetime(2024, 6, 3, 7, 0), datetime(2024, 6, 3, 12, 20))
        assert edited.total_hours == 5.25
        assert entry.total_hours == 8

    def test_retime_rejects_end_before_start(self):
        entry = make_entry(datetime(2024, 6, 3, 7, 0), 8)
        with pytest.raises(ValidationError):
            retime_entry(entry, datetime(2024, 6, 3, 9, 0), datetime(2024, 6, 3, 8, 0))

    def test_typed_hours_mark_entry_manual(self):
        entry = make_entry(datetime(2024, 6, 3, 7, 0), 8)
        edited = set_entry_hours(entry, 6.5)
        assert edited.total_hours == 6.5
        assert edited.is_manual is True
        assert edited.start_time == entry.start_time

    def test_recrew_with_workers(self):
        entry = make_entry(datetime(2024, 6, 3, 7, 0), 4, crew_count=5)
        edited = recrew_entry(entry, worker_names=["Alice", "Bob"], select_workers=True)
        assert edited.crew_count == 2
        assert edited.worker_names == ("Alice", "Bob")
        assert edited.man_hours == 8.0

    def test_recrew_empty_selection_rejected(self):
        entry = make_entry(datetime(2024, 6, 3, 7, 0), 4)
        with pytest.raises(ValidationError):
            recrew_entry(entry, worker_names=[], select_workers=True)


class TestFinancialRowUpdates:
    def test_new_row_derives_totals(self):
        row = new_financial_row(1, "subcontractor", "Drywall", 10, 60, 20, order_index=3)
        assert row.total_cost == 600.0
        assert row.selling_price == pytest.approx(720.0)
        assert row.order_index == 3.0

    @pytest.mark.parametrize("field", ["quantity", "unit_cost"])
    def test_missing_required_number_rejected(self, field):
        args = {"quantity": 1, "unit_cost": 1}
        args[field] = None
        with pytest.raises(ValidationError, match="required"):
            new_financial_row(1, "other", "x", args["quantity"], args["unit_cost"], order_index=0)

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError, match="Unknown category"):
            new_financial_row(1, "snacks", "x", 1, 1, order_index=0)

    def test_edit_recomputes_and_keeps_order_index(self):
        row = new_financial_row(1, "equipment", "Lift", 2, 100, 10, order_index=4.5)
        edited = edit_financial_row(row, quantity=3)
        assert edited.total_cost == 300.0
        assert edited.selling_price == pytest.approx(330.0)
        assert edited.order_index == 4.5
        assert row.quantity == 2

    def test_edit_cannot_move_row(self):
        row = new_financial_row(1, "equipment", "Lift", 2, 100, order_index=4.5)
        with pytest.raises(ValidationError):
            edit_financial_row(row, order_index=0)
