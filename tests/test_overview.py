"""
Tests for the weekly overview pipeline.

Reference week: today is Wednesday 2024-01-10, so the default window
starts on Sunday 2024-01-07.
"""

import pytest
from datetime import date
from decimal import Decimal

from paycycle.config import EngineSettings
from paycycle.engine.overview import build_weekly_overview, default_window
from paycycle.models import (
    Bill,
    BillDeferment,
    BillStatus,
    DayOfWeek,
    ExpenseBudget,
    FinanceSnapshot,
    Gig,
    Paycheck,
    RecurringPaycheck,
    WeeklyCadence,
)


TODAY = date(2024, 1, 10)


@pytest.fixture
def settings():
    return EngineSettings(window_weeks=4, include_current_week=True)


@pytest.fixture
def snapshot():
    return FinanceSnapshot(
        bills=[
            Bill(id="rent", name="Rent", amount=Decimal("900.00"), due_day=15),
            Bill(id="invoice", name="Invoice", amount=Decimal("50.00"), due_date=date(2024, 1, 5)),
            Bill(id="misc", name="Someday", amount=Decimal("20.00")),
        ],
        paychecks=[
            Paycheck(
                id="p-1",
                amount=Decimal("1180.00"),
                date=date(2024, 1, 12),
                recurring_rule_id="rp-1",
            ),
        ],
        recurring_paychecks=[
            RecurringPaycheck(
                id="rp-1",
                amount=Decimal("1200.00"),
                start_date=date(2023, 12, 1),
                cadence=WeeklyCadence(interval=2, day_of_week=DayOfWeek.FRIDAY),
                name="Day job",
            ),
        ],
        gigs=[
            Gig(
                id="g-1",
                name="Wedding",
                amount=Decimal("400.00"),
                start_date=date(2024, 1, 19),
                end_date=date(2024, 1, 21),
            ),
        ],
    )


class TestDefaultWindow:
    """Tests for the default aggregation window."""

    def test_window_starts_on_sunday(self):
        assert default_window(TODAY, 6) == (date(2024, 1, 7), date(2024, 2, 17))

    def test_single_week(self):
        assert default_window(date(2024, 1, 7), 1) == (date(2024, 1, 7), date(2024, 1, 13))


class TestBuildWeeklyOverview:
    """Tests for the end-to-end pipeline over one snapshot."""

    def test_window(self, snapshot, settings):
        overview = build_weekly_overview(snapshot, today=TODAY, settings=settings)
        assert overview.window_start == date(2024, 1, 7)
        assert overview.window_end == date(2024, 2, 3)

    def test_weeks_and_carryover(self, snapshot, settings):
        """Test the full flow from records to projected weeks."""
        overview = build_weekly_overview(snapshot, today=TODAY, settings=settings)
        assert [b.start_date for b in overview.buckets] == [
            date(2024, 1, 7),
            date(2024, 1, 14),
            date(2024, 1, 21),
        ]
        first, second, third = overview.buckets

        # the actual paycheck replaces its generated twin
        assert [p.id for p in first.paychecks] == ["p-1"]
        assert first.total_income == Decimal("1180.00")
        assert first.week_remainder == Decimal("1180.00")

        assert [o.bill_id for o in second.bills] == ["rent"]
        assert second.carryover_balance == Decimal("1180.00")
        assert second.week_remainder == Decimal("280.00")

        assert [p.id for p in third.paychecks] == ["rp-1-2024-01-26"]
        assert third.paychecks[0].is_generated
        assert third.carryover_balance == Decimal("280.00")
        assert third.total_available == Decimal("1480.00")
        assert overview.closing_balance == Decimal("1480.00")

    def test_gig_spans_two_weeks(self, snapshot, settings):
        overview = build_weekly_overview(snapshot, today=TODAY, settings=settings)
        assert overview.bucket_for(date(2024, 1, 19)).total_gigs == Decimal("400.00")
        assert overview.bucket_for(date(2024, 1, 21)).total_gigs == Decimal("400.00")
        assert overview.total_income == Decimal("2380.00")

    def test_bill_lists(self, snapshot, settings):
        overview = build_weekly_overview(snapshot, today=TODAY, settings=settings)
        assert [r.bill_id for r in overview.overdue_bills] == ["invoice"]
        assert [b.id for b in overview.undated_bills] == ["misc"]
        assert overview.deferred_bills == []
        assert overview.report_for("rent").status == BillStatus.UPCOMING
        assert overview.report_for("misc").status == BillStatus.UNDATED
        assert overview.report_for("nope") is None

    def test_occurrence_status(self, snapshot, settings):
        overview = build_weekly_overview(snapshot, today=TODAY, settings=settings)
        occurrence = overview.bucket_for(date(2024, 1, 15)).bills[0]
        assert occurrence.status == BillStatus.UPCOMING

    def test_validation_issues_are_attached(self, snapshot, settings):
        """Test that issues are reported without blocking aggregation."""
        overview = build_weekly_overview(snapshot, today=TODAY, settings=settings)
        assert any(
            issue.record_id == "misc" and issue.issue_type == "undated"
            for issue in overview.issues
        )
        assert overview.buckets

    def test_explicit_window(self, snapshot, settings):
        overview = build_weekly_overview(
            snapshot,
            window_start=date(2024, 1, 14),
            window_end=date(2024, 1, 20),
            today=TODAY,
            settings=settings,
        )
        assert [b.start_date for b in overview.buckets] == [date(2024, 1, 14)]

    def test_same_inputs_same_overview(self, snapshot, settings):
        first = build_weekly_overview(snapshot, today=TODAY, settings=settings)
        second = build_weekly_overview(snapshot, today=TODAY, settings=settings)
        assert first.buckets == second.buckets


class TestDeferments:
    """Tests for deferments across status and buckets."""

    def with_deferment(self, snapshot, month):
        deferment = BillDeferment(id="d-1", bill_id="rent", month_year=month)
        return snapshot.model_copy(update={"bill_deferments": [deferment]})

    def test_deferment_of_another_month_keeps_bill_in_its_week(self, snapshot, settings):
        """Test that a November deferment leaves the January rent bucketed."""
        overview = build_weekly_overview(
            self.with_deferment(snapshot, "2023-11"), today=TODAY, settings=settings
        )
        assert overview.report_for("rent").status == BillStatus.UPCOMING
        occurrence = overview.bucket_for(date(2024, 1, 15)).bills[0]
        assert occurrence.bill_id == "rent"
        assert occurrence.status == BillStatus.UPCOMING
        assert overview.deferred_bills == []

    def test_deferment_of_current_month_moves_bill_aside(self, snapshot, settings):
        overview = build_weekly_overview(
            self.with_deferment(snapshot, "2024-01"), today=TODAY, settings=settings
        )
        assert overview.report_for("rent").status == BillStatus.DEFERRED
        assert [b.id for b in overview.deferred_bills] == ["rent"]
        assert overview.total_bills == Decimal("0.00")
        assert overview.closing_balance == Decimal("2380.00")

    @pytest.mark.parametrize("month", ["2023-11", "2024-01", "2024-02", "2024-06"])
    def test_status_and_buckets_agree(self, snapshot, settings, month):
        """Test that a DEFERRED bill is never bucketed and is always listed aside."""
        overview = build_weekly_overview(
            self.with_deferment(snapshot, month), today=TODAY, settings=settings
        )
        deferred_ids = {b.id for b in overview.deferred_bills}
        for report in overview.status_reports:
            if report.status == BillStatus.DEFERRED:
                assert report.bill_id in deferred_ids
        for bucket in overview.buckets:
            for occurrence in bucket.bills:
                assert occurrence.status != BillStatus.DEFERRED


class TestOverdueBills:
    """Tests for bills already past due."""

    def test_overdue_bill_stays_out_of_current_week(self, snapshot, settings):
        """Test a bill due Monday, checked on Wednesday of the same week."""
        phone = Bill(id="phone", name="Phone", amount=Decimal("60.00"), due_date=date(2024, 1, 8))
        snapshot = snapshot.model_copy(update={"bills": snapshot.bills + [phone]})
        overview = build_weekly_overview(snapshot, today=TODAY, settings=settings)
        assert "phone" in [r.bill_id for r in overview.overdue_bills]
        assert overview.bucket_for(TODAY).bills == []
        assert overview.bucket_for(TODAY).total_bills == Decimal("0.00")


class TestExpenses:
    """Tests for expense deductions in the overview."""

    def test_budget_is_deducted_every_week(self, snapshot, settings):
        budget = ExpenseBudget(
            id="eb-1",
            expense_type_id="groceries",
            amount=Decimal("100.00"),
            start_date=date(2024, 1, 1),
        )
        snapshot = snapshot.model_copy(update={"expense_budgets": [budget]})
        overview = build_weekly_overview(snapshot, today=TODAY, settings=settings)
        first, second, third = overview.buckets
        assert first.total_available == Decimal("1080.00")
        assert second.carryover_balance == Decimal("1080.00")
        assert second.week_remainder == Decimal("80.00")
        assert third.total_available == Decimal("1180.00")
        assert overview.total_expenses == Decimal("300.00")
        assert overview.closing_balance == Decimal("1180.00")


class TestCurrentWeek:
    """Tests for materializing the current week."""

    def test_current_week_always_present(self, settings):
        overview = build_weekly_overview(FinanceSnapshot(), today=TODAY, settings=settings)
        assert [b.start_date for b in overview.buckets] == [date(2024, 1, 7)]
        assert overview.buckets[0].is_empty

    def test_current_week_can_be_skipped(self):
        settings = EngineSettings(window_weeks=4, include_current_week=False)
        overview = build_weekly_overview(FinanceSnapshot(), today=TODAY, settings=settings)
        assert overview.buckets == []
        assert overview.closing_balance == Decimal("0.00")
