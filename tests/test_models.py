"""
Tests for paycycle

Test strategy:
1. Unit tests for individual components (models, engine functions)
2. Integration tests for flows (with in-memory storage)
3. No real storage backends in tests
"""

import pytest
from datetime import date, datetime, timedelta
from decimal import Decimal

from pydantic import ValidationError

from paycycle.models import (
    Bill,
    BillDeferment,
    BillOccurrence,
    BillPayment,
    BillStatus,
    BillStatusReport,
    DayOfMonthAnchor,
    ExpenseBudget,
    ExpensePurchase,
    FinanceSnapshot,
    Gig,
    LastBusinessDayAnchor,
    MonthlyCadence,
    Paycheck,
    Priority,
    RecurrenceRule,
    ValidationIssue,
    ValidationResult,
    WeekBucket,
    WeeklyCadence,
)


class TestBillModels:
    """Tests for bill-related Pydantic models."""

    def test_bill_creation(self):
        """Test Bill model creation."""
        bill = Bill(id="rent", name="Rent", amount=Decimal("900.00"), due_day=1)
        assert bill.is_recurring
        assert bill.is_dated
        assert bill.priority == Priority.MEDIUM

    def test_bill_strips_whitespace(self):
        """Test that whitespace is stripped from the name."""
        bill = Bill(id="rent", name="  Rent  ")
        assert bill.name == "Rent"

    def test_bill_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValidationError):
            Bill(id="rent", amount=Decimal("-1.00"))

    def test_unparseable_due_date_becomes_none(self):
        """Test lenient date coercion."""
        bill = Bill(id="b-1", due_date="31/31/2024")
        assert bill.due_date is None
        assert not bill.is_dated

    def test_due_day_from_string(self):
        assert Bill(id="b-1", due_day="15").due_day == 15
        assert Bill(id="b-1", due_day="fifteenth").due_day is None

    def test_out_of_range_due_day_is_not_recurring(self):
        assert not Bill(id="b-1", due_day=32).is_recurring

    def test_effective_amount(self):
        assert Bill(id="b-1", amount=Decimal("10.00")).effective_amount == Decimal("10.00")
        variable = Bill(id="b-2", is_variable=True, statement_minimum_due=Decimal("25.00"))
        assert variable.effective_amount == Decimal("25.00")
        assert Bill(id="b-3").effective_amount == Decimal("0.00")

    def test_active_months(self):
        bill = Bill(id="b-1", due_day=1, start_month="2024-02", end_month="2024-04")
        assert not bill.is_active_in_month(2024, 1)
        assert bill.is_active_in_month(2024, 2)
        assert bill.is_active_in_month(2024, 4)
        assert not bill.is_active_in_month(2024, 5)

    def test_month_pattern_enforced(self):
        with pytest.raises(ValidationError):
            Bill(id="b-1", start_month="2024-13")


class TestPaymentModels:
    """Tests for payments and deferments."""

    def make_payment(self, **kwargs):
        return BillPayment(
            id="pay-1",
            bill_id="rent",
            amount=Decimal("50.00"),
            payment_date=date(2024, 2, 3),
            **kwargs,
        )

    def test_last_payment_date_defaults_to_payment_date(self):
        assert self.make_payment().last_payment_date == date(2024, 2, 3)

    def test_applied_month_uses_month_end(self):
        payment = self.make_payment(applied_month="2024-01")
        assert payment.last_payment_date == date(2024, 1, 31)
        assert payment.period_key == "2024-01"

    def test_applied_date_wins(self):
        payment = self.make_payment(applied_date="2024-01-20", applied_month="2024-01")
        assert payment.last_payment_date == date(2024, 1, 20)

    def test_period_key_from_payment_date(self):
        assert self.make_payment().period_key == "2024-02"

    def test_deferment_month_pattern(self):
        with pytest.raises(ValidationError):
            BillDeferment(id="d-1", bill_id="rent", month_year="Jan 2024")

    def test_deferment_lenient_dates(self):
        deferment = BillDeferment(
            id="d-1",
            bill_id="rent",
            month_year="2024-01",
            decide_by_date="soon",
            loss_date="2024-02-01",
        )
        assert deferment.decide_by_date is None
        assert deferment.loss_date == date(2024, 2, 1)


class TestStatusReport:
    """Tests for BillStatusReport helpers."""

    def test_partially_paid(self):
        report = BillStatusReport(
            bill_id="b-1",
            status=BillStatus.OVERDUE,
            total_amount=Decimal("100.00"),
            partial_payment=Decimal("30.00"),
        )
        assert report.is_partially_paid
        assert not report.is_paid


class TestRecurrenceModels:
    """Tests for the cadence union."""

    def test_rules_are_immutable(self):
        rule = RecurrenceRule(
            id="r-1",
            amount=Decimal("10.00"),
            start_date=date(2024, 1, 1),
            cadence=MonthlyCadence(),
        )
        with pytest.raises(ValidationError):
            rule.amount = Decimal("20.00")

    def test_cadence_from_dict(self):
        """Test that the discriminator picks the right variants."""
        rule = RecurrenceRule.model_validate({
            "id": "r-1",
            "amount": "10.00",
            "start_date": "2024-01-01",
            "cadence": {"kind": "month", "anchor": {"kind": "last_business_day"}},
        })
        assert isinstance(rule.cadence, MonthlyCadence)
        assert isinstance(rule.cadence.anchor, LastBusinessDayAnchor)

    def test_monthly_default_anchor(self):
        assert MonthlyCadence().anchor == DayOfMonthAnchor(day=1)

    def test_day_of_month_bounds(self):
        with pytest.raises(ValidationError):
            DayOfMonthAnchor(day=32)

    def test_interval_must_be_positive(self):
        with pytest.raises(ValidationError):
            WeeklyCadence(interval=0)


class TestIncomeModels:
    """Tests for paychecks and gigs."""

    def test_paycheck_lenient_date(self):
        assert Paycheck(id="p-1", amount=Decimal("1.00"), date="bad").date is None

    def test_gig_without_end_is_single_day(self):
        gig = Gig(id="g-1", start_date=date(2024, 1, 5))
        assert gig.span == (date(2024, 1, 5), date(2024, 1, 5))

    def test_gig_end_before_start_is_single_day(self):
        gig = Gig(id="g-1", start_date=date(2024, 1, 5), end_date=date(2024, 1, 1))
        assert gig.span == (date(2024, 1, 5), date(2024, 1, 5))

    def test_gig_overlaps(self):
        gig = Gig(id="g-1", start_date=date(2024, 1, 5), end_date=date(2024, 1, 9))
        assert gig.overlaps(date(2024, 1, 9), date(2024, 1, 20))
        assert not gig.overlaps(date(2024, 1, 10), date(2024, 1, 20))
        assert not Gig(id="g-2").overlaps(date(2024, 1, 1), date(2024, 12, 31))

    def test_gig_hours(self):
        assert Gig(id="g-1", total_hours="6.5").total_hours == Decimal("6.5")
        assert Gig(id="g-2").total_hours is None
        with pytest.raises(ValidationError):
            Gig(id="g-3", total_hours=Decimal("-1"))

    def test_linked_income_ids(self):
        gig = Gig(id="g-1", paycheck_ids=["p-1"], deposit_ids=["d-1"])
        assert gig.linked_income_ids == ["p-1", "d-1"]


class TestExpenseModels:
    """Tests for expense budgets and purchases."""

    def test_budget_covers_week(self):
        budget = ExpenseBudget(
            id="eb-1",
            expense_type_id="food",
            amount=Decimal("60.00"),
            start_date="2024-01-07",
            end_date="2024-01-20",
        )
        assert budget.covers_week(date(2024, 1, 7), date(2024, 1, 13))
        assert budget.covers_week(date(2024, 1, 14), date(2024, 1, 20))
        assert not budget.covers_week(date(2023, 12, 31), date(2024, 1, 6))
        assert not budget.covers_week(date(2024, 1, 21), date(2024, 1, 27))

    def test_budget_without_start_never_applies(self):
        budget = ExpenseBudget(id="eb-1", expense_type_id="food", amount=Decimal("60.00"), start_date="soon")
        assert budget.start_date is None
        assert not budget.covers_week(date(2024, 1, 7), date(2024, 1, 13))

    def test_purchase_amount_fallbacks(self):
        """Test actual amount, then estimate, then zero."""
        assert ExpensePurchase(
            id="x-1",
            purchase_amount=Decimal("12.00"),
            estimated_amount=Decimal("15.00"),
        ).amount == Decimal("12.00")
        assert ExpensePurchase(id="x-2", estimated_amount=Decimal("15.00")).amount == Decimal("15.00")
        assert ExpensePurchase(id="x-3").amount == Decimal("0.00")

    def test_purchase_lenient_date(self):
        assert ExpensePurchase(id="x-1", purchase_date="2024-01-16T12:00:00Z").purchase_date == date(2024, 1, 16)
        assert ExpensePurchase(id="x-2", purchase_date="later").purchase_date is None


class TestWeekModels:
    """Tests for week buckets."""

    def test_bucket_must_span_seven_days(self):
        with pytest.raises(ValidationError):
            WeekBucket(start_date=date(2024, 1, 7), end_date=date(2024, 1, 14))

    def test_bucket_contains(self):
        start = date(2024, 1, 7)
        bucket = WeekBucket(start_date=start, end_date=start + timedelta(days=6))
        assert bucket.contains(date(2024, 1, 13))
        assert not bucket.contains(date(2024, 1, 14))
        assert bucket.is_empty

    def test_occurrence_bill_id(self):
        bill = Bill(id="rent", amount=Decimal("1.00"), due_day=1)
        occurrence = BillOccurrence(bill=bill, due_date=date(2024, 1, 1), amount=Decimal("1.00"))
        assert occurrence.bill_id == "rent"


class TestSnapshotModels:
    """Tests for snapshots and validation results."""

    def test_snapshot_lookups(self):
        snapshot = FinanceSnapshot(
            bills=[Bill(id="rent")],
            bill_payments=[BillPayment(
                id="pay-1",
                bill_id="rent",
                amount=Decimal("1.00"),
                payment_date=date(2024, 1, 1),
            )],
            bill_deferments=[BillDeferment(id="d-1", bill_id="other", month_year="2024-01")],
        )
        assert [p.id for p in snapshot.payments_for("rent")] == ["pay-1"]
        assert snapshot.deferments_for("rent") == []
        assert snapshot.record_count == 3
        assert isinstance(snapshot.loaded_at, datetime)

    def test_validation_result_has_errors(self):
        """Test has_errors and error_count."""
        result = ValidationResult(issues=[
            ValidationIssue(
                record_type="gig",
                record_id="g-1",
                field="end_date",
                issue_type="invalid_range",
                message="Gig ends before it starts",
                severity="error",
            ),
            ValidationIssue(
                record_type="bill",
                record_id="b-1",
                field="due_date",
                issue_type="undated",
                message="No due date",
                severity="info",
            ),
        ])
        assert result.has_errors
        assert result.error_count == 1
        assert len(result.issues_for("b-1")) == 1

    def test_validation_issue_severity_pattern(self):
        with pytest.raises(ValidationError):
            ValidationIssue(
                record_type="bill",
                field="amount",
                issue_type="missing",
                message="x",
                severity="fatal",
            )
