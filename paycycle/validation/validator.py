"""
Snapshot Validation

Checks a FinanceSnapshot for records the engine can only handle with a
fallback, and reports them.

IMPORTANT: Validation NEVER blocks aggregation and NEVER fixes data.
The engine always runs on whatever it is given (undated bills are
routed aside, bad due days fall back to undated, and so on). The issues
found here are surfaced next to the weekly overview for human review.

SEVERITIES:
- error:   the record is internally inconsistent (end before start)
- warning: the record will be shown, but probably not as intended
- info:    worth knowing, nothing is wrong
"""

from collections import Counter, defaultdict
from typing import Iterable

from paycycle.models.expense import ExpenseBudget
from paycycle.models.income import Gig
from paycycle.models.recurrence import RecurrenceRule
from paycycle.models.snapshot import FinanceSnapshot, ValidationIssue, ValidationResult


class SnapshotValidator:
    """Runs every record-level and cross-record check over a snapshot."""

    def validate(self, snapshot: FinanceSnapshot) -> ValidationResult:
        issues: list[ValidationIssue] = []
        issues.extend(self._validate_bills(snapshot))
        issues.extend(self._validate_payments(snapshot))
        issues.extend(self._validate_deferments(snapshot))
        issues.extend(self._validate_gigs(snapshot.gigs))
        issues.extend(self._validate_rules("recurring_paycheck", snapshot.recurring_paychecks))
        issues.extend(self._validate_rules("recurring_deposit", snapshot.recurring_deposits))
        issues.extend(self._validate_budgets(snapshot.expense_budgets))
        return ValidationResult(issues=issues)

    # =========================================================================
    # BILLS
    # =========================================================================

    def _validate_bills(self, snapshot: FinanceSnapshot) -> list[ValidationIssue]:
        issues = []
        for bill in snapshot.bills:
            if not bill.is_variable and bill.amount is None:
                issues.append(ValidationIssue(
                    record_type="bill",
                    record_id=bill.id,
                    field="amount",
                    issue_type="missing",
                    message=f"Bill '{bill.name or bill.id}' has no amount and is not variable",
                    severity="warning",
                ))

            if bill.due_day is not None and not bill.is_recurring:
                issues.append(ValidationIssue(
                    record_type="bill",
                    record_id=bill.id,
                    field="due_day",
                    issue_type="out_of_range",
                    message=f"Due day {bill.due_day} is outside 1-31",
                    severity="warning",
                ))

            if bill.due_date is not None and bill.due_day is not None:
                issues.append(ValidationIssue(
                    record_type="bill",
                    record_id=bill.id,
                    field="due_date",
                    issue_type="conflict",
                    message="Bill has both a due date and a due day; the due date is used",
                    severity="warning",
                ))

            if not bill.is_dated:
                issues.append(ValidationIssue(
                    record_type="bill",
                    record_id=bill.id,
                    field="due_date",
                    issue_type="undated",
                    message=f"Bill '{bill.name or bill.id}' has no due date and is listed separately",
                    severity="info",
                ))

            if bill.start_month and bill.end_month and bill.end_month < bill.start_month:
                issues.append(ValidationIssue(
                    record_type="bill",
                    record_id=bill.id,
                    field="end_month",
                    issue_type="invalid_range",
                    message="Bill end month is before its start month",
                    severity="error",
                ))
        return issues

    def _validate_payments(self, snapshot: FinanceSnapshot) -> list[ValidationIssue]:
        known = {bill.id for bill in snapshot.bills}
        return [
            ValidationIssue(
                record_type="bill_payment",
                record_id=payment.id,
                field="bill_id",
                issue_type="unknown_reference",
                message=f"Payment refers to unknown bill '{payment.bill_id}'",
                severity="warning",
            )
            for payment in snapshot.bill_payments
            if payment.bill_id not in known
        ]

    def _validate_deferments(self, snapshot: FinanceSnapshot) -> list[ValidationIssue]:
        counts = Counter(
            (d.bill_id, d.month_year) for d in snapshot.bill_deferments if d.is_active
        )
        return [
            ValidationIssue(
                record_type="bill_deferment",
                record_id=bill_id,
                field="month_year",
                issue_type="duplicate",
                message=f"{count} active deferments for {month_year}; the newest is used",
                severity="warning",
            )
            for (bill_id, month_year), count in sorted(counts.items())
            if count > 1
        ]

    # =========================================================================
    # INCOME
    # =========================================================================

    def _validate_gigs(self, gigs: Iterable[Gig]) -> list[ValidationIssue]:
        issues = []
        owners: dict[str, list[str]] = defaultdict(list)

        for gig in gigs:
            if gig.start_date is None:
                issues.append(ValidationIssue(
                    record_type="gig",
                    record_id=gig.id,
                    field="start_date",
                    issue_type="missing",
                    message=f"Gig '{gig.name or gig.id}' has no start date and is not bucketed",
                    severity="warning",
                ))
            elif gig.end_date is not None and gig.end_date < gig.start_date:
                issues.append(ValidationIssue(
                    record_type="gig",
                    record_id=gig.id,
                    field="end_date",
                    issue_type="invalid_range",
                    message="Gig ends before it starts; treated as a single day",
                    severity="error",
                ))
            for income_id in gig.linked_income_ids:
                owners[income_id].append(gig.id)

        for income_id, gig_ids in sorted(owners.items()):
            if len(gig_ids) > 1:
                issues.append(ValidationIssue(
                    record_type="gig",
                    record_id=income_id,
                    field="paycheck_ids",
                    issue_type="duplicate",
                    message=f"Income record is linked to {len(gig_ids)} gigs: {', '.join(gig_ids)}",
                    severity="warning",
                ))
        return issues

    def _validate_rules(
        self,
        record_type: str,
        rules: Iterable[RecurrenceRule],
    ) -> list[ValidationIssue]:
        return [
            ValidationIssue(
                record_type=record_type,
                record_id=rule.id,
                field="end_date",
                issue_type="invalid_range",
                message="Rule ends before it starts and produces no occurrences",
                severity="error",
            )
            for rule in rules
            if rule.end_date is not None and rule.end_date < rule.start_date
        ]

    # =========================================================================
    # EXPENSES
    # =========================================================================

    def _validate_budgets(self, budgets: Iterable[ExpenseBudget]) -> list[ValidationIssue]:
        issues = []
        for budget in budgets:
            if budget.start_date is None:
                issues.append(ValidationIssue(
                    record_type="expense_budget",
                    record_id=budget.id,
                    field="start_date",
                    issue_type="missing",
                    message="Budget has no start date and is never deducted",
                    severity="warning",
                ))
            elif budget.end_date is not None and budget.end_date < budget.start_date:
                issues.append(ValidationIssue(
                    record_type="expense_budget",
                    record_id=budget.id,
                    field="end_date",
                    issue_type="invalid_range",
                    message="Budget ends before it starts and is never deducted",
                    severity="error",
                ))
        return issues
