"""
In-Memory Storage

Holds records in plain lists. Used by the tests and by applications that
already have their records loaded and just want the weekly overview.
"""

from typing import Iterable, Optional

from paycycle.models.bill import Bill, BillDeferment, BillPayment
from paycycle.models.expense import ExpenseBudget, ExpensePurchase
from paycycle.models.income import Deposit, Gig, Paycheck
from paycycle.models.recurrence import RecurringDeposit, RecurringPaycheck
from paycycle.models.snapshot import FinanceSnapshot
from paycycle.services.storage.interface import FinanceStorageInterface


class InMemoryFinanceStorage(FinanceStorageInterface):
    """FinanceStorageInterface over lists held in memory."""

    def __init__(
        self,
        bills: Optional[Iterable[Bill]] = None,
        bill_payments: Optional[Iterable[BillPayment]] = None,
        bill_deferments: Optional[Iterable[BillDeferment]] = None,
        paychecks: Optional[Iterable[Paycheck]] = None,
        deposits: Optional[Iterable[Deposit]] = None,
        gigs: Optional[Iterable[Gig]] = None,
        recurring_paychecks: Optional[Iterable[RecurringPaycheck]] = None,
        recurring_deposits: Optional[Iterable[RecurringDeposit]] = None,
        expense_budgets: Optional[Iterable[ExpenseBudget]] = None,
        expense_purchases: Optional[Iterable[ExpensePurchase]] = None,
    ):
        self.bills = list(bills or [])
        self.bill_payments = list(bill_payments or [])
        self.bill_deferments = list(bill_deferments or [])
        self.paychecks = list(paychecks or [])
        self.deposits = list(deposits or [])
        self.gigs = list(gigs or [])
        self.recurring_paychecks = list(recurring_paychecks or [])
        self.recurring_deposits = list(recurring_deposits or [])
        self.expense_budgets = list(expense_budgets or [])
        self.expense_purchases = list(expense_purchases or [])

    @classmethod
    def from_snapshot(cls, snapshot: FinanceSnapshot) -> "InMemoryFinanceStorage":
        return cls(
            bills=snapshot.bills,
            bill_payments=snapshot.bill_payments,
            bill_deferments=snapshot.bill_deferments,
            paychecks=snapshot.paychecks,
            deposits=snapshot.deposits,
            gigs=snapshot.gigs,
            recurring_paychecks=snapshot.recurring_paychecks,
            recurring_deposits=snapshot.recurring_deposits,
            expense_budgets=snapshot.expense_budgets,
            expense_purchases=snapshot.expense_purchases,
        )

    # Fetches return shallow copies of the stored lists.

    async def fetch_bills(self) -> list[Bill]:
        return list(self.bills)

    async def fetch_bill_payments(self) -> list[BillPayment]:
        return list(self.bill_payments)

    async def fetch_bill_deferments(self) -> list[BillDeferment]:
        return list(self.bill_deferments)

    async def fetch_paychecks(self) -> list[Paycheck]:
        return list(self.paychecks)

    async def fetch_deposits(self) -> list[Deposit]:
        return list(self.deposits)

    async def fetch_gigs(self) -> list[Gig]:
        return list(self.gigs)

    async def fetch_recurring_paychecks(self) -> list[RecurringPaycheck]:
        return list(self.recurring_paychecks)

    async def fetch_recurring_deposits(self) -> list[RecurringDeposit]:
        return list(self.recurring_deposits)

    async def fetch_expense_budgets(self) -> list[ExpenseBudget]:
        return list(self.expense_budgets)

    async def fetch_expense_purchases(self) -> list[ExpensePurchase]:
        return list(self.expense_purchases)
