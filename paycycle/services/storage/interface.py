"""
Abstract Storage Interface

DESIGN DECISION: The engine never talks to a database. It is handed a
FinanceSnapshot, and this interface is the only way one gets built.
This allows us to:
1. Plug in whatever backend the embedding application uses
2. Use in-memory storage for testing
3. Keep the engine pure and synchronous

Storage is read-only from the engine's point of view and is expected to
have scoped every record to a single user already. Filtering, paging and
persistence all live on the other side of this interface.
"""

import asyncio
from abc import ABC, abstractmethod

from paycycle.models.bill import Bill, BillDeferment, BillPayment
from paycycle.models.expense import ExpenseBudget, ExpensePurchase
from paycycle.models.income import Deposit, Gig, Paycheck
from paycycle.models.recurrence import RecurringDeposit, RecurringPaycheck
from paycycle.models.snapshot import FinanceSnapshot


class FinanceStorageInterface(ABC):
    """
    Abstract interface for reading a user's finance records.

    Any storage implementation must implement the fetch methods.
    Implementations raise StorageError (or a subclass) on failure.
    """

    @abstractmethod
    async def fetch_bills(self) -> list[Bill]:
        """All bills, one-time and recurring."""
        pass

    @abstractmethod
    async def fetch_bill_payments(self) -> list[BillPayment]:
        """All bill payments, settled and scheduled."""
        pass

    @abstractmethod
    async def fetch_bill_deferments(self) -> list[BillDeferment]:
        pass

    @abstractmethod
    async def fetch_paychecks(self) -> list[Paycheck]:
        """Actual (non-generated) paychecks."""
        pass

    @abstractmethod
    async def fetch_deposits(self) -> list[Deposit]:
        """Actual (non-generated) deposits."""
        pass

    @abstractmethod
    async def fetch_gigs(self) -> list[Gig]:
        pass

    @abstractmethod
    async def fetch_recurring_paychecks(self) -> list[RecurringPaycheck]:
        pass

    @abstractmethod
    async def fetch_recurring_deposits(self) -> list[RecurringDeposit]:
        pass

    @abstractmethod
    async def fetch_expense_budgets(self) -> list[ExpenseBudget]:
        pass

    @abstractmethod
    async def fetch_expense_purchases(self) -> list[ExpensePurchase]:
        """Completed and planned purchases."""
        pass

    async def load_snapshot(self) -> FinanceSnapshot:
        """
        Fetch every collection and bundle them into one snapshot.

        The fetches run concurrently. If any of them fails the error
        propagates and no partial snapshot is returned.

        Raises:
            StorageError: If any fetch fails
        """
        (
            bills,
            bill_payments,
            bill_deferments,
            paychecks,
            deposits,
            gigs,
            recurring_paychecks,
            recurring_deposits,
            expense_budgets,
            expense_purchases,
        ) = await asyncio.gather(
            self.fetch_bills(),
            self.fetch_bill_payments(),
            self.fetch_bill_deferments(),
            self.fetch_paychecks(),
            self.fetch_deposits(),
            self.fetch_gigs(),
            self.fetch_recurring_paychecks(),
            self.fetch_recurring_deposits(),
            self.fetch_expense_budgets(),
            self.fetch_expense_purchases(),
        )
        return FinanceSnapshot(
            bills=bills,
            bill_payments=bill_payments,
            bill_deferments=bill_deferments,
            paychecks=paychecks,
            deposits=deposits,
            gigs=gigs,
            recurring_paychecks=recurring_paychecks,
            recurring_deposits=recurring_deposits,
            expense_budgets=expense_budgets,
            expense_purchases=expense_purchases,
        )


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Requested collection or record not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
