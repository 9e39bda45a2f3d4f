import uuid
from datetime import datetime, timezone

from schemas.advisory import EXPENSE_CATEGORIES
from schemas.finance import SpendItem, Transaction, TransactionStatus
from services.errors import UserInputError

DEFAULT_CATEGORY = "Other"

# Shared household expenses use their own category list
FAMILY_EXPENSE_CATEGORIES = ("Groceries", "Utilities", "Housing", "Education", "Healthcare", "Other")


class TransactionBook:
    """Expense tracker entries, newest first.

    Input is validated here, before anything reaches the advisory gateway.
    ``categories`` is the closed set an entry may be filed under.
    """

    def __init__(self, categories: tuple[str, ...] = EXPENSE_CATEGORIES):
        self.categories = categories
        self._items: list[Transaction] = []

    def add(
        self,
        description: str,
        amount: float,
        category: str | None = None,
        status: TransactionStatus = TransactionStatus.PENDING,
    ) -> Transaction:
        description = (description or "").strip()
        if not description or amount is None or amount <= 0:
            raise UserInputError("Please enter a valid description and amount.")
        category = category or DEFAULT_CATEGORY
        if category not in self.categories:
            raise UserInputError(f"Unknown category: {category}")

        txn = Transaction(
            id=uuid.uuid4().hex,
            description=description,
            amount=amount,
            category=category,
            date=datetime.now(timezone.utc),
            status=status,
        )
        self._items.insert(0, txn)
        return txn

    def confirm(self, txn_id: str) -> Transaction:
        txn = self.get(txn_id)
        txn.status = TransactionStatus.CONFIRMED
        return txn

    def recategorize(self, txn_id: str, category: str) -> Transaction:
        if category not in self.categories:
            raise UserInputError(f"Unknown category: {category}")
        txn = self.get(txn_id)
        txn.category = category
        txn.status = TransactionStatus.CONFIRMED
        return txn

    def get(self, txn_id: str) -> Transaction:
        for txn in self._items:
            if txn.id == txn_id:
                return txn
        raise KeyError(txn_id)

    def all(self) -> list[Transaction]:
        return list(self._items)

    def spend_items(self) -> tuple[SpendItem, ...]:
        """Compact view used for BudgetOptimization and SpendingTrend requests."""
        return tuple(
            SpendItem(date=t.date.date().isoformat(), category=t.category, amount=t.amount)
            for t in self._items
        )
