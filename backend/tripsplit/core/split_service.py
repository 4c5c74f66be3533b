"""Even-split share calculation for a single expense."""
from decimal import Decimal
from typing import Dict

from tripsplit.errors import ComputationError, ErrorCode
from tripsplit.expenses.models import Expense


class SplitCalculator:
    """Shares are unrounded Decimals; rounding happens once, on output."""

    @staticmethod
    def share_of(expense: Expense) -> Decimal:
        """
        Amount each member of ``split_between`` owes for the expense.

        Raises:
            ComputationError: the expense has nobody to split between, which
                ingestion validation should have made impossible
        """
        n = len(expense.split_between)
        if n == 0:
            raise ComputationError(
                f"Expense {expense.id} has an empty split_between",
                code=ErrorCode.INVALID_EXPENSE,
            )
        return expense.amount / n

    @classmethod
    def split_equal(cls, expense: Expense) -> Dict[str, Decimal]:
        share = cls.share_of(expense)
        return {member: share for member in expense.split_between}
