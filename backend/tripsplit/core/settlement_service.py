"""
Settlement Engine - who owes whom within a trip.

Two one-directional views are computed per (trip, user):
- owed to user: shares of expenses the user paid, grouped by the member owing
- owed by user: the user's shares of expenses others paid, grouped by payer

The views are deliberately not netted against each other: if A owes B 10 and
B owes A 4, both amounts are reported.
"""
from decimal import Decimal
from typing import Dict, Iterable, List

from tripsplit.core.aggregation_service import user_display
from tripsplit.core.split_service import SplitCalculator
from tripsplit.expenses.models import Expense
from tripsplit.ledger import LedgerStore
from tripsplit.utils.money import ZERO, round_money


class SettlementEngine:
    """Pairwise amounts owed between trip members."""

    def __init__(self, store: LedgerStore):
        self.store = store

    # ------------------ PURE FOLDS ------------------

    @staticmethod
    def owed_to(expenses: Iterable[Expense], user_id: str) -> Dict[str, Decimal]:
        """
        Money other members owe ``user_id``, per member.

        The payer's own share is absorbed: a user never owes themself.
        """
        owed: Dict[str, Decimal] = {}
        for e in expenses:
            if e.paid_by != user_id:
                continue
            share = SplitCalculator.share_of(e)
            for member in e.split_between:
                if member == user_id:
                    continue
                owed[member] = owed.get(member, ZERO) + share
        return owed

    @staticmethod
    def owed_by(expenses: Iterable[Expense], user_id: str) -> Dict[str, Decimal]:
        """Money ``user_id`` owes others, per payer."""
        owed: Dict[str, Decimal] = {}
        for e in expenses:
            if not e.paid_by or e.paid_by == user_id or user_id not in e.split_between:
                continue
            share = SplitCalculator.share_of(e)
            owed[e.paid_by] = owed.get(e.paid_by, ZERO) + share
        return owed

    @staticmethod
    def net_balances(expenses: Iterable[Expense]) -> Dict[str, Dict[str, Decimal]]:
        """
        Per-user totals: paid, share of all expenses, and paid minus share.

        Positive balance = is owed money, negative = owes money. Balances of a
        trip sum to zero up to rounding.
        """
        rows: Dict[str, Dict[str, Decimal]] = {}

        def row(uid):
            return rows.setdefault(uid, {"total_paid": ZERO, "total_share": ZERO})

        for e in expenses:
            if e.paid_by:
                row(e.paid_by)["total_paid"] += e.amount
            share = SplitCalculator.share_of(e)
            for member in e.split_between:
                row(member)["total_share"] += share

        for r in rows.values():
            r["balance"] = r["total_paid"] - r["total_share"]
        return rows

    # ------------------ STORE-BACKED VIEWS ------------------

    def _trip_expenses(self, trip_id: str) -> List[Expense]:
        return [Expense.from_document(d) for d in self.store.find_expenses({"trip_id": trip_id})]

    def _enrich(self, amounts: Dict[str, Decimal]) -> List[Dict]:
        users = {u["_id"]: u for u in self.store.find_users(list(amounts))}
        return [
            {**user_display(users.get(uid), uid), "amount": round_money(amount)}
            for uid, amount in amounts.items()
        ]

    def amount_owed_to_user(self, trip_id: str, user_id: str) -> List[Dict]:
        amounts = self.owed_to(self._trip_expenses(trip_id), user_id)
        return self._enrich(amounts)

    def amount_owed_by_user(self, trip_id: str, user_id: str) -> List[Dict]:
        amounts = self.owed_by(self._trip_expenses(trip_id), user_id)
        return self._enrich(amounts)

    def trip_balances(self, trip_id: str) -> List[Dict]:
        rows = self.net_balances(self._trip_expenses(trip_id))
        users = {u["_id"]: u for u in self.store.find_users(list(rows))}

        balances = []
        for uid, r in rows.items():
            balances.append({
                **user_display(users.get(uid), uid),
                "total_paid": round_money(r["total_paid"]),
                "total_share": round_money(r["total_share"]),
                "balance": round_money(r["balance"]),
            })
        balances.sort(key=lambda b: -b["balance"])
        return balances
