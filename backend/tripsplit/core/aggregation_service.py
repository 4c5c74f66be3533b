"""
Expense Aggregator - reporting views over a collection of expenses.

Responsibilities:
- Total spend per trip
- Per-user spend grouped by (year, category) and by (year, month)
- Per-payer contributions within a trip

The store only filters; every grouping and sum below runs in process. The
static ``group_*`` helpers take plain expense lists so they can be used
without a store.
"""
import calendar
from collections import OrderedDict
from datetime import timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from tripsplit.expenses.models import Expense
from tripsplit.ledger import LedgerStore
from tripsplit.utils.dates import isoformat, parse_utc_offset, to_offset
from tripsplit.utils.money import ZERO, round_money

UNKNOWN_USER = "Unknown"


def user_display(user: Optional[Dict], user_id: str) -> Dict:
    """Display fields for a counterparty; tolerate users deleted since."""
    if not user:
        return {"user_id": user_id, "full_name": UNKNOWN_USER, "avatar": None}
    return {
        "user_id": user_id,
        "full_name": user.get("full_name", UNKNOWN_USER),
        "avatar": user.get("avatar"),
    }


class ExpenseAggregator:
    """Folds expenses for a trip or user into totals."""

    def __init__(self, store: LedgerStore, report_offset: str = "+05:30"):
        self.store = store
        self.report_tz: timezone = parse_utc_offset(report_offset)

    def _expenses(self, filter: Dict) -> List[Expense]:
        return [Expense.from_document(d) for d in self.store.find_expenses(filter)]

    # ------------------ PURE FOLDS ------------------

    @staticmethod
    def sum_amounts(expenses: Iterable[Expense]) -> Decimal:
        return sum((e.amount for e in expenses), ZERO)

    @staticmethod
    def group_by_category(expenses: Iterable[Expense]) -> List[Dict]:
        """CategoryTotal rows sorted by (year, category); year taken in UTC."""
        totals: Dict[tuple, Decimal] = {}
        for e in expenses:
            key = (e.payment_date.year, e.category)
            totals[key] = totals.get(key, ZERO) + e.amount

        return [
            {"year": year, "category": category, "total_amount": round_money(total)}
            for (year, category), total in sorted(totals.items())
        ]

    @staticmethod
    def group_by_month(expenses: Iterable[Expense], tz: timezone) -> List[Dict]:
        """MonthTotal rows in calendar order; year and month taken in ``tz``."""
        totals: Dict[tuple, Decimal] = {}
        for e in expenses:
            local = to_offset(e.payment_date, tz)
            key = (local.year, local.month)
            totals[key] = totals.get(key, ZERO) + e.amount

        # Month number is the sort key, the name is only for display
        return [
            {"year": year, "month": calendar.month_name[month], "total_amount": round_money(total)}
            for (year, month), total in sorted(totals.items())
        ]

    @staticmethod
    def group_by_payer(expenses: Iterable[Expense]) -> "OrderedDict[str, Decimal]":
        """Total paid per payer, largest first; expenses with no payer are skipped."""
        totals: Dict[str, Decimal] = {}
        for e in expenses:
            if not e.paid_by:
                continue
            totals[e.paid_by] = totals.get(e.paid_by, ZERO) + e.amount
        ordered = sorted(totals.items(), key=lambda kv: (-kv[1], kv[0]))
        return OrderedDict(ordered)

    # ------------------ STORE-BACKED VIEWS ------------------

    def total_for_trip(self, trip_id: str) -> Decimal:
        """Sum of all expense amounts of the trip; 0 when there are none."""
        return self.sum_amounts(self._expenses({"trip_id": trip_id}))

    def by_category_by_year(self, user_id: str) -> List[Dict]:
        """Spend of expenses paid by the user, grouped by (year, category)."""
        return self.group_by_category(self._expenses({"paid_by": user_id}))

    def by_month_by_year(self, user_id: str) -> List[Dict]:
        """Spend of expenses paid by the user, grouped by (year, month)."""
        return self.group_by_month(self._expenses({"paid_by": user_id}), self.report_tz)

    def contributions_by_user(self, trip_id: str) -> List[Dict]:
        """ContributionEntry rows for the trip, enriched with payer display fields."""
        totals = self.group_by_payer(self._expenses({"trip_id": trip_id}))
        users = {u["_id"]: u for u in self.store.find_users(list(totals))}

        return [
            {**user_display(users.get(uid), uid), "total_paid": round_money(total)}
            for uid, total in totals.items()
        ]

    def recent_expenses(self, trip_id: str, limit: int = 5) -> List[Dict]:
        """Latest expenses by payment date with payer and split member details."""
        docs = self.store.find_expenses({"trip_id": trip_id}, sort=("payment_date", -1), limit=limit)
        expenses = [Expense.from_document(d) for d in docs]

        user_ids = set()
        for e in expenses:
            user_ids.update(e.split_between)
            if e.paid_by:
                user_ids.add(e.paid_by)
        users = {u["_id"]: u for u in self.store.find_users(sorted(user_ids))}

        result = []
        for e in expenses:
            result.append({
                "_id": e.id,
                "category": e.category,
                "description": e.description,
                "paid_to": e.paid_to,
                "amount": round_money(e.amount),
                "payment_date": isoformat(e.payment_date),
                "paid_by": user_display(users.get(e.paid_by), e.paid_by) if e.paid_by else None,
                "split_between": [user_display(users.get(m), m) for m in e.split_between],
            })
        return result
