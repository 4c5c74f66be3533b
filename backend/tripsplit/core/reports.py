"""Read-only report entry points used by the HTTP layer.

Each function takes the store and already-validated identifiers and returns
plain JSON-ready values, or raises a TripSplitError.
"""
from datetime import datetime
from typing import Dict, List, Optional

from tripsplit.core.aggregation_service import ExpenseAggregator
from tripsplit.core.settlement_service import SettlementEngine
from tripsplit.core.summary_service import TripSummaryBuilder
from tripsplit.errors import ErrorCode, NotFoundError
from tripsplit.ledger import LedgerStore


def _require_trip(store: LedgerStore, trip_id: str) -> Dict:
    trip = store.find_trip(trip_id)
    if not trip:
        raise NotFoundError("Trip not found", code=ErrorCode.TRIP_NOT_FOUND)
    return trip


def _require_user(store: LedgerStore, user_id: str) -> Dict:
    user = store.find_user(user_id)
    if not user:
        raise NotFoundError("User not found", code=ErrorCode.USER_NOT_FOUND)
    return user


def compute_trip_expense_summary(store: LedgerStore, trip_id: str, recent_limit: int = 5) -> Dict:
    return TripSummaryBuilder(store).trip_expense_summary(trip_id, recent_limit=recent_limit)


def compute_category_report(store: LedgerStore, user_id: str) -> List[Dict]:
    _require_user(store, user_id)
    return ExpenseAggregator(store).by_category_by_year(user_id)


def compute_monthly_report(store: LedgerStore, user_id: str, report_offset: str = "+05:30") -> List[Dict]:
    _require_user(store, user_id)
    return ExpenseAggregator(store, report_offset=report_offset).by_month_by_year(user_id)


def compute_contributions(store: LedgerStore, trip_id: str) -> List[Dict]:
    _require_trip(store, trip_id)
    return ExpenseAggregator(store).contributions_by_user(trip_id)


def compute_owed_to_user(store: LedgerStore, trip_id: str, user_id: str) -> List[Dict]:
    _require_trip(store, trip_id)
    return SettlementEngine(store).amount_owed_to_user(trip_id, user_id)


def compute_owed_by_user(store: LedgerStore, trip_id: str, user_id: str) -> List[Dict]:
    _require_trip(store, trip_id)
    return SettlementEngine(store).amount_owed_by_user(trip_id, user_id)


def compute_balances(store: LedgerStore, trip_id: str) -> List[Dict]:
    _require_trip(store, trip_id)
    return SettlementEngine(store).trip_balances(trip_id)


def compute_trip_summary(store: LedgerStore, trip_id: str) -> Dict:
    return TripSummaryBuilder(store).trip_summary(trip_id)


def compute_expense_summaries_for_user(store: LedgerStore, user_id: str) -> List[Dict]:
    return TripSummaryBuilder(store).expense_summaries_for_user(user_id)


def compute_dashboard(store: LedgerStore, user_id: str, now: Optional[datetime] = None) -> Dict:
    return TripSummaryBuilder(store).dashboard_summary(user_id, now=now)
