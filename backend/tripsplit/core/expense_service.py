"""
Expense Service - expense ingestion and listing.

Ingestion is where the split invariants are enforced: positive amount,
non-empty split set, payment date not in the future, and payer and split
members belonging to the trip. Later computations rely on these.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional

from tripsplit.errors import ErrorCode, NotFoundError, PermissionDeniedError, ValidationError
from tripsplit.ledger import LedgerStore, RecordKind
from tripsplit.utils.dates import parse_utc_offset, utcnow
from tripsplit.utils.permissions import is_member
from tripsplit.utils.validators import validate_expense_payload

logger = logging.getLogger(__name__)


class ExpenseService:
    """Service for recording and listing trip expenses."""

    def __init__(self, store: LedgerStore, report_offset: str = "+05:30"):
        self.store = store
        self.report_tz = parse_utc_offset(report_offset)

    def add_expense(self, user_id: str, data: Dict, now: Optional[datetime] = None) -> Dict:
        """
        Validate and store an expense.

        Args:
            user_id: Authenticated user; must be a trip member and is the
                payer unless ``paid_by`` names another member
            data: Request body
            now: Current time (UTC), injectable for tests

        Returns:
            Stored expense document
        """
        expense = validate_expense_payload(data, payer_id=user_id, now=now, tz=self.report_tz)

        trip = self.store.find_trip(expense.trip_id)
        if not trip:
            raise NotFoundError("Trip not found", code=ErrorCode.TRIP_NOT_FOUND)
        if not is_member(user_id, trip):
            raise PermissionDeniedError("Not a member of this trip")
        if not is_member(expense.paid_by, trip):
            raise ValidationError("paid_by must be a trip member")
        outsiders = [m for m in expense.split_between if not is_member(m, trip)]
        if outsiders:
            raise ValidationError(f"Split between contains non-members: {outsiders}")

        doc = expense.to_document()
        doc["created_at"] = utcnow()
        expense_id = self.store.create_record(RecordKind.EXPENSES, doc)
        logger.info("Expense %s of %s added to trip %s", expense_id, doc["amount"], expense.trip_id)

        doc["_id"] = expense_id
        return doc

    def list_trip_expenses(self, user_id: str, trip_id: str) -> List[Dict]:
        """All expenses of a trip, most recent payment first."""
        trip = self.store.find_trip(trip_id)
        if not trip:
            raise NotFoundError("Trip not found", code=ErrorCode.TRIP_NOT_FOUND)
        if not is_member(user_id, trip):
            raise PermissionDeniedError("Not a member of this trip")
        return self.store.find_expenses({"trip_id": trip_id}, sort=("payment_date", -1))
