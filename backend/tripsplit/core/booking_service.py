"""Booking Service - hotel and travel bookings attached to a trip."""
import logging
from typing import Dict

from tripsplit.bookings.models import Booking, parse_booking_details
from tripsplit.errors import ErrorCode, NotFoundError, PermissionDeniedError, ValidationError
from tripsplit.ledger import LedgerStore, RecordKind
from tripsplit.utils.dates import utcnow
from tripsplit.utils.permissions import is_member
from tripsplit.utils.validators import require_id, require_object

logger = logging.getLogger(__name__)


class BookingService:

    def __init__(self, store: LedgerStore):
        self.store = store

    def add_booking(self, user_id: str, data: Dict) -> Dict:
        data = require_object(data)
        trip_id = require_id(data.get("trip_id"), "trip_id")
        trip = self.store.find_trip(trip_id)
        if not trip:
            raise NotFoundError("Trip not found", code=ErrorCode.TRIP_NOT_FOUND)
        if not is_member(user_id, trip):
            raise PermissionDeniedError("Not a member of this trip")

        receipt = data.get("booking_receipt") or ""
        if not isinstance(receipt, str):
            raise ValidationError("booking_receipt must be a reference string")

        booking = Booking(
            id=None,
            trip_id=trip_id,
            details=parse_booking_details(data.get("booking_type"), data.get("booking_details")),
            booking_receipt=receipt,
        )
        doc = booking.to_document()
        doc["created_at"] = utcnow()
        booking.id = self.store.create_record(RecordKind.BOOKINGS, doc)
        logger.info("Booking %s (%s) saved for trip %s", booking.id, booking.booking_type, trip_id)
        return booking.to_response()

    def list_bookings(self, trip_id: str) -> Dict:
        trip = self.store.find_trip(trip_id)
        if not trip:
            raise NotFoundError("Trip not found", code=ErrorCode.TRIP_NOT_FOUND)

        bookings = [Booking.from_document(d) for d in self.store.find_bookings({"trip_id": trip_id})]
        return {
            "trip_id": trip["_id"],
            "trip_name": trip.get("trip_name"),
            "trip_desc": trip.get("trip_desc"),
            "bookings": [b.to_response() for b in bookings],
        }
