"""
Trip Service - trip plan CRUD and membership.

Responsibilities:
- Create trips (creator is always the first member) and fan out invitations
- Update trip details while preserving the creator
- Append itinerary items
- Remove members (creator only)
- Delete trips with their invitations, expenses and bookings
- Member listings and member search
"""
import logging
from typing import Dict, List, Optional

from tripsplit.core.aggregation_service import user_display
from tripsplit.core.invitation_service import InvitationService
from tripsplit.errors import ErrorCode, NotFoundError, PermissionDeniedError, ValidationError
from tripsplit.ledger import LedgerStore, RecordKind
from tripsplit.utils.dates import utcnow
from tripsplit.utils.enums import UserType
from tripsplit.utils.permissions import is_creator, is_member
from tripsplit.utils.validators import (
    require_id, require_object, validate_itinerary_item, validate_trip_payload,
)

logger = logging.getLogger(__name__)

MEMBER_SEARCH_DEFAULT_LIMIT = 5


class TripService:
    """Service for trip plans."""

    def __init__(self, store: LedgerStore):
        self.store = store
        self.invitations = InvitationService(store)

    def get_trip_document(self, trip_id: str) -> Dict:
        trip = self.store.find_trip(trip_id)
        if not trip:
            raise NotFoundError("Trip not found", code=ErrorCode.TRIP_NOT_FOUND)
        return trip

    def _require_member(self, user_id: str, trip_id: str) -> Dict:
        trip = self.get_trip_document(trip_id)
        if not is_member(user_id, trip):
            raise PermissionDeniedError("Not a member of this trip")
        return trip

    def _require_creator(self, user_id: str, trip_id: str, action: str) -> Dict:
        trip = self.get_trip_document(trip_id)
        if not is_creator(user_id, trip):
            raise PermissionDeniedError(f"Only trip organiser can {action} !!")
        return trip

    def create_trip(self, creator_id: str, data: Dict) -> Dict:
        """
        Create a trip and invite the requested members.

        Invitations are a best-effort fan-out: the trip stays created even if
        some invitations fail, and the failures are reported back.

        Args:
            creator_id: Authenticated user
            data: Trip fields plus optional ``trip_members`` (invitee ids)

        Returns:
            {"trip", "invitations_sent", "invitations_failed"}
        """
        data = require_object(data)
        fields = validate_trip_payload(data)
        invitees = data.get("trip_members") or []
        if not isinstance(invitees, list):
            raise ValidationError("trip_members must be an array of user IDs")
        invitees = [require_id(i, "trip_members") for i in invitees]

        fields.setdefault("itinerary", [])
        fields.update({
            "trip_members": [creator_id],
            "created_by": creator_id,
            "created_at": utcnow(),
        })
        trip_id = self.store.create_record(RecordKind.TRIPS, fields)
        logger.info("Trip %s created by %s", trip_id, creator_id)

        sent, failed = self.invitations.invite_many(creator_id, trip_id, invitees)
        return {
            "trip": self.get_trip_document(trip_id),
            "invitations_sent": len(sent),
            "invitations_failed": failed,
        }

    def get_trip(self, trip_id: str) -> Dict:
        """Trip with members expanded to display fields."""
        trip = self.get_trip_document(trip_id)
        users = {u["_id"]: u for u in self.store.find_users(trip.get("trip_members", []))}
        trip["trip_members"] = [user_display(users.get(m), m) for m in trip.get("trip_members", [])]
        return trip

    def update_trip(self, user_id: str, trip_id: str, data: Dict) -> Dict:
        """Replace trip details; creator and membership are preserved."""
        trip = self._require_member(user_id, trip_id)
        fields = validate_trip_payload(data)
        fields["created_by"] = trip["created_by"]
        fields["updated_at"] = utcnow()

        updated = self.store.update_trip(trip_id, fields)
        if not updated:
            raise NotFoundError("Trip not found", code=ErrorCode.TRIP_NOT_FOUND)
        return updated

    def add_itinerary_item(self, user_id: str, trip_id: str, item: Dict) -> Dict:
        self._require_member(user_id, trip_id)
        itinerary_item = validate_itinerary_item(item)
        updated = self.store.push_itinerary_item(trip_id, itinerary_item.to_document())
        if not updated:
            raise NotFoundError("Trip not found", code=ErrorCode.TRIP_NOT_FOUND)
        return updated

    def remove_trip_member(self, user_id: str, trip_id: str, member_id: str) -> Dict:
        trip = self._require_creator(user_id, trip_id, "remove trip members")
        require_id(member_id, "member_id")
        if member_id == trip["created_by"]:
            raise ValidationError("The trip organiser cannot be removed")
        if not is_member(member_id, trip):
            raise NotFoundError("Member is not part of this trip", code=ErrorCode.USER_NOT_FOUND)

        updated = self.store.remove_member(trip_id, member_id)
        if not updated:
            raise NotFoundError("Trip not found", code=ErrorCode.TRIP_NOT_FOUND)
        logger.info("Member %s removed from trip %s", member_id, trip_id)
        return updated

    def delete_trip(self, user_id: str, trip_id: str) -> Dict:
        """
        Delete a trip after its dependent records.

        Each step completes (and any failure propagates) before the next one,
        so the trip is only reported deleted once its dependents are gone.
        """
        trip = self._require_creator(user_id, trip_id, "delete the trip")

        removed = {
            "invitations": self.store.delete_many(RecordKind.INVITATIONS, {"trip_id": trip_id}),
            "expenses": self.store.delete_many(RecordKind.EXPENSES, {"trip_id": trip_id}),
            "bookings": self.store.delete_many(RecordKind.BOOKINGS, {"trip_id": trip_id}),
        }
        if not self.store.delete_record(RecordKind.TRIPS, trip_id):
            raise NotFoundError("Trip not found", code=ErrorCode.TRIP_NOT_FOUND)

        logger.info("Trip %s deleted by %s (%s)", trip_id, user_id, removed)
        return {"trip": trip, "removed": removed}

    def members_and_invited(self, trip_id: str) -> List[Dict]:
        """Current members followed by users with a pending invitation."""
        trip = self.get_trip_document(trip_id)
        members = self.store.find_users(trip.get("trip_members", []))
        invitee_ids = [i["invitee"] for i in self.store.find_invitations({"trip_id": trip_id})]
        invited = self.store.find_users(invitee_ids)

        return (
            [{**user_display(u, u["_id"]), "user_type": UserType.MEMBER.value} for u in members]
            + [{**user_display(u, u["_id"]), "user_type": UserType.INVITED.value} for u in invited]
        )

    def search_members(self, trip_id: str, prefix: Optional[str] = None) -> List[Dict]:
        """Members whose full name starts with prefix; the first few when no prefix."""
        trip = self.get_trip_document(trip_id)
        members = [
            {"trip_id": trip_id, **user_display(u, u["_id"])}
            for u in self.store.find_users(trip.get("trip_members", []))
        ]
        if not prefix:
            return members[:MEMBER_SEARCH_DEFAULT_LIMIT]
        prefix = prefix.lower()
        return [m for m in members if (m["full_name"] or "").lower().startswith(prefix)]

    def trips_created_by(self, user_id: str) -> List[Dict]:
        return self.store.find_trips({"created_by": user_id})

    def trips_joined_by(self, user_id: str) -> List[Dict]:
        return self.store.find_trips({"trip_members": user_id})
