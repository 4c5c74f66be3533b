"""
Invitation Service - trip invitations.

Lifecycle: an invitation is created pending and deleted on accept or decline.
Accepting adds the invitee to the trip's member set (atomic add-to-set) before
the record is deleted; declining only deletes it. Acting on an invitation that
no longer exists is a NotFoundError, so a repeated accept never adds twice.
"""
import logging
from typing import Dict, List, Tuple

from tripsplit.errors import (
    ConflictError, ErrorCode, NotFoundError, PermissionDeniedError, TripSplitError,
)
from tripsplit.ledger import LedgerStore, RecordKind
from tripsplit.trips.models import Invitation
from tripsplit.utils.dates import utcnow
from tripsplit.utils.enums import InvitationStatus
from tripsplit.utils.permissions import is_member
from tripsplit.utils.validators import require_id

logger = logging.getLogger(__name__)


class InvitationService:
    """Service for the invite / accept / decline flow."""

    def __init__(self, store: LedgerStore):
        self.store = store

    def _require_invitation(self, invitation_id: str) -> Dict:
        invitation = self.store.find_invitation({"_id": invitation_id})
        if not invitation:
            raise NotFoundError("Invitation is not valid !!", code=ErrorCode.INVITATION_NOT_FOUND)
        return invitation

    def invite(self, inviter_id: str, trip_id: str, invitee_id: str) -> Dict:
        """
        Create a pending invitation.

        Args:
            inviter_id: Authenticated user sending the invite (must be a member)
            trip_id: Trip to invite into
            invitee_id: User being invited

        Returns:
            Created invitation record
        """
        require_id(invitee_id, "invitee_id")
        trip = self.store.find_trip(trip_id)
        if not trip:
            raise NotFoundError("Trip not found", code=ErrorCode.TRIP_NOT_FOUND)
        if not is_member(inviter_id, trip):
            raise PermissionDeniedError("Only trip members can invite others")
        if not self.store.find_user(invitee_id):
            raise NotFoundError("Invitee not found", code=ErrorCode.USER_NOT_FOUND)
        if is_member(invitee_id, trip):
            raise ConflictError("User is already a trip member", code=ErrorCode.ALREADY_EXISTS)
        if self.store.find_invitation({"trip_id": trip_id, "invitee": invitee_id}):
            raise ConflictError("User already Invited !!", code=ErrorCode.ALREADY_INVITED)

        record = {
            "trip_id": trip_id,
            "inviter": inviter_id,
            "invitee": invitee_id,
            "created_at": utcnow(),
        }
        record["_id"] = self.store.create_record(RecordKind.INVITATIONS, record)
        logger.info("User %s invited %s to trip %s", inviter_id, invitee_id, trip_id)
        return self._to_response(record)

    def invite_many(self, inviter_id: str, trip_id: str, invitee_ids: List[str]) -> Tuple[List[Dict], List[Dict]]:
        """
        Best-effort fan-out: every invitee is tried, failures are collected
        and nothing already sent is rolled back.

        Returns:
            Tuple of (sent invitations, failures as {invitee, error})
        """
        sent, failed = [], []
        seen = set()
        for invitee in invitee_ids or []:
            if not isinstance(invitee, str):
                failed.append({"invitee": invitee, "error": "invitee_id is not a valid id"})
                continue
            if invitee == inviter_id or invitee in seen:
                continue
            seen.add(invitee)
            try:
                sent.append(self.invite(inviter_id, trip_id, invitee))
            except TripSplitError as e:
                failed.append({"invitee": invitee, "error": e.message})

        if failed:
            logger.warning(
                "Trip %s: %d of %d invitations could not be sent",
                trip_id, len(failed), len(sent) + len(failed)
            )
        return sent, failed

    def accept(self, user_id: str, invitation_id: str) -> Dict:
        """Pending -> Accepted: join the trip, then consume the invitation."""
        invitation = self._require_invitation(invitation_id)
        if invitation["invitee"] != user_id:
            raise PermissionDeniedError("This invitation belongs to another user")

        trip = self.store.update_membership(invitation["trip_id"], add=user_id)
        if not trip:
            raise NotFoundError("Trip not found", code=ErrorCode.TRIP_NOT_FOUND)

        self.store.delete_record(RecordKind.INVITATIONS, invitation["_id"])
        logger.info("User %s accepted invitation %s", user_id, invitation_id)
        return {"status": InvitationStatus.ACCEPTED.value, "trip": trip}

    def decline(self, user_id: str, invitation_id: str) -> Dict:
        """Pending -> Declined: consume the invitation, membership untouched."""
        invitation = self._require_invitation(invitation_id)
        if invitation["invitee"] != user_id:
            raise PermissionDeniedError("This invitation belongs to another user")

        self.store.delete_record(RecordKind.INVITATIONS, invitation["_id"])
        logger.info("User %s declined invitation %s", user_id, invitation_id)
        return {
            "status": InvitationStatus.DECLINED.value,
            "invitation": self._to_response(invitation, InvitationStatus.DECLINED),
        }

    def list_for_user(self, user_id: str) -> List[Dict]:
        """Pending invitations addressed to the user, with inviter and trip details."""
        result = []
        for invitation in self.store.find_invitations({"invitee": user_id}):
            inviter = self.store.find_user(invitation["inviter"])
            trip = self.store.find_trip(invitation["trip_id"])
            if not inviter or not trip:
                # Dangling references are not shown
                continue
            result.append({
                "invitation_id": invitation["_id"],
                "inviter": {
                    "full_name": inviter.get("full_name"),
                    "avatar": inviter.get("avatar"),
                    "username": inviter.get("username"),
                },
                "trip_details": {
                    "trip_id": trip["_id"],
                    "trip_name": trip.get("trip_name"),
                    "trip_desc": trip.get("trip_desc"),
                },
            })
        return result

    @staticmethod
    def _to_response(invitation: Dict, status: InvitationStatus = InvitationStatus.PENDING) -> Dict:
        return Invitation.from_document(invitation).to_response(status.value)
