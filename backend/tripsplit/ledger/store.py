"""
Ledger Store - the data-access seam between the services and the database.

Services only fetch, insert, delete and apply atomic set/array updates through
this interface; all grouping and summation happens in the services, so any
implementation with the same filter semantics can back them.

Filter semantics (shared by every implementation):
- ``{"field": value}`` matches when the stored field equals value, or when
  the stored field is a list containing value.
- Identifiers are strings at this interface. A malformed identifier matches
  nothing on reads and raises ValidationError on writes.
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Optional, Tuple


class RecordKind(str, Enum):
    USERS = "users"
    TRIPS = "trips"
    EXPENSES = "expenses"
    INVITATIONS = "invitations"
    BOOKINGS = "bookings"


# Fields holding user/trip identifiers, per record kind
REFERENCE_FIELDS: Dict[RecordKind, Tuple[str, ...]] = {
    RecordKind.USERS: (),
    RecordKind.TRIPS: ("created_by", "trip_members"),
    RecordKind.EXPENSES: ("trip_id", "paid_by", "split_between"),
    RecordKind.INVITATIONS: ("trip_id", "inviter", "invitee"),
    RecordKind.BOOKINGS: ("trip_id",),
}

Sort = Tuple[str, int]


class LedgerStore(ABC):
    """Persistence primitives consumed by the core services."""

    # Expenses

    @abstractmethod
    def find_expenses(
        self,
        filter: Optional[Dict] = None,
        sort: Optional[Sort] = None,
        limit: Optional[int] = None
    ) -> List[Dict]: ...

    # Trips

    @abstractmethod
    def find_trip(self, trip_id: str) -> Optional[Dict]: ...

    @abstractmethod
    def find_trips(self, filter: Optional[Dict] = None) -> List[Dict]: ...

    @abstractmethod
    def find_trips_for_user(self, user_id: str) -> List[Dict]:
        """Trips the user created or is a member of."""

    @abstractmethod
    def update_trip(self, trip_id: str, fields: Dict) -> Optional[Dict]: ...

    @abstractmethod
    def update_membership(self, trip_id: str, add: str) -> Optional[Dict]:
        """Atomically add a member to the trip's member set."""

    @abstractmethod
    def remove_member(self, trip_id: str, user_id: str) -> Optional[Dict]: ...

    @abstractmethod
    def push_itinerary_item(self, trip_id: str, item: Dict) -> Optional[Dict]: ...

    # Users

    @abstractmethod
    def find_user(self, user_id: str) -> Optional[Dict]: ...

    @abstractmethod
    def find_users(self, user_ids: List[str]) -> List[Dict]:
        """Users for the given ids, in the order given; unknown ids are skipped."""

    @abstractmethod
    def find_user_by_login(
        self,
        username: Optional[str] = None,
        email: Optional[str] = None
    ) -> Optional[Dict]: ...

    @abstractmethod
    def search_users(self, prefix: str, limit: int = 10) -> List[Dict]:
        """Users whose username starts with prefix, case-insensitively."""

    @abstractmethod
    def update_user(self, user_id: str, fields: Dict) -> Optional[Dict]: ...

    # Invitations and bookings

    @abstractmethod
    def find_invitation(self, filter: Dict) -> Optional[Dict]: ...

    @abstractmethod
    def find_invitations(self, filter: Optional[Dict] = None) -> List[Dict]: ...

    @abstractmethod
    def find_bookings(self, filter: Optional[Dict] = None) -> List[Dict]: ...

    # Generic writes

    @abstractmethod
    def create_record(self, kind: RecordKind, fields: Dict) -> str: ...

    @abstractmethod
    def delete_record(self, kind: RecordKind, record_id: str) -> bool: ...

    @abstractmethod
    def delete_many(self, kind: RecordKind, filter: Dict) -> int: ...
