"""In-process ledger store with the same filter semantics as the Mongo store."""
import copy
import threading
from typing import Dict, List, Optional

from bson import ObjectId

from tripsplit.errors import ErrorCode, ValidationError
from tripsplit.ledger.store import REFERENCE_FIELDS, LedgerStore, RecordKind, Sort


def _matches(doc: Dict, filter: Optional[Dict]) -> bool:
    for key, expected in (filter or {}).items():
        actual = doc.get(key)
        if isinstance(actual, list) and not isinstance(expected, list):
            if expected not in actual:
                return False
        elif actual != expected:
            return False
    return True


def _sorted(docs: List[Dict], sort: Optional[Sort]) -> List[Dict]:
    if not sort:
        return docs
    field, direction = sort
    present = [d for d in docs if d.get(field) is not None]
    missing = [d for d in docs if d.get(field) is None]
    present.sort(key=lambda d: d[field], reverse=direction < 0)
    # Mongo orders missing values first ascending, last descending
    return missing + present if direction >= 0 else present + missing


class MemoryLedgerStore(LedgerStore):
    """Dictionary-backed store, one ordered dict per record kind."""

    def __init__(self):
        self._records: Dict[RecordKind, Dict[str, Dict]] = {kind: {} for kind in RecordKind}
        self._lock = threading.Lock()

    def _check_ids(self, kind: RecordKind, fields: Dict) -> None:
        for field in REFERENCE_FIELDS[kind]:
            value = fields.get(field)
            values = value if isinstance(value, list) else [value]
            for v in values:
                if v is not None and not ObjectId.is_valid(str(v)):
                    raise ValidationError(f"Invalid id: {v}", code=ErrorCode.INVALID_ID)

    def _all(self, kind, filter=None, sort=None, limit=None) -> List[Dict]:
        docs = [copy.deepcopy(d) for d in self._records[kind].values() if _matches(d, filter)]
        docs = _sorted(docs, sort)
        if limit:
            docs = docs[:limit]
        return docs

    def _get(self, kind, record_id) -> Optional[Dict]:
        doc = self._records[kind].get(str(record_id))
        return copy.deepcopy(doc) if doc is not None else None

    def _mutate(self, kind, record_id, fn) -> Optional[Dict]:
        with self._lock:
            doc = self._records[kind].get(str(record_id))
            if doc is None:
                return None
            fn(doc)
            return copy.deepcopy(doc)

    # Expenses

    def find_expenses(self, filter=None, sort=None, limit=None):
        return self._all(RecordKind.EXPENSES, filter, sort, limit)

    # Trips

    def find_trip(self, trip_id):
        return self._get(RecordKind.TRIPS, trip_id)

    def find_trips(self, filter=None):
        return self._all(RecordKind.TRIPS, filter, sort=("start_date", 1))

    def find_trips_for_user(self, user_id):
        trips = [
            copy.deepcopy(t) for t in self._records[RecordKind.TRIPS].values()
            if t.get("created_by") == user_id or user_id in (t.get("trip_members") or [])
        ]
        return _sorted(trips, ("start_date", 1))

    def update_trip(self, trip_id, fields):
        self._check_ids(RecordKind.TRIPS, fields)
        return self._mutate(RecordKind.TRIPS, trip_id, lambda d: d.update(copy.deepcopy(fields)))

    def update_membership(self, trip_id, add):
        self._check_ids(RecordKind.TRIPS, {"trip_members": [add]})

        def add_to_set(doc):
            members = doc.setdefault("trip_members", [])
            if add not in members:
                members.append(add)

        return self._mutate(RecordKind.TRIPS, trip_id, add_to_set)

    def remove_member(self, trip_id, user_id):
        self._check_ids(RecordKind.TRIPS, {"trip_members": [user_id]})

        def pull(doc):
            doc["trip_members"] = [m for m in doc.get("trip_members", []) if m != user_id]

        return self._mutate(RecordKind.TRIPS, trip_id, pull)

    def push_itinerary_item(self, trip_id, item):
        return self._mutate(
            RecordKind.TRIPS, trip_id,
            lambda d: d.setdefault("itinerary", []).append(copy.deepcopy(item))
        )

    # Users

    def find_user(self, user_id):
        return self._get(RecordKind.USERS, user_id)

    def find_users(self, user_ids):
        users = [self._get(RecordKind.USERS, uid) for uid in user_ids]
        return [u for u in users if u is not None]

    def find_user_by_login(self, username=None, email=None):
        for doc in self._records[RecordKind.USERS].values():
            if username and doc.get("username") == username.lower():
                return copy.deepcopy(doc)
            if email and doc.get("email") == email:
                return copy.deepcopy(doc)
        return None

    def search_users(self, prefix, limit=10):
        prefix = prefix.lower()
        found = [
            copy.deepcopy(d) for d in self._records[RecordKind.USERS].values()
            if (d.get("username") or "").lower().startswith(prefix)
        ]
        return found[:limit]

    def update_user(self, user_id, fields):
        return self._mutate(RecordKind.USERS, user_id, lambda d: d.update(copy.deepcopy(fields)))

    # Invitations and bookings

    def find_invitation(self, filter):
        found = self._all(RecordKind.INVITATIONS, filter)
        return found[0] if found else None

    def find_invitations(self, filter=None):
        return self._all(RecordKind.INVITATIONS, filter, sort=("created_at", 1))

    def find_bookings(self, filter=None):
        return self._all(RecordKind.BOOKINGS, filter, sort=("created_at", 1))

    # Generic writes

    def create_record(self, kind, fields):
        self._check_ids(kind, fields)
        record_id = str(ObjectId())
        doc = copy.deepcopy(fields)
        doc.pop("_id", None)
        doc["_id"] = record_id
        with self._lock:
            self._records[kind][record_id] = doc
        return record_id

    def delete_record(self, kind, record_id):
        with self._lock:
            return self._records[kind].pop(str(record_id), None) is not None

    def delete_many(self, kind, filter):
        with self._lock:
            doomed = [rid for rid, d in self._records[kind].items() if _matches(d, filter)]
            for rid in doomed:
                del self._records[kind][rid]
        return len(doomed)
