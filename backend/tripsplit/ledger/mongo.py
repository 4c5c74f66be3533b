"""MongoDB-backed ledger store (pymongo)."""
import logging
import re
from typing import Dict, List, Optional

from bson import ObjectId
from pymongo import ReturnDocument

from tripsplit.errors import ErrorCode, ValidationError
from tripsplit.ledger.store import REFERENCE_FIELDS, LedgerStore, RecordKind, Sort

logger = logging.getLogger(__name__)


class _InvalidId(Exception):
    pass


def _oid(value) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if not ObjectId.is_valid(str(value)):
        raise _InvalidId(value)
    return ObjectId(str(value))


def _id_fields(kind: RecordKind):
    return ("_id",) + REFERENCE_FIELDS[kind]


def _encode(kind: RecordKind, doc: Dict) -> Dict:
    """Convert identifier fields from strings to ObjectIds."""
    out = dict(doc)
    for field in _id_fields(kind):
        if field not in out or out[field] is None:
            continue
        value = out[field]
        if isinstance(value, (list, tuple)):
            out[field] = [_oid(v) for v in value]
        else:
            out[field] = _oid(value)
    return out


def _decode(kind: RecordKind, doc: Optional[Dict]) -> Optional[Dict]:
    """Convert identifier fields from ObjectIds back to strings."""
    if doc is None:
        return None
    for field in _id_fields(kind):
        value = doc.get(field)
        if isinstance(value, list):
            doc[field] = [str(v) for v in value]
        elif value is not None:
            doc[field] = str(value)
    return doc


class MongoLedgerStore(LedgerStore):
    """Ledger store over a pymongo ``Database``."""

    def __init__(self, db):
        self.db = db

    def _collection(self, kind: RecordKind):
        return self.db[kind.value]

    def _query(self, kind: RecordKind, filter: Optional[Dict]) -> Optional[Dict]:
        # None means the filter can never match (malformed id)
        try:
            return _encode(kind, filter or {})
        except _InvalidId:
            return None

    def _find(self, kind, filter=None, sort=None, limit=None) -> List[Dict]:
        query = self._query(kind, filter)
        if query is None:
            return []
        cursor = self._collection(kind).find(query)
        if sort:
            cursor = cursor.sort(sort[0], sort[1])
        if limit:
            cursor = cursor.limit(limit)
        return [_decode(kind, d) for d in cursor]

    def _find_one(self, kind, filter) -> Optional[Dict]:
        query = self._query(kind, filter)
        if query is None:
            return None
        return _decode(kind, self._collection(kind).find_one(query))

    def _update_one(self, kind, record_id, update) -> Optional[Dict]:
        try:
            oid = _oid(record_id)
        except _InvalidId:
            return None
        doc = self._collection(kind).find_one_and_update(
            {"_id": oid}, update, return_document=ReturnDocument.AFTER
        )
        return _decode(kind, doc)

    # Expenses

    def find_expenses(self, filter=None, sort: Optional[Sort] = None, limit=None):
        return self._find(RecordKind.EXPENSES, filter, sort, limit)

    # Trips

    def find_trip(self, trip_id):
        return self._find_one(RecordKind.TRIPS, {"_id": trip_id})

    def find_trips(self, filter=None):
        return self._find(RecordKind.TRIPS, filter, sort=("start_date", 1))

    def find_trips_for_user(self, user_id):
        try:
            oid = _oid(user_id)
        except _InvalidId:
            return []
        cursor = self._collection(RecordKind.TRIPS).find(
            {"$or": [{"created_by": oid}, {"trip_members": oid}]}
        ).sort("start_date", 1)
        return [_decode(RecordKind.TRIPS, d) for d in cursor]

    def update_trip(self, trip_id, fields):
        try:
            encoded = _encode(RecordKind.TRIPS, fields)
        except _InvalidId as e:
            raise ValidationError(f"Invalid id: {e}", code=ErrorCode.INVALID_ID)
        return self._update_one(RecordKind.TRIPS, trip_id, {"$set": encoded})

    def update_membership(self, trip_id, add):
        try:
            member = _oid(add)
        except _InvalidId:
            raise ValidationError("Invalid member id", code=ErrorCode.INVALID_ID)
        return self._update_one(
            RecordKind.TRIPS, trip_id, {"$addToSet": {"trip_members": member}}
        )

    def remove_member(self, trip_id, user_id):
        try:
            member = _oid(user_id)
        except _InvalidId:
            raise ValidationError("Invalid member id", code=ErrorCode.INVALID_ID)
        return self._update_one(
            RecordKind.TRIPS, trip_id, {"$pull": {"trip_members": member}}
        )

    def push_itinerary_item(self, trip_id, item):
        return self._update_one(RecordKind.TRIPS, trip_id, {"$push": {"itinerary": item}})

    # Users

    def find_user(self, user_id):
        return self._find_one(RecordKind.USERS, {"_id": user_id})

    def find_users(self, user_ids):
        oids = []
        for uid in user_ids:
            try:
                oids.append(_oid(uid))
            except _InvalidId:
                continue
        if not oids:
            return []
        found = {
            str(d["_id"]): _decode(RecordKind.USERS, d)
            for d in self._collection(RecordKind.USERS).find({"_id": {"$in": oids}})
        }
        return [found[uid] for uid in user_ids if uid in found]

    def find_user_by_login(self, username=None, email=None):
        clauses = []
        if username:
            clauses.append({"username": username.lower()})
        if email:
            clauses.append({"email": email})
        if not clauses:
            return None
        return _decode(RecordKind.USERS, self._collection(RecordKind.USERS).find_one({"$or": clauses}))

    def search_users(self, prefix, limit=10):
        pattern = re.compile("^" + re.escape(prefix), re.IGNORECASE)
        cursor = self._collection(RecordKind.USERS).find({"username": pattern}).limit(limit)
        return [_decode(RecordKind.USERS, d) for d in cursor]

    def update_user(self, user_id, fields):
        return self._update_one(RecordKind.USERS, user_id, {"$set": fields})

    # Invitations and bookings

    def find_invitation(self, filter):
        return self._find_one(RecordKind.INVITATIONS, filter)

    def find_invitations(self, filter=None):
        return self._find(RecordKind.INVITATIONS, filter, sort=("created_at", 1))

    def find_bookings(self, filter=None):
        return self._find(RecordKind.BOOKINGS, filter, sort=("created_at", 1))

    # Generic writes

    def create_record(self, kind, fields):
        try:
            doc = _encode(kind, fields)
        except _InvalidId as e:
            raise ValidationError(f"Invalid id: {e}", code=ErrorCode.INVALID_ID)
        doc.pop("_id", None)
        result = self._collection(kind).insert_one(doc)
        logger.debug("Inserted %s %s", kind.value, result.inserted_id)
        return str(result.inserted_id)

    def delete_record(self, kind, record_id):
        try:
            oid = _oid(record_id)
        except _InvalidId:
            return False
        result = self._collection(kind).delete_one({"_id": oid})
        return result.deleted_count == 1

    def delete_many(self, kind, filter):
        query = self._query(kind, filter)
        if query is None:
            return 0
        return self._collection(kind).delete_many(query).deleted_count
