"""User Service - accounts, profile lookups and user search."""
import logging
from typing import Dict, List, Optional

from tripsplit.errors import ConflictError, ErrorCode, NotFoundError
from tripsplit.ledger import LedgerStore, RecordKind
from tripsplit.users.model import User
from tripsplit.utils.dates import utcnow

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, store: LedgerStore):
        self.store = store

    def register(self, username: str, email: str, full_name: str,
                 password_hash: str, avatar: Optional[str] = None) -> User:
        """
        Create an account. Usernames are stored lowercase.

        Raises:
            ConflictError: username or email already taken
        """
        username = username.strip().lower()
        email = email.strip().lower()
        if self.store.find_user_by_login(username=username, email=email):
            raise ConflictError("User with email or username already exists")

        doc = {
            "username": username,
            "email": email,
            "full_name": full_name.strip(),
            "avatar": avatar or None,
            "password_hash": password_hash,
            "refresh_token_jti": None,
            "created_at": utcnow(),
        }
        doc["_id"] = self.store.create_record(RecordKind.USERS, doc)
        logger.info("Registered user %s", doc["_id"])
        return User.from_document(doc)

    def find_by_login(self, login: str) -> Optional[Dict]:
        """Raw user document (with credentials) by username or email."""
        login = (login or "").strip().lower()
        if not login:
            return None
        return self.store.find_user_by_login(username=login, email=login)

    def get_user(self, user_id: str) -> User:
        doc = self.store.find_user(user_id)
        if not doc:
            raise NotFoundError("User not found", code=ErrorCode.USER_NOT_FOUND)
        return User.from_document(doc)

    def set_refresh_token(self, user_id: str, jti: Optional[str]) -> None:
        self.store.update_user(user_id, {"refresh_token_jti": jti})

    def refresh_token_matches(self, user_id: str, jti: str) -> bool:
        doc = self.store.find_user(user_id)
        return bool(doc) and doc.get("refresh_token_jti") == jti

    def search(self, prefix: str, exclude: Optional[str] = None, limit: int = 10) -> List[Dict]:
        """Public profiles whose username starts with prefix."""
        prefix = (prefix or "").strip()
        if not prefix:
            return []
        users = self.store.search_users(prefix, limit=limit + 1)
        return [
            User.from_document(u).to_public() for u in users if u["_id"] != exclude
        ][:limit]
