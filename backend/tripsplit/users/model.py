from dataclasses import dataclass
from typing import Dict, Optional


@dataclass
class User:
    id: str
    username: str
    email: str
    full_name: str = ""
    avatar: Optional[str] = None

    @classmethod
    def from_document(cls, doc: Dict) -> "User":
        return cls(
            id=str(doc["_id"]),
            username=doc.get("username", ""),
            email=doc.get("email", ""),
            full_name=doc.get("full_name", ""),
            avatar=doc.get("avatar"),
        )

    def to_public(self) -> Dict:
        """Profile without credentials."""
        return {
            "_id": self.id,
            "username": self.username,
            "email": self.email,
            "full_name": self.full_name,
            "avatar": self.avatar,
        }
