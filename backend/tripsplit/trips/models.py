"""Trip plan and invitation models."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional


@dataclass
class ItineraryItem:
    date: datetime
    place_to_visit: str
    checklist: List[str] = field(default_factory=list)
    notes: str = ""

    @classmethod
    def from_document(cls, doc: Dict) -> "ItineraryItem":
        return cls(
            date=doc.get("date"),
            place_to_visit=doc.get("place_to_visit"),
            checklist=list(doc.get("checklist") or []),
            notes=doc.get("notes", ""),
        )

    def to_document(self) -> Dict:
        return {
            "date": self.date,
            "place_to_visit": self.place_to_visit,
            "checklist": list(self.checklist),
            "notes": self.notes,
        }


@dataclass
class TripPlan:
    id: Optional[str]
    trip_name: str
    trip_desc: str
    start_date: datetime
    end_date: datetime
    created_by: str
    trip_members: List[str] = field(default_factory=list)
    itinerary: List[ItineraryItem] = field(default_factory=list)
    planned_budget: Optional[float] = None
    notes: str = ""
    cover_image: Optional[str] = None

    @classmethod
    def from_document(cls, doc: Dict) -> "TripPlan":
        return cls(
            id=doc.get("_id"),
            trip_name=doc.get("trip_name"),
            trip_desc=doc.get("trip_desc"),
            start_date=doc.get("start_date"),
            end_date=doc.get("end_date"),
            created_by=doc.get("created_by"),
            trip_members=list(doc.get("trip_members") or []),
            itinerary=[ItineraryItem.from_document(i) for i in doc.get("itinerary") or []],
            planned_budget=doc.get("planned_budget"),
            notes=doc.get("notes", ""),
            cover_image=doc.get("cover_image"),
        )


@dataclass
class Invitation:
    id: Optional[str]
    trip_id: str
    inviter: str
    invitee: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Dict) -> "Invitation":
        return cls(
            id=doc.get("_id"),
            trip_id=doc.get("trip_id"),
            inviter=doc.get("inviter"),
            invitee=doc.get("invitee"),
            created_at=doc.get("created_at"),
        )

    def to_response(self, status: str) -> Dict:
        return {
            "_id": self.id,
            "trip_id": self.trip_id,
            "inviter": self.inviter,
            "invitee": self.invitee,
            "status": status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
