"""
Trip Summary Builder - dashboard views combining trip metadata with
expense aggregates.

Day counts follow calendar-day difference: a trip starting and ending on the
same day has 0 days and -1 nights. That boundary is reported as is.
"""
from datetime import datetime
from typing import Dict, List, Optional

from tripsplit.core.aggregation_service import ExpenseAggregator, user_display
from tripsplit.errors import ErrorCode, NotFoundError
from tripsplit.ledger import LedgerStore
from tripsplit.trips.models import TripPlan
from tripsplit.utils.dates import day_diff, isoformat, utcnow
from tripsplit.utils.money import round_money


class TripSummaryBuilder:
    """Builds per-trip and per-user summaries."""

    def __init__(self, store: LedgerStore, aggregator: Optional[ExpenseAggregator] = None):
        self.store = store
        self.aggregator = aggregator or ExpenseAggregator(store)

    @staticmethod
    def total_days(trip: TripPlan) -> int:
        return day_diff(trip.start_date, trip.end_date)

    @classmethod
    def total_nights(cls, trip: TripPlan) -> int:
        return cls.total_days(trip) - 1

    @staticmethod
    def places_to_visit(trip: TripPlan) -> List[str]:
        return [item.place_to_visit for item in trip.itinerary]

    @staticmethod
    def total_members(trip: TripPlan) -> int:
        return len(set(trip.trip_members))

    def total_expenses(self, trip: TripPlan) -> float:
        return round_money(self.aggregator.total_for_trip(trip.id))

    def trip_card(self, trip: TripPlan) -> Dict:
        """Fields shared by every trip entry on the dashboard."""
        return {
            "trip_id": trip.id,
            "trip_name": trip.trip_name,
            "trip_desc": trip.trip_desc,
            "start_date": isoformat(trip.start_date),
            "end_date": isoformat(trip.end_date),
            "total_days": self.total_days(trip),
            "total_nights": self.total_nights(trip),
            "total_members": self.total_members(trip),
            "planned_budget": trip.planned_budget,
            "places_to_visit": self.places_to_visit(trip),
        }

    def _load(self, trip_id: str) -> TripPlan:
        doc = self.store.find_trip(trip_id)
        if not doc:
            raise NotFoundError("Trip not found", code=ErrorCode.TRIP_NOT_FOUND)
        return TripPlan.from_document(doc)

    def trip_summary(self, trip_id: str) -> Dict:
        return self.trip_summary_from(self._load(trip_id))

    def trip_expense_summary(self, trip_id: str, recent_limit: int = 5) -> Dict:
        trip = self._load(trip_id)
        return {
            "total_expenses": self.total_expenses(trip),
            "planned_budget": trip.planned_budget or 0,
            "recent_expenses": self.aggregator.recent_expenses(trip.id, limit=recent_limit),
        }

    def expense_summaries_for_user(self, user_id: str) -> List[Dict]:
        """Summary of every trip the user is a member of, with member details."""
        summaries = []
        for doc in self.store.find_trips({"trip_members": user_id}):
            trip = TripPlan.from_document(doc)
            summary = self.trip_summary_from(trip)
            users = {u["_id"]: u for u in self.store.find_users(trip.trip_members)}
            summary["trip_members"] = [user_display(users.get(m), m) for m in trip.trip_members]
            summaries.append(summary)
        return summaries

    def trip_summary_from(self, trip: TripPlan) -> Dict:
        card = self.trip_card(trip)
        del card["start_date"], card["end_date"]
        card["total_expenses"] = self.total_expenses(trip)
        return card

    def dashboard_summary(self, user_id: str, now: Optional[datetime] = None) -> Dict:
        """
        Classify every trip the user created or belongs to.

        Returns:
            {
                "upcoming_trip": nearest trip starting at or after now that the
                    user is a member of, or [] when there is none,
                "created_trips": [...],
                "joined_trips": [...]   # member but not creator
            }
        """
        now = now or utcnow()
        trips = [TripPlan.from_document(d) for d in self.store.find_trips_for_user(user_id)]

        created, joined, upcoming = [], [], []
        for trip in trips:
            is_member = user_id in trip.trip_members
            if trip.created_by == user_id:
                created.append(trip)
            elif is_member:
                joined.append(trip)
            if is_member and trip.start_date >= now:
                upcoming.append(trip)

        nearest = min(upcoming, key=lambda t: t.start_date) if upcoming else None
        return {
            "upcoming_trip": self.trip_card(nearest) if nearest else [],
            "created_trips": [self.trip_card(t) for t in created],
            "joined_trips": [self.trip_card(t) for t in joined],
        }
