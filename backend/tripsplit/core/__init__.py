"""Core business logic services for TripSplit."""

from .split_service import SplitCalculator
from .aggregation_service import ExpenseAggregator
from .settlement_service import SettlementEngine
from .summary_service import TripSummaryBuilder
from .expense_service import ExpenseService
from .invitation_service import InvitationService
from .trip_service import TripService
from .booking_service import BookingService
from .user_service import UserService

__all__ = [
    "SplitCalculator",
    "ExpenseAggregator",
    "SettlementEngine",
    "TripSummaryBuilder",
    "ExpenseService",
    "InvitationService",
    "TripService",
    "BookingService",
    "UserService",
]
