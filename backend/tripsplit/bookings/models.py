"""Booking models.

A booking's details are one of two shapes, chosen by ``booking_type``:
HotelDetails for stays and TravelDetails for journeys.
"""
import re
from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Dict, Optional, Union

from tripsplit.errors import ValidationError
from tripsplit.utils.dates import isoformat, parse_datetime
from tripsplit.utils.enums import BookingType, TravelType

# 12-hour clock, e.g. "9:05 AM", "12:00pm", "07:30 p.m."
TIME_RE = re.compile(r"^(0?[1-9]|1[0-2]):[0-5][0-9] ?([APap]\.?[Mm]\.?)$")


def _required_text(data: Dict, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} is required")
    return value.strip()


def _time(data: Dict, key: str) -> str:
    value = _required_text(data, key)
    if not TIME_RE.match(value):
        raise ValidationError(f"{key} has an invalid time format, expected e.g. 12:00 PM")
    return value


@dataclass
class HotelDetails:
    booking_type: ClassVar[BookingType] = BookingType.HOTEL

    hotel_name: str
    check_in_date: datetime
    checkout_date: datetime
    location: str

    @classmethod
    def from_payload(cls, data: Dict) -> "HotelDetails":
        details = cls(
            hotel_name=_required_text(data, "hotel_name"),
            check_in_date=parse_datetime(data.get("check_in_date"), "check_in_date"),
            checkout_date=parse_datetime(data.get("checkout_date"), "checkout_date"),
            location=_required_text(data, "location"),
        )
        if details.checkout_date < details.check_in_date:
            raise ValidationError("checkout_date must not be before check_in_date")
        return details

    def to_document(self) -> Dict:
        return {
            "hotel_name": self.hotel_name,
            "check_in_date": self.check_in_date,
            "checkout_date": self.checkout_date,
            "location": self.location,
        }


@dataclass
class TravelDetails:
    booking_type: ClassVar[BookingType] = BookingType.TRAVEL

    travel_type: str
    source: str
    destination: str
    departure_date: datetime
    departure_time: str
    arrival_date: datetime
    arrival_time: str

    @classmethod
    def from_payload(cls, data: Dict) -> "TravelDetails":
        travel_type = _required_text(data, "travel_type").lower()
        if travel_type not in {t.value for t in TravelType}:
            raise ValidationError(f"travel_type must be one of {[t.value for t in TravelType]}")
        details = cls(
            travel_type=travel_type,
            source=_required_text(data, "source"),
            destination=_required_text(data, "destination"),
            departure_date=parse_datetime(data.get("departure_date"), "departure_date"),
            departure_time=_time(data, "departure_time"),
            arrival_date=parse_datetime(data.get("arrival_date"), "arrival_date"),
            arrival_time=_time(data, "arrival_time"),
        )
        if details.arrival_date < details.departure_date:
            raise ValidationError("arrival_date must not be before departure_date")
        return details

    def to_document(self) -> Dict:
        return {
            "travel_type": self.travel_type,
            "source": self.source,
            "destination": self.destination,
            "departure_date": self.departure_date,
            "departure_time": self.departure_time,
            "arrival_date": self.arrival_date,
            "arrival_time": self.arrival_time,
        }


BookingDetails = Union[HotelDetails, TravelDetails]

_DETAILS_BY_TYPE = {
    BookingType.HOTEL.value: HotelDetails,
    BookingType.TRAVEL.value: TravelDetails,
}


def parse_booking_details(booking_type: str, data) -> BookingDetails:
    """Validate raw details against the shape selected by booking_type."""
    details_cls = _DETAILS_BY_TYPE.get((booking_type or "").lower())
    if details_cls is None:
        raise ValidationError(f"booking_type must be one of {sorted(_DETAILS_BY_TYPE)}")
    if not isinstance(data, dict):
        raise ValidationError("booking_details must be an object")
    return details_cls.from_payload(data)


@dataclass
class Booking:
    id: Optional[str]
    trip_id: str
    details: BookingDetails
    booking_receipt: str = ""

    @property
    def booking_type(self) -> str:
        return self.details.booking_type.value

    @classmethod
    def from_document(cls, doc: Dict) -> "Booking":
        details_cls = _DETAILS_BY_TYPE[doc["booking_type"]]
        return cls(
            id=doc.get("_id"),
            trip_id=doc.get("trip_id"),
            details=details_cls(**doc["booking_details"]),
            booking_receipt=doc.get("booking_receipt", ""),
        )

    def to_document(self) -> Dict:
        return {
            "trip_id": self.trip_id,
            "booking_type": self.booking_type,
            "booking_receipt": self.booking_receipt,
            "booking_details": self.details.to_document(),
        }

    def to_response(self) -> Dict:
        return {
            "_id": self.id,
            "booking_type": self.booking_type,
            "booking_receipt": self.booking_receipt,
            "booking_details": {k: isoformat(v) for k, v in self.details.to_document().items()},
        }
