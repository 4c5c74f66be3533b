"""Request payload validators.

Each validator either returns clean values or raises ValidationError; none of
them touches the store.
"""
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from bson import ObjectId

from tripsplit.errors import ErrorCode, ValidationError
from tripsplit.expenses.models import Expense
from tripsplit.trips.models import ItineraryItem
from tripsplit.utils.dates import parse_datetime, to_offset, utcnow
from tripsplit.utils.enums import ExpenseCategory
from tripsplit.utils.money import MAX_AMOUNT, round_money, to_decimal


def require_id(value, field: str) -> str:
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise ValidationError(f"{field} is not a valid id", code=ErrorCode.INVALID_ID)
    return value


def require_text(data: Dict, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} is required")
    return value.strip()


def require_object(data, what: str = "Request body") -> Dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(f"{what} must be a JSON object")
    return data


def parse_positive_amount(value, field: str) -> Decimal:
    try:
        amount = to_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{field} must be a number")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"{field} must be greater than 0")
    # Bounded first so rounding stays within decimal precision
    if amount > MAX_AMOUNT:
        raise ValidationError(f"{field} must not exceed {MAX_AMOUNT}")
    if round_money(amount) <= 0:
        raise ValidationError(f"{field} must be greater than 0")
    return amount


def parse_category(value) -> str:
    allowed = [c.value for c in ExpenseCategory]
    category = (value or "").strip().lower() if isinstance(value, str) else value
    if category not in allowed:
        raise ValidationError(f"category must be one of {allowed}")
    return category


def parse_id_set(values, field: str) -> List[str]:
    """Distinct ids in first-seen order; the list must not be empty."""
    if not isinstance(values, list) or not values:
        raise ValidationError(f"{field} must be a non-empty array of user IDs.")
    seen = []
    for value in values:
        require_id(value, field)
        if value not in seen:
            seen.append(value)
    return seen


def validate_expense_payload(data: Dict, payer_id: str, now: Optional[datetime] = None,
                             tz: timezone = timezone.utc) -> Expense:
    """
    Build an unsaved Expense from a request body.

    Args:
        data: Request body
        payer_id: Authenticated user, used when ``paid_by`` is absent
        now: Current time (UTC), injectable for tests
        tz: Zone whose calendar day counts as "today"

    Returns:
        Expense with ``id`` unset
    """
    data = require_object(data)
    now = now or utcnow()

    trip_id = require_id(data.get("trip_id"), "trip_id")
    paid_by = require_id(data.get("paid_by") or payer_id, "paid_by")

    if not data.get("payment_date"):
        raise ValidationError("Payment Date is required !!", code=ErrorCode.INVALID_DATE)
    payment_date = parse_datetime(data["payment_date"], "Payment Date")
    if payment_date.date() > to_offset(now, tz).date():
        raise ValidationError("Payment Date cannot be in the future", code=ErrorCode.INVALID_DATE)

    description = data.get("description") or ""
    if not isinstance(description, str):
        raise ValidationError("description must be text")

    return Expense(
        id=None,
        trip_id=trip_id,
        paid_by=paid_by,
        amount=parse_positive_amount(data.get("amount"), "amount"),
        payment_date=payment_date,
        split_between=parse_id_set(data.get("split_between"), "Split between"),
        category=parse_category(data.get("category")),
        description=description.strip(),
        paid_to=require_text(data, "paid_to"),
    )


def validate_trip_payload(data: Dict) -> Dict:
    """Validated trip fields (name, description, dates, budget, notes, cover, itinerary)."""
    data = require_object(data)
    fields = {
        "trip_name": require_text(data, "trip_name"),
        "trip_desc": require_text(data, "trip_desc"),
        "start_date": parse_datetime(data.get("start_date"), "start_date"),
        "end_date": parse_datetime(data.get("end_date"), "end_date"),
        "notes": (data.get("notes") or "").strip(),
        "cover_image": data.get("cover_image") or None,
    }
    if fields["end_date"] < fields["start_date"]:
        raise ValidationError("End date must be after start date", code=ErrorCode.INVALID_DATE)

    budget = data.get("planned_budget")
    fields["planned_budget"] = (
        float(parse_positive_amount(budget, "planned_budget")) if budget not in (None, "") else None
    )

    itinerary = data.get("itinerary")
    if itinerary is not None:
        if not isinstance(itinerary, list):
            raise ValidationError("itinerary must be an array")
        fields["itinerary"] = [validate_itinerary_item(i).to_document() for i in itinerary]
    return fields


def validate_itinerary_item(data) -> ItineraryItem:
    if not isinstance(data, dict):
        raise ValidationError("Invalid itinerary item data")
    checklist = data.get("checklist", [])
    if not isinstance(checklist, list) or not all(isinstance(c, str) for c in checklist):
        raise ValidationError("Invalid itinerary item data: checklist must be a list of strings")
    notes = data.get("notes") or ""
    if not isinstance(notes, str):
        raise ValidationError("Invalid itinerary item data: notes must be text")
    return ItineraryItem(
        date=parse_datetime(data.get("date"), "date"),
        place_to_visit=require_text(data, "place_to_visit"),
        checklist=list(checklist),
        notes=notes.strip(),
    )
