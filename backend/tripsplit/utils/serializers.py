"""Turn stored documents into JSON-ready values."""
from datetime import date, datetime
from decimal import Decimal

from tripsplit.utils.money import round_money

# Never leave the service
PRIVATE_FIELDS = {"password_hash", "refresh_token_jti"}


def jsonable(value):
    if isinstance(value, dict):
        return {k: jsonable(v) for k, v in value.items() if k not in PRIVATE_FIELDS}
    if isinstance(value, (list, tuple)):
        return [jsonable(v) for v in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return round_money(value)
    if isinstance(value, bytes):
        return None
    return value
