"""Permission helpers."""


def is_creator(user_id, trip):
    return trip is not None and trip.get("created_by") == user_id


def is_member(user_id, trip):
    return trip is not None and user_id in (trip.get("trip_members") or [])
