from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from tripsplit.core import BookingService, TripService
from tripsplit.errors import PermissionDeniedError
from tripsplit.extensions import get_store
from tripsplit.utils.permissions import is_member

bookings_bp = Blueprint("bookings", __name__)


@bookings_bp.route("/", methods=["POST"])
@jwt_required()
def add_booking():
    """
    Request body:
    {
        "trip_id": "...",
        "booking_type": "hotel|travel",
        "booking_details": {...},
        "booking_receipt": "receipts/abc.pdf"   // optional
    }
    """
    booking = BookingService(get_store()).add_booking(
        get_jwt_identity(), request.get_json(silent=True) or {}
    )
    return jsonify(booking), 201


@bookings_bp.route("/trip/<trip_id>", methods=["GET"])
@jwt_required()
def list_bookings(trip_id):
    trip = TripService(get_store()).get_trip_document(trip_id)
    if not is_member(get_jwt_identity(), trip):
        raise PermissionDeniedError("Not a member of this trip")
    return jsonify(BookingService(get_store()).list_bookings(trip_id))
