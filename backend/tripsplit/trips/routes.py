from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from tripsplit.core import TripService
from tripsplit.core.reports import compute_trip_expense_summary, compute_trip_summary
from tripsplit.errors import PermissionDeniedError
from tripsplit.extensions import get_store
from tripsplit.utils.permissions import is_member
from tripsplit.utils.serializers import jsonable
from tripsplit.utils.validators import require_object

trips_bp = Blueprint("trips", __name__)


def _member_trip(trips, trip_id):
    trip = trips.get_trip_document(trip_id)
    if not is_member(get_jwt_identity(), trip):
        raise PermissionDeniedError("Not a member of this trip")
    return trip


@trips_bp.route("/", methods=["POST"])
@jwt_required()
def create_trip():
    """
    Create a trip; the caller becomes its organiser and first member.

    Request body:
    {
        "trip_name": "Goa Trip",
        "trip_desc": "...",
        "start_date": "2025-01-10",
        "end_date": "2025-01-14",
        "planned_budget": 30000,            // optional
        "itinerary": [...],                 // optional
        "trip_members": ["<user id>", ...]  // optional, invited
    }
    """
    result = TripService(get_store()).create_trip(get_jwt_identity(), request.get_json(silent=True) or {})
    return jsonify(jsonable(result)), 201


@trips_bp.route("/<trip_id>", methods=["GET"])
@jwt_required()
def get_trip(trip_id):
    trips = TripService(get_store())
    _member_trip(trips, trip_id)
    return jsonify(jsonable(trips.get_trip(trip_id)))


@trips_bp.route("/<trip_id>", methods=["PUT"])
@jwt_required()
def update_trip(trip_id):
    trip = TripService(get_store()).update_trip(
        get_jwt_identity(), trip_id, request.get_json(silent=True) or {}
    )
    return jsonify(jsonable(trip))


@trips_bp.route("/<trip_id>", methods=["DELETE"])
@jwt_required()
def delete_trip(trip_id):
    result = TripService(get_store()).delete_trip(get_jwt_identity(), trip_id)
    return jsonify(jsonable({"message": "Trip deleted", **result}))


@trips_bp.route("/<trip_id>/itinerary", methods=["POST"])
@jwt_required()
def add_itinerary_item(trip_id):
    trip = TripService(get_store()).add_itinerary_item(
        get_jwt_identity(), trip_id, request.get_json(silent=True) or {}
    )
    return jsonify(jsonable(trip)), 201


@trips_bp.route("/<trip_id>/invite", methods=["POST"])
@jwt_required()
def invite(trip_id):
    data = require_object(request.get_json(silent=True))
    invitation = TripService(get_store()).invitations.invite(
        get_jwt_identity(), trip_id, data.get("invitee_id")
    )
    return jsonify(invitation), 201


@trips_bp.route("/<trip_id>/members/<member_id>", methods=["DELETE"])
@jwt_required()
def remove_member(trip_id, member_id):
    trip = TripService(get_store()).remove_trip_member(get_jwt_identity(), trip_id, member_id)
    return jsonify(jsonable(trip))


@trips_bp.route("/<trip_id>/members", methods=["GET"])
@jwt_required()
def members(trip_id):
    trips = TripService(get_store())
    _member_trip(trips, trip_id)
    return jsonify(trips.members_and_invited(trip_id))


@trips_bp.route("/<trip_id>/members/search", methods=["GET"])
@jwt_required()
def search_members(trip_id):
    trips = TripService(get_store())
    _member_trip(trips, trip_id)
    return jsonify(trips.search_members(trip_id, request.args.get("q", "").strip()))


@trips_bp.route("/<trip_id>/summary", methods=["GET"])
@jwt_required()
def trip_summary(trip_id):
    _member_trip(TripService(get_store()), trip_id)
    return jsonify(compute_trip_summary(get_store(), trip_id))


@trips_bp.route("/<trip_id>/expense-summary", methods=["GET"])
@jwt_required()
def trip_expense_summary(trip_id):
    _member_trip(TripService(get_store()), trip_id)
    summary = compute_trip_expense_summary(
        get_store(), trip_id, recent_limit=current_app.config["RECENT_EXPENSES_LIMIT"]
    )
    return jsonify(summary)
