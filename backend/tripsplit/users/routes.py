from flask import Blueprint, jsonify, request, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from tripsplit.core import InvitationService, TripService, UserService
from tripsplit.core.reports import (
    compute_category_report, compute_dashboard,
    compute_expense_summaries_for_user, compute_monthly_report,
)
from tripsplit.extensions import get_store
from tripsplit.utils.serializers import jsonable

users_bp = Blueprint("users", __name__)

@users_bp.route("/profile", methods=["GET"])
@jwt_required()
def profile():
    user = UserService(get_store()).get_user(get_jwt_identity())
    return jsonify(user.to_public())


@users_bp.route("/search", methods=["GET"])
@jwt_required()
def search_users():
    """Search for other users by username prefix."""
    query = request.args.get("q", "").strip()
    users = UserService(get_store()).search(query, exclude=get_jwt_identity())
    return jsonify({"users": users})


@users_bp.route("/trips/created", methods=["GET"])
@jwt_required()
def created_trips():
    trips = TripService(get_store()).trips_created_by(get_jwt_identity())
    return jsonify(jsonable(trips))


@users_bp.route("/trips/joined", methods=["GET"])
@jwt_required()
def joined_trips():
    trips = TripService(get_store()).trips_joined_by(get_jwt_identity())
    return jsonify(jsonable(trips))


# ------------------ INVITATIONS ------------------

@users_bp.route("/invitations", methods=["GET"])
@jwt_required()
def list_invitations():
    invitations = InvitationService(get_store()).list_for_user(get_jwt_identity())
    return jsonify(invitations)


@users_bp.route("/invitations/<invitation_id>/accept", methods=["POST"])
@jwt_required()
def accept_invitation(invitation_id):
    result = InvitationService(get_store()).accept(get_jwt_identity(), invitation_id)
    return jsonify(jsonable(result))


@users_bp.route("/invitations/<invitation_id>/decline", methods=["POST"])
@jwt_required()
def decline_invitation(invitation_id):
    result = InvitationService(get_store()).decline(get_jwt_identity(), invitation_id)
    return jsonify(jsonable(result))


# ------------------ REPORTS ------------------

@users_bp.route("/reports/categories", methods=["GET"])
@jwt_required()
def category_report():
    return jsonify(compute_category_report(get_store(), get_jwt_identity()))


@users_bp.route("/reports/monthly", methods=["GET"])
@jwt_required()
def monthly_report():
    report = compute_monthly_report(
        get_store(), get_jwt_identity(),
        report_offset=current_app.config["REPORT_UTC_OFFSET"]
    )
    return jsonify(report)


@users_bp.route("/dashboard", methods=["GET"])
@jwt_required()
def dashboard():
    return jsonify(compute_dashboard(get_store(), get_jwt_identity()))


@users_bp.route("/trip-expense-summary", methods=["GET"])
@jwt_required()
def trip_expense_summary():
    return jsonify(compute_expense_summaries_for_user(get_store(), get_jwt_identity()))
