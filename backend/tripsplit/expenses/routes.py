# tripsplit/expenses/routes.py

from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from tripsplit.core import ExpenseService, TripService
from tripsplit.core.reports import (
    compute_balances, compute_contributions,
    compute_owed_by_user, compute_owed_to_user,
)
from tripsplit.errors import PermissionDeniedError
from tripsplit.extensions import get_store
from tripsplit.utils.permissions import is_member
from tripsplit.utils.serializers import jsonable
from tripsplit.utils.validators import require_id

expenses_bp = Blueprint("expenses", __name__)


def _require_member(trip_id):
    trip = TripService(get_store()).get_trip_document(trip_id)
    if not is_member(get_jwt_identity(), trip):
        raise PermissionDeniedError("Not a member of this trip")


@expenses_bp.route("/", methods=["POST"])
@jwt_required()
def add_expense():
    """
    Record an expense split equally between the selected members.

    Request body:
    {
        "trip_id": "...",
        "amount": 900,
        "category": "food|accommodation|entertainment|travel|miscellaneous|other",
        "paid_to": "Beach Shack",
        "payment_date": "2024-05-02",
        "split_between": ["<user id>", ...],
        "paid_by": "<user id>",     // optional, defaults to the caller
        "description": "Dinner"     // optional
    }
    """
    expenses = ExpenseService(get_store(), report_offset=current_app.config["REPORT_UTC_OFFSET"])
    expense = expenses.add_expense(
        get_jwt_identity(), request.get_json(silent=True) or {}
    )
    return jsonify(jsonable(expense)), 201


@expenses_bp.route("/trip/<trip_id>", methods=["GET"])
@jwt_required()
def list_trip_expenses(trip_id):
    expenses = ExpenseService(get_store()).list_trip_expenses(get_jwt_identity(), trip_id)
    return jsonify(jsonable(expenses))


@expenses_bp.route("/trip/<trip_id>/contributions", methods=["GET"])
@jwt_required()
def contributions(trip_id):
    _require_member(trip_id)
    return jsonify(compute_contributions(get_store(), trip_id))


# Owed amounts default to the caller; ?user_id= looks at another member

@expenses_bp.route("/trip/<trip_id>/owed-to", methods=["GET"])
@jwt_required()
def owed_to_user(trip_id):
    _require_member(trip_id)
    user_id = require_id(request.args.get("user_id") or get_jwt_identity(), "user_id")
    return jsonify(compute_owed_to_user(get_store(), trip_id, user_id))


@expenses_bp.route("/trip/<trip_id>/owed-by", methods=["GET"])
@jwt_required()
def owed_by_user(trip_id):
    _require_member(trip_id)
    user_id = require_id(request.args.get("user_id") or get_jwt_identity(), "user_id")
    return jsonify(compute_owed_by_user(get_store(), trip_id, user_id))


@expenses_bp.route("/trip/<trip_id>/balances", methods=["GET"])
@jwt_required()
def balances(trip_id):
    _require_member(trip_id)
    return jsonify(compute_balances(get_store(), trip_id))
