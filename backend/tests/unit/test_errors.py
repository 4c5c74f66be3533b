from tripsplit.errors import (
    AuthenticationError,
    ComputationError,
    ConflictError,
    ErrorCode,
    NotFoundError,
    PermissionDeniedError,
    TripSplitError,
    ValidationError,
)


def test_status_per_error_class():
    assert ValidationError("bad").status == 400
    assert AuthenticationError("who").status == 401
    assert PermissionDeniedError("no").status == 403
    assert NotFoundError("gone").status == 404
    assert ConflictError("dup").status == 409
    assert ComputationError("div by zero").status == 500


def test_default_codes():
    assert ValidationError("bad").code == ErrorCode.VALIDATION_ERROR
    assert NotFoundError("gone").code == ErrorCode.NOT_FOUND
    assert ConflictError("dup").code == ErrorCode.ALREADY_EXISTS


def test_to_dict_carries_message_and_code():
    err = NotFoundError("Trip not found", code=ErrorCode.TRIP_NOT_FOUND)
    assert err.to_dict() == {"error": "Trip not found", "code": "TRIP_NOT_FOUND"}


def test_computation_error_never_exposes_internal_message():
    internal = "Expense 65f1 has an empty split_between"
    err = ComputationError(internal, code=ErrorCode.INVALID_EXPENSE)
    assert internal not in err.to_dict()["error"]
    assert err.to_dict()["code"] == "INTERNAL_ERROR"


def test_all_errors_share_base():
    for cls in (ValidationError, NotFoundError, ComputationError, AuthenticationError,
                PermissionDeniedError, ConflictError):
        assert issubclass(cls, TripSplitError)
