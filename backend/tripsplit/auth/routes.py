from flask import Blueprint, request, jsonify
from flask_jwt_extended import (
    create_access_token, create_refresh_token, decode_token,
    get_jwt, get_jwt_identity, jwt_required,
)

from tripsplit import bcrypt
from tripsplit.core import UserService
from tripsplit.errors import AuthenticationError, ValidationError
from tripsplit.extensions import get_store
from tripsplit.users.forms import LoginForm, RegistrationForm

auth_bp = Blueprint("auth", __name__)


def _form_error(form):
    field, messages = next(iter(form.errors.items()))
    return ValidationError(f"{field}: {messages[0]}")


def _issue_tokens(users, user_id):
    access_token = create_access_token(identity=user_id)
    refresh_token = create_refresh_token(identity=user_id)
    users.set_refresh_token(user_id, decode_token(refresh_token)["jti"])
    return access_token, refresh_token


@auth_bp.route("/register", methods=["POST"])
def register():
    form = RegistrationForm()
    if not form.validate_on_submit():
        raise _form_error(form)

    users = UserService(get_store())
    user = users.register(
        username=form.username.data,
        email=form.email.data,
        full_name=form.full_name.data,
        password_hash=bcrypt.generate_password_hash(form.password.data).decode("utf-8"),
        avatar=form.avatar.data,
    )
    return jsonify({"message": "User registered successfully", "user": user.to_public()}), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    form = LoginForm()
    if not form.validate_on_submit():
        raise _form_error(form)

    users = UserService(get_store())
    user = users.find_by_login(form.login.data)
    if not user or not bcrypt.check_password_hash(user["password_hash"], form.password.data):
        raise AuthenticationError("Invalid credentials")

    access_token, refresh_token = _issue_tokens(users, user["_id"])
    return jsonify({
        "access_token": access_token,
        "refresh_token": refresh_token,
        "user": users.get_user(user["_id"]).to_public()
    })


@auth_bp.route("/refresh", methods=["POST"])
@jwt_required(refresh=True)
def refresh():
    uid = get_jwt_identity()
    users = UserService(get_store())
    if not users.refresh_token_matches(uid, get_jwt()["jti"]):
        raise AuthenticationError("Invalid refresh token")

    access_token, refresh_token = _issue_tokens(users, uid)
    return jsonify({"access_token": access_token, "refresh_token": refresh_token})


@auth_bp.route("/logout", methods=["POST"])
@jwt_required()
def logout():
    UserService(get_store()).set_refresh_token(get_jwt_identity(), None)
    return jsonify({"message": "User logged out"})


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    user = UserService(get_store()).get_user(get_jwt_identity())
    return jsonify(user.to_public())
