from flask import Blueprint, current_app, jsonify, request

from ..auth import current_user_id, jwt_required
from ..errors import Unauthorized
from ..serializers import user_to_dict
from ..services import users

bp = Blueprint("accounts", __name__, url_prefix="/Auth")


@bp.route("/register", methods=["POST"])
def register():
    user = users.register_user(request.get_json(silent=True))
    return jsonify({"success": True, "message": "User created successfully", "user": user}), 201


@bp.route("/login", methods=["POST"])
def login():
    token, user = users.login_user(request.get_json(silent=True))
    public = user_to_dict(user)
    response = jsonify({
        "success": True,
        "message": "Successfully logged in",
        "user": {k: public[k] for k in ("_id", "username", "email", "avatar", "bio")},
    })
    response.set_cookie(
        current_app.config["AUTH_COOKIE_NAME"],
        token,
        httponly=True,
        secure=current_app.config["COOKIE_SECURE"],
        samesite="Strict",
        max_age=current_app.config["JWT_EXP_SECONDS"],
    )
    return response


@bp.route("/logout", methods=["POST"])
def logout():
    cookie_name = current_app.config["AUTH_COOKIE_NAME"]
    token_exists = bool(request.cookies.get(cookie_name))
    already_logged_out = users.logout_user(token_exists)
    response = jsonify({
        "success": True,
        "message": "No active session found" if already_logged_out else "Logged out successfully",
        "clientSideCleanup": True,
    })
    if token_exists:
        response.delete_cookie(cookie_name, httponly=True, samesite="Strict")
    return response


@bp.route("/check", methods=["GET"])
def check():
    try:
        user = users.login_user_check(current_user_id())
    except Unauthorized:
        return jsonify({"loggedIn": False}), 401
    return jsonify({"loggedIn": True, "user": user})


@bp.route("/healthcheck", methods=["GET"])
def healthcheck():
    return jsonify({"status": "OK"})


@bp.route("/user/<user_id>", methods=["GET"])
def get_user(user_id):
    return jsonify({"user": users.get_user(user_id)})


@bp.route("/user/<user_id>", methods=["DELETE"])
@jwt_required
def delete_user(user_id):
    return jsonify(users.delete_user(user_id, current_user_id()))


@bp.route("/following/<user_id>", methods=["GET"])
@jwt_required
def following(user_id):
    return jsonify(users.get_all_followings(user_id))


@bp.route("/sentMessages", methods=["GET"])
@jwt_required
def sent_messages():
    return jsonify(users.get_senders_for_current_user(current_user_id()))
