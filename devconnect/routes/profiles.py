from flask import Blueprint, jsonify, request

from ..auth import current_user_id, require_identity
from ..services import profiles

bp = Blueprint("profiles", __name__, url_prefix="/Profile")
bp.before_request(require_identity)


@bp.route("/", methods=["GET"])
def my_profile():
    return jsonify(profiles.get_profile(current_user_id()))


@bp.route("/<profile_id>", methods=["GET"])
def profile(profile_id):
    return jsonify(profiles.get_profile_by_id(profile_id, current_user_id()))


@bp.route("/follow/<target_id>", methods=["POST"])
def follow(target_id):
    user, already_following = profiles.follow_user(target_id, current_user_id())
    return jsonify({
        "user": user,
        "message": "User unfollowed successfully" if already_following else "User followed successfully",
    })


@bp.route("/update/<profile_id>", methods=["PATCH"])
def update(profile_id):
    user = profiles.update_profile(profile_id, current_user_id(), request.get_json(silent=True))
    return jsonify({"message": "Profile updated successfully", "user": user})
