from flask import Blueprint, jsonify, request

from ..auth import current_user_id, require_identity
from ..services import messages

bp = Blueprint("messages", __name__, url_prefix="/Message")
bp.before_request(require_identity)


@bp.route("/send", methods=["POST"])
def send():
    message = messages.send_message(current_user_id(), request.get_json(silent=True))
    return jsonify({"message": "Message sent successfully", "data": message}), 201


@bp.route("/messages/<other_id>", methods=["GET"])
def conversation(other_id):
    found = messages.get_messages_between_users(current_user_id(), other_id)
    return jsonify({"messages": found, "count": len(found)})


@bp.route("/senders", methods=["GET"])
def senders():
    found = messages.get_all_senders(current_user_id())
    return jsonify({"senders": found, "count": len(found)})
