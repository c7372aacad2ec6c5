from flask import Blueprint, jsonify, request

from ..auth import current_user_id, require_identity
from ..services import comments

bp = Blueprint("comments", __name__, url_prefix="/Comment")
bp.before_request(require_identity)


@bp.route("/create", methods=["POST"])
def create():
    comment = comments.create_comment(current_user_id(), request.get_json(silent=True))
    return jsonify({"message": "Comment created successfully", "comment": comment}), 201


@bp.route("/delete/<comment_id>", methods=["DELETE"])
def delete(comment_id):
    comments.delete_comment(comment_id, current_user_id())
    return jsonify({"message": "Comment deleted successfully"})


@bp.route("/update/<comment_id>", methods=["PATCH"])
def update(comment_id):
    comment = comments.update_comment(comment_id, current_user_id(), request.get_json(silent=True))
    return jsonify({"message": "Comment updated successfully", "comment": comment})


@bp.route("/post/<post_id>", methods=["GET"])
def by_post(post_id):
    return jsonify({"comments": comments.get_comments_by_post(post_id)})


@bp.route("/like/<comment_id>", methods=["POST"])
def like(comment_id):
    likes, already_liked = comments.like_comment(comment_id, current_user_id())
    return jsonify({
        "message": "Comment unliked" if already_liked else "Comment liked",
        "likes": likes,
    })
