from flask import Blueprint, jsonify, request

from ..auth import current_user_id, jwt_required
from ..services import posts

bp = Blueprint("posts", __name__, url_prefix="/Post")


@bp.route("/all", methods=["GET"])
def all_posts():
    return jsonify(posts.get_all_posts())


@bp.route("/create", methods=["POST"])
@jwt_required
def create():
    post = posts.create_post(current_user_id(), request.get_json(silent=True))
    return jsonify({"message": "Post created successfully", "post": post}), 201


@bp.route("/delete/<post_id>", methods=["DELETE"])
@jwt_required
def delete(post_id):
    post = posts.delete_post(post_id, current_user_id())
    return jsonify({"message": "Post deleted successfully", "post": post})


@bp.route("/update/<post_id>", methods=["PATCH"])
@jwt_required
def update(post_id):
    post = posts.update_post(post_id, current_user_id(), request.get_json(silent=True))
    return jsonify({"message": "Post updated successfully", "post": post})


@bp.route("/like/<post_id>", methods=["POST"])
@jwt_required
def like(post_id):
    likes, already_liked = posts.like_post(post_id, current_user_id())
    return jsonify({
        "message": "Post unliked" if already_liked else "Post liked",
        "likes": likes,
    })


@bp.route("/comments/<post_id>", methods=["GET"])
@jwt_required
def comments(post_id):
    return jsonify({"comments": posts.get_comments_by_post_id(post_id)})
