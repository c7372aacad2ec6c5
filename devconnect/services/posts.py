import logging

from .. import db
from ..errors import Forbidden, NotFound, Unauthorized
from ..schemas import PostCreate, PostUpdate, require_object, validate
from ..serializers import comment_to_dict, post_to_dict
from ..toggle import toggle_like

logger = logging.getLogger(__name__)


def _get_post(post_id):
    post = db.posts.find_by_id(post_id)
    if not post:
        raise NotFound("Post not found")
    return post


def _check_author(post, user_id):
    if str(post["author_id"]) != str(user_id):
        raise Forbidden("Forbidden: You cannot modify another user's post")


def create_post(user_id, body):
    if not user_id:
        raise Unauthorized("User not authenticated")
    data = validate(PostCreate, body)

    now = db.utcnow()
    post = {
        "id": db.new_id(),
        "author_id": user_id,
        "title": data.title,
        "content": data.content,
        "image": data.image,
        "likes": [],
        "comments": [],
        "created_at": now,
        "updated_at": now,
    }
    with db.transaction():
        author = db.users.find_by_id(user_id)
        if not author:
            raise NotFound("account doesn't exist")
        db.posts.save(post)
        author["posts"].append(post["id"])
        db.users.save(author)
    logger.info("Post %s created by %s", post["id"], user_id)
    return post_to_dict(post)


def get_all_posts():
    return [post_to_dict(p) for p in db.posts.find(order_by="created_at DESC, rowid DESC")]


def update_post(post_id, user_id, body):
    body = require_object(body)
    post = _get_post(post_id)
    _check_author(post, user_id)

    merged = {
        "title": body.get("title") or post["title"],
        "content": body.get("content") or post["content"],
        "image": body.get("image") or post["image"],
    }
    data = validate(PostUpdate, merged)

    post.update(title=data.title, content=data.content, image=data.image, updated_at=db.utcnow())
    db.posts.save(post)
    return post_to_dict(post)


def remove_post(post):
    """Deletes a post, its comments and its entry in the author's post list."""
    with db.transaction():
        db.comments.delete_many("post_id = ?", (post["id"],))
        author = db.users.find_by_id(post["author_id"])
        if author:
            author["posts"] = [p for p in author["posts"] if p != post["id"]]
            db.users.save(author)
        db.posts.delete_one(post["id"])


def delete_post(post_id, user_id):
    post = _get_post(post_id)
    _check_author(post, user_id)
    snapshot = post_to_dict(post)
    remove_post(post)
    logger.info("Post %s deleted", post_id)
    return snapshot


def like_post(post_id, user_id):
    if not user_id:
        raise Unauthorized("User not authenticated")
    with db.transaction():
        post = _get_post(post_id)
        result = toggle_like(post["likes"], user_id)
        post["likes"] = result.members
        db.posts.save(post)
    return result


def get_comments_by_post_id(post_id):
    post = _get_post(post_id)
    found = db.comments.find_by_ids(post["comments"], order_by="created_at DESC, rowid DESC")
    return [comment_to_dict(c) for c in found]
