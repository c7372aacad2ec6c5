from .. import db
from ..errors import Forbidden, NotFound, Unauthorized, ValidationError
from ..schemas import CommentCreate, CommentUpdate, validate
from ..serializers import comment_to_dict
from ..toggle import toggle_like


def _invalid_id(what):
    message = f"Invalid {what} ID"
    return ValidationError(message, errors=[{"path": ["id"], "message": message}])


def _get_comment(comment_id):
    if not db.is_valid_id(comment_id):
        raise _invalid_id("comment")
    comment = db.comments.find_by_id(comment_id)
    if not comment:
        raise NotFound("Comment not found")
    return comment


def _check_author(comment, user_id):
    if str(comment["user_id"]) != str(user_id):
        raise Forbidden("Forbidden: You cannot modify another user's comment")


def create_comment(user_id, body):
    if not user_id:
        raise Unauthorized("Unauthorized: User not authenticated")
    data = validate(CommentCreate, body)
    if not db.is_valid_id(data.post):
        raise _invalid_id("post")

    comment = {
        "id": db.new_id(),
        "user_id": user_id,
        "post_id": data.post,
        "content": data.content,
        "likes": [],
        "created_at": db.utcnow(),
    }
    with db.transaction():
        post = db.posts.find_by_id(data.post)
        if not post:
            raise NotFound("Post not found")
        db.comments.save(comment)
        post["comments"].append(comment["id"])
        db.posts.save(post)
    return comment_to_dict(comment)


def delete_comment(comment_id, user_id):
    comment = _get_comment(comment_id)
    _check_author(comment, user_id)
    with db.transaction():
        db.comments.delete_one(comment["id"])
        post = db.posts.find_by_id(comment["post_id"])
        if post:
            post["comments"] = [c for c in post["comments"] if c != comment["id"]]
            db.posts.save(post)
    return True


def update_comment(comment_id, user_id, body):
    comment = _get_comment(comment_id)
    _check_author(comment, user_id)
    data = validate(CommentUpdate, body)
    comment["content"] = data.content
    db.comments.save(comment)
    return comment_to_dict(comment)


def get_comments_by_post(post_id):
    if not db.is_valid_id(post_id):
        raise ValidationError("Invalid post ID")
    found = db.comments.find("post_id = ?", (post_id,), order_by="created_at DESC, rowid DESC")
    return [comment_to_dict(c) for c in found]


def like_comment(comment_id, user_id):
    if not user_id:
        raise Unauthorized("Unauthorized")
    if not db.is_valid_id(user_id):
        raise _invalid_id("user")
    with db.transaction():
        comment = _get_comment(comment_id)
        result = toggle_like(comment["likes"], user_id)
        comment["likes"] = result.members
        db.comments.save(comment)
    return result
