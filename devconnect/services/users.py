import logging

from flask import current_app
from werkzeug.security import check_password_hash, generate_password_hash

from .. import db
from ..auth import create_token
from ..errors import Conflict, Forbidden, NotFound, Unauthorized
from ..inbox import unique_senders
from ..schemas import LoginRequest, RegisterRequest, validate
from ..serializers import user_to_dict
from .posts import remove_post

logger = logging.getLogger(__name__)


def register_user(body):
    data = validate(RegisterRequest, body)

    if db.users.find_one("email = ?", (data.email,)):
        raise Conflict("Email already in use")
    if db.users.find_one("username = ?", (data.username,)):
        raise Conflict("Username already taken")

    now = db.utcnow()
    user = {
        "id": db.new_id(),
        "username": data.username,
        "email": data.email,
        "password_hash": generate_password_hash(data.password),
        "bio": data.bio or "",
        "avatar": data.avatar or current_app.config["DEFAULT_AVATAR"],
        "followers": [],
        "following": [],
        "posts": [],
        "created_at": now,
        "updated_at": now,
    }
    db.users.save(user)
    logger.info("Registered user %s", user["username"])
    return {"username": user["username"], "email": user["email"]}


def login_user(body):
    """Returns ``(token, user)`` for valid credentials."""
    data = validate(LoginRequest, body)
    user = db.users.find_one("email = ?", (data.email.strip().lower(),))
    if not user:
        raise NotFound("Account doesn't exist")
    if not check_password_hash(user["password_hash"], data.password):
        raise Unauthorized("Invalid credentials")
    return create_token(user), user


def logout_user(token_exists):
    """True when there was no session to end."""
    # no server-side token revocation
    return not token_exists


def login_user_check(user_id):
    if not user_id:
        raise Unauthorized("User not authenticated")
    user = db.users.find_by_id(user_id)
    if not user:
        raise Unauthorized("User not found")
    return user_to_dict(user)


def get_user(user_id):
    user = db.users.find_by_id(user_id)
    if not user:
        raise NotFound("User not found")
    return user_to_dict(user)


def delete_user(user_id, requester_id):
    if not requester_id:
        raise Unauthorized("User not authenticated")
    if str(user_id) != str(requester_id):
        raise Forbidden("Forbidden: You cannot delete another user's account")
    with db.transaction():
        user = db.users.find_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        for post in db.posts.find("author_id = ?", (user_id,)):
            remove_post(post)
        db.users.delete_one(user_id)
    logger.info("Deleted user %s", user_id)
    return {"message": "User deleted successfully"}


def get_all_followings(user_id):
    user = db.users.find_by_id(user_id)
    if not user:
        raise NotFound("User not found")
    following = [user_to_dict(u) for u in db.users.find_by_ids(user["following"])]
    return {
        "message": "Following users fetched successfully",
        "following": following,
    }


def get_senders_for_current_user(user_id):
    """Distinct senders of messages to ``user_id`` that it does not follow."""
    if not user_id:
        raise Unauthorized("User not authenticated")
    user = db.users.find_by_id(user_id)
    if not user:
        raise NotFound("User not found")

    rows = db.query_db(
        """
        SELECT m.sender_id, u.username, u.avatar
        FROM messages m LEFT JOIN users u ON u.id = m.sender_id
        WHERE m.receiver_id = ?
        ORDER BY m.rowid
        """,
        (user_id,),
    )
    senders = unique_senders(rows, exclude=user["following"])
    return {"senders": senders, "count": len(senders)}
