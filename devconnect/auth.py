import datetime
import functools
import logging
from typing import Optional

import jwt  # PyJWT
from flask import current_app, g, request

from .errors import Unauthorized

logger = logging.getLogger(__name__)


def create_token(user: dict) -> str:
    now = datetime.datetime.now(datetime.timezone.utc)
    payload = {
        "id": user["id"],
        "username": user["username"],
        "email": user["email"],
        "bio": user.get("bio") or "",
        "iat": now,
        "exp": now + datetime.timedelta(seconds=current_app.config["JWT_EXP_SECONDS"]),
    }
    return jwt.encode(
        payload,
        current_app.config["SECRET_KEY"],
        algorithm=current_app.config["JWT_ALGORITHM"],
    )


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(
            token,
            current_app.config["SECRET_KEY"],
            algorithms=[current_app.config["JWT_ALGORITHM"]],
        )
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token expired") from None
    except jwt.InvalidTokenError:
        raise Unauthorized("Invalid token") from None


def _request_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header.split(" ", 1)[1].strip() or None
    return request.cookies.get(current_app.config["AUTH_COOKIE_NAME"])


def load_identity():
    """
    before_request hook: resolves the caller from the bearer header or the
    auth cookie. A bad token leaves the request anonymous and marks the
    cookie for clearing.
    """
    g.identity = None
    g.clear_auth_cookie = False
    token = _request_token()
    if not token:
        return
    try:
        g.identity = decode_token(token)
    except Unauthorized as e:
        logger.info("Rejected token: %s", e.message)
        g.auth_error = e.message
        g.clear_auth_cookie = True


def clear_stale_cookie(response):
    if g.get("clear_auth_cookie"):
        response.delete_cookie(current_app.config["AUTH_COOKIE_NAME"])
    return response


def current_user_id() -> Optional[str]:
    identity = g.get("identity")
    return identity.get("id") if identity else None


def require_identity():
    """before_request hook for blueprints whose every route needs a caller."""
    if not current_user_id():
        raise Unauthorized(g.get("auth_error") or "User not authenticated")


def jwt_required(f):
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        require_identity()
        return f(*args, **kwargs)
    return wrapper
