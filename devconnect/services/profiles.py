import logging

from .. import db
from ..errors import Conflict, Forbidden, NotFound, Unauthorized, ValidationError
from ..schemas import ProfileUpdate, validate
from ..serializers import profile_to_dict
from ..toggle import set_membership, toggle_membership

logger = logging.getLogger(__name__)


def get_profile(user_id):
    if not user_id:
        raise Unauthorized("Unauthorized")
    user = db.users.find_by_id(user_id)
    if not user:
        raise NotFound("User not found")
    return profile_to_dict(user)


def get_profile_by_id(profile_id, requester_id):
    if not requester_id:
        raise Unauthorized("Unauthorized: User not authenticated")
    user = db.users.find_by_id(profile_id)
    if not user:
        raise NotFound("User not found")
    return profile_to_dict(user)


def follow_user(target_id, current_id):
    """
    Toggles ``current_id`` in the target's followers and mirrors the change
    in the caller's following list. Both documents are written in one
    transaction.

    Returns ``(target profile, already_following)``.
    """
    if not current_id:
        raise Unauthorized("User not authenticated")
    if str(target_id) == str(current_id):
        raise ValidationError("Cannot follow yourself")

    with db.transaction():
        target = db.users.find_by_id(target_id)
        if not target:
            raise NotFound("User not found")
        current = db.users.find_by_id(current_id)
        if not current:
            raise NotFound("Authenticated user not found")

        result = toggle_membership(target["followers"], current_id)
        target["followers"] = result.members
        current["following"] = set_membership(
            current["following"], target_id, present=not result.already_present
        )
        db.users.save(target)
        db.users.save(current)

    logger.info(
        "%s %s %s", current_id, "unfollowed" if result.already_present else "followed", target_id
    )
    return profile_to_dict(target), result.already_present


def update_profile(profile_id, requester_id, body):
    if not requester_id:
        raise Unauthorized("Unauthorized: User not authenticated")
    if str(requester_id) != str(profile_id):
        raise Forbidden("Forbidden: You cannot edit another user's profile")

    data = validate(ProfileUpdate, body, message="Invalid input")
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    with db.transaction():
        user = db.users.find_by_id(profile_id)
        if not user:
            raise NotFound("User not found")
        username = changes.get("username")
        if username and username != user["username"]:
            if db.users.find_one("username = ?", (username,)):
                raise Conflict("Username already taken")
        user.update(changes)
        user["updated_at"] = db.utcnow()
        db.users.save(user)
    return profile_to_dict(user)
