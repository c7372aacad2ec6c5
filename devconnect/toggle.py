"""
Membership toggling shared by likes (posts, comments) and follows.

A membership list holds either bare user ids (followers/following) or
like entries ``{"user": <id>, "createdAt": <iso time>}``. Identities are
compared by their string form.
"""

from typing import Callable, NamedTuple, Optional

from .db import utcnow


class ToggleResult(NamedTuple):
    members: list
    already_present: bool


def member_id(entry) -> str:
    if isinstance(entry, dict):
        return str(entry.get("user"))
    return str(entry)


def like_entry(user_id) -> dict:
    return {"user": str(user_id), "createdAt": utcnow()}


def toggle_membership(members, identity, make_entry: Optional[Callable] = None) -> ToggleResult:
    """
    Removes ``identity`` from ``members`` if present, otherwise appends it.

    ``make_entry`` builds the appended entry from the identity; without it
    the identity string itself is appended. The input list is not mutated.
    """
    identity = str(identity)
    members = list(members or [])
    already_present = any(member_id(e) == identity for e in members)
    if already_present:
        members = [e for e in members if member_id(e) != identity]
    else:
        members.append(make_entry(identity) if make_entry else identity)
    return ToggleResult(members, already_present)


def set_membership(members, identity, present: bool) -> list:
    """Returns ``members`` with ``identity`` present or absent, as asked."""
    identity = str(identity)
    members = [e for e in (members or []) if member_id(e) != identity]
    if present:
        members.append(identity)
    return members


def toggle_like(likes, user_id) -> ToggleResult:
    return toggle_membership(likes, user_id, make_entry=like_entry)
