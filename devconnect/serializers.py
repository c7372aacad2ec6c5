"""
JSON shapes for API responses.

Documents are stored with snake_case columns; responses use the wire
names the client expects (``_id``, ``createdAt`` ...). Reference fields are
populated with small projections of the referenced document.
"""

from . import db


def author_projection(user):
    if user is None:
        return None
    return {
        "_id": user["id"],
        "username": user["username"],
        "email": user["email"],
        "avatar": user["avatar"],
    }


def user_to_dict(user):
    if user is None:
        return None
    return {
        "_id": user["id"],
        "username": user["username"],
        "email": user["email"],
        "bio": user["bio"],
        "avatar": user["avatar"],
        "followers": user["followers"],
        "following": user["following"],
        "posts": user["posts"],
        "createdAt": user["created_at"],
        "updatedAt": user["updated_at"],
    }


def post_to_dict(post):
    if post is None:
        return None
    author = db.users.find_by_id(post["author_id"])
    by_id = {c["id"]: c for c in db.comments.find_by_ids(post["comments"])}
    comment_summaries = [
        {"_id": by_id[cid]["id"], "content": by_id[cid]["content"], "createdAt": by_id[cid]["created_at"]}
        for cid in post["comments"]
        if cid in by_id
    ]
    return {
        "_id": post["id"],
        "title": post["title"],
        "content": post["content"],
        "image": post["image"],
        "author_id": author_projection(author),
        "likes": post["likes"],
        "comments": comment_summaries,
        "createdAt": post["created_at"],
        "updatedAt": post["updated_at"],
    }


def profile_to_dict(user):
    """User document with its posts populated, newest first."""
    if user is None:
        return None
    profile = user_to_dict(user)
    own_posts = db.posts.find_by_ids(user["posts"], order_by="created_at DESC, rowid DESC")
    profile["posts"] = [post_to_dict(p) for p in own_posts]
    return profile


def comment_to_dict(comment):
    if comment is None:
        return None
    user = db.users.find_by_id(comment["user_id"])
    return {
        "_id": comment["id"],
        "user": {"_id": user["id"], "username": user["username"], "avatar": user["avatar"]} if user else None,
        "post": comment["post_id"],
        "content": comment["content"],
        "likes": comment["likes"],
        "createdAt": comment["created_at"],
    }


def message_to_dict(message):
    return {
        "_id": message["id"],
        "text": message["content"],
        "createdAt": message["created_at"],
        "senderId": message["sender_id"],
        "receiverId": message["receiver_id"],
    }
