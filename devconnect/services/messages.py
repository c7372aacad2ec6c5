from .. import db
from ..errors import Forbidden, NotFound, Unauthorized, ValidationError
from ..schemas import MessageCreate, require_object, validate
from ..serializers import message_to_dict


def send_message(sender_id, body):
    body = require_object(body)
    if not sender_id:
        raise Unauthorized("User not authenticated")

    sender = db.users.find_by_id(sender_id)
    if not sender:
        raise NotFound("User not found")

    receiver_id = body.get("receiverId")
    if not receiver_id:
        raise ValidationError("Receiver ID is required")

    if not any(str(i) == str(receiver_id) for i in sender["following"]):
        raise Forbidden("Cannot send message to user you are not following")

    data = validate(MessageCreate, body)
    message = {
        "id": db.new_id(),
        "sender_id": sender_id,
        "receiver_id": data.receiverId,
        "content": data.content,
        "created_at": db.utcnow(),
    }
    db.messages.save(message)
    return message_to_dict(message)


def get_messages_between_users(current_id, other_id):
    if not current_id:
        raise Unauthorized("User not authenticated")
    if not other_id:
        raise ValidationError("Receiver ID is required")

    found = db.messages.find(
        "(sender_id = ? AND receiver_id = ?) OR (sender_id = ? AND receiver_id = ?)",
        (current_id, other_id, other_id, current_id),
        order_by="created_at ASC, rowid ASC",
    )
    return [message_to_dict(m) for m in found]


def get_all_senders(current_id):
    """Everyone who has messaged ``current_id``, one entry per sender."""
    if not current_id:
        raise Unauthorized("User not authenticated")
    rows = db.query_db(
        """
        SELECT u.id AS _id, u.username AS username, u.avatar AS avatar
        FROM messages m JOIN users u ON u.id = m.sender_id
        WHERE m.receiver_id = ?
        GROUP BY m.sender_id
        ORDER BY MIN(m.rowid)
        """,
        (current_id,),
    )
    return [dict(r) for r in rows]
