"""Sender deduplication for the messaging inbox."""


def unique_senders(rows, exclude=()):
    """
    Collapses received messages to one entry per sender, keeping the first
    occurrence in ``rows`` order.

    Each row carries ``sender_id`` plus the sender's resolved ``username``
    and ``avatar``. Rows whose sender no longer resolves (``username`` is
    None) are skipped, as are senders whose id is in ``exclude``.
    """
    excluded = {str(i) for i in exclude}
    seen = {}
    for row in rows:
        if row["username"] is None:
            continue
        sender_id = str(row["sender_id"])
        if sender_id in excluded or sender_id in seen:
            continue
        seen[sender_id] = {
            "_id": sender_id,
            "username": row["username"],
            "avatar": row["avatar"],
        }
    return list(seen.values())
