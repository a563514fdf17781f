"""
Conversation aggregator.

Folds a participant's messages into one summary per peer: the latest
message exchanged with that peer plus the number of unread messages the
peer has sent. "Latest" is the greatest ``(timestamp, id)`` pair, so two
messages created in the same millisecond still have a stable winner.
"""

from collections import defaultdict

from .models import Message


def _order_key(message):
    return (message.timestamp, message.id)


def _peer_of(owner_id, message):
    if message.sender_id == owner_id:
        return message.recipient_id
    if message.recipient_id == owner_id:
        return message.sender_id
    return None


def summarize(owner_id, messages):
    """
    Build conversation summaries for ``owner_id``.

    Messages the owner is not a party to are skipped. Summaries are sorted
    newest conversation first.

    Returns:
        list of dicts: {'peer_id', 'unread_count', 'message'}
    """
    latest = {}
    unread = defaultdict(int)

    for message in messages:
        peer_id = _peer_of(owner_id, message)
        if peer_id is None:
            continue

        if message.recipient_id == owner_id and not message.is_read:
            unread[peer_id] += 1

        current = latest.get(peer_id)
        if current is None or _order_key(message) > _order_key(current):
            latest[peer_id] = message

    ordered = sorted(latest.items(), key=lambda item: _order_key(item[1]), reverse=True)
    return [
        {'peer_id': peer_id, 'unread_count': unread[peer_id], 'message': message}
        for peer_id, message in ordered
    ]


def conversation_summaries(owner_id):
    messages = Message.objects.involving(owner_id)
    return summarize(owner_id, messages)
