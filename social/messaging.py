"""
Direct messaging: the message log and the operations exposed over HTTP.

Every operation runs the authorization guard first, then the moderation
gate, and only then touches the log. A rejected request therefore never
changes the log.
"""

import logging

from django.db import transaction

from . import guards, moderation
from .conversations import conversation_summaries
from .exceptions import NotFound, PreconditionFailed, Unauthorized
from .identity import store
from .models import Message

logger = logging.getLogger(__name__)


class MessageLog:
    """Append-only store of direct messages."""

    def append(self, sender_id, receiver_id, text, timestamp=None):
        """
        Add a message. Peers are not checked here; callers run the
        moderation gate first.
        """
        fields = {'sender_id': sender_id, 'recipient_id': receiver_id, 'text': text}
        if timestamp is not None:
            fields['timestamp'] = timestamp
        return Message.objects.create(**fields)

    def history(self, first_id, second_id):
        """Messages between two accounts, oldest first."""
        return list(Message.objects.between(first_id, second_id).order_by('timestamp', 'id'))

    def get(self, message_id):
        message = Message.objects.filter(id=message_id).first()
        if message is None:
            raise NotFound("Message not found")
        return message

    def remove(self, message_id):
        deleted, _ = Message.objects.filter(id=message_id).delete()
        if not deleted:
            raise NotFound("Message not found")


log = MessageLog()


# ============================================================================
# OPERATIONS
# ============================================================================

def inbox(caller, owner_id):
    guards.require_same_identity(
        caller, owner_id, "Unauthorized: You can only view your own messages"
    )
    return conversation_summaries(owner_id)


def conversation(caller, owner_id, peer_id):
    guards.require_same_identity(
        caller, owner_id, "Unauthorized: You can only view your own conversations"
    )
    return log.history(owner_id, peer_id)


def send_message(caller, payload):
    """
    Send ``payload['text']`` from ``senderId`` to ``receiverId``.

    Checks, in order: caller is the sender, sender exists and is not
    suspended, receiver exists and accepts direct messages, text is not
    blank.
    """
    sender_id = guards.parse_caller_id(payload.get('senderId'))
    guards.require_same_identity(
        caller, sender_id, "Unauthorized: You can only send messages as yourself"
    )

    sender = store.get_current(sender_id)
    moderation.require_active(sender, 'message')

    receiver_id = guards.parse_caller_id(payload.get('receiverId'))
    receiver = store.find_by_id(receiver_id) if receiver_id else None
    if receiver is None:
        raise NotFound("Recipient not found")
    moderation.require_can_receive_messages(receiver)

    text = payload.get('text')
    if not isinstance(text, str) or not text.strip():
        raise PreconditionFailed("Message text cannot be empty")

    with transaction.atomic():
        message = log.append(sender.id, receiver.id, text)

    logger.info(f"Message {message.id} sent from {sender.id} to {receiver.id}")
    return message


def delete_message(caller, message_id):
    if caller is None:
        raise Unauthorized("Unauthorized: Authentication required")

    with transaction.atomic():
        message = log.get(message_id)
        guards.require_message_party(caller, message)
        log.remove(message.id)

    logger.info(f"Message {message_id} deleted by {caller}")
