"""
Authorization guard for direct messaging.

Every message read/write carries a claimed caller id (``X-User-Id``,
attached to the request as ``request.caller_id`` by
CallerIdentityMiddleware) and the identity the operation targets. The
checks here only decide pass/fail; they never touch storage.
"""

import logging

from .exceptions import Unauthorized

logger = logging.getLogger(__name__)


def parse_caller_id(raw):
    """Header value -> int id, or None when missing or not an integer."""
    if raw is None:
        return None
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    # ids start at 1, "0" reads as no caller
    return value or None


def caller_id(request):
    return getattr(request, 'caller_id', None)


def require_caller(request, message="Unauthorized: Authentication required"):
    caller = caller_id(request)
    if caller is None:
        logger.warning(f"Rejected {request.method} {request.path}: no caller id")
        raise Unauthorized(message)
    return caller


def require_same_identity(caller, target_id, message="Unauthorized"):
    """Caller must be exactly the identity named in the path or body."""
    if caller is None or caller != target_id:
        logger.warning(f"Caller {caller} tried to act as {target_id}")
        raise Unauthorized(message)


def require_message_party(caller, message):
    if caller is None:
        raise Unauthorized("Unauthorized: Authentication required")
    if caller not in (message.sender_id, message.recipient_id):
        logger.warning(f"Caller {caller} is not a party to message {message.id}")
        raise Unauthorized("Unauthorized: You can only delete your own messages")
