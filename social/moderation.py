"""
Moderation gate.

Decides whether an account in its current standing may perform an action:

- content-producing actions (post, like, retweet, comment, message, profile
  edit, story, confession) are refused for suspended accounts;
- admin actions need ``is_admin`` or the reserved super-admin username;
- badge assignment, admin toggling and follower grants need the
  super-admin username itself, ordinary admins are refused.

The super-admin name is compared case-insensitively. Username uniqueness
at signup stays case-sensitive; the two rules are separate on purpose.
"""

import logging

from django.conf import settings

from .exceptions import Forbidden, PreconditionFailed
from .models import PrivacySettings

logger = logging.getLogger(__name__)

SUSPENDED_MESSAGES = {
    'post': "You are suspended and cannot post",
    'react': "You are suspended and cannot react to posts",
    'comment': "You are suspended and cannot comment",
    'message': "You are suspended and cannot send messages",
    'profile': "You are suspended and cannot change your profile",
    'story': "You are suspended and cannot share stories",
    'confession': "You are suspended and cannot post confessions",
}


def is_super_admin(account):
    if account is None:
        return False
    return account.username.lower() == settings.XVO_SUPER_ADMIN_USERNAME.lower()


def is_admin(account):
    if account is None:
        return False
    return account.is_admin or is_super_admin(account)


def require_active(account, action):
    if account.is_suspended:
        logger.warning(f"Suspended account {account.id} attempted '{action}'")
        message = SUSPENDED_MESSAGES.get(action, "You are suspended")
        raise Forbidden(f"Forbidden: suspended. {message}")


def require_admin(account):
    if not is_admin(account):
        logger.warning(f"Account {getattr(account, 'id', None)} denied admin action")
        raise Forbidden("Forbidden: insufficient privilege. Admin only.")


def require_super_admin(account):
    if not is_super_admin(account):
        logger.warning(f"Account {getattr(account, 'id', None)} denied super-admin action")
        raise Forbidden(
            f"Forbidden: insufficient privilege. Only {settings.XVO_SUPER_ADMIN_USERNAME} can do this."
        )


def require_can_receive_messages(receiver):
    # accounts without a privacy row accept messages
    privacy = PrivacySettings.objects.filter(user_id=receiver.id).first()
    if privacy is not None and not privacy.allow_direct_messages:
        raise Forbidden("Forbidden: This user has disabled direct messages")


def require_verification_eligible(account):
    threshold = settings.XVO_VERIFICATION_FOLLOWER_THRESHOLD
    count = len(account.followers)
    if count < threshold:
        raise PreconditionFailed(
            f"You need {threshold:,} followers to request verification. "
            f"You currently have {count:,} followers."
        )
