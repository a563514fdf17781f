"""
Read-through account cache.

Account reads go through the Django cache. Every ``User.save()`` drops the
cached record, once immediately and once more when the surrounding
transaction commits, so a reader can never re-cache a row that is about to
change. The next read re-populates it from the database. Writers that need
a consistent view (social.identity) bypass the cache and lock the row.

Cache keys:
    "account_{id}"   TTL XVO_ACCOUNT_CACHE_TTL
"""

import logging

from django.conf import settings
from django.core.cache import cache
from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import User

logger = logging.getLogger(__name__)


def _key(account_id):
    return f"account_{account_id}"


def get_account(account_id):
    """Cached account or None."""
    key = _key(account_id)
    account = cache.get(key)
    if account is not None:
        return account

    account = User.objects.filter(id=account_id).first()
    if account is not None:
        cache.set(key, account, settings.XVO_ACCOUNT_CACHE_TTL)
    return account


def forget_account(account_id):
    cache.delete(_key(account_id))


@receiver(post_save, sender=User)
def invalidate_account(sender, instance, **kwargs):
    forget_account(instance.pk)
    transaction.on_commit(lambda: forget_account(instance.pk))
