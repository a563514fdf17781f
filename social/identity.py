"""
Identity store.

Owns every write to an account row. Reads for display go through the
read-through cache (social.cache); writes lock the row with
``select_for_update()`` inside ``transaction.atomic()`` so two concurrent
updates to the same account are applied one after the other instead of
the later one silently discarding the earlier one.

Updates take explicit typed patches (see social.forms). There is no
"merge the request body into the record" path, so ``id``, the password
hash and the moderation flags can only change through the methods that
are meant to change them.
"""

import logging
from datetime import timedelta

from django.conf import settings
from django.core.cache import cache
from django.db import IntegrityError, transaction
from django.utils import timezone

from . import cache as account_cache
from . import moderation
from .exceptions import AuthenticationFailed, Forbidden, NotFound, PreconditionFailed
from .models import Notification, PrivacySettings, User

logger = logging.getLogger(__name__)

DUPLICATE_USERNAME = "This Username already exists"


def privacy_for(account):
    """Privacy row for an account, created on first access for legacy rows."""
    privacy, _ = PrivacySettings.objects.get_or_create(user_id=account.id)
    return privacy


def _locked(account_id):
    """Account row locked for the rest of the surrounding transaction."""
    try:
        return User.objects.select_for_update().get(id=account_id)
    except User.DoesNotExist:
        raise NotFound("Account not found")


def _locked_pair(first_id, second_id):
    # lock in id order so two opposite follow toggles cannot deadlock
    rows = User.objects.select_for_update().filter(id__in=[first_id, second_id]).order_by('id')
    accounts = {account.id: account for account in rows}
    if first_id not in accounts or second_id not in accounts:
        raise NotFound("Account not found")
    return accounts[first_id], accounts[second_id]


class IdentityStore:

    # ====================================================================
    #       LOOKUPS
    # ====================================================================

    def find_by_id(self, account_id):
        return account_cache.get_account(account_id)

    def get(self, account_id):
        account = self.find_by_id(account_id)
        if account is None:
            raise NotFound("Account not found")
        return account

    def find_current(self, account_id):
        """
        Uncached read, for moderation and privilege checks.

        The account cache is per process, so another worker's suspension or
        demotion may not have reached it yet.
        """
        return User.objects.filter(id=account_id).first()

    def get_current(self, account_id):
        account = self.find_current(account_id)
        if account is None:
            raise NotFound("Account not found")
        return account

    def find_by_username(self, username):
        """Exact, case-sensitive match."""
        return User.objects.filter(username=username).first()

    def all(self):
        return list(User.objects.select_related('privacy').order_by('id'))

    def authenticate(self, username, password):
        account = self.find_by_username(username)
        if account is None or not account.check_password(password):
            logger.warning(f"Failed login for username '{username}'")
            raise AuthenticationFailed()
        return account

    # ====================================================================
    #       CREATE / UPDATE
    # ====================================================================

    def create(self, name, username, password, avatar=None):
        if User.objects.filter(username=username).exists():
            raise PreconditionFailed(DUPLICATE_USERNAME)

        try:
            with transaction.atomic():
                account = User.objects.create_user(
                    username=username,
                    password=password,
                    display_name=name,
                    avatar=avatar or settings.XVO_DEFAULT_AVATAR,
                )
                PrivacySettings.objects.create(user=account)
        except IntegrityError:
            # lost a race with a concurrent signup for the same name
            logger.warning(f"IntegrityError during signup for '{username}'")
            raise PreconditionFailed(DUPLICATE_USERNAME)

        logger.info(f"Created account {account.id} ({account.username})")
        return account

    def update(self, account_id, profile=None, privacy=None, password=None):
        """
        Apply typed patches to one account.

        Args:
            profile: cleaned ProfileForm patch (display_name, username, bio, avatar)
            privacy: cleaned PrivacyForm patch
            password: new plain-text password, hashed before storing

        Returns:
            User: the updated account
        """
        with transaction.atomic():
            account = _locked(account_id)

            if profile:
                username = profile.get('username')
                if (username and username != account.username
                        and User.objects.filter(username=username).exists()):
                    raise PreconditionFailed(DUPLICATE_USERNAME)
                for field, value in profile.items():
                    setattr(account, field, value)

            if password:
                account.set_password(password)

            if profile or password:
                account.save()

            if privacy:
                row, _ = PrivacySettings.objects.select_for_update().get_or_create(user_id=account.id)
                for field, value in privacy.items():
                    setattr(row, field, value)
                row.save(update_fields=list(privacy))

        logger.info(
            f"Updated account {account_id}: profile={sorted(profile or {})} "
            f"privacy={sorted(privacy or {})} password={bool(password)}"
        )
        return account

    def touch_last_online(self, account_id):
        """
        Record a heartbeat.

        Writes at most once per XVO_HEARTBEAT_INTERVAL_SECONDS per account;
        heartbeats in between are answered from the current record.
        """
        interval = settings.XVO_HEARTBEAT_INTERVAL_SECONDS
        now = timezone.now()
        cache_key = f"last_online_update_{account_id}"
        last_update = cache.get(cache_key)

        if last_update and (now - last_update) < timedelta(seconds=interval):
            return self.get(account_id)

        with transaction.atomic():
            account = _locked(account_id)
            account.last_online = now
            account.save(update_fields=['last_online'])

        cache.set(cache_key, now, interval)
        return account

    # ====================================================================
    #       SOCIAL GRAPH
    # ====================================================================

    def toggle_follow(self, actor_id, target_id):
        """
        Follow or unfollow ``target_id``.

        Returns:
            tuple: (action, actor, target) where action is "followed" or
            "unfollowed"
        """
        if actor_id == target_id:
            raise PreconditionFailed("Cannot follow yourself")

        with transaction.atomic():
            actor, target = _locked_pair(actor_id, target_id)

            if target.id in actor.following:
                actor.following = [i for i in actor.following if i != target.id]
                target.followers = [i for i in target.followers if i != actor.id]
                action = "unfollowed"
            else:
                if not privacy_for(target).allow_follow_requests:
                    raise Forbidden("This user has disabled follow requests")
                actor.following = actor.following + [target.id]
                target.followers = target.followers + [actor.id]
                action = "followed"
                Notification.objects.create(user=target, actor=actor, verb='follow')

            actor.save(update_fields=['following'])
            target.save(update_fields=['followers'])

        logger.info(f"Account {actor_id} {action} {target_id}")
        return action, actor, target

    # ====================================================================
    #       VERIFICATION
    # ====================================================================

    def request_verification(self, account_id):
        """
        Submit a verification request.

        Returns:
            tuple: (account, submitted). ``submitted`` is False when a
            request was already pending; nothing changes in that case.
        """
        with transaction.atomic():
            account = _locked(account_id)
            if account.verified_id:
                raise PreconditionFailed("Your account is already verified")
            moderation.require_verification_eligible(account)
            if account.verification_requested:
                return account, False
            account.verification_requested = True
            account.save(update_fields=['verification_requested'])

        logger.info(f"Account {account_id} requested verification")
        return account, True

    def decide_verification(self, account_id, approve, decided_by):
        with transaction.atomic():
            account = _locked(account_id)
            if approve:
                account.verified_id = True
            account.verification_requested = False
            account.save(update_fields=['verified_id', 'verification_requested'])
            Notification.objects.create(
                user=account,
                actor=decided_by,
                verb='verification_approved' if approve else 'verification_denied',
            )

        logger.info(
            f"{decided_by.username} {'approved' if approve else 'denied'} "
            f"verification for account {account_id}"
        )
        return account

    # ====================================================================
    #       MODERATION STATE
    # ====================================================================

    def set_suspension(self, account_id, suspended):
        return self._set_flag(account_id, 'is_suspended', suspended)

    def set_admin(self, account_id, is_admin):
        return self._set_flag(account_id, 'is_admin', is_admin)

    def _set_flag(self, account_id, field, value):
        with transaction.atomic():
            account = _locked(account_id)
            setattr(account, field, value)
            account.save(update_fields=[field])
        logger.info(f"Account {account_id}: {field}={value}")
        return account

    def assign_badge(self, account_id, badge, issued_by):
        """Set a badge colour; ``'none'`` clears both badge and issuer."""
        with transaction.atomic():
            account = _locked(account_id)
            if badge == 'none':
                account.badge = None
                account.badge_issued_by = None
            else:
                account.badge = badge
                account.badge_issued_by = issued_by.username
            account.save(update_fields=['badge', 'badge_issued_by'])

        logger.info(f"{issued_by.username} set badge of account {account_id} to {badge}")
        return account

    def grant_followers(self, account_id, count):
        """
        Append ``count`` synthetic follower ids.

        Synthetic ids are negative and count down from the smallest id
        already present, so they never collide with real accounts or with
        an earlier grant.
        """
        limit = settings.XVO_FOLLOWER_GRANT_BATCH_LIMIT
        if count <= 0:
            raise PreconditionFailed("Follower count must be greater than 0")
        if count > limit:
            raise PreconditionFailed(f"You can grant at most {limit:,} followers at a time")

        with transaction.atomic():
            account = _locked(account_id)
            start = min(account.followers + [0]) - 1
            account.followers = account.followers + list(range(start, start - count, -1))
            account.save(update_fields=['followers'])

        logger.info(f"Granted {count} followers to account {account_id}")
        return account


store = IdentityStore()
