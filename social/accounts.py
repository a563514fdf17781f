"""
Account use cases: signup, login, profile updates, follows, verification
and the admin moderation panel.

``update_account`` is the single entry point for PUT /api/accounts/{id}.
It splits the body into typed patches and decides who may apply each:

    profile / privacy / password    the account owner only
    isSuspended, verification       admins (or the super-admin)
    badge, isAdmin, grantFollowers  the super-admin only

Values equal to the stored ones are dropped before any check, since the
legacy client PUTs the whole account object back. Every privilege is
checked before anything is written, and all writes of one request share
a transaction.
"""

import logging

from django.db import transaction

from . import guards, moderation
from .exceptions import Unauthorized
from .forms import LoginForm, ModerationForm, PasswordForm, PrivacyForm, ProfileForm, SignupForm
from .identity import store
from .models import PrivacySettings, User

logger = logging.getLogger(__name__)

ADMIN_ONLY = ('is_suspended', 'verification')
SUPER_ADMIN_ONLY = ('badge', 'is_admin', 'grant_followers')


def current_account(request):
    """Account named by the caller header; Unauthorized if missing or unknown."""
    caller = guards.require_caller(request)
    account = store.find_current(caller)
    if account is None:
        logger.warning(f"Caller {caller} does not match any account")
        raise Unauthorized("Unauthorized: Unknown caller")
    return account


def signup(payload):
    fields = SignupForm.from_json(payload).patch()
    return store.create(
        name=fields['name'],
        username=fields['username'],
        password=fields['password'],
        avatar=fields.get('avatar'),
    )


def login(payload):
    fields = LoginForm.from_json(payload).patch()
    return store.authenticate(fields['username'], fields['password'])


def _owner_changes(target, profile, privacy):
    """Drop profile and privacy values equal to the stored ones."""
    profile = {
        field: value for field, value in profile.items()
        if value != getattr(target, field)
    }
    if privacy:
        stored = PrivacySettings.objects.filter(user_id=target.id).first()
        privacy = {
            field: value for field, value in privacy.items()
            # a missing row means every flag is still at its default
            if value != (getattr(stored, field) if stored else True)
        }
    return profile, privacy


def _moderation_changes(target, patch):
    """Drop moderation keys that would leave the record as it is."""
    changes = dict(patch)
    if changes.get('is_suspended') == target.is_suspended:
        del changes['is_suspended']
    if changes.get('is_admin') == target.is_admin:
        del changes['is_admin']
    badge = changes.get('badge')
    if badge is not None and (None if badge == 'none' else badge) == target.badge:
        del changes['badge']
    return changes


def update_account(caller, account_id, payload):
    profile_form = ProfileForm.from_json(payload)
    privacy_form = PrivacyForm.from_json(payload)
    password_form = PasswordForm.from_json(payload)
    moderation_form = ModerationForm.from_json(payload)

    if caller is None:
        raise Unauthorized("Unauthorized: Authentication required")
    actor = store.find_current(caller)
    if actor is None:
        raise Unauthorized("Unauthorized: Unknown caller")
    target = store.get_current(account_id)

    profile, privacy = _owner_changes(target, profile_form.patch(), privacy_form.patch())
    password = password_form.patch().get('password')
    changes = _moderation_changes(target, moderation_form.patch())

    # --- Owner fields ---
    if profile or privacy or password:
        guards.require_same_identity(
            caller, target.id, "Unauthorized: You can only update your own account"
        )
        if profile or password:
            moderation.require_active(actor, 'profile')

    # --- Moderation fields ---
    if any(key in changes for key in ADMIN_ONLY):
        moderation.require_admin(actor)
    if any(key in changes for key in SUPER_ADMIN_ONLY):
        moderation.require_super_admin(actor)

    with transaction.atomic():
        if profile or privacy or password:
            store.update(target.id, profile=profile, privacy=privacy, password=password)
        if 'is_suspended' in changes:
            store.set_suspension(target.id, changes['is_suspended'])
        if 'verification' in changes:
            store.decide_verification(target.id, changes['verification'] == 'approve', decided_by=actor)
        if 'badge' in changes:
            store.assign_badge(target.id, changes['badge'], issued_by=actor)
        if 'is_admin' in changes:
            store.set_admin(target.id, changes['is_admin'])
        if 'grant_followers' in changes:
            store.grant_followers(target.id, changes['grant_followers'])

    return User.objects.get(id=target.id)


def heartbeat(caller, account_id):
    guards.require_same_identity(caller, account_id, "Unauthorized: You can only update your own status")
    return store.touch_last_online(account_id)


def follow(actor, target_id):
    return store.toggle_follow(actor.id, target_id)


def request_verification(caller, account_id):
    guards.require_same_identity(
        caller, account_id, "Unauthorized: You can only request verification for yourself"
    )
    return store.request_verification(account_id)


def admin_overview(actor):
    """Accounts the moderation panel lists."""
    moderation.require_admin(actor)
    accounts = User.objects.select_related('privacy').order_by('id')
    return {
        'pendingVerifications': list(
            accounts.filter(verification_requested=True, verified_id=False).exclude(id=actor.id)
        ),
        'suspended': list(accounts.filter(is_suspended=True)),
        'admins': list(accounts.filter(is_admin=True)),
    }
