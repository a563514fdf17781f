"""
Typed patches for account and content mutations.

Request bodies are camelCase JSON. Each form declares the fields it accepts
and the JSON key each one is read from; anything else in the body is
ignored, so protected columns (id, password hash, moderation flags) can
never ride along with an unrelated update.

Only keys actually present in the body end up in ``patch()``. A missing
boolean therefore means "unchanged", not False.
"""

from django import forms
from django.conf import settings
from django.contrib.auth.validators import UnicodeUsernameValidator
from django.core.exceptions import NON_FIELD_ERRORS

from .exceptions import PreconditionFailed

# Placeholder the legacy client sends back in place of the stored hash
PASSWORD_UNCHANGED = 'hashed'

BADGE_FORM_CHOICES = [('none', 'None'), ('blue', 'Blue'), ('black', 'Black'), ('grey', 'Grey'), ('gold', 'Gold')]


class JsonPatchForm(forms.Form):
    """Form fed from a JSON dict using the ``json_keys`` mapping."""

    # form field name -> JSON key
    json_keys = {}

    @classmethod
    def from_json(cls, payload):
        data = {}
        for field, key in cls.json_keys.items():
            if key in payload:
                data[field] = payload[key]
        return cls(data=data)

    def patch(self):
        """Validated values for the fields present in the body."""
        if not self.is_valid():
            raise PreconditionFailed(_first_error(self))
        return {
            name: value for name, value in self.cleaned_data.items()
            if name in self.data and value is not None
        }


def _first_error(form):
    for field, errors in form.errors.items():
        if field == NON_FIELD_ERRORS:
            return errors[0]
        label = form.json_keys.get(field, field)
        return f"{label}: {errors[0]}"
    return "Invalid request"


class StrictBooleanField(forms.Field):
    """JSON booleans only; "false"/"0" strings are not guessed at."""

    def to_python(self, value):
        if value is None:
            return None
        if isinstance(value, bool):
            return value
        raise forms.ValidationError("Must be true or false")


# ============================================================================
# ACCOUNTS
# ============================================================================

class SignupForm(JsonPatchForm):
    json_keys = {
        'name': 'name',
        'username': 'username',
        'password': 'password',
        'avatar': 'avatar',
    }

    name = forms.CharField(max_length=150)
    username = forms.CharField(max_length=150, validators=[UnicodeUsernameValidator()])
    password = forms.CharField(min_length=6)
    avatar = forms.URLField(max_length=500, required=False, assume_scheme="https")


class LoginForm(JsonPatchForm):
    json_keys = {'username': 'username', 'password': 'password'}

    username = forms.CharField()
    password = forms.CharField(strip=False)


class ProfileForm(JsonPatchForm):
    json_keys = {
        'display_name': 'displayName',
        'username': 'username',
        'bio': 'bio',
        'avatar': 'avatar',
    }

    display_name = forms.CharField(max_length=150, required=False)
    username = forms.CharField(max_length=150, required=False, validators=[UnicodeUsernameValidator()])
    bio = forms.CharField(required=False, strip=False)
    avatar = forms.URLField(max_length=500, required=False, assume_scheme="https")

    def clean_username(self):
        username = self.cleaned_data['username']
        if 'username' in self.data and not username:
            raise forms.ValidationError("Username cannot be empty")
        return username

    def clean_avatar(self):
        # empty avatar falls back to the default picture
        return self.cleaned_data['avatar'] or settings.XVO_DEFAULT_AVATAR


class PrivacyForm(JsonPatchForm):
    json_keys = {
        'allow_follow_requests': 'allowFollowRequests',
        'allow_direct_messages': 'allowDirectMessages',
        'show_activity': 'showActivity',
        'show_last_online': 'showLastOnline',
    }

    allow_follow_requests = StrictBooleanField(required=False)
    allow_direct_messages = StrictBooleanField(required=False)
    show_activity = StrictBooleanField(required=False)
    show_last_online = StrictBooleanField(required=False)

    @classmethod
    def from_json(cls, payload):
        # also accept the nested {"privacySettings": {...}} shape
        nested = payload.get('privacySettings')
        if isinstance(nested, dict):
            payload = {**nested, **payload}
        return super(PrivacyForm, cls).from_json(payload)


class PasswordForm(JsonPatchForm):
    json_keys = {'password': 'password'}

    password = forms.CharField(min_length=6, strip=False, required=False)

    @classmethod
    def from_json(cls, payload):
        if payload.get('password') == PASSWORD_UNCHANGED:
            return cls(data={})
        return super(PasswordForm, cls).from_json(payload)


class ModerationForm(JsonPatchForm):
    json_keys = {
        'is_suspended': 'isSuspended',
        'verification': 'verification',
        'badge': 'badge',
        'is_admin': 'isAdmin',
        'grant_followers': 'grantFollowers',
    }

    is_suspended = StrictBooleanField(required=False)
    verification = forms.ChoiceField(choices=[('approve', 'Approve'), ('deny', 'Deny')], required=False)
    badge = forms.ChoiceField(choices=BADGE_FORM_CHOICES, required=False)
    is_admin = StrictBooleanField(required=False)
    grant_followers = forms.IntegerField(min_value=1, required=False)

    @classmethod
    def from_json(cls, payload):
        payload = dict(payload)
        # the legacy client clears a badge by sending null
        if 'badge' in payload and payload['badge'] is None:
            payload['badge'] = 'none'
        return super(ModerationForm, cls).from_json(payload)


# ============================================================================
# CONTENT
# ============================================================================

class PostForm(JsonPatchForm):
    json_keys = {
        'text': 'text',
        'image': 'image',
        'mood': 'mood',
        'location': 'location',
    }

    text = forms.CharField(required=False)
    image = forms.URLField(max_length=500, required=False, assume_scheme="https")
    mood = forms.CharField(max_length=50, required=False)
    location = forms.CharField(max_length=200, required=False)

    def clean(self):
        cleaned = super().clean()
        if not cleaned.get('text') and not cleaned.get('image'):
            raise forms.ValidationError("Please enter some text or add an image")
        return cleaned


class TextForm(JsonPatchForm):
    """Single required text body (comments, stories, confessions, post edits)."""

    json_keys = {'text': 'text'}

    text = forms.CharField()

