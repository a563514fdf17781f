"""
================================================================================
XVO SOCIAL - DATABASE MODELS
================================================================================

@file        models.py
@description Django ORM models for accounts, posts, direct messages,
             stories, confessions and notifications

MODULE PURPOSE
================================================================================
1. Accounts
   - User (AbstractUser extension with moderation and verification flags)
   - PrivacySettings (OneToOne with User)

2. Content
   - Post (likes and retweets as ManyToMany)
   - Comment
   - Story (short-lived thoughts, newest one is the current story)
   - Confession (anonymous, no author stored)

3. Direct Messaging
   - Message (flat sender/recipient log; conversations are derived on read)

4. Notifications
   - Notification (likes, retweets, comments, follows, verification decisions)

FOLLOWER LISTS
================================================================================
followers/following are JSON lists of account ids rather than a Follow table.
Admin follower grants append synthetic negative ids, and the same id may
appear more than once. Lists are never de-duplicated.

MODEL RELATIONSHIPS
================================================================================
User (1) ──────> (1) PrivacySettings
User (1) ──────> (N) Post / Comment / Story / Notification
User (1) ──────> (N) Message (as sender and as recipient)
Post (N) <─────> (N) User (likes, retweets)
================================================================================
"""

from datetime import timedelta

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone as dj_timezone


# ============================================================================
# CONSTANTS & CHOICES
# ============================================================================

BADGE_CHOICES = [
    ('blue', 'Verified / Famous / Owner'),
    ('black', 'CEO / Admin'),
    ('grey', 'Business'),
    ('gold', 'Government'),
]

NOTIFICATION_VERBS = [
    ('like', 'liked your post'),
    ('retweet', 'retweeted your post'),
    ('comment', 'commented on your post'),
    ('follow', 'followed you'),
    ('verification_approved', 'approved your verification request'),
    ('verification_denied', 'denied your verification request'),
]


def default_avatar():
    return settings.XVO_DEFAULT_AVATAR


# ============================================================================
# SECTION 1: ACCOUNTS
# ============================================================================

class User(AbstractUser):
    """
    Account record with profile, social graph and moderation state.

    Username uniqueness is enforced case-sensitively by the database.
    The reserved super-admin name is matched case-insensitively elsewhere
    (see social.moderation); the two rules are kept independent.

    Attributes:
        display_name (CharField): Name shown on posts and profile
        bio (TextField): Profile biography
        avatar (URLField): Avatar image reference
        followers (JSONField): Account ids following this account
        following (JSONField): Account ids this account follows
        is_admin (BooleanField): Moderation privileges
        is_suspended (BooleanField): Blocks all content-producing actions
        verified_id (BooleanField): Verification approved by an admin
        verification_requested (BooleanField): Pending verification request
        badge (CharField): Badge colour assigned by the super-admin
        badge_issued_by (CharField): Username of the badge issuer
        last_online (DateTimeField): Last heartbeat

    Properties:
        is_online: True if the last heartbeat is within 5 minutes
    """

    # --- Profile ---
    display_name = models.CharField(
        max_length=150,
        blank=True,
        help_text="Name shown on posts and profile"
    )
    bio = models.TextField(
        blank=True,
        help_text="Profile biography"
    )
    avatar = models.URLField(
        max_length=500,
        default=default_avatar,
        help_text="Avatar image reference"
    )

    # --- Social Graph ---
    followers = models.JSONField(
        default=list,
        blank=True,
        help_text="Ids of accounts following this account (duplicates allowed)"
    )
    following = models.JSONField(
        default=list,
        blank=True,
        help_text="Ids of accounts this account follows"
    )

    # --- Moderation ---
    is_admin = models.BooleanField(
        default=False,
        help_text="Can suspend users and decide verification requests"
    )
    is_suspended = models.BooleanField(
        default=False,
        help_text="Suspended accounts cannot post, react, comment or message"
    )

    # --- Verification ---
    verified_id = models.BooleanField(
        default=False,
        help_text="Verification approved by an admin"
    )
    verification_requested = models.BooleanField(
        default=False,
        help_text="Verification request awaiting an admin decision"
    )
    badge = models.CharField(
        max_length=10,
        choices=BADGE_CHOICES,
        null=True,
        blank=True,
        help_text="Badge assigned by the super-admin"
    )
    badge_issued_by = models.CharField(
        max_length=150,
        null=True,
        blank=True,
        help_text="Username of the account that issued the badge"
    )

    # --- Presence ---
    last_online = models.DateTimeField(
        default=dj_timezone.now,
        help_text="Last heartbeat timestamp"
    )

    @property
    def is_online(self):
        if not self.last_online:
            return False
        return dj_timezone.now() - self.last_online < timedelta(minutes=5)

    def __str__(self):
        return self.username


class PrivacySettings(models.Model):
    """
    Per-account privacy flags.

    Created together with the account. Read it by user id rather than through
    a cached User so stale flags are never served.
    """

    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name='privacy',
        help_text="Account these settings belong to"
    )
    allow_follow_requests = models.BooleanField(
        default=True,
        help_text="Other accounts may start following"
    )
    allow_direct_messages = models.BooleanField(
        default=True,
        help_text="Other accounts may send direct messages"
    )
    show_activity = models.BooleanField(
        default=True,
        help_text="Activity is visible to others"
    )
    show_last_online = models.BooleanField(
        default=True,
        help_text="Last online time is visible to others"
    )

    def __str__(self):
        return f"Privacy for {self.user}"


# ============================================================================
# SECTION 2: CONTENT
# ============================================================================

class Post(models.Model):
    """
    Feed post with likes, retweets and comments.

    Example:
        post = Post.objects.create(user=author, text="Hello world!")
        post.likes.add(other_user)
    """

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='posts',
        help_text="Author of this post"
    )
    text = models.TextField(
        blank=True,
        help_text="Post text content"
    )
    image = models.URLField(
        max_length=500,
        null=True,
        blank=True,
        help_text="Attached image reference"
    )
    mood = models.CharField(
        max_length=50,
        null=True,
        blank=True
    )
    location = models.CharField(
        max_length=200,
        null=True,
        blank=True
    )
    timestamp = models.DateTimeField(
        auto_now_add=True,
        help_text="Creation timestamp"
    )
    likes = models.ManyToManyField(
        User,
        related_name='liked_posts',
        blank=True
    )
    retweets = models.ManyToManyField(
        User,
        related_name='retweeted_posts',
        blank=True
    )

    class Meta:
        ordering = ['-timestamp', '-id']

    def __str__(self):
        return f"{self.user} - {self.text[:50]}"


class Comment(models.Model):
    post = models.ForeignKey(
        Post,
        on_delete=models.CASCADE,
        related_name='comments',
        help_text="Post being commented on"
    )
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='comments',
        help_text="Comment author"
    )
    text = models.TextField()
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['timestamp', 'id']


class Story(models.Model):
    """
    Short "what's on your mind" thought. Only the newest story of an
    account is shown as its current story; older ones stay in the list.
    """

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='stories',
        help_text="Story author"
    )
    text = models.TextField()
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-timestamp', '-id']
        verbose_name_plural = 'stories'


class Confession(models.Model):
    """Anonymous post. The author is deliberately not stored."""

    text = models.TextField()
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-timestamp', '-id']


# ============================================================================
# SECTION 3: DIRECT MESSAGING
# ============================================================================

class MessageQuerySet(models.QuerySet):

    def involving(self, account_id):
        """Messages the account sent or received."""
        return self.filter(models.Q(sender_id=account_id) | models.Q(recipient_id=account_id))

    def between(self, first_id, second_id):
        return self.filter(
            models.Q(sender_id=first_id, recipient_id=second_id)
            | models.Q(sender_id=second_id, recipient_id=first_id)
        )


class Message(models.Model):
    """
    Direct message between two accounts.

    Messages form a flat append-only log. Conversation lists are derived
    from it on every read (social.conversations), nothing is denormalized.
    A message never changes after creation; only its sender or recipient
    may delete it.

    Attributes:
        sender (ForeignKey): Account that sent the message
        recipient (ForeignKey): Account that receives the message
        text (TextField): Message body
        timestamp (DateTimeField): Creation time (not strictly increasing
            across concurrent writers, ties are broken by id)
        is_read (BooleanField): Read flag, false on creation
    """

    sender = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='sent_messages',
        help_text="Account that sent this message"
    )
    recipient = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='received_messages',
        help_text="Account receiving this message"
    )
    text = models.TextField(
        help_text="Message text content"
    )
    timestamp = models.DateTimeField(
        default=dj_timezone.now,
        db_index=True,
        help_text="Message creation timestamp"
    )
    is_read = models.BooleanField(
        default=False,
        help_text="Read status"
    )

    objects = MessageQuerySet.as_manager()

    class Meta:
        ordering = ['timestamp', 'id']
        indexes = [
            models.Index(fields=['sender', 'recipient'], name='message_pair_idx'),
        ]

    def __str__(self):
        return f"{self.sender} to {self.recipient}: {self.text[:30]}"


# ============================================================================
# SECTION 4: NOTIFICATIONS
# ============================================================================

class Notification(models.Model):
    """
    Activity notification.

    Example:
        Notification.objects.create(
            user=post.user,
            actor=liker,
            verb='like',
            post=post
        )
    """

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='notifications',
        help_text="Account receiving this notification"
    )
    actor = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        help_text="Account that performed the action"
    )
    verb = models.CharField(
        max_length=30,
        choices=NOTIFICATION_VERBS
    )
    post = models.ForeignKey(
        Post,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        help_text="Associated post (if applicable)"
    )
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
