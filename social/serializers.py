"""
Model -> JSON dicts.

Keys are camelCase and timestamps are epoch milliseconds, the shape the
XVO web client reads. Password hashes are never included.
"""

from .identity import privacy_for
from .models import PrivacySettings


def epoch_ms(value):
    if value is None:
        return None
    return round(value.timestamp() * 1000)


def _privacy(account):
    try:
        return account.privacy
    except PrivacySettings.DoesNotExist:
        return privacy_for(account)


def serialize_privacy(privacy):
    return {
        'allowFollowRequests': privacy.allow_follow_requests,
        'allowDirectMessages': privacy.allow_direct_messages,
        'showActivity': privacy.show_activity,
        'showLastOnline': privacy.show_last_online,
    }


def serialize_account(account):
    return {
        'id': account.id,
        'username': account.username,
        'name': account.display_name,
        'displayName': account.display_name,
        'bio': account.bio,
        'avatar': account.avatar,
        'followers': account.followers,
        'following': account.following,
        'privacySettings': serialize_privacy(_privacy(account)),
        'verifiedID': account.verified_id,
        'verificationRequested': account.verification_requested,
        'badge': account.badge,
        'badgeIssuedBy': account.badge_issued_by,
        'isAdmin': account.is_admin,
        'isSuspended': account.is_suspended,
        'lastOnline': epoch_ms(account.last_online),
        'isOnline': account.is_online,
    }


def serialize_message(message):
    return {
        'id': message.id,
        'senderId': message.sender_id,
        'receiverId': message.recipient_id,
        'text': message.text,
        'timestamp': epoch_ms(message.timestamp),
        'read': message.is_read,
    }


def serialize_conversation(summary):
    return {
        'peerId': summary['peer_id'],
        'unreadCount': summary['unread_count'],
        'message': serialize_message(summary['message']),
    }


def serialize_comment(comment):
    return {
        'id': comment.id,
        'postId': comment.post_id,
        'userId': comment.user_id,
        'text': comment.text,
        'timestamp': epoch_ms(comment.timestamp),
    }


def serialize_post(post):
    # expects likes, retweets and comments prefetched
    return {
        'id': post.id,
        'userId': post.user_id,
        'text': post.text,
        'image': post.image or None,
        'mood': post.mood or None,
        'location': post.location or None,
        'timestamp': epoch_ms(post.timestamp),
        'likes': [account.id for account in post.likes.all()],
        'retweets': [account.id for account in post.retweets.all()],
        'comments': [serialize_comment(comment) for comment in post.comments.all()],
    }


def serialize_story(story):
    return {
        'id': story.id,
        'userId': story.user_id,
        'text': story.text,
        'timestamp': epoch_ms(story.timestamp),
    }


def serialize_confession(confession):
    return {
        'id': confession.id,
        'text': confession.text,
        'timestamp': epoch_ms(confession.timestamp),
    }


def serialize_notification(notification):
    return {
        'id': notification.id,
        'type': notification.verb,
        'userId': notification.user_id,
        'fromUserId': notification.actor_id,
        'postId': notification.post_id,
        'read': notification.is_read,
        'timestamp': epoch_ms(notification.created_at),
    }
