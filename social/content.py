"""
Posts, reactions, comments, stories, confessions and notifications.

Every content-producing operation passes the moderation gate before it
writes. Reactions and comments on someone else's post notify the author.
"""

import logging

from django.db import transaction

from . import moderation
from .exceptions import Forbidden, NotFound, Unauthorized
from .forms import PostForm, TextForm
from .models import Comment, Confession, Notification, Post, Story

logger = logging.getLogger(__name__)


def _posts():
    return Post.objects.prefetch_related('likes', 'retweets', 'comments')


def _get_post(post_id, lock=False):
    queryset = Post.objects.select_for_update() if lock else Post.objects.all()
    post = queryset.filter(id=post_id).first()
    if post is None:
        raise NotFound("Post not found")
    return post


def _notify(post, actor, verb):
    if post.user_id != actor.id:
        Notification.objects.create(user_id=post.user_id, actor=actor, verb=verb, post=post)


# ============================================================================
# POSTS
# ============================================================================

def feed():
    """All posts, newest first."""
    return list(_posts())


def posts_by(account_id):
    return list(_posts().filter(user_id=account_id))


def create_post(account, payload):
    moderation.require_active(account, 'post')
    fields = PostForm.from_json(payload).patch()
    post = Post.objects.create(user=account, **fields)
    logger.info(f"Post {post.id} created by {account.id}")
    return _posts().get(id=post.id)


def edit_post(account, post_id, payload):
    moderation.require_active(account, 'post')
    text = TextForm.from_json(payload).patch()['text']

    with transaction.atomic():
        post = _get_post(post_id, lock=True)
        if post.user_id != account.id:
            raise Unauthorized("Unauthorized: You can only edit your own posts")
        post.text = text
        post.save(update_fields=['text'])

    logger.info(f"Post {post_id} edited by {account.id}")
    return _posts().get(id=post_id)


def delete_post(account, post_id):
    post = _get_post(post_id)
    if post.user_id != account.id and not moderation.is_admin(account):
        raise Forbidden("Forbidden: You can only delete your own posts")
    post.delete()
    logger.info(f"Post {post_id} deleted by {account.id}")


# ============================================================================
# REACTIONS
# ============================================================================

def _toggle_reaction(account, post_id, relation, verb):
    moderation.require_active(account, 'react')

    with transaction.atomic():
        post = _get_post(post_id, lock=True)
        reactors = getattr(post, relation)
        if reactors.filter(id=account.id).exists():
            reactors.remove(account)
            active = False
        else:
            reactors.add(account)
            active = True
            _notify(post, account, verb)
        count = reactors.count()

    logger.info(f"Account {account.id} {'added' if active else 'removed'} {verb} on post {post_id}")
    return active, count


def toggle_like(account, post_id):
    """Returns (liked, like_count)."""
    return _toggle_reaction(account, post_id, 'likes', 'like')


def toggle_retweet(account, post_id):
    """Returns (retweeted, retweet_count)."""
    return _toggle_reaction(account, post_id, 'retweets', 'retweet')


# ============================================================================
# COMMENTS
# ============================================================================

def add_comment(account, post_id, payload):
    moderation.require_active(account, 'comment')
    text = TextForm.from_json(payload).patch()['text']

    with transaction.atomic():
        post = _get_post(post_id)
        comment = Comment.objects.create(post=post, user=account, text=text)
        _notify(post, account, 'comment')

    logger.info(f"Comment {comment.id} added to post {post_id} by {account.id}")
    return comment


def delete_comment(account, post_id, comment_id):
    """Comment author, post author or an admin may delete a comment."""
    comment = Comment.objects.select_related('post').filter(id=comment_id, post_id=post_id).first()
    if comment is None:
        raise NotFound("Comment not found")

    allowed = (
        comment.user_id == account.id
        or comment.post.user_id == account.id
        or moderation.is_admin(account)
    )
    if not allowed:
        raise Forbidden("Forbidden: You cannot delete this comment")

    comment.delete()
    logger.info(f"Comment {comment_id} deleted by {account.id}")


# ============================================================================
# STORIES & CONFESSIONS
# ============================================================================

def stories():
    return list(Story.objects.all())


def current_story(account_id):
    return Story.objects.filter(user_id=account_id).first()


def create_story(account, payload):
    moderation.require_active(account, 'story')
    text = TextForm.from_json(payload).patch()['text']
    story = Story.objects.create(user=account, text=text)
    logger.info(f"Story {story.id} shared by {account.id}")
    return story


def confessions():
    return list(Confession.objects.all())


def post_confession(account, payload):
    # the caller is gated but never recorded
    moderation.require_active(account, 'confession')
    text = TextForm.from_json(payload).patch()['text']
    confession = Confession.objects.create(text=text)
    logger.info(f"Confession {confession.id} posted")
    return confession


# ============================================================================
# NOTIFICATIONS
# ============================================================================

def notifications_for(account):
    return list(Notification.objects.filter(user_id=account.id))


def mark_notifications_read(account):
    updated = Notification.objects.filter(user_id=account.id, is_read=False).update(is_read=True)
    logger.info(f"Marked {updated} notifications read for {account.id}")
    return updated
