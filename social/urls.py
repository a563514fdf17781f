"""
================================================================================
XVO SOCIAL - API URL CONFIGURATION
================================================================================

@file        urls.py
@description JSON API routes, mounted under /api/ by xvo/urls.py

URL STRUCTURE OVERVIEW
================================================================================
1. Accounts & Authentication (signup, login, profile, follow, verification)
2. Admin Moderation Panel
3. Direct Messages
4. Posts, Reactions & Comments
5. Stories & Confessions
6. Notifications

The caller's identity travels in the X-User-Id header (see
social.middleware.CallerIdentityMiddleware), never in the path.
================================================================================
"""

from django.urls import path

from . import views


urlpatterns = [

    # ========================================================================
    # SECTION 1: ACCOUNTS & AUTHENTICATION
    # ========================================================================

    path(
        "accounts",
        views.accounts,
        name="accounts"
    ),  # List accounts / sign up

    path(
        "accounts/<int:account_id>",
        views.account_detail,
        name="account_detail"
    ),  # Read / typed update

    path(
        "login",
        views.login_view,
        name="login"
    ),

    path(
        "accounts/<int:account_id>/heartbeat",
        views.heartbeat,
        name="heartbeat"
    ),  # Presence ping, throttled

    path(
        "accounts/<int:account_id>/follow",
        views.toggle_follow,
        name="toggle_follow"
    ),

    path(
        "accounts/<int:account_id>/verification-request",
        views.verification_request,
        name="verification_request"
    ),

    path(
        "accounts/<int:account_id>/story",
        views.account_story,
        name="account_story"
    ),  # Newest story of the account


    # ========================================================================
    # SECTION 2: ADMIN MODERATION PANEL
    # ========================================================================

    path(
        "admin/overview",
        views.admin_overview,
        name="admin_overview"
    ),  # Pending verifications, suspended accounts, admins


    # ========================================================================
    # SECTION 3: DIRECT MESSAGES
    # ========================================================================

    path(
        "messages",
        views.send_message,
        name="send_message"
    ),

    path(
        "messages/<int:resource_id>",
        views.messages_resource,
        name="messages_resource"
    ),  # GET: summaries for user id, DELETE: message by id

    path(
        "messages/<int:user_id>/<int:other_user_id>",
        views.conversation,
        name="conversation"
    ),  # Ordered history with one peer


    # ========================================================================
    # SECTION 4: POSTS, REACTIONS & COMMENTS
    # ========================================================================

    path(
        "posts",
        views.posts,
        name="posts"
    ),  # Feed / new post

    path(
        "posts/<int:post_id>",
        views.post_detail,
        name="post_detail"
    ),  # Edit / delete

    path(
        "posts/<int:post_id>/like",
        views.toggle_like,
        name="toggle_like"
    ),

    path(
        "posts/<int:post_id>/retweet",
        views.toggle_retweet,
        name="toggle_retweet"
    ),

    path(
        "posts/<int:post_id>/comments",
        views.add_comment,
        name="add_comment"
    ),

    path(
        "posts/<int:post_id>/comments/<int:comment_id>",
        views.delete_comment,
        name="delete_comment"
    ),


    # ========================================================================
    # SECTION 5: STORIES & CONFESSIONS
    # ========================================================================

    path(
        "stories",
        views.stories,
        name="stories"
    ),

    path(
        "confessions",
        views.confessions,
        name="confessions"
    ),


    # ========================================================================
    # SECTION 6: NOTIFICATIONS
    # ========================================================================

    path(
        "notifications",
        views.notifications_view,
        name="notifications"
    ),

    path(
        "notifications/read",
        views.mark_notifications_read,
        name="mark_notifications_read"
    ),
]
