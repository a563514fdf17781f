import json
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from . import accounts as account_service
from . import content, messaging
from .exceptions import PreconditionFailed
from .guards import caller_id
from .identity import store
from .serializers import (
    epoch_ms,
    serialize_account,
    serialize_comment,
    serialize_confession,
    serialize_conversation,
    serialize_message,
    serialize_notification,
    serialize_post,
    serialize_story,
)

# Logger
logger = logging.getLogger(__name__)


def _json_body(request):
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise PreconditionFailed("Invalid JSON body")
    if not isinstance(payload, dict):
        raise PreconditionFailed("Expected a JSON object")
    return payload


# ============================================================================
# ACCOUNTS
# ============================================================================

@csrf_exempt
@require_http_methods(["GET", "POST"])
def accounts(request):
    if request.method == "POST":
        account = account_service.signup(_json_body(request))
        return JsonResponse(serialize_account(account), status=201)
    return JsonResponse([serialize_account(a) for a in store.all()], safe=False)


@csrf_exempt
@require_http_methods(["GET", "PUT"])
def account_detail(request, account_id):
    if request.method == "PUT":
        account = account_service.update_account(caller_id(request), account_id, _json_body(request))
    else:
        account = store.get(account_id)
    return JsonResponse(serialize_account(account))


@csrf_exempt
@require_POST
def login_view(request):
    account = account_service.login(_json_body(request))
    return JsonResponse(serialize_account(account))


@csrf_exempt
@require_POST
def heartbeat(request, account_id):
    account = account_service.heartbeat(caller_id(request), account_id)
    return JsonResponse({"lastOnline": epoch_ms(account.last_online)})


@csrf_exempt
@require_POST
def toggle_follow(request, account_id):
    actor = account_service.current_account(request)
    action, actor, target = account_service.follow(actor, account_id)
    return JsonResponse({
        "action": action,
        "followers": len(target.followers),
        "following": len(actor.following)
    })


@csrf_exempt
@require_POST
def verification_request(request, account_id):
    account, submitted = account_service.request_verification(caller_id(request), account_id)
    return JsonResponse({
        "status": "submitted" if submitted else "pending",
        "account": serialize_account(account)
    })


@require_GET
def account_story(request, account_id):
    store.get(account_id)
    story = content.current_story(account_id)
    return JsonResponse({"story": serialize_story(story) if story else None})


@require_GET
def admin_overview(request):
    actor = account_service.current_account(request)
    overview = account_service.admin_overview(actor)
    return JsonResponse({
        key: [serialize_account(a) for a in rows] for key, rows in overview.items()
    })


# ============================================================================
# DIRECT MESSAGES
# ============================================================================

@csrf_exempt
@require_http_methods(["GET", "DELETE"])
def messages_resource(request, resource_id):
    # /api/messages/<id> names an account on GET and a message on DELETE
    if request.method == "DELETE":
        messaging.delete_message(caller_id(request), resource_id)
        return JsonResponse({"success": True})
    summaries = messaging.inbox(caller_id(request), resource_id)
    return JsonResponse([serialize_conversation(s) for s in summaries], safe=False)


@require_GET
def conversation(request, user_id, other_user_id):
    history = messaging.conversation(caller_id(request), user_id, other_user_id)
    return JsonResponse([serialize_message(m) for m in history], safe=False)


@csrf_exempt
@require_POST
def send_message(request):
    message = messaging.send_message(caller_id(request), _json_body(request))
    return JsonResponse(serialize_message(message), status=201)


# ============================================================================
# POSTS
# ============================================================================

@csrf_exempt
@require_http_methods(["GET", "POST"])
def posts(request):
    if request.method == "POST":
        actor = account_service.current_account(request)
        post = content.create_post(actor, _json_body(request))
        return JsonResponse(serialize_post(post), status=201)
    return JsonResponse([serialize_post(p) for p in content.feed()], safe=False)


@csrf_exempt
@require_http_methods(["PUT", "DELETE"])
def post_detail(request, post_id):
    actor = account_service.current_account(request)
    if request.method == "DELETE":
        content.delete_post(actor, post_id)
        return JsonResponse({"success": True})
    post = content.edit_post(actor, post_id, _json_body(request))
    return JsonResponse(serialize_post(post))


@csrf_exempt
@require_POST
def toggle_like(request, post_id):
    actor = account_service.current_account(request)
    liked, count = content.toggle_like(actor, post_id)
    return JsonResponse({"liked": liked, "likes": count})


@csrf_exempt
@require_POST
def toggle_retweet(request, post_id):
    actor = account_service.current_account(request)
    retweeted, count = content.toggle_retweet(actor, post_id)
    return JsonResponse({"retweeted": retweeted, "retweets": count})


@csrf_exempt
@require_POST
def add_comment(request, post_id):
    actor = account_service.current_account(request)
    comment = content.add_comment(actor, post_id, _json_body(request))
    return JsonResponse(serialize_comment(comment), status=201)


@csrf_exempt
@require_http_methods(["DELETE"])
def delete_comment(request, post_id, comment_id):
    actor = account_service.current_account(request)
    content.delete_comment(actor, post_id, comment_id)
    return JsonResponse({"success": True})


# ============================================================================
# STORIES & CONFESSIONS
# ============================================================================

@csrf_exempt
@require_http_methods(["GET", "POST"])
def stories(request):
    if request.method == "POST":
        actor = account_service.current_account(request)
        story = content.create_story(actor, _json_body(request))
        return JsonResponse(serialize_story(story), status=201)
    return JsonResponse([serialize_story(s) for s in content.stories()], safe=False)


@csrf_exempt
@require_http_methods(["GET", "POST"])
def confessions(request):
    if request.method == "POST":
        actor = account_service.current_account(request)
        confession = content.post_confession(actor, _json_body(request))
        return JsonResponse(serialize_confession(confession), status=201)
    return JsonResponse([serialize_confession(c) for c in content.confessions()], safe=False)


# ============================================================================
# NOTIFICATIONS
# ============================================================================

@require_GET
def notifications_view(request):
    actor = account_service.current_account(request)
    notifications = content.notifications_for(actor)
    return JsonResponse([serialize_notification(n) for n in notifications], safe=False)


@csrf_exempt
@require_POST
def mark_notifications_read(request):
    actor = account_service.current_account(request)
    updated = content.mark_notifications_read(actor)
    return JsonResponse({"success": True, "updated": updated})
