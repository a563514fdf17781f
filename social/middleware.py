"""
================================================================================
XVO SOCIAL - CUSTOM MIDDLEWARE
================================================================================

@file        middleware.py
@description Caller identity and JSON error handling for the /api/ surface

MODULE PURPOSE
================================================================================
1. CallerIdentityMiddleware
   - Reads the claimed caller id from the X-User-Id header
   - Attaches it to the request as request.caller_id (int or None)

2. ApiExceptionMiddleware
   - Turns social.exceptions.ApiError into {"error": message} JSON
     responses with the matching status code
   - Anything else propagates to Django's normal 500 handling

SETTINGS
================================================================================
XVO_CALLER_HEADER: META key of the caller header (default HTTP_X_USER_ID)
================================================================================
"""

import logging

from django.conf import settings
from django.http import JsonResponse

from .exceptions import ApiError
from .guards import parse_caller_id

logger = logging.getLogger(__name__)


# ============================================================================
# CALLER IDENTITY MIDDLEWARE
# ============================================================================

class CallerIdentityMiddleware:
    """
    Attach the claimed caller id to every request.

    The header is a claim, not a proof. Views pass it to social.guards,
    which compare it with the identity each operation targets.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.caller_id = parse_caller_id(request.META.get(settings.XVO_CALLER_HEADER))
        return self.get_response(request)


# ============================================================================
# API EXCEPTION MIDDLEWARE
# ============================================================================

class ApiExceptionMiddleware:

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if not isinstance(exception, ApiError):
            return None

        if exception.status_code >= 500:
            logger.error(f"{request.method} {request.path} failed: {exception.message}")
        else:
            logger.info(
                f"{request.method} {request.path} -> {exception.status_code}: {exception.message}"
            )
        return JsonResponse({"error": exception.message}, status=exception.status_code)
