"""
API error taxonomy.

Services raise these; ApiExceptionMiddleware turns them into
``{"error": message}`` JSON responses with the matching status code.
"""


class ApiError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super(ApiError, self).__init__(self.message)


class Unauthorized(ApiError):
    """Caller identity does not match the identity the operation targets."""
    status_code = 403
    default_message = "Unauthorized"


class Forbidden(ApiError):
    """Suspended account or insufficient privilege."""
    status_code = 403
    default_message = "Forbidden: insufficient privilege"


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


class PreconditionFailed(ApiError):
    status_code = 400
    default_message = "Precondition failed"


class AuthenticationFailed(ApiError):
    status_code = 401
    default_message = "Invalid username or password"
