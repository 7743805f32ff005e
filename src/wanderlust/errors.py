"""Domain errors.

Every error here is an expected, user-actionable condition. The global handler in
``wanderlust.middleware.error_handler`` renders them as ``{"detail", "code"}`` JSON
with the status code carried by the class; none of them is logged as a system error.
"""

from __future__ import annotations


class WanderlustError(Exception):
    """Base class for typed failures returned to the caller."""

    status_code: int = 400
    code: str = "error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message()
        super().__init__(self.message)

    def default_message(self) -> str:
        return "Request failed"


class Unauthenticated(WanderlustError):
    status_code = 401
    code = "unauthenticated"

    def default_message(self) -> str:
        return "Not authenticated"


class NotFound(WanderlustError):
    status_code = 404
    code = "not_found"

    def default_message(self) -> str:
        return "Not found"


class InvalidOperation(WanderlustError):
    status_code = 400
    code = "invalid_operation"


class SelfFollow(InvalidOperation):
    code = "self_follow"

    def default_message(self) -> str:
        return "Cannot follow yourself"


class AlreadyFollowing(InvalidOperation):
    status_code = 409
    code = "already_following"

    def default_message(self) -> str:
        return "Already following this user"


class NotFollowing(InvalidOperation):
    code = "not_following"

    def default_message(self) -> str:
        return "Not following this user"


class LimitExceeded(WanderlustError):
    status_code = 403
    code = "limit_exceeded"

    def __init__(self, message: str | None = None, *, limit: str | None = None, maximum: int | None = None) -> None:
        self.limit = limit
        self.maximum = maximum
        super().__init__(message)

    def default_message(self) -> str:
        return "Free tier limit reached. Upgrade to Pro to remove it."


class AuthorizationDenied(WanderlustError):
    status_code = 403
    code = "authorization_denied"

    def default_message(self) -> str:
        return "Not authorized"


class ValidationFailed(WanderlustError):
    status_code = 422
    code = "validation_failed"
