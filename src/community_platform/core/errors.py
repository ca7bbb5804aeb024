"""Error taxonomy raised by the engine services.

Each error carries a stable ``kind`` and the HTTP status the API layer maps it
to. Services never raise ``HTTPException`` directly so they stay usable outside
of a request.
"""

from __future__ import annotations


class EngineError(RuntimeError):
    """Base class for business errors raised by the engine."""

    kind = "ERROR"
    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationError(EngineError):
    """Input the caller can correct: short queries, bad pagination, bad text."""

    kind = "VALIDATION"
    status_code = 400


class AuthRequiredError(EngineError):
    """A mutating operation was attempted without an authenticated identity."""

    kind = "AUTH_REQUIRED"
    status_code = 401

    def __init__(self, detail: str = "Please sign in to continue.") -> None:
        super().__init__(detail)


class ForbiddenError(EngineError):
    """The caller is authenticated but does not own the target."""

    kind = "FORBIDDEN"
    status_code = 403

    def __init__(self, detail: str = "You can edit or delete only items you authored.") -> None:
        super().__init__(detail)


class SelfActionForbiddenError(EngineError):
    """Voting on one's own post or comment."""

    kind = "SELF_ACTION_FORBIDDEN"
    status_code = 403

    def __init__(self, detail: str = "You can't vote on your own posts/comments.") -> None:
        super().__init__(detail)


class NotFoundError(EngineError):
    """Target is missing, soft-deleted, invisible, or outside the requested scope."""

    kind = "NOT_FOUND"
    status_code = 404

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(detail)


class ConflictError(EngineError):
    """The store reported a uniqueness violation."""

    kind = "CONFLICT"
    status_code = 409


class TransientStoreError(EngineError):
    """Unexpected store failure; the caller decides whether to retry."""

    kind = "TRANSIENT"
    status_code = 503

    def __init__(
        self,
        detail: str = "A temporary error occurred. Please try again in a moment.",
    ) -> None:
        super().__init__(detail)


__all__ = [
    "AuthRequiredError",
    "ConflictError",
    "EngineError",
    "ForbiddenError",
    "NotFoundError",
    "SelfActionForbiddenError",
    "TransientStoreError",
    "ValidationError",
]
