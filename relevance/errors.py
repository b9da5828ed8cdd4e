"""
Error taxonomy for the relevance engine.

- ValidationError: bad caller input (non-positive limit, empty id, unknown kind).
  Raised synchronously before any store access.
- UpstreamUnavailable: a store adapter failed or timed out.
- NotFound: an explicitly requested single item does not exist.
"""

from typing import Optional


class RecommendationError(Exception):
    """Base class for all engine errors."""


class ValidationError(RecommendationError, ValueError):
    """Invalid input supplied by the caller."""


class UpstreamUnavailable(RecommendationError):
    """A store adapter call failed or exceeded its timeout."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        detail = f"{operation} unavailable"
        if cause is not None:
            detail = f"{detail}: {type(cause).__name__}: {cause}"
        super().__init__(detail)


class NotFound(RecommendationError, LookupError):
    """A specific user or item requested by id does not exist."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")


def require_positive_limit(limit: int) -> int:
    """Return limit unchanged, or raise ValidationError if it is not a positive int."""
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise ValidationError(f"limit must be a positive integer, got {limit!r}")
    return limit


def require_id(value: Optional[str], name: str) -> str:
    """Return a stripped id, or raise ValidationError when it is missing or blank."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{name} is required")
    return str(value).strip()
