"""Error taxonomy for design generation.

Every terminal failure of a generation request is expressed as a
:class:`GenerationError`.  Its ``message`` is safe to show to the user; its
``detail`` (when present) is for the server log only.

Provider failures are classified by :func:`classify_provider_failure`:

1. A structured provider error code, when the provider exposes one, is
   looked up in :data:`_CODE_KINDS`.
2. Otherwise the failure message is searched for ``"rate limit"`` and
   ``"content policy"`` (case-insensitive).  This is a best-effort
   heuristic; provider wording can change without notice.
3. Anything else is a generic provider error.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Classification of a failed generation request."""

    CONFIGURATION_MISSING = "configuration_missing"
    INVALID_INPUT = "invalid_input"
    CONTENT_POLICY_VIOLATION = "content_policy_violation"
    RATE_LIMITED = "rate_limited"
    PROVIDER_ERROR = "provider_error"
    UNEXPECTED = "unexpected"


# HTTP status for each kind.
_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.CONFIGURATION_MISSING: 500,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.CONTENT_POLICY_VIOLATION: 400,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.PROVIDER_ERROR: 500,
    ErrorKind.UNEXPECTED: 500,
}

# Caller-facing messages.
MISSING_API_KEY = "provider API key not configured"
INVALID_BODY = "invalid request body"
DESCRIPTION_REQUIRED = "description is required"
REFERENCE_IMAGE_TOO_LARGE = "reference image too large; upload an image under 10MB"
RATE_LIMIT_EXCEEDED = "rate limit exceeded, try again later"
CONTENT_POLICY = "content policy violation; modify your request"
PROVIDER_FAILED = "error generating image with provider"
UNEXPECTED_ERROR = "an unexpected error occurred"

# Provider error codes (OpenAI naming) mapped onto the taxonomy.
_CODE_KINDS: dict[str, ErrorKind] = {
    "rate_limit_exceeded": ErrorKind.RATE_LIMITED,
    "content_policy_violation": ErrorKind.CONTENT_POLICY_VIOLATION,
}

_KIND_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.RATE_LIMITED: RATE_LIMIT_EXCEEDED,
    ErrorKind.CONTENT_POLICY_VIOLATION: CONTENT_POLICY,
    ErrorKind.PROVIDER_ERROR: PROVIDER_FAILED,
}


class GenerationError(Exception):
    """Terminal failure of a design generation request.

    Attributes:
        kind: Taxonomy entry for the failure.
        message: Short, user-facing explanation.
        detail: Optional operator-facing detail.  Logged, never returned.
    """

    def __init__(self, kind: ErrorKind, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.detail = detail

    @property
    def status_code(self) -> int:
        """HTTP status associated with :attr:`kind`."""
        return _STATUS_CODES[self.kind]

    def __repr__(self) -> str:
        return f"GenerationError(kind={self.kind.value!r}, message={self.message!r})"


class ProviderFailure(Exception):
    """A provider call failed.

    Raised by provider implementations so the handler does not depend on any
    particular SDK's exception hierarchy.

    Attributes:
        code: Structured provider error code, or ``None`` when the provider
            did not supply one.
    """

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


def classify_provider_failure(exc: BaseException) -> GenerationError:
    """Map a failed provider call onto the error taxonomy.

    Args:
        exc: The exception raised by the provider call.  Any exception type
            is accepted; a ``code`` attribute is used when present.

    Returns:
        A :class:`GenerationError` with ``detail`` set to the provider's
        own message.
    """
    detail = str(exc)
    code = getattr(exc, "code", None)

    kind = _CODE_KINDS.get(code) if isinstance(code, str) else None
    if kind is None:
        lowered = detail.lower()
        if "rate limit" in lowered:
            kind = ErrorKind.RATE_LIMITED
        elif "content policy" in lowered:
            kind = ErrorKind.CONTENT_POLICY_VIOLATION
        else:
            kind = ErrorKind.PROVIDER_ERROR

    return GenerationError(kind, _KIND_MESSAGES[kind], detail=detail)
