"""
Daymare Backend: Error Kinds and Exception Hierarchy
=====================================================

What:  One enumeration of error kinds and the exceptions that carry them.
How:   Every application exception is tagged with an ``ErrorKind``. The kind
       alone decides the HTTP status code and whether the exception's message
       may reach the client or is replaced by a fixed public text.
Who:   Raised by the article store and the route handlers; rendered by the
       router (``Router.dispatch``) and by the global handlers in ``main``.

Exception Hierarchy:
    DaymareError (base)
    ├── DecodeError              → DECODE_ERROR       400 "invalid request"
    ├── ValidationError          → VALIDATION_ERROR   400 raw message
    ├── NotFoundError            → NOT_FOUND          404 "Not found"
    │   ├── ArticleNotFoundError
    │   └── InvalidArticleIdError
    ├── StoreUnavailableError    → STORE_UNAVAILABLE  503 "store unavailable"
    └── InvalidRouteError        (startup only, never rendered)
    ResponseAlreadySentError     (programming error, rendered as 500)
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(Enum):
    """
    Deterministic mapping from error kind to HTTP status and message policy.

    Each member's value is ``(status_code, public_message)``. A ``None``
    public message means the exception's own message is client-safe and is
    returned verbatim; otherwise the fixed text replaces it.
    """

    DECODE_ERROR = (400, "invalid request")
    VALIDATION_ERROR = (400, None)
    NOT_FOUND = (404, "Not found")
    STORE_UNAVAILABLE = (503, "store unavailable")

    @property
    def status_code(self) -> int:
        return self.value[0]

    @property
    def redacted(self) -> bool:
        return self.value[1] is not None

    def public_message(self, message: str) -> str:
        return self.value[1] if self.redacted else message


class DaymareError(Exception):
    """
    Base exception for all Daymare application errors.

    Attributes:
        message:  Detailed description. Returned to the client only when the
                  kind is not redacted.
        context:  Extra debug info, logged but never returned.
    """

    kind: ErrorKind = ErrorKind.STORE_UNAVAILABLE

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @property
    def public_message(self) -> str:
        return self.kind.public_message(self.message)


class DecodeError(DaymareError):
    """The request body is not decodable JSON."""

    kind = ErrorKind.DECODE_ERROR

    def __init__(self, message: str = "invalid request", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class ValidationError(DaymareError):
    """
    The request body decoded but does not fit the endpoint's schema.

    The message names the offending field, so it is returned as is.
    """

    kind = ErrorKind.VALIDATION_ERROR

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(DaymareError):
    """A requested resource does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        message: Optional[str] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class ArticleNotFoundError(NotFoundError):
    """No article document carries the given identifier."""

    def __init__(self, article_id: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(resource="article", resource_id=article_id, context=context)


class InvalidArticleIdError(NotFoundError):
    """
    The identifier is not a valid ObjectId.

    Reported exactly like a missing article: clients cannot tell the two apart.
    """

    def __init__(self, article_id: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            resource="article",
            resource_id=article_id,
            context=context,
            message=f"'{article_id}' is not a valid article ID",
        )


class StoreUnavailableError(DaymareError):
    """
    A MongoDB round-trip failed.

    The driver error is kept in ``context`` for the logs; clients only ever
    see the fixed public message.
    """

    kind = ErrorKind.STORE_UNAVAILABLE

    def __init__(
        self,
        message: str = "The document store is unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidRouteError(DaymareError):
    """
    A route could not be registered.

    Raised while the route table is wired during startup (malformed pattern,
    registration after freeze), so it aborts the process instead of reaching
    a client.
    """

    def __init__(self, message: str, pattern: Optional[str] = None):
        super().__init__(message=message, context={"pattern": pattern} if pattern else None)
        self.pattern = pattern


class ResponseAlreadySentError(RuntimeError):
    """A handler tried to write a second response for the same request."""
