"""
Gmail Relay — Custom Exception Hierarchy
=========================================

What:  Application-specific exceptions for the fatal error scenarios.
How:   Each exception carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return JSON error responses with the matching HTTP status code.
Who:   Raised by the mail service and the Gmail provider; caught by handlers.

Exception Hierarchy:
    RelayError (base)
    ├── ValidationError       → 400 Bad Request  {error}
    ├── AuthenticationError   → 401 Unauthorized {error}
    ├── UpstreamError         → 500 Internal     {error, details}
    └── ProviderError         (provider-level failure, wrapped by the service)

Non-fatal failures (display-name lookups, applying the SENT label) are not
exceptions at all: they come back as `Degraded` results from
`gmail_relay.services.results` and the caller branches on them.
"""

from typing import Any, Dict, Optional


class RelayError(Exception):
    """
    Base exception for all relay errors.

    Attributes:
        message:  Human-readable description (safe to return in API response)
        context:  Additional debug info (logged, not returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(RelayError):
    """
    Raised when a required request field is missing or empty.

    HTTP:    400 Bad Request
    The message is static and names the missing field(s), e.g.
    "Missing required fields: gmail_id and access_token".
    Raised before any provider is created, so no upstream call happens.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        fields: Optional[list] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if fields:
            ctx["fields"] = list(fields)
        super().__init__(message=message, context=ctx)
        self.fields = list(fields or [])


class AuthenticationError(RelayError):
    """
    Raised when the Authorization header is absent.

    HTTP:    401 Unauthorized
    Only presence is checked; the relay never validates tokens itself.
    """

    def __init__(
        self,
        message: str = "Missing authorization header",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ProviderError(RelayError):
    """
    Raised by a mail provider when an upstream call fails.

    What:    Network failure, auth rejection, quota, or a malformed response.
    Who:     Raised by GmailProvider; the mail service wraps it into an
             UpstreamError carrying the operation's fixed error string.

    Attributes:
        status: Upstream HTTP status when one was received, else None.
    """

    def __init__(
        self,
        message: str = "Upstream provider call failed",
        status: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status is not None:
            ctx["status"] = status
        super().__init__(message=message, context=ctx)
        self.status = status


class UpstreamError(RelayError):
    """
    Raised when a primary upstream call of an operation fails.

    HTTP:    500 Internal Server Error
    Response: {"error": <fixed human string>, "details": <upstream text>}

    Never retried. Example:
        UpstreamError("Failed to archive email", details="Requested entity was not found.")
    """

    def __init__(
        self,
        message: str = "Upstream request failed",
        details: str = "",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.details = details
