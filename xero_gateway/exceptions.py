"""
Exceptions raised by the Xero gateway.

Errors reported by Xero inside a well-formed <Response> are returned as
`Error` records on the response and are never raised.
"""
from __future__ import annotations
from typing import Optional


class XeroGatewayError(Exception):
    """Base class for all gateway errors."""
    pass


class UnparseableResponse(XeroGatewayError):
    """Raised when a payload is not XML or its root is not <Response>."""

    def __init__(self, root_tag: Optional[str], detail: Optional[str] = None):
        self.root_tag = root_tag
        self.detail = detail
        if detail:
            message = f"Unparseable response: {detail}"
        else:
            message = f"Unrecognized response root element <{root_tag}>"
        super().__init__(message)


class DecodeError(XeroGatewayError):
    """Raised when a codec is handed an element that is not the one it decodes."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected <{expected}> element, got <{actual}>")


class NotLoadedError(XeroGatewayError):
    """Raised when nested data was not downloaded and cannot be fetched lazily."""
    pass


class XeroConnectionError(XeroGatewayError):
    """Raised when the connection to Xero fails."""
    pass


class XeroConnectTimeout(XeroConnectionError):
    """Raised when no connection could be opened, so the request never reached Xero."""
    pass


class XeroHTTPError(XeroGatewayError):
    """Raised when Xero answers with a non-success HTTP status."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class BadRequest(XeroHTTPError):
    pass


class ApiException(BadRequest):
    """
    A 400 response whose body is an <ApiException> document.

    Carries Xero's error number, exception type, message and the flattened
    per-element validation messages.
    """

    def __init__(
        self,
        message: str,
        error_number: str | None = None,
        type: str | None = None,
        validation_errors: list[str] | None = None,
        body: str | None = None,
    ):
        super().__init__(message, status_code=400, body=body)
        self.error_number = error_number
        self.type = type
        self.validation_errors = validation_errors or []


class OAuthError(XeroHTTPError):
    """401 from Xero: expired or invalid token, or tenant not connected."""

    def __init__(self, message: str, oauth_problem: str | None = None, body: str | None = None):
        super().__init__(message, status_code=401, body=body)
        self.oauth_problem = oauth_problem


class ObjectNotFound(XeroHTTPError):
    def __init__(self, url: str, body: str | None = None):
        super().__init__(f"Object not found at {url}", status_code=404, body=body)
        self.url = url


class RateLimitExceeded(XeroHTTPError):
    def __init__(self, retry_after: int | None = None, problem: str | None = None, body: str | None = None):
        message = "Xero rate limit exceeded"
        if problem:
            message += f" ({problem})"
        super().__init__(message, status_code=429, body=body)
        self.retry_after = retry_after
        self.problem = problem


class ServiceUnavailable(XeroHTTPError):
    def __init__(self, body: str | None = None):
        super().__init__("Xero is unavailable", status_code=503, body=body)
