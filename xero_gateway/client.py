"""
HTTP client for the Xero API.

Sends authenticated requests and classifies HTTP failures into the
exception hierarchy in `exceptions`. It knows nothing about the meaning of
response bodies; decoding is done by the dispatcher.
"""
from __future__ import annotations
from typing import Optional
from urllib.parse import parse_qs

import requests
from lxml import etree
from loguru import logger
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from .config import GatewayConfig
from .exceptions import (
    ApiException,
    BadRequest,
    OAuthError,
    ObjectNotFound,
    RateLimitExceeded,
    ServiceUnavailable,
    XeroConnectionError,
    XeroConnectTimeout,
    XeroHTTPError,
)
from .parsers.base import child_elements, parse_document, text

DEFAULT_HEADERS = {
    "Accept": "text/xml",
    "User-Agent": "xero-gateway/1.0",
}

# GET is safe to resend after any transient failure. Other methods may
# already have been applied by Xero, so they are only resent when Xero
# refused them (429) or the connection was never opened.
RETRYABLE = (XeroConnectionError, RateLimitExceeded, ServiceUnavailable)
RETRYABLE_UNSENT = (XeroConnectTimeout, RateLimitExceeded)
IDEMPOTENT_METHODS = frozenset({"GET"})

_backoff = wait_exponential(multiplier=1, min=1, max=30)


def _wait_for_retry(retry_state) -> float:
    """Honour Retry-After on rate limiting, back off exponentially otherwise."""
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    if isinstance(exc, RateLimitExceeded) and exc.retry_after:
        return float(min(exc.retry_after, 60))
    return _backoff(retry_state)


class XeroClient:
    """
    Authenticated HTTP client for Xero with retry logic.

    Features:
    - OAuth2 bearer token plus xero-tenant-id header on every request
    - Automatic retry with exponential backoff on connection errors,
      rate limiting (429) and service unavailability (503); PUT and POST
      are only resent on 429 or a connect timeout
    - Connection pooling via requests.Session
    """

    def __init__(self, config: Optional[GatewayConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or GatewayConfig.from_env()
        if self.config.access_token and not self.config.tenant_id:
            raise ValueError("Must provide a tenant id with an OAuth2 access token")
        self.session = session or requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)
        if self.config.access_token:
            self.session.headers["Authorization"] = f"Bearer {self.config.access_token}"
            self.session.headers["xero-tenant-id"] = self.config.tenant_id

    def get(self, url: str, params: Optional[dict] = None, headers: Optional[dict] = None) -> bytes:
        return self.request("GET", url, params=params, headers=headers)

    def put(self, url: str, body: str, params: Optional[dict] = None, headers: Optional[dict] = None) -> bytes:
        return self.request("PUT", url, params=params, body=body, headers=headers)

    def post(self, url: str, body: str, params: Optional[dict] = None, headers: Optional[dict] = None) -> bytes:
        return self.request("POST", url, params=params, body=body, headers=headers)

    def request(
        self,
        method: str,
        url: str,
        params: Optional[dict] = None,
        body: Optional[str] = None,
        headers: Optional[dict] = None,
    ) -> bytes:
        """
        Send a request, retrying transient failures, and return the raw body.

        Args:
            method: HTTP verb
            url: Absolute URL
            params: Query parameters
            body: XML request body, sent as the `xml` form field
            headers: Extra headers for this request only

        Returns:
            Response body bytes

        Raises:
            XeroConnectionError: If Xero cannot be reached after all retries
            XeroHTTPError: (or a subclass) for non-success statuses
        """
        retrying = Retrying(
            wait=_wait_for_retry,
            stop=stop_after_attempt(self.config.retry_attempts),
            retry=retry_if_exception_type(RETRYABLE if method in IDEMPOTENT_METHODS else RETRYABLE_UNSENT),
            before_sleep=lambda retry_state: logger.warning(
                f"Retrying Xero {method} {url} (attempt {retry_state.attempt_number}): "
                f"{retry_state.outcome.exception()}"
            ),
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                return self._send(method, url, params, body, headers)

    def _send(
        self,
        method: str,
        url: str,
        params: Optional[dict],
        body: Optional[str],
        headers: Optional[dict],
    ) -> bytes:
        data = {"xml": body} if body is not None else None
        logger.debug(f"Xero {method} {url} params={params or {}}")
        try:
            r = self.session.request(
                method,
                url,
                params=params or None,
                data=data,
                headers=headers,
                timeout=self.config.request_timeout,
            )
        except requests.ConnectTimeout as e:
            logger.error(f"Could not open a connection to Xero at {url}: {e}")
            raise XeroConnectTimeout(f"Connect timeout: {e}") from e
        except requests.ConnectionError as e:
            logger.error(f"Failed to connect to Xero at {url}: {e}")
            raise XeroConnectionError(f"Cannot connect to Xero: {e}") from e
        except requests.Timeout as e:
            logger.error(f"Xero request timed out after {self.config.request_timeout}s")
            raise XeroConnectionError(f"Request timeout: {e}") from e
        except requests.RequestException as e:
            logger.error(f"Xero request failed: {e}")
            raise XeroConnectionError(f"Request failed: {e}") from e

        if 200 <= r.status_code < 300:
            return r.content

        self._raise_for_status(r, url)

    def _raise_for_status(self, r: requests.Response, url: str) -> None:
        body = r.text
        status = r.status_code

        if status == 400:
            exc = self._api_exception(body)
            if exc is not None:
                logger.error(f"Xero rejected request: {exc}")
                raise exc
            raise BadRequest(f"Bad request to {url}", status_code=400, body=body)
        if status == 401:
            problem = self._oauth_problem(body, r.headers.get("WWW-Authenticate"))
            logger.error(f"Xero authorization failed: {problem or 'unauthorized'}")
            raise OAuthError(f"Unauthorized: {problem or body[:200]}", oauth_problem=problem, body=body)
        if status == 404:
            raise ObjectNotFound(url, body=body)
        if status == 429:
            retry_after = r.headers.get("Retry-After")
            raise RateLimitExceeded(
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
                problem=r.headers.get("X-Rate-Limit-Problem"),
                body=body,
            )
        if status == 503:
            raise ServiceUnavailable(body=body)

        logger.error(f"Xero returned HTTP {status} for {url}")
        raise XeroHTTPError(f"Unexpected HTTP {status} from Xero", status_code=status, body=body)

    @staticmethod
    def _api_exception(body: str) -> Optional[ApiException]:
        """Build an ApiException from an <ApiException> body, or None if the body is something else."""
        try:
            root = parse_document(body)
        except etree.XMLSyntaxError:
            return None
        if root.tag != "ApiException":
            return None

        validation_errors = []
        for error in root.iter("ValidationError"):
            message = text(error, "Message")
            if message:
                validation_errors.append(message)
        # Some exceptions nest a single <Message> per element instead
        if not validation_errors:
            for element in child_elements(root.find("Elements")):
                message = text(element, "Message")
                if message:
                    validation_errors.append(message)

        message = text(root, "Message") or "Xero API exception"
        return ApiException(
            message,
            error_number=text(root, "ErrorNumber"),
            type=text(root, "Type"),
            validation_errors=validation_errors,
            body=body,
        )

    @staticmethod
    def _oauth_problem(body: str, www_authenticate: Optional[str]) -> Optional[str]:
        if body and "oauth_problem" in body:
            problem = parse_qs(body.strip()).get("oauth_problem")
            if problem:
                return problem[0]
        if www_authenticate and "error=" in www_authenticate:
            return www_authenticate.split("error=", 1)[1].split(",")[0].strip('" ')
        return None

    def close(self):
        """Close the session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
