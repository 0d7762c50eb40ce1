"""Tests for the HTTP client: headers, status classification and retries."""
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import requests

from xero_gateway.client import XeroClient
from xero_gateway.config import GatewayConfig
from xero_gateway.exceptions import (
    ApiException,
    BadRequest,
    OAuthError,
    ObjectNotFound,
    RateLimitExceeded,
    ServiceUnavailable,
    XeroConnectionError,
    XeroHTTPError,
)

FIX = Path(__file__).parent / "fixtures"
URL = "https://api.xero.test/api.xro/2.0/Invoices"

def read(p): return (FIX / p).read_text(encoding="utf-8")


def http_response(status_code, body="", headers=None):
    return Mock(status_code=status_code, content=body.encode("utf-8"), text=body, headers=headers or {})


@pytest.fixture
def session():
    s = requests.Session()
    s.request = Mock()
    return s


@pytest.fixture
def client(session):
    config = GatewayConfig(access_token="tok", tenant_id="tenant-1", retry_attempts=3, request_timeout=10)
    return XeroClient(config, session)


def test_auth_headers(client, session):
    assert session.headers["Authorization"] == "Bearer tok"
    assert session.headers["xero-tenant-id"] == "tenant-1"
    assert session.headers["Accept"] == "text/xml"


def test_token_without_tenant_rejected():
    with pytest.raises(ValueError):
        XeroClient(GatewayConfig(access_token="tok", tenant_id=None), requests.Session())


def test_get_returns_body(client, session):
    session.request.return_value = http_response(200, "<Response />")
    assert client.get(URL, {"page": 1}) == b"<Response />"
    session.request.assert_called_once_with(
        "GET", URL, params={"page": 1}, data=None, headers=None, timeout=10
    )


def test_put_sends_xml_form_field(client, session):
    session.request.return_value = http_response(200, "<Response />")
    client.put(URL, "<Invoice />", {"SummarizeErrors": "false"})
    kwargs = session.request.call_args.kwargs
    assert kwargs["data"] == {"xml": "<Invoice />"}
    assert kwargs["params"] == {"SummarizeErrors": "false"}


def test_api_exception_on_400(client, session):
    session.request.return_value = http_response(400, read("api_exception.xml"))
    with pytest.raises(ApiException) as exc_info:
        client.put(URL, "<Invoice />")
    exc = exc_info.value
    assert isinstance(exc, BadRequest)
    assert exc.status_code == 400
    assert exc.error_number == "10"
    assert exc.type == "ValidationException"
    assert str(exc) == "A validation exception occurred"
    assert exc.validation_errors == [
        "Email address must be valid.",
        "Account code '999' is not a valid code for this document.",
    ]


def test_plain_400_is_bad_request(client, session):
    session.request.return_value = http_response(400, "Bad things")
    with pytest.raises(BadRequest) as exc_info:
        client.get(URL)
    assert not isinstance(exc_info.value, ApiException)
    assert exc_info.value.body == "Bad things"


def test_oauth_problem_from_body(client, session):
    session.request.return_value = http_response(
        401, "oauth_problem=token_expired&oauth_problem_advice=The%20access%20token%20has%20expired"
    )
    with pytest.raises(OAuthError) as exc_info:
        client.get(URL)
    assert exc_info.value.oauth_problem == "token_expired"
    assert exc_info.value.status_code == 401


def test_oauth_problem_from_www_authenticate(client, session):
    session.request.return_value = http_response(
        401, "", {"WWW-Authenticate": 'Bearer error="invalid_token", error_description="expired"'}
    )
    with pytest.raises(OAuthError) as exc_info:
        client.get(URL)
    assert exc_info.value.oauth_problem == "invalid_token"


def test_not_found(client, session):
    session.request.return_value = http_response(404, "The resource you're looking for cannot be found")
    with pytest.raises(ObjectNotFound) as exc_info:
        client.get(URL + "/missing")
    assert exc_info.value.url == URL + "/missing"
    assert session.request.call_count == 1


@patch("time.sleep")
def test_rate_limit_retried_after_retry_after(mock_sleep, client, session):
    session.request.side_effect = [
        http_response(429, "", {"Retry-After": "5", "X-Rate-Limit-Problem": "minute"}),
        http_response(200, "<Response />"),
    ]
    assert client.get(URL) == b"<Response />"
    assert session.request.call_count == 2
    mock_sleep.assert_called_once_with(5.0)


@patch("time.sleep")
def test_rate_limit_exhausts_attempts(mock_sleep, client, session):
    session.request.return_value = http_response(429, "", {"Retry-After": "1", "X-Rate-Limit-Problem": "daily"})
    with pytest.raises(RateLimitExceeded) as exc_info:
        client.get(URL)
    assert exc_info.value.problem == "daily"
    assert exc_info.value.retry_after == 1
    assert session.request.call_count == 3


@patch("time.sleep")
def test_service_unavailable_retried(mock_sleep, client, session):
    session.request.return_value = http_response(503, "Service Unavailable")
    with pytest.raises(ServiceUnavailable):
        client.get(URL)
    assert session.request.call_count == 3
    assert mock_sleep.call_count == 2


@patch("time.sleep")
def test_connection_error_wrapped_and_retried(mock_sleep, client, session):
    session.request.side_effect = requests.ConnectionError("refused")
    with pytest.raises(XeroConnectionError) as exc_info:
        client.get(URL)
    assert isinstance(exc_info.value.__cause__, requests.ConnectionError)
    assert session.request.call_count == 3


@patch("time.sleep")
def test_timeout_wrapped(mock_sleep, client, session):
    session.request.side_effect = [requests.Timeout("slow"), http_response(200, "<Response />")]
    assert client.get(URL) == b"<Response />"


def test_other_status_not_retried(client, session):
    session.request.return_value = http_response(500, "boom")
    with pytest.raises(XeroHTTPError) as exc_info:
        client.get(URL)
    assert exc_info.value.status_code == 500
    assert session.request.call_count == 1


@patch("time.sleep")
def test_single_attempt_config(mock_sleep, session):
    client = XeroClient(GatewayConfig(access_token="tok", tenant_id="t", retry_attempts=1), session)
    session.request.return_value = http_response(503)
    with pytest.raises(ServiceUnavailable):
        client.get(URL)
    assert session.request.call_count == 1
    mock_sleep.assert_not_called()


@patch("time.sleep")
def test_put_not_resent_after_read_timeout(mock_sleep, client, session):
    """The request may already have created the invoice, so it is sent once."""
    session.request.side_effect = [requests.ReadTimeout("no answer"), http_response(200, "<Response />")]
    with pytest.raises(XeroConnectionError):
        client.put(URL, "<Invoice />")
    assert session.request.call_count == 1
    mock_sleep.assert_not_called()


@patch("time.sleep")
def test_post_not_resent_after_connection_drop_or_503(mock_sleep, client, session):
    session.request.side_effect = [requests.ConnectionError("reset by peer"), http_response(200, "<Response />")]
    with pytest.raises(XeroConnectionError):
        client.post(URL, "<Contact />")
    assert session.request.call_count == 1

    session.request.reset_mock(side_effect=True)
    session.request.return_value = http_response(503, "Service Unavailable")
    with pytest.raises(ServiceUnavailable):
        client.post(URL, "<Contact />")
    assert session.request.call_count == 1


@patch("time.sleep")
def test_put_resent_after_connect_timeout(mock_sleep, client, session):
    session.request.side_effect = [requests.ConnectTimeout("no route"), http_response(200, "<Response />")]
    assert client.put(URL, "<Invoice />") == b"<Response />"
    assert session.request.call_count == 2


@patch("time.sleep")
def test_put_resent_after_rate_limit(mock_sleep, client, session):
    session.request.side_effect = [
        http_response(429, "", {"Retry-After": "2"}),
        http_response(200, "<Response />"),
    ]
    assert client.put(URL, "<Invoice />") == b"<Response />"
    assert session.request.call_count == 2
    mock_sleep.assert_called_once_with(2.0)
