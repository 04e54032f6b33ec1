"""Tests for the resilient GitHub API client."""

import json
from unittest.mock import MagicMock, call, patch

import pytest
import requests

from common.http_client import (
    ApiClient,
    ForbiddenError,
    NotFoundError,
    RateLimitedError,
    ResponseKind,
    TransientError,
    classify_response,
)
from retention.metrics import RunMetrics

URL = "https://api.github.com/repos/octo/demo/releases?per_page=100&page=1"
RATE_LIMIT_BODY = json.dumps({"message": "API rate limit exceeded for user ID 1."})


def _response(status, text=""):
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    return resp


def _client(responses, **kwargs):
    session = MagicMock()
    session.request.side_effect = responses
    metrics = RunMetrics()
    client = ApiClient("ghp_secret", metrics=metrics, session=session, **kwargs)
    return client, session, metrics


class TestClassifyResponse:
    """Status/body classification."""

    def test_success_codes(self):
        assert classify_response(200, "[]") is ResponseKind.SUCCESS
        assert classify_response(204, "") is ResponseKind.SUCCESS

    def test_rate_limit_message_is_case_insensitive(self):
        body = json.dumps({"message": "You have exceeded a secondary Rate Limit."})
        assert classify_response(403, body) is ResponseKind.RATE_LIMITED

    def test_forbidden_without_marker(self):
        body = json.dumps({"message": "Resource not accessible by integration"})
        assert classify_response(403, body) is ResponseKind.FORBIDDEN
        assert classify_response(403, "not json") is ResponseKind.FORBIDDEN

    def test_not_found(self):
        assert classify_response(404, "") is ResponseKind.NOT_FOUND

    def test_everything_else_is_transient(self):
        for status in (0, 401, 422, 500, 502, 503):
            assert classify_response(status, "") is ResponseKind.TRANSIENT


@patch("common.http_client.time.sleep")
class TestApiClientCall:
    """Retry behaviour of ApiClient.call."""

    def test_success_returns_parsed_body(self, mock_sleep):
        client, session, metrics = _client([_response(200, '[{"id": 1}]')])

        assert client.call("GET", URL) == [{"id": 1}]
        assert metrics.api_calls == 1
        mock_sleep.assert_not_called()

        headers = session.request.call_args.kwargs["headers"]
        assert headers["Authorization"] == "Bearer ghp_secret"
        assert headers["Accept"] == "application/vnd.github+json"

    def test_no_content_returns_none(self, mock_sleep):
        client, _, metrics = _client([_response(204, "")])

        assert client.call("DELETE", URL) is None
        assert metrics.api_calls == 1

    def test_rate_limit_then_success_backs_off_linearly(self, mock_sleep):
        client, session, metrics = _client(
            [_response(403, RATE_LIMIT_BODY), _response(403, RATE_LIMIT_BODY), _response(200, "[]")],
            retry_delay=2,
        )

        assert client.call("GET", URL) == []
        assert session.request.call_count == 3
        assert mock_sleep.call_args_list == [call(2), call(4)]
        assert metrics.api_calls == 1

    def test_rate_limit_exhausted(self, mock_sleep):
        client, session, metrics = _client([_response(403, RATE_LIMIT_BODY)] * 3, retry_delay=2)

        with pytest.raises(RateLimitedError) as excinfo:
            client.call("GET", URL)

        assert excinfo.value.status_code == 403
        assert session.request.call_count == 3
        assert mock_sleep.call_args_list == [call(2), call(4)]
        assert metrics.api_calls == 1

    def test_forbidden_is_not_retried(self, mock_sleep):
        body = json.dumps({"message": "Must have admin rights to Repository."})
        client, session, metrics = _client([_response(403, body)])

        with pytest.raises(ForbiddenError):
            client.call("DELETE", URL)

        assert session.request.call_count == 1
        mock_sleep.assert_not_called()
        assert metrics.api_calls == 1

    def test_not_found_is_not_retried(self, mock_sleep):
        client, session, _ = _client([_response(404, '{"message": "Not Found"}')])

        with pytest.raises(NotFoundError) as excinfo:
            client.call("DELETE", URL)

        assert excinfo.value.status_code == 404
        assert session.request.call_count == 1
        mock_sleep.assert_not_called()

    def test_server_error_retries_with_fixed_delay(self, mock_sleep):
        client, session, metrics = _client([_response(500)] * 3, retry_delay=2)

        with pytest.raises(TransientError) as excinfo:
            client.call("GET", URL)

        assert excinfo.value.status_code == 500
        assert session.request.call_count == 3
        assert mock_sleep.call_args_list == [call(2), call(2)]
        assert metrics.api_calls == 1

    def test_server_error_recovers(self, mock_sleep):
        client, session, _ = _client([_response(502), _response(200, '{"ok": true}')])

        assert client.call("GET", URL) == {"ok": True}
        assert session.request.call_count == 2

    def test_connection_error_is_transient(self, mock_sleep):
        client, session, _ = _client(
            [requests.ConnectionError("reset"), _response(200, "[]")]
        )

        assert client.call("GET", URL) == []
        assert session.request.call_count == 2
        mock_sleep.assert_called_once()

    def test_transport_failure_exhausted_reports_status_zero(self, mock_sleep):
        client, _, _ = _client([requests.Timeout("slow")] * 2, max_retries=2)

        with pytest.raises(TransientError) as excinfo:
            client.call("GET", URL)

        assert excinfo.value.status_code == 0

    def test_every_call_counts_once(self, mock_sleep):
        client, _, metrics = _client(
            [_response(200, "[]"), _response(404), _response(500), _response(200, "[]")]
        )

        client.call("GET", URL)
        with pytest.raises(NotFoundError):
            client.call("GET", URL)
        client.call("GET", URL)

        assert metrics.api_calls == 3


class TestApiClientConfig:
    """Constructor validation."""

    def test_rejects_zero_retries(self):
        with pytest.raises(ValueError):
            ApiClient("t", max_retries=0, session=MagicMock())

    def test_error_url_has_no_credentials(self):
        err = NotFoundError("x", method="GET", url="https://user:pw@api.github.com/x?token=abc")
        assert "pw" not in err.url
        assert "abc" not in err.url
