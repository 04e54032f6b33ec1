"""Resilient HTTP client for the GitHub REST API.

Wraps ``requests`` with bounded retries: rate-limited responses back off
linearly with the attempt number, other transient failures (5xx, transport
errors) wait a fixed delay. Forbidden and not-found responses fail at once.
Every call counts as exactly one API call in the run metrics, however many
attempts it took.
"""
from __future__ import annotations

import json
import logging
import time
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, redact, safe_url, Timer

if TYPE_CHECKING:  # pragma: no cover
    from retention.metrics import RunMetrics

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A GitHub API call that did not succeed."""

    def __init__(self, message: str, *, method: str, url: str, status_code: int = 0):
        super().__init__(message)
        self.method = method
        self.url = safe_url(url)
        self.status_code = status_code


class RateLimitedError(ApiError):
    """Rate limit still in effect after all retries."""


class ForbiddenError(ApiError):
    """403 without a rate-limit indicator."""


class NotFoundError(ApiError):
    """404 from the API."""


class TransientError(ApiError):
    """Generic failure that persisted through all retries."""


class ResponseKind(Enum):
    """Classification of a single HTTP attempt."""

    SUCCESS = "success"
    RATE_LIMITED = "rate_limited"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    TRANSIENT = "transient"


class RetryState(Enum):
    """States of a single call's retry loop."""

    ATTEMPTING = "attempting"
    WAITING = "waiting"
    EXHAUSTED = "exhausted"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def _body_message(text: str) -> str:
    """Extract the ``message`` field of a JSON error body, or the raw text."""
    if not text:
        return ""
    try:
        data = json.loads(text)
    except (ValueError, TypeError):
        return text
    if isinstance(data, dict):
        return str(data.get("message") or "")
    return ""


def classify_response(status_code: int, text: str) -> ResponseKind:
    """Map a status code and body onto a ResponseKind."""
    if status_code in (200, 204):
        return ResponseKind.SUCCESS
    if status_code == 403:
        if Constants.RATE_LIMIT_MARKER in _body_message(text).lower():
            return ResponseKind.RATE_LIMITED
        return ResponseKind.FORBIDDEN
    if status_code == 404:
        return ResponseKind.NOT_FOUND
    return ResponseKind.TRANSIENT


def _parse_body(text: str) -> Optional[Any]:
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


class ApiClient:
    """Issues single GitHub API operations with retry and rate-limit backoff."""

    def __init__(
        self,
        token: str,
        *,
        metrics: Optional["RunMetrics"] = None,
        max_retries: int = Constants.HTTP_RETRY_MAX,
        retry_delay: float = Constants.HTTP_RETRY_DELAY_SEC,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            token: GitHub token sent as a bearer credential.
            metrics: Run counters; ``api_calls`` is incremented per call.
            max_retries: Total attempts allowed for retryable failures.
            retry_delay: Base delay in seconds between attempts.
            session: Optional pre-built requests session.
        """
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.token = token
        self.metrics = metrics
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.session = session or requests.Session()

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers including authorization."""
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": Constants.GITHUB_ACCEPT,
            "X-GitHub-Api-Version": Constants.GITHUB_API_VERSION,
            "User-Agent": Constants.USER_AGENT,
        }

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self.session.close()

    def _attempt(self, method: str, url: str, attempt: int) -> Tuple[int, str]:
        """Perform one HTTP attempt; transport errors come back as status 0."""
        safe_target = safe_url(url)
        with Timer() as t:
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP request",
                    extra=extra_context(
                        event="http_request",
                        component="http_client",
                        action=method,
                        target=safe_target,
                        attempt=attempt + 1,
                    ),
                )
            try:
                response = self.session.request(
                    method,
                    url,
                    headers=self._get_headers(),
                    timeout=Constants.REQUEST_TIMEOUT,
                )
            except requests.Timeout:
                logger.warning(
                    "%s %s timed out after %s seconds",
                    method,
                    safe_target,
                    Constants.REQUEST_TIMEOUT,
                )
                return 0, "timeout"
            except requests.RequestException as exc:  # includes ConnectionError
                logger.warning("%s %s connection error: %s", method, safe_target, redact(str(exc)))
                return 0, str(exc)
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP response",
                    extra=extra_context(
                        event="http_response",
                        component="http_client",
                        action=method,
                        status_code=response.status_code,
                        duration_ms=t.duration_ms(),
                        target=safe_target,
                    ),
                )
            return response.status_code, response.text or ""

    def call(self, method: str, url: str) -> Optional[Any]:
        """Perform ``method`` on ``url`` and return the decoded body.

        Raises:
            RateLimitedError: rate limit persisted through every attempt.
            ForbiddenError: 403 without a rate-limit indicator.
            NotFoundError: 404.
            TransientError: any other failure persisted through every attempt.
        """
        if self.metrics is not None:
            self.metrics.record_api_call()

        safe_target = safe_url(url)
        state = RetryState.ATTEMPTING
        attempt = 0
        status_code, text = 0, ""
        kind = ResponseKind.TRANSIENT

        while state in (RetryState.ATTEMPTING, RetryState.WAITING):
            status_code, text = self._attempt(method, url, attempt)
            kind = classify_response(status_code, text)

            if kind is ResponseKind.SUCCESS:
                state = RetryState.SUCCEEDED
            elif kind in (ResponseKind.FORBIDDEN, ResponseKind.NOT_FOUND):
                state = RetryState.FAILED
            elif attempt + 1 >= self.max_retries:
                state = RetryState.EXHAUSTED
            else:
                state = RetryState.WAITING
                if kind is ResponseKind.RATE_LIMITED:
                    delay = self.retry_delay * (attempt + 1)
                    logger.warning(
                        "Rate limit exceeded for %s %s. Waiting %ss before retry...",
                        method,
                        safe_target,
                        delay,
                    )
                else:
                    delay = self.retry_delay
                    logger.warning(
                        "API call failed with HTTP %s: %s %s", status_code, method, safe_target
                    )
                    logger.info(
                        "Retrying in %ss... (attempt %d/%d)",
                        delay,
                        attempt + 2,
                        self.max_retries,
                    )
                time.sleep(delay)
                attempt += 1

        if state is RetryState.SUCCEEDED:
            return _parse_body(text)

        if state is RetryState.FAILED:
            if kind is ResponseKind.NOT_FOUND:
                logger.warning("Resource not found (404): %s %s", method, safe_target)
                raise NotFoundError(
                    f"Resource not found: {safe_target}",
                    method=method,
                    url=url,
                    status_code=status_code,
                )
            logger.error("API call forbidden (403): %s %s", method, safe_target)
            raise ForbiddenError(
                f"Forbidden: {_body_message(text) or safe_target}",
                method=method,
                url=url,
                status_code=status_code,
            )

        if kind is ResponseKind.RATE_LIMITED:
            logger.error("Rate limit persisted after %d attempts: %s %s", self.max_retries, method, safe_target)
            raise RateLimitedError(
                f"Rate limited after {self.max_retries} attempts: {safe_target}",
                method=method,
                url=url,
                status_code=status_code,
            )
        logger.error("Max retries exceeded for: %s %s (HTTP %s)", method, safe_target, status_code)
        raise TransientError(
            f"Request failed after {self.max_retries} attempts (HTTP {status_code}): {safe_target}",
            method=method,
            url=url,
            status_code=status_code,
        )
