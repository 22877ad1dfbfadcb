"""
HTTP transport for the Tether.name API.

All network access goes through ``HttpTransport.post_json`` so that policies
such as retries can wrap it without the challenge client noticing.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

import httpx

from .exceptions import NetworkError, ServiceError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class HttpTransport:
    """
    JSON-over-HTTPS transport backed by ``httpx.Client``.

    Maps transport failures to ``NetworkError`` and non-2xx responses to
    ``ServiceError``.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.timeout = timeout
        self._owned_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout)

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owned_client:
            self._client.close()

    def post_json(
        self,
        url: str,
        payload: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> dict[str, Any]:
        """
        POST a JSON body and return the decoded JSON object.

        Args:
            url: Absolute request URL
            payload: JSON body, or None to send no body
            timeout: Per-call timeout in seconds (defaults to the transport's)

        Returns:
            dict: The decoded response body

        Raises:
            NetworkError: On connection failure or timeout
            ServiceError: On a non-2xx status or a body that is not a JSON object
        """
        effective_timeout = self.timeout if timeout is None else timeout
        try:
            response = self._client.post(url, json=payload, timeout=effective_timeout)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise NetworkError(
                f"Request to {url} timed out after {effective_timeout}s", timeout=True
            ) from e
        except httpx.HTTPStatusError as e:
            raise ServiceError(
                f"Request to {url} failed: {e.response.status_code}",
                e.response.status_code,
                e.response.text
            ) from e
        except httpx.RequestError as e:
            raise NetworkError(f"Request to {url} failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise ServiceError(
                f"Invalid JSON response from {url}",
                response.status_code,
                response.text
            ) from e
        if not isinstance(data, dict):
            raise ServiceError(
                f"Unexpected response from {url}: expected a JSON object",
                response.status_code,
                response.text
            )
        return data


class RetryingTransport:
    """
    Exponential backoff around another transport.

    Only ``NetworkError`` is retried; a ``ServiceError`` means the service
    answered and is raised immediately.
    """

    def __init__(
        self,
        inner: HttpTransport,
        max_attempts: int = 3,
        backoff: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.inner = inner
        self.max_attempts = max_attempts
        self.backoff = backoff
        self._sleep = sleep

    def __enter__(self) -> "RetryingTransport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self.inner.close()

    def post_json(
        self,
        url: str,
        payload: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> dict[str, Any]:
        attempt = 1
        while True:
            try:
                return self.inner.post_json(url, payload, timeout=timeout)
            except NetworkError as e:
                if attempt >= self.max_attempts:
                    raise
                delay = self.backoff * (2 ** (attempt - 1))
                logger.warning(
                    "Attempt %d/%d to %s failed (%s); retrying in %.2fs",
                    attempt, self.max_attempts, url, e, delay
                )
                self._sleep(delay)
                attempt += 1
