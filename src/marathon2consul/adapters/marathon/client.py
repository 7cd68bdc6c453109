"""
Marathon API Client - Low-level HTTP client for the Marathon REST API.

This handles the raw HTTP communication with Marathon.
The MarathonAdapter uses this to implement the OrchestratorPort.

Marathon REST API documentation:
https://mesosphere.github.io/marathon/api-console/index.html
"""

import logging
import time
from typing import Any

import requests
from requests.adapters import HTTPAdapter

from marathon2consul.adapters.http_base import (
    RETRYABLE_STATUS_CODES,
    calculate_delay,
    get_retry_after,
)
from marathon2consul.core.ports.orchestrator import (
    AuthenticationError,
    NotFoundError,
    OrchestratorError,
    PermissionError,
    RateLimitError,
    TransientError,
)


class MarathonApiClient:
    """
    Low-level Marathon REST API client.

    Handles authentication, request/response and error handling.

    Features:
    - HTTP basic auth or DC/OS ACS token authentication
    - Automatic retry with exponential backoff for transient failures
    - Connection pooling
    """

    # Default retry configuration
    DEFAULT_MAX_RETRIES = 3
    DEFAULT_INITIAL_DELAY = 1.0
    DEFAULT_MAX_DELAY = 30.0
    DEFAULT_BACKOFF_FACTOR = 2.0
    DEFAULT_JITTER = 0.1

    DEFAULT_POOL_CONNECTIONS = 4
    DEFAULT_POOL_MAXSIZE = 4
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        url: str,
        username: str | None = None,
        password: str | None = None,
        token: str | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
        jitter: float = DEFAULT_JITTER,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the Marathon client.

        Args:
            url: Marathon URL (e.g., http://marathon.mesos:8080)
            username: HTTP basic auth user
            password: HTTP basic auth password
            token: DC/OS ACS token, takes precedence over basic auth
            max_retries: Maximum retry attempts for transient failures
            initial_delay: Initial retry delay in seconds
            max_delay: Maximum retry delay in seconds
            backoff_factor: Multiplier for exponential backoff
            jitter: Random jitter factor (0.1 = 10%)
            timeout: Request timeout in seconds
        """
        self.base_url = url.rstrip("/")
        self.timeout = timeout
        self.logger = logging.getLogger("MarathonApiClient")

        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.backoff_factor = backoff_factor
        self.jitter = jitter

        self._session = requests.Session()
        self._session.headers.update({"Accept": "application/json"})
        if token:
            self._session.headers["Authorization"] = f"token={token}"
        elif username:
            self._session.auth = (username, password or "")

        adapter = HTTPAdapter(
            pool_connections=self.DEFAULT_POOL_CONNECTIONS,
            pool_maxsize=self.DEFAULT_POOL_MAXSIZE,
        )
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)

    # -------------------------------------------------------------------------
    # Core Request Methods
    # -------------------------------------------------------------------------

    def request(self, method: str, endpoint: str, **kwargs: Any) -> requests.Response:
        """
        Make a request to the Marathon API with retry.

        Args:
            method: HTTP method
            endpoint: API path (e.g., 'v2/apps/prod/web')
            **kwargs: Additional arguments for requests

        Returns:
            The successful response

        Raises:
            OrchestratorError: On API errors after all retries exhausted
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault("timeout", self.timeout)
        last_exception: Exception | None = None

        for attempt in range(self.max_retries + 1):
            try:
                response = self._session.request(method, url, **kwargs)

                if response.status_code in RETRYABLE_STATUS_CODES:
                    retry_after = get_retry_after(response)
                    if attempt < self.max_retries:
                        delay = self._delay(attempt, retry_after)
                        self.logger.warning(
                            f"Retryable error {response.status_code} on {method} {endpoint}, "
                            f"attempt {attempt + 1}/{self.max_retries + 1}, "
                            f"retrying in {delay:.2f}s"
                        )
                        time.sleep(delay)
                        continue

                    if response.status_code == 429:
                        raise RateLimitError(
                            f"Marathon rate limit exceeded for {endpoint}",
                            retry_after=retry_after,
                        )
                    raise TransientError(
                        f"Marathon server error {response.status_code} for {endpoint} "
                        f"after {self.max_retries + 1} attempts"
                    )

                return self._check_response(response, endpoint)

            except requests.exceptions.ConnectionError as e:
                last_exception = e
                if attempt < self.max_retries:
                    delay = self._delay(attempt)
                    self.logger.warning(
                        f"Connection error on {method} {endpoint}, retrying in {delay:.2f}s: {e}"
                    )
                    time.sleep(delay)
                    continue
                raise OrchestratorError(f"Connection to Marathon failed: {e}", cause=e)

            except requests.exceptions.Timeout as e:
                last_exception = e
                if attempt < self.max_retries:
                    delay = self._delay(attempt)
                    self.logger.warning(f"Timeout on {method} {endpoint}, retrying in {delay:.2f}s")
                    time.sleep(delay)
                    continue
                raise OrchestratorError(f"Marathon request timed out: {e}", cause=e)

        raise OrchestratorError(
            f"Request failed after {self.max_retries + 1} attempts", cause=last_exception
        )

    def _delay(self, attempt: int, retry_after: int | None = None) -> float:
        return calculate_delay(
            attempt,
            initial_delay=self.initial_delay,
            max_delay=self.max_delay,
            backoff_factor=self.backoff_factor,
            jitter=self.jitter,
            retry_after=retry_after,
        )

    def _check_response(self, response: requests.Response, endpoint: str) -> requests.Response:
        """Convert error responses to typed exceptions."""
        if response.ok:
            return response

        status = response.status_code
        error_body = response.text[:500] if response.text else ""

        if status == 401:
            raise AuthenticationError("Marathon authentication failed. Check your credentials.")
        if status == 403:
            raise PermissionError(f"Permission denied for {endpoint}")
        if status == 404:
            raise NotFoundError(f"Not found: {endpoint}")

        raise OrchestratorError(f"Marathon API error {status}: {error_body}")

    # -------------------------------------------------------------------------
    # Convenience Methods
    # -------------------------------------------------------------------------

    def ping(self) -> bool:
        """Check that Marathon answers its ping endpoint."""
        try:
            self.request("GET", "ping")
            return True
        except OrchestratorError:
            return False

    def get_app(self, app_id: str) -> dict[str, Any]:
        """
        Get an application by id.

        Args:
            app_id: Application id, with or without the leading '/'

        Returns:
            The `app` object of the response

        Raises:
            NotFoundError: If the app doesn't exist
        """
        path = app_id.strip("/")
        response = self.request("GET", f"v2/apps/{path}")
        try:
            data = response.json()
        except ValueError as e:
            raise OrchestratorError(f"Invalid JSON for app {app_id}", app_id=app_id, cause=e)

        if not isinstance(data, dict) or not isinstance(data.get("app"), dict):
            raise OrchestratorError(f"Unexpected response for app {app_id}", app_id=app_id)
        return data["app"]

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()
