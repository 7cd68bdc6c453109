"""
Consul API Client - Low-level HTTP client for the Consul agent API.

This handles the raw HTTP communication with the local Consul agent.
The ConsulAdapter uses this to implement the ServiceRegistryPort.

Consul agent API documentation:
https://developer.hashicorp.com/consul/api-docs/agent/service
"""

import logging
import time
from typing import Any
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter

from marathon2consul.adapters.http_base import (
    RETRYABLE_STATUS_CODES,
    calculate_delay,
    get_retry_after,
)
from marathon2consul.core.ports.service_registry import (
    RegistryAuthenticationError,
    RegistryError,
    RegistryNotFoundError,
    RegistryPermissionError,
    RegistryTransientError,
)


class ConsulApiClient:
    """
    Low-level Consul agent API client.

    Features:
    - ACL token authentication (X-Consul-Token)
    - Automatic retry with exponential backoff for transient failures
    - Dry-run mode: write operations are logged, not sent
    """

    DEFAULT_MAX_RETRIES = 3
    DEFAULT_INITIAL_DELAY = 0.5
    DEFAULT_MAX_DELAY = 10.0
    DEFAULT_BACKOFF_FACTOR = 2.0
    DEFAULT_JITTER = 0.1

    DEFAULT_POOL_CONNECTIONS = 4
    DEFAULT_POOL_MAXSIZE = 4
    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        url: str,
        token: str | None = None,
        datacenter: str | None = None,
        dry_run: bool = True,
        max_retries: int = DEFAULT_MAX_RETRIES,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
        jitter: float = DEFAULT_JITTER,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the Consul client.

        Args:
            url: Consul agent address (e.g., http://127.0.0.1:8500)
            token: ACL token
            datacenter: Datacenter passed as the `dc` query parameter
            dry_run: If True, don't make write operations
            max_retries: Maximum retry attempts for transient failures
            initial_delay: Initial retry delay in seconds
            max_delay: Maximum retry delay in seconds
            backoff_factor: Multiplier for exponential backoff
            jitter: Random jitter factor (0.1 = 10%)
            timeout: Request timeout in seconds
        """
        self.base_url = url.rstrip("/")
        if "://" not in self.base_url:
            self.base_url = f"http://{self.base_url}"
        self.api_url = f"{self.base_url}/v1"
        self.datacenter = datacenter
        self.dry_run = dry_run
        self.timeout = timeout
        self.logger = logging.getLogger("ConsulApiClient")

        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.backoff_factor = backoff_factor
        self.jitter = jitter

        self._session = requests.Session()
        self._session.headers.update(
            {"Accept": "application/json", "Content-Type": "application/json"}
        )
        if token:
            self._session.headers["X-Consul-Token"] = token

        adapter = HTTPAdapter(
            pool_connections=self.DEFAULT_POOL_CONNECTIONS,
            pool_maxsize=self.DEFAULT_POOL_MAXSIZE,
        )
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)

    # -------------------------------------------------------------------------
    # Core Request Methods
    # -------------------------------------------------------------------------

    def request(self, method: str, endpoint: str, **kwargs: Any) -> dict[str, Any] | list[Any]:
        """
        Make a request to the Consul API with retry.

        Args:
            method: HTTP method
            endpoint: API endpoint relative to /v1 (e.g., 'agent/services')
            **kwargs: Additional arguments for requests

        Returns:
            JSON response (dict or list), empty dict for empty bodies

        Raises:
            RegistryError: On API errors after all retries exhausted
        """
        url = f"{self.api_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault("timeout", self.timeout)
        if self.datacenter:
            params = dict(kwargs.pop("params", None) or {})
            params.setdefault("dc", self.datacenter)
            kwargs["params"] = params

        last_exception: Exception | None = None

        for attempt in range(self.max_retries + 1):
            try:
                response = self._session.request(method, url, **kwargs)

                if response.status_code in RETRYABLE_STATUS_CODES:
                    if attempt < self.max_retries:
                        delay = self._delay(attempt, get_retry_after(response))
                        self.logger.warning(
                            f"Retryable error {response.status_code} on {method} {endpoint}, "
                            f"attempt {attempt + 1}/{self.max_retries + 1}, "
                            f"retrying in {delay:.2f}s"
                        )
                        time.sleep(delay)
                        continue
                    raise RegistryTransientError(
                        f"Consul error {response.status_code} for {endpoint} "
                        f"after {self.max_retries + 1} attempts"
                    )

                return self._handle_response(response, endpoint)

            except requests.exceptions.ConnectionError as e:
                last_exception = e
                if attempt < self.max_retries:
                    delay = self._delay(attempt)
                    self.logger.warning(
                        f"Connection error on {method} {endpoint}, retrying in {delay:.2f}s: {e}"
                    )
                    time.sleep(delay)
                    continue
                raise RegistryError(f"Connection to Consul failed: {e}", cause=e)

            except requests.exceptions.Timeout as e:
                last_exception = e
                if attempt < self.max_retries:
                    delay = self._delay(attempt)
                    self.logger.warning(f"Timeout on {method} {endpoint}, retrying in {delay:.2f}s")
                    time.sleep(delay)
                    continue
                raise RegistryError(f"Consul request timed out: {e}", cause=e)

        raise RegistryError(
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

    def _handle_response(
        self, response: requests.Response, endpoint: str
    ) -> dict[str, Any] | list[Any]:
        """Handle API response and convert errors to typed exceptions."""
        if response.ok:
            if not response.text:
                return {}
            try:
                data = response.json()
            except ValueError:
                return {}
            return data if isinstance(data, (dict, list)) else {}

        status = response.status_code
        error_body = response.text[:500] if response.text else ""

        if status == 401:
            raise RegistryAuthenticationError("Consul rejected the ACL token.")
        if status == 403:
            raise RegistryPermissionError(f"Permission denied for {endpoint}: {error_body}")
        if status == 404:
            raise RegistryNotFoundError(f"Not found: {endpoint}")

        raise RegistryError(f"Consul API error {status}: {error_body}")

    # -------------------------------------------------------------------------
    # Agent Service API
    # -------------------------------------------------------------------------

    def get_self(self) -> dict[str, Any]:
        """Get the agent configuration and member information."""
        result = self.request("GET", "agent/self")
        return result if isinstance(result, dict) else {}

    def test_connection(self) -> bool:
        """Test if the agent answers and accepts the token."""
        try:
            self.get_self()
            return True
        except RegistryError:
            return False

    def register_service(self, payload: dict[str, Any]) -> None:
        """Register a service. Respects dry_run mode."""
        if self.dry_run:
            self.logger.info(f"[DRY-RUN] Would register service {payload.get('ID')}")
            return
        self.request("PUT", "agent/service/register", json=payload)

    def deregister_service(self, service_id: str) -> None:
        """Deregister a service. Respects dry_run mode."""
        if self.dry_run:
            self.logger.info(f"[DRY-RUN] Would deregister service {service_id}")
            return
        self.request("PUT", f"agent/service/deregister/{quote(service_id, safe='')}")

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()
