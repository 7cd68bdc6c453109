"""
HTTP helpers shared by the Marathon and Consul API clients.
"""

import random

import requests


# HTTP status codes that should trigger retry
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


def calculate_delay(
    attempt: int,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    backoff_factor: float = 2.0,
    jitter: float = 0.1,
    retry_after: int | None = None,
) -> float:
    """
    Calculate delay before next retry using exponential backoff with jitter.

    Args:
        attempt: Current attempt number (0-indexed)
        initial_delay: Delay of the first retry in seconds
        max_delay: Upper bound of the delay in seconds
        backoff_factor: Multiplier for exponential backoff
        jitter: Random jitter factor (0.1 = 10% variation)
        retry_after: Optional Retry-After header value in seconds

    Returns:
        Delay in seconds
    """
    if retry_after is not None:
        base_delay = min(retry_after, max_delay)
    else:
        base_delay = min(initial_delay * (backoff_factor**attempt), max_delay)

    jitter_range = base_delay * jitter
    return max(0.0, base_delay + random.uniform(-jitter_range, jitter_range))


def get_retry_after(response: requests.Response) -> int | None:
    """
    Extract Retry-After header value from response.

    Returns:
        Retry delay in seconds, or None if header not present or not numeric
    """
    retry_after = response.headers.get("Retry-After")
    if retry_after is None:
        return None
    try:
        return int(retry_after)
    except ValueError:
        return None
