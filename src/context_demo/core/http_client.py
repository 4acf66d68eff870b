"""Shared HTTP client with retry logic and rate limiting."""

import logging
import time
from typing import Optional, Dict, Any

import requests

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = (429, 500, 502, 503, 504)


class RetryableHTTPClient:
    """HTTP client with exponential backoff retry logic and rate limiting.

    Handles common failure scenarios (connection errors, timeouts, 429, 500,
    502, 503, 504) with exponential backoff, respects Retry-After headers, and
    enforces rate limiting. Once retries are exhausted the last error is raised;
    callers decide whether that is fatal.

    Args:
        rps: Maximum requests per second (default: 1.0)
        max_retries: Maximum number of attempts per request (default: 3)
        timeout: Request timeout in seconds (default: 15)
        session: Optional pre-built requests.Session (mainly for tests)
    """

    def __init__(
        self,
        rps: float = 1.0,
        max_retries: int = 3,
        timeout: float = 15,
        session: Optional[requests.Session] = None,
    ):
        self.session = session or requests.Session()
        self.rps = rps
        self.max_retries = max(1, int(max_retries))
        self.timeout = timeout
        self.min_interval = 1.0 / max(rps, 0.01)
        self.last_request_time = 0.0

    def _rate_limit(self):
        """Enforce rate limiting between requests."""
        now = time.time()
        elapsed = now - self.last_request_time
        if elapsed < self.min_interval:
            time.sleep(self.min_interval - elapsed)
        self.last_request_time = time.time()

    def post_json_with_retry(
        self,
        url: str,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> requests.Response:
        """POST a JSON body with exponential backoff retry logic.

        Args:
            url: URL to post to
            payload: JSON-serializable request body
            headers: Optional request headers
            timeout: Optional timeout override (uses instance default if None)

        Returns:
            Response object with a 2xx status

        Raises:
            requests.HTTPError: On non-retryable HTTP errors, or retryable ones
                once retries are exhausted
            requests.RequestException: On network errors after retries exhausted
        """
        timeout = timeout or self.timeout

        for attempt in range(self.max_retries):
            last_attempt = attempt == self.max_retries - 1
            try:
                self._rate_limit()
                r = self.session.post(url, json=payload, headers=headers, timeout=timeout)

                # Retry on throttling/server errors with exponential backoff
                if r.status_code in RETRYABLE_STATUS and not last_attempt:
                    wait = self._calculate_backoff_time(r, attempt)
                    logger.warning(
                        "HTTP %s from %s, retrying in %.1fs (attempt %d/%d)",
                        r.status_code, url, wait, attempt + 1, self.max_retries,
                    )
                    time.sleep(wait)
                    continue

                # Raise on other HTTP errors
                r.raise_for_status()
                return r

            except requests.HTTPError:
                raise
            except requests.RequestException as e:
                # Network error → backoff and retry
                if not last_attempt:
                    wait = min(8.0, 2.0 ** attempt)
                    logger.warning("Request to %s failed (%s), retrying in %.1fs", url, e, wait)
                    time.sleep(wait)
                    continue
                # Last attempt failed, re-raise
                raise

        # max_retries is at least 1, so the loop always returns or raises
        raise RuntimeError("unreachable")

    def _calculate_backoff_time(self, response: requests.Response, attempt: int) -> float:
        """Calculate backoff time, respecting Retry-After header if present."""
        retry_after = response.headers.get("Retry-After")
        if retry_after:
            try:
                wait = float(retry_after)
                return max(wait, 1.0)  # At least 1 second
            except (ValueError, TypeError):
                pass
        # Exponential backoff: 1s, 2s, 4s, max 8s
        return min(8.0, 2.0 ** attempt)

    def close(self):
        """Close the underlying session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
