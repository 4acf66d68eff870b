"""
Context API client.

Wraps the three Context API calls the demo needs: entity search (DDS),
recommendation queries and the entitled-sources lookup. Every call is a JSON
POST carrying the API key and session id; transport, HTTP and payload errors
surface as ContextApiError.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

import requests

from ..http_client import RetryableHTTPClient
from ..models import ContentItem, Entity, QueryMode, QueryType

logger = logging.getLogger(__name__)

ENTITY_SEARCH_PATH = "/api/v1/dds/search"
RECOMMENDATION_PATH = "/api/v1/recommendation/query"
SOURCES_PATH = "/api/v1/recommendation/sources"


class ContextApiError(RuntimeError):
    """Raised when a Context API call fails or returns an unusable payload."""


def _extract_list(data: Any, key: str) -> List[Any]:
    """Return the list under *key*, accepting a bare JSON list as well."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        value = data.get(key)
        if value is None:
            return []
        if isinstance(value, list):
            return value
    raise ContextApiError(f"Expected a list under '{key}', got: {str(data)[:200]}")


class ContextApiClient:
    """Client for the Selerity Context API.

    Args:
        server_url: Root URL of the API server (``https://...``)
        api_key: Key sent with every request
        session_id: Session identifier sent with every request
        http: Optional RetryableHTTPClient; built from rps/max_retries/timeout when omitted
    """

    def __init__(
        self,
        server_url: str,
        api_key: str,
        session_id: str,
        *,
        http: Optional[RetryableHTTPClient] = None,
        rps: float = 2.0,
        max_retries: int = 3,
        timeout: float = 15,
    ):
        self.server_url = server_url.rstrip("/")
        self.api_key = api_key
        self.session_id = session_id
        self.http = http or RetryableHTTPClient(rps=rps, max_retries=max_retries, timeout=timeout)

    @classmethod
    def from_settings(cls, settings) -> "ContextApiClient":
        """Build a client from a DemoSettings value."""
        return cls(
            settings.server_url,
            settings.api_key,
            settings.session_id,
            rps=settings.rps,
            max_retries=settings.max_retries,
            timeout=settings.timeout,
        )

    def _post(self, path: str, body: Dict[str, Any]) -> Any:
        """POST *body* plus credentials to *path* and return the decoded JSON."""
        url = f"{self.server_url}{path}"
        payload = {"authToken": self.api_key, "sessionID": self.session_id}
        payload.update(body)
        headers = {"Accept": "application/json", "User-Agent": "context-api-demo"}
        logger.debug("POST %s %s", url, body)
        try:
            r = self.http.post_json_with_retry(url, payload, headers=headers)
            return r.json()
        except requests.RequestException as e:
            raise ContextApiError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise ContextApiError(f"Malformed JSON from {url}: {e}") from e

    def search_entities(self, query: str, exact: bool, limit: int) -> List[Entity]:
        """Search DDS for entities matching *query*.

        Args:
            query: Free-text query (e.g. ``AAPL`` or ``Google``)
            exact: Only consider exact matches when True
            limit: Upper bound requested from the service

        Raises:
            ContextApiError: On transport failures or malformed records
        """
        data = self._post(ENTITY_SEARCH_PATH, {"query": query, "exact": bool(exact), "limit": int(limit)})
        try:
            return [Entity.from_json(record) for record in _extract_list(data, "results")]
        except (ValueError, AttributeError) as e:
            raise ContextApiError(f"Malformed entity search result: {e}") from e

    def query_content(
        self,
        query_type: QueryType,
        mode: QueryMode,
        batch_size: int,
        entity_ids: Iterable[str],
    ) -> List[ContentItem]:
        """Run a recommendation query and return the content items in response order."""
        body = {
            "queryType": QueryType(query_type).value,
            "mode": QueryMode(mode).value,
            "batchSize": int(batch_size),
            "contextEntities": list(entity_ids),
        }
        data = self._post(RECOMMENDATION_PATH, body)
        try:
            return [ContentItem.from_json(record) for record in _extract_list(data, "contentItems")]
        except ValueError as e:
            raise ContextApiError(f"Malformed recommendation result: {e}") from e

    def query_entitled_sources(self) -> List[str]:
        """Return the names of the sources the API key is entitled to."""
        data = self._post(SOURCES_PATH, {})
        return [str(source) for source in _extract_list(data, "sources")]

    def close(self) -> None:
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


__all__ = ["ContextApiClient", "ContextApiError"]
