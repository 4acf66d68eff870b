"""
Data models for the Context API demo.

Entities and content items are decoded from API payloads into frozen
dataclasses so that the update loop and formatter never touch raw JSON.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .json_utils import get_as_string, get_path

logger = logging.getLogger(__name__)


class QueryType(str, Enum):
    FEED = "FEED"
    RECOMMENDATION = "RECOMMENDATION"
    SURVEY = "SURVEY"
    SEARCH = "SEARCH"
    DISCOVERY = "DISCOVERY"

    @classmethod
    def parse(cls, value: Optional[str]) -> "QueryType":
        """Map user input onto a query type, falling back to FEED for unknown names."""
        if isinstance(value, cls):
            return value
        cleaned = (value or "").strip().upper()
        try:
            return cls(cleaned)
        except ValueError:
            logger.warning("Unknown query type %s. Switching to FEED.", value)
            return cls.FEED


class QueryMode(str, Enum):
    """INITIAL establishes a baseline; UPDATE asks only for items new since the last query."""

    INITIAL = "INITIAL"
    UPDATE = "UPDATE"


@dataclass(frozen=True)
class Entity:
    entity_id: str
    entity_type: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Entity":
        entity_id = get_as_string(data, "entityID")
        if not entity_id:
            raise ValueError(f"Entity record without entityID: {data!r}")
        return cls(
            entity_id=entity_id,
            entity_type=get_as_string(data, "entityType"),
            name=get_as_string(data, "displayName"),
            description=get_as_string(data, "description"),
        )


@dataclass(frozen=True)
class RelatedContent:
    relationship: Optional[str] = None
    content_type: Optional[str] = None
    link_url: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "RelatedContent":
        return cls(
            relationship=get_as_string(data, "relationship"),
            content_type=get_as_string(data, "contentItem", "contentType"),
            link_url=get_as_string(data, "contentItem", "linkURL"),
        )


@dataclass(frozen=True)
class ContentItem:
    """A single content item as returned by a recommendation query.

    ``content_id`` may be None for malformed records; the update loop skips
    those instead of failing.
    """

    content_id: Optional[str]
    headline: Optional[str] = None
    content_type: Optional[str] = None
    source: Optional[str] = None
    timestamp: Optional[str] = None
    score: Optional[str] = None
    summary: Optional[str] = None
    author: Optional[str] = None
    link_url: Optional[str] = None
    related: Tuple[RelatedContent, ...] = ()

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "ContentItem":
        if not isinstance(data, dict):
            raise ValueError(f"Content item is not an object: {data!r}")
        related_raw = get_path(data, "relatedContent") or []
        if not isinstance(related_raw, list):
            raise ValueError(f"relatedContent is not a list: {related_raw!r}")
        return cls(
            content_id=get_as_string(data, "contentID"),
            headline=get_as_string(data, "headline"),
            content_type=get_as_string(data, "contentType"),
            source=get_as_string(data, "source"),
            timestamp=get_as_string(data, "timestamp"),
            score=get_as_string(data, "score"),
            summary=get_as_string(data, "summary"),
            author=get_as_string(data, "socialInfo", "author"),
            link_url=get_as_string(data, "linkURL"),
            related=tuple(
                RelatedContent.from_json(r) for r in related_raw if isinstance(r, dict)
            ),
        )


__all__ = [
    "QueryType",
    "QueryMode",
    "Entity",
    "RelatedContent",
    "ContentItem",
]
