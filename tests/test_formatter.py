"""Tests for content item decoding and console formatting."""

from __future__ import annotations

from pathlib import Path
import sys

import pytest

# Ensure the repository's src/ directory is importable without installation.
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from context_demo.core.models import ContentItem, Entity, QueryType  # noqa: E402
from context_demo.processors.formatter import format_content_item  # noqa: E402


FULL_ITEM = {
    "contentID": "c-42",
    "headline": "Apple beats estimates",
    "contentType": "ARTICLE",
    "source": "newswire",
    "timestamp": 1490000000000,
    "score": 0.87,
    "summary": "Quarterly results.",
    "socialInfo": {"author": "Jane Doe"},
    "linkURL": "https://example.com/a",
    "relatedContent": [
        {"relationship": "SIMILAR", "contentItem": {"contentType": "TWEET", "linkURL": "https://t.example/1"}},
    ],
}


def test_format_full_item_in_fixed_order():
    text = format_content_item(ContentItem.from_json(FULL_ITEM))
    assert text.splitlines() == [
        "",
        "* Apple beats estimates",
        "",
        "  contentID: c-42",
        "  contentType: ARTICLE",
        "  source: newswire",
        "  timestamp: 1490000000000",
        "  score: 0.87",
        "  summary: Quarterly results.",
        "  socialInfo->author: Jane Doe",
        "  linkURL: https://example.com/a",
        "  related content: SIMILAR TWEET https://t.example/1",
    ]


def test_missing_author_and_related_content_use_placeholders():
    raw = {"contentID": "c-1", "headline": "Bare"}
    item = ContentItem.from_json(raw)
    assert item.related == ()
    lines = format_content_item(item).splitlines()
    assert "  socialInfo->author: null" in lines
    assert "  source: null" in lines
    assert not any(line.startswith("  related content:") for line in lines)


def test_null_related_content_and_social_info():
    item = ContentItem.from_json({"contentID": "c-2", "socialInfo": None, "relatedContent": None})
    assert item.author is None
    assert item.related == ()


def test_related_content_missing_nested_item():
    item = ContentItem.from_json({"contentID": "c-3", "relatedContent": [{"relationship": "CITES"}]})
    assert format_content_item(item).splitlines()[-1] == "  related content: CITES null null"


def test_content_item_without_id_decodes_to_none():
    assert ContentItem.from_json({"headline": "no id"}).content_id is None


def test_non_object_content_item_rejected():
    with pytest.raises(ValueError):
        ContentItem.from_json(["not", "an", "object"])


def test_entity_requires_id():
    with pytest.raises(ValueError):
        Entity.from_json({"displayName": "Nameless"})


@pytest.mark.parametrize(
    "text,expected",
    [
        ("FEED", QueryType.FEED),
        ("recommendation", QueryType.RECOMMENDATION),
        (" Survey ", QueryType.SURVEY),
        ("AUTHOR", QueryType.FEED),
        (None, QueryType.FEED),
    ],
)
def test_query_type_parse(text, expected):
    assert QueryType.parse(text) is expected
