"""Console rendering of content items."""

from typing import Optional

from ..core.models import ContentItem

MISSING = "null"


def or_null(value: Optional[str]) -> str:
    """Render a possibly missing value, using the ``null`` placeholder."""
    return MISSING if value is None else value


def format_content_item(item: ContentItem) -> str:
    """Render *item* as the multi-line transcript block printed by the demo.

    The block starts with an empty line, then the headline, then one line per
    field in a fixed order, then one line per related content item. Missing
    values are shown as ``null``.
    """
    lines = [
        "",
        f"* {or_null(item.headline)}",
        "",
        f"  contentID: {or_null(item.content_id)}",
        f"  contentType: {or_null(item.content_type)}",
        f"  source: {or_null(item.source)}",
        f"  timestamp: {or_null(item.timestamp)}",
        f"  score: {or_null(item.score)}",
        f"  summary: {or_null(item.summary)}",
        f"  socialInfo->author: {or_null(item.author)}",
        f"  linkURL: {or_null(item.link_url)}",
    ]
    for related in item.related:
        lines.append(
            f"  related content: {or_null(related.relationship)} "
            f"{or_null(related.content_type)} {or_null(related.link_url)}"
        )
    return "\n".join(lines)


__all__ = ["format_content_item", "or_null", "MISSING"]
