"""
Entity resolution for demo queries.

Turns the free-text query into the entity ids that the recommendation queries
are scoped to, and prints a one-time summary of what was found.
"""

import logging
from typing import Callable, List

import click

from ..core.apis.context_client import ContextApiClient
from .formatter import or_null

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTITIES = 20


def resolve_entity_ids(
    client: ContextApiClient,
    query: str,
    *,
    exact: bool = False,
    max_entities: int = DEFAULT_MAX_ENTITIES,
    echo: Callable[[str], None] = click.echo,
) -> List[str]:
    """Resolve *query* to at most *max_entities* entity ids.

    Args:
        client: Anything with a ``search_entities(query, exact, limit)`` method
        query: Free-text query (e.g. ``AAPL``)
        exact: Request exact matching only
        max_entities: Upper bound on the returned ids, enforced even if the
            service returns more
        echo: Output function for the summary lines

    Returns:
        Entity ids in the order the service returned them

    Raises:
        Whatever the client raises; there is no partial result.
    """
    entities = client.search_entities(query, exact, max_entities)[:max_entities]

    echo(f"Query for '{query}' will look for those entities:")
    for entity in entities:
        echo(
            f"* {entity.entity_id} -> {or_null(entity.name)} "
            f"({or_null(entity.entity_type)}, {or_null(entity.description)})"
        )

    if not entities:
        logger.warning("No entities matched query '%s'", query)
    logger.info("Resolved query '%s' to %d entities (exact=%s)", query, len(entities), exact)
    return [entity.entity_id for entity in entities]


__all__ = ["resolve_entity_ids", "DEFAULT_MAX_ENTITIES"]
