"""
Watch command implementation.
Resolves the query to entities, then polls for new content items until stopped.
"""

import logging
import threading
from typing import Callable, Optional

import click

from ..core.command_context import CommandContext
from ..processors.entity_resolver import resolve_entity_ids
from ..processors.update_loop import UpdateLoop

logger = logging.getLogger(__name__)


def run(
    config_path: Optional[str] = None,
    *,
    query: str = "",
    exact: bool = False,
    query_type: Optional[str] = None,
    server: Optional[str] = None,
    api_key: Optional[str] = None,
    session_id: Optional[str] = None,
    iterations: Optional[int] = None,
    shutdown: Optional[threading.Event] = None,
    echo: Callable[[str], None] = click.echo,
    context: Optional[CommandContext] = None,
) -> None:
    """Run the INITIAL/UPDATE polling demo.

    Workflow:
    1. Build settings from config and overrides, and open the API client.
    2. Resolve the query to at most ``max_entities`` entity ids.
    3. Poll forever (or ``iterations`` times), printing only unseen content items.

    Args:
        config_path: Path to the main configuration file
        query: Free-text entity query (e.g. ``AAPL``, ``Google``)
        exact: Only consider exact entity matches
        query_type: One of FEED, RECOMMENDATION, SURVEY, SEARCH, DISCOVERY
        server: API server override
        api_key: API key override
        session_id: Session id override (``<automatic>`` for a fresh one)
        iterations: Optional bound on the number of queries
        shutdown: Event that interrupts the pause between queries
        echo: Output function for the transcript
        context: Prebuilt command context (skips config loading)

    Raises:
        ContextApiError: When entity resolution or a content query fails
        Interrupted: When shutdown is requested (signal or event)
    """
    logger.info("Starting watch command")

    ctx = context or CommandContext(
        config_path,
        server=server,
        api_key=api_key,
        session_id=session_id,
        query=query,
        exact=exact,
        query_type=query_type,
    )
    settings = ctx.settings

    with ctx:
        echo(f"Using Selerity Context API server at {settings.server_url}")

        entity_ids = resolve_entity_ids(
            ctx.client,
            settings.query,
            exact=settings.exact,
            max_entities=settings.max_entities,
            echo=echo,
        )

        loop = UpdateLoop(
            ctx.client,
            entity_ids,
            query_type=settings.query_type,
            batch_size=settings.batch_size,
            pause_secs=settings.pause_secs,
            echo=echo,
            shutdown=shutdown,
        )
        loop.run(max_iterations=iterations)

    logger.info("Watch command finished after %d queries", loop.iteration)
