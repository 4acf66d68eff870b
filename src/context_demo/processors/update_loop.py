"""
Polling loop for new content items.

One INITIAL recommendation query establishes the baseline, every later query
is an UPDATE. Items already printed (tracked in a SeenWindow of two batches)
are suppressed, and the loop pauses between queries. Errors from the query or
from formatting end the run; the loop never swallows them.
"""

import logging
import threading
from typing import Callable, Iterable, List, Optional

import click

from ..core.apis.context_client import ContextApiClient
from ..core.models import ContentItem, QueryMode, QueryType
from ..core.shutdown import wait_or_interrupt
from .formatter import format_content_item
from .seen_window import SeenWindow

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10
DEFAULT_PAUSE_SECS = 30


class UpdateLoop:
    """Runs INITIAL then UPDATE queries, printing only unseen content items.

    Args:
        client: Anything with a ``query_content(query_type, mode, batch_size, entity_ids)`` method
        entity_ids: Resolved entity ids the queries are scoped to
        query_type: Recommendation query type
        batch_size: Maximum items requested per query
        pause_secs: Back-off between queries
        echo: Output function; each new item is passed as one string
        shutdown: Event that cancels the pause when set
    """

    def __init__(
        self,
        client: ContextApiClient,
        entity_ids: Iterable[str],
        *,
        query_type: QueryType = QueryType.FEED,
        batch_size: int = DEFAULT_BATCH_SIZE,
        pause_secs: float = DEFAULT_PAUSE_SECS,
        echo: Callable[[str], None] = click.echo,
        shutdown: Optional[threading.Event] = None,
    ):
        self.client = client
        self.entity_ids = tuple(entity_ids)
        self.query_type = query_type
        self.batch_size = batch_size
        self.pause_secs = pause_secs
        self.echo = echo
        self.shutdown = shutdown or threading.Event()
        self.window = SeenWindow.for_batch_size(batch_size)
        self._mode = QueryMode.INITIAL
        self._iteration = 0

    @property
    def mode(self) -> QueryMode:
        """Mode the next query will use."""
        return self._mode

    @property
    def iteration(self) -> int:
        """Number of queries attempted so far."""
        return self._iteration

    def run_once(self) -> List[ContentItem]:
        """Query once, print unseen items, and return them."""
        mode = self._mode
        self._iteration += 1
        try:
            items = self.client.query_content(self.query_type, mode, self.batch_size, self.entity_ids)
        finally:
            # From now on, all queries are UPDATEs, even if this one failed
            self._mode = QueryMode.UPDATE

        logger.debug("Query %d (%s) returned %d items", self._iteration, mode.value, len(items))
        self.echo(f"Received {len(items)} recommendations. (Printing only new ones.)")

        printed = []
        for item in items:
            content_id = item.content_id
            if content_id is None:
                logger.warning("Skipping content item without contentID")
                continue
            if content_id in self.window:
                logger.debug("Skipping already printed item %s", content_id)
                continue
            self.echo(format_content_item(item))
            evicted = self.window.add(content_id)
            if evicted:
                logger.debug("Evicted %s from seen window", evicted)
            printed.append(item)
        return printed

    def pause(self) -> None:
        """Back off before the next query; raises Interrupted on shutdown."""
        self.echo(f"Sleeping for {self.pause_secs:g} seconds before asking for updated content items")
        wait_or_interrupt(self.shutdown, self.pause_secs)

    def run(self, max_iterations: Optional[int] = None) -> None:
        """Poll until interrupted, an error escapes, or *max_iterations* queries were made."""
        logger.info(
            "Starting %s updates for %d entities (batch_size=%d, pause=%ss)",
            self.query_type.value, len(self.entity_ids), self.batch_size, self.pause_secs,
        )
        while True:
            self.run_once()
            if max_iterations is not None and self._iteration >= max_iterations:
                logger.info("Stopping after %d queries", self._iteration)
                return
            self.pause()


__all__ = ["UpdateLoop", "DEFAULT_BATCH_SIZE", "DEFAULT_PAUSE_SECS"]
