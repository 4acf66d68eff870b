"""
Sources command implementation.
Lists the sources the API key is entitled to; no content is queried.
"""

import logging
from typing import Callable, List, Optional

import click

from ..core.command_context import CommandContext

logger = logging.getLogger(__name__)


def run(
    config_path: Optional[str] = None,
    *,
    server: Optional[str] = None,
    api_key: Optional[str] = None,
    session_id: Optional[str] = None,
    echo: Callable[[str], None] = click.echo,
    context: Optional[CommandContext] = None,
) -> List[str]:
    """Print and return the entitled sources."""
    ctx = context or CommandContext(
        config_path, server=server, api_key=api_key, session_id=session_id
    )
    with ctx:
        echo(f"Using Selerity Context API server at {ctx.settings.server_url}")
        sources = ctx.client.query_entitled_sources()

    if not sources:
        echo("API key is not entitled for any source.")
    else:
        echo("API key is entitled for the following sources:")
        for source in sources:
            echo(f"* {source}")
    logger.info("API key is entitled for %d sources", len(sources))
    return sources
