"""Command-line entry point for the Context API demo."""

from __future__ import annotations

import logging
import sys
import threading

import click

from .commands import sources as sources_cmd
from .commands import watch as watch_cmd
from .core.config import ConfigManager, DEFAULT_CONFIG_PATH
from .core.shutdown import Interrupted, signals_set

# Setup logging early so submodules inherit sane defaults
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

QUERY_TYPE_HELP = (
    "The type of query to make. One of FEED (keep on top of latest breaking news), "
    "RECOMMENDATION (get 'up to speed' quickly), SURVEY, SEARCH, DISCOVERY"
)


def _connection_options(func):
    """Options shared by all commands that talk to the API server."""
    func = click.option("--sessionid", "session_id", metavar="SESSION_ID",
                        help="The session id to use for requests (default: <automatic>)")(func)
    func = click.option("--apikey", "api_key", metavar="API_KEY",
                        help="The key used for the API connections (or $CONTEXT_API_KEY)")(func)
    func = click.option("--apiserver", "server", metavar="URL",
                        help="The Context API server to connect to (overrides config)")(func)
    return func


@click.group()
@click.option(
    "--config",
    default=None,
    help=f"Path to config file (default: {DEFAULT_CONFIG_PATH})",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """Context API demo - follow new content items for a set of entities."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config


@cli.command("watch")
@_connection_options
@click.option("--query", default="", metavar="QUERY",
              help="Query only for content items of the given entity (e.g. AAPL, Google)")
@click.option("--exact", is_flag=True,
              help="When matching entities, consider only exact matches instead of also partial ones")
@click.option("--querytype", "query_type", metavar="TYPE", help=QUERY_TYPE_HELP)
@click.option("--iterations", type=click.IntRange(min=1),
              help="Stop after this many queries (default: run until interrupted)")
@click.pass_context
def watch(
    ctx: click.Context,
    server: str | None,
    api_key: str | None,
    session_id: str | None,
    query: str,
    exact: bool,
    query_type: str | None,
    iterations: int | None,
) -> None:
    """Resolve QUERY to entities and keep printing new content items."""
    shutdown = threading.Event()
    try:
        with signals_set(shutdown):
            watch_cmd.run(
                ctx.obj["config_path"],
                query=query,
                exact=exact,
                query_type=query_type,
                server=server,
                api_key=api_key,
                session_id=session_id,
                iterations=iterations,
                shutdown=shutdown,
            )
        click.echo("✅ Watch command completed successfully")
    except Interrupted as exc:
        click.echo("Interrupted, exiting.", err=True)
        sys.exit(exc.exit_code)
    except Exception as exc:
        logger.exception("Watch command failed")
        click.echo(f"❌ Watch command failed: {exc}", err=True)
        sys.exit(1)


@cli.command("sources")
@_connection_options
@click.pass_context
def sources(
    ctx: click.Context,
    server: str | None,
    api_key: str | None,
    session_id: str | None,
) -> None:
    """Output the entitled sources. No query for content is made."""
    try:
        sources_cmd.run(
            ctx.obj["config_path"],
            server=server,
            api_key=api_key,
            session_id=session_id,
        )
    except Exception as exc:
        logger.exception("Sources command failed")
        click.echo(f"❌ Sources command failed: {exc}", err=True)
        sys.exit(1)


@cli.command("status")
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show configuration status."""
    try:
        config_manager = ConfigManager(ctx.obj["config_path"])
        click.echo(f"📄 Config file: {config_manager.config_path}")

        if config_manager.validate_config():
            click.echo("✅ Configuration is valid")
        else:
            click.echo("❌ Configuration validation failed")
            return

        api_cfg = config_manager.get_api_config()
        click.echo(f"🌐 API server: {api_cfg.get('server')}")
        if config_manager.resolve_api_key():
            click.echo("🔑 API key: available")
        else:
            click.echo(f"🔑 API key: missing (set {api_cfg.get('api_key_env') or 'CONTEXT_API_KEY'})")

        defaults = config_manager.get_defaults()
        click.echo("⚙️  Defaults:")
        for key in ("query_type", "batch_size", "pause_secs", "max_entities"):
            click.echo(f"   {key}: {defaults.get(key)}")

    except Exception as exc:  # pragma: no cover - click echoes the message
        click.echo(f"❌ Error checking status: {exc}", err=True)


if __name__ == "__main__":  # pragma: no cover - script entry
    cli()
