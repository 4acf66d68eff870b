from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

from .commands import sources as sources_cmd
from .commands import watch as watch_cmd
from .core.config import ConfigManager, DEFAULT_CONFIG_PATH

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = str(DEFAULT_CONFIG_PATH)

__all__ = [
    'watch',
    'sources',
    'status',
]


def watch(
    query: str = "",
    *,
    exact: bool = False,
    query_type: Optional[str] = None,
    api_key: Optional[str] = None,
    server: Optional[str] = None,
    iterations: Optional[int] = None,
    config_path: Optional[str] = None,
) -> None:
    """Follow new content items for the entities matching *query*.

    Args:
        query: Free-text entity query (e.g. "AAPL")
        exact: Only consider exact entity matches
        query_type: FEED, RECOMMENDATION, SURVEY, SEARCH or DISCOVERY
        api_key: API key (falls back to config/environment)
        server: API server override
        iterations: Stop after this many queries; None polls until interrupted
        config_path: Path to main YAML config; defaults to the data dir config
    """
    watch_cmd.run(
        config_path,
        query=query,
        exact=exact,
        query_type=query_type,
        api_key=api_key,
        server=server,
        iterations=iterations,
    )


def sources(
    *,
    api_key: Optional[str] = None,
    server: Optional[str] = None,
    config_path: Optional[str] = None,
) -> List[str]:
    """Print and return the sources the API key is entitled to."""
    return sources_cmd.run(config_path, api_key=api_key, server=server)


def status(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Return configuration and environment status for programmatic use."""
    cfg_path = config_path or _DEFAULT_CONFIG
    info: Dict[str, Any] = {'config_path': cfg_path}
    if not os.path.exists(cfg_path):
        info.update({'valid': False, 'error': f'Config file not found: {cfg_path}'})
        return info
    try:
        cm = ConfigManager(cfg_path)
        valid = cm.validate_config()
        info.update({
            'valid': bool(valid),
            'server': cm.get_api_config().get('server'),
            'api_key_available': bool(cm.resolve_api_key()),
            'defaults': cm.get_defaults(),
        })
        return info
    except Exception as e:
        info.update({'valid': False, 'error': str(e)})
        return info
