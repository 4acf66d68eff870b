"""
Command context for shared initialization across CLI commands.

Provides a unified way to load config, build the run settings and open the
Context API client so command implementations stay small.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .apis.context_client import ContextApiClient
from .config import ConfigManager, DemoSettings

logger = logging.getLogger(__name__)


class CommandContext:
    """Encapsulates shared initialization logic for CLI commands.

    Example:
        ```python
        with CommandContext(config_path, api_key="...") as ctx:
            sources = ctx.client.query_entitled_sources()
        ```
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        *,
        settings: Optional[DemoSettings] = None,
        client: Optional[ContextApiClient] = None,
        **overrides: Any,
    ):
        """Initialize command context with config, settings and client.

        Args:
            config_path: Path to main config file (None = use default)
            settings: Prebuilt settings; skips config loading when given
            client: Prebuilt client (tests inject fakes here)
            **overrides: Forwarded to ``ConfigManager.build_settings``

        Raises:
            ValueError: If configuration is invalid or no API key is available
        """
        if settings is None:
            self.config_manager = ConfigManager(config_path)
            settings = self.config_manager.build_settings(**overrides)
        else:
            self.config_manager = None
        self.settings = settings
        self.client = client or ContextApiClient.from_settings(settings)

        logger.debug(
            "CommandContext initialized for %s (session %s)", settings.server_url, settings.session_id
        )

    def close(self) -> None:
        self.client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - close the HTTP session."""
        self.close()
