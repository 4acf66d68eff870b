"""Configuration management for the YAML config file and run settings."""

import os
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .models import QueryType
from .paths import get_data_dir, resolve_data_path

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = get_data_dir() / "config"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.yaml"

SUPPORT_EMAIL_ADDRESS = "support@selerityinc.com"
AUTOMATIC_SESSION_ID = "<automatic>"

_DEFAULT_CONFIG_TEMPLATE = """# Auto-generated default configuration for context-api-demo
api:
  server: "context-api-test.seleritycorp.com"
  api_key_env: "CONTEXT_API_KEY"
  api_key_file: ""
  session_id: "<automatic>"
  timeout: 15
  max_retries: 3
  rps: 2.0

defaults:
  query_type: "FEED"
  batch_size: 10
  pause_secs: 30
  max_entities: 20
"""

_POSITIVE_INT_DEFAULTS = ("batch_size", "pause_secs", "max_entities")


def _write_template(path: Path, content: str) -> None:
    """Write templated YAML content to disk with a trailing newline."""
    path.write_text(content.strip() + "\n", encoding="utf-8")


def normalize_server_url(server: str) -> str:
    """Prefix bare host names with https:// so they form a proper URL."""
    server = (server or "").strip()
    if not server:
        raise ValueError("No API server configured")
    if "://" not in server:
        server = "https://" + server
    return server.rstrip("/")


def resolve_session_id(session_id: Optional[str]) -> str:
    """Return *session_id*, or a fresh UUID when it is empty or automatic."""
    if not session_id or session_id == AUTOMATIC_SESSION_ID:
        return str(uuid.uuid4())
    return session_id


def _load_key_from_file(path: Path, env_var: str) -> Optional[str]:
    """Read an API key from a file, tolerating KEY=value or raw key formats."""
    if not path.exists():
        return None
    content = path.read_text(encoding="utf-8").strip()
    if "=" in content:
        for line in content.splitlines():
            if line.strip().startswith(env_var):
                parts = line.split("=", 1)
                val = parts[1].strip().strip('"').strip("'")
                if val:
                    return val
    return content or None


def _setting(section: Dict[str, Any], key: str, default: Any) -> Any:
    """Return ``section[key]``, treating a missing or empty (``key:``) entry as *default*."""
    value = section.get(key)
    return default if value is None else value


@dataclass(frozen=True)
class DemoSettings:
    """Immutable settings for one demo run, passed explicitly to the commands."""

    server_url: str
    api_key: str
    session_id: str
    query: str = ""
    exact: bool = False
    query_type: QueryType = QueryType.FEED
    batch_size: int = 10
    pause_secs: float = 30
    max_entities: int = 20
    timeout: float = 15
    max_retries: int = 3
    rps: float = 2.0


class ConfigManager:
    """Manages loading and validation of the YAML configuration file."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize the manager and ensure a baseline config file exists.

        Without *config_path* the file lives at config/config.yaml under the
        runtime data directory.
        """
        if config_path:
            path = Path(config_path).expanduser()
        else:
            path = resolve_data_path("config", "config.yaml", ensure_parent=True)
        if not path.is_absolute():
            path = path.resolve()
        self.config_path = str(path)
        self.base_dir = str(path.parent)
        self._config = None
        self._ensure_default_config()

    def load_config(self) -> Dict[str, Any]:
        """Load the main configuration file."""
        if self._config is None:
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    self._config = yaml.safe_load(f) or {}
                logger.info(f"Loaded configuration from {self.config_path}")
            except Exception as e:
                logger.error(f"Failed to load config from {self.config_path}: {e}")
                raise

        return self._config

    def _ensure_default_config(self) -> None:
        """Create the default configuration file if it is missing."""
        config_file = Path(self.config_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)
        if not config_file.exists():
            _write_template(config_file, _DEFAULT_CONFIG_TEMPLATE)
            logger.info("Created default config.yaml at %s", config_file)

    def get_api_config(self) -> Dict[str, Any]:
        return self.load_config().get('api') or {}

    def get_defaults(self) -> Dict[str, Any]:
        return self.load_config().get('defaults') or {}

    def validate_config(self) -> bool:
        """Validate the configuration file."""
        try:
            config = self.load_config()
            if not isinstance(config, dict):
                logger.error("Config root must be a mapping")
                return False

            for section in ('api', 'defaults'):
                if section not in config:
                    logger.error(f"Missing required section '{section}' in main config")
                    return False
                if not isinstance(config[section], dict):
                    logger.error(f"Section '{section}' must be a mapping")
                    return False

            api_cfg = config['api']
            if not isinstance(api_cfg.get('server'), str) or not api_cfg['server'].strip():
                logger.error("api.server must be a non-empty string")
                return False
            for key in ('timeout', 'rps'):
                value = api_cfg.get(key)
                if value is not None and (not isinstance(value, (int, float)) or value <= 0):
                    logger.error(f"api.{key} must be a positive number")
                    return False
            retries = api_cfg.get('max_retries')
            if retries is not None and (not isinstance(retries, int) or retries < 1):
                logger.error("api.max_retries must be an integer >= 1")
                return False

            defaults = config['defaults']
            for key in _POSITIVE_INT_DEFAULTS:
                value = defaults.get(key)
                if value is not None and (not isinstance(value, int) or value <= 0):
                    logger.error(f"defaults.{key} must be a positive integer")
                    return False
            qt = defaults.get('query_type')
            if qt is not None and str(qt).upper() not in QueryType.__members__:
                logger.warning(f"defaults.query_type '{qt}' is unknown; FEED will be used")

            logger.info("Configuration validation passed")
            return True

        except Exception as e:
            logger.error(f"Configuration validation failed: {e}")
            return False

    def _key_file_candidates(self) -> List[Path]:
        api_cfg = self.get_api_config()
        base_dir = Path(self.base_dir)
        candidates: List[Path] = []
        key_file_cfg = (api_cfg.get('api_key_file') or '').strip()
        if key_file_cfg:
            key_path = Path(key_file_cfg).expanduser()
            if key_path.is_absolute():
                candidates.append(key_path)
            else:
                candidates.append(base_dir / key_path)
                candidates.append(Path.cwd() / key_path)
        candidates.append(base_dir / 'secrets' / 'context_api_key.env')
        return candidates

    def resolve_api_key(self, explicit: Optional[str] = None) -> Optional[str]:
        """Resolve the API key from the explicit value, environment, or key file."""
        if explicit:
            return explicit
        env_var = self.get_api_config().get('api_key_env') or 'CONTEXT_API_KEY'
        key = os.environ.get(env_var)
        if key:
            return key
        for path in self._key_file_candidates():
            key = _load_key_from_file(path, env_var)
            if key:
                logger.debug("Using API key from %s", path)
                return key
        return None

    def build_settings(
        self,
        *,
        server: Optional[str] = None,
        api_key: Optional[str] = None,
        session_id: Optional[str] = None,
        query: str = "",
        exact: bool = False,
        query_type: Optional[str] = None,
    ) -> DemoSettings:
        """Combine config values with command-line overrides into DemoSettings.

        Raises:
            ValueError: If the configuration is invalid or no API key is available
        """
        if not self.validate_config():
            raise ValueError("Invalid configuration. Run 'context-demo status' for details.")

        api_cfg = self.get_api_config()
        defaults = self.get_defaults()

        key = self.resolve_api_key(api_key)
        if not key:
            env_var = api_cfg.get('api_key_env') or 'CONTEXT_API_KEY'
            raise ValueError(
                "No usable api key given. Pass --apikey INSERT-YOUR-API-KEY-HERE or set "
                f"{env_var}. If you have not yet gotten an API key, get in touch with us at "
                f"{SUPPORT_EMAIL_ADDRESS}"
            )

        return DemoSettings(
            server_url=normalize_server_url(server or api_cfg.get('server')),
            api_key=key,
            session_id=resolve_session_id(session_id or api_cfg.get('session_id')),
            query=query or "",
            exact=bool(exact),
            query_type=QueryType.parse(query_type or defaults.get('query_type') or 'FEED'),
            batch_size=int(_setting(defaults, 'batch_size', 10)),
            pause_secs=float(_setting(defaults, 'pause_secs', 30)),
            max_entities=int(_setting(defaults, 'max_entities', 20)),
            timeout=float(_setting(api_cfg, 'timeout', 15)),
            max_retries=int(_setting(api_cfg, 'max_retries', 3)),
            rps=float(_setting(api_cfg, 'rps', 2.0)),
        )


__all__ = [
    "ConfigManager",
    "DemoSettings",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_CONFIG_DIR",
    "SUPPORT_EMAIL_ADDRESS",
    "normalize_server_url",
    "resolve_session_id",
]
