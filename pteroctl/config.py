"""
Configuration management for pteroctl.

Settings are stored as JSON in the configuration directory
(default ``~/.pteroctl``) and can be overridden by environment variables:

    PTEROCTL_PANEL_URL  - Panel base URL
    PTEROCTL_API_KEY    - Application API key
    PTEROCTL_CONFIG_DIR - Custom configuration directory
"""

import json
import logging
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Optional, Dict, Any

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".pteroctl"
CONFIG_FILE_NAME = "config.json"
CONFIG_FILE_MODE = 0o600
DEFAULT_TIMEOUT = 30
DEFAULT_MAX_RETRIES = 3

ENV_PANEL_URL = "PTEROCTL_PANEL_URL"
ENV_API_KEY = "PTEROCTL_API_KEY"
ENV_CONFIG_DIR = "PTEROCTL_CONFIG_DIR"


@dataclass
class PteroConfig:
    """Connection settings for a single panel."""

    panel_url: str = ""
    api_key: str = ""
    timeout: int = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    verify_ssl: bool = True

    def is_configured(self) -> bool:
        """Check whether both the panel URL and the API key are set."""
        return bool(self.panel_url and self.api_key)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PteroConfig":
        """Build a config from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


class ConfigManager:
    """
    Loads, saves and updates the pteroctl configuration file.

    Environment variables take precedence over stored values but are
    never written back to disk.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize the configuration manager.

        Args:
            config_dir: Custom configuration directory
        """
        env_dir = os.environ.get(ENV_CONFIG_DIR)
        self.config_dir = Path(config_dir or env_dir or DEFAULT_CONFIG_DIR)
        self._config: Optional[PteroConfig] = None

    def get_config_path(self) -> Path:
        """Get the path of the configuration file."""
        return self.config_dir / CONFIG_FILE_NAME

    def _read_stored(self) -> PteroConfig:
        path = self.get_config_path()
        data: Dict[str, Any] = {}

        if path.exists():
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                raise ConfigurationError(
                    f"Cannot read configuration file {path}",
                    details=str(e)
                )
            if not isinstance(data, dict):
                raise ConfigurationError(f"Invalid configuration file {path}")

        return PteroConfig.from_dict(data)

    def load(self) -> PteroConfig:
        """Load configuration from disk and apply environment overrides."""
        config = self._read_stored()

        panel_url = os.environ.get(ENV_PANEL_URL)
        if panel_url:
            config.panel_url = panel_url
        api_key = os.environ.get(ENV_API_KEY)
        if api_key:
            config.api_key = api_key

        return config

    def get(self) -> PteroConfig:
        """Get the current configuration, loading it on first access."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def save(self, config: PteroConfig) -> None:
        """Write configuration to disk with owner-only permissions."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        path = self.get_config_path()
        if path.exists():
            try:
                os.chmod(path, CONFIG_FILE_MODE)
            except OSError as e:
                logger.warning(f"Could not restrict permissions on {path}: {e}")
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CONFIG_FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(json.dumps(config.to_dict(), indent=2))
        self._config = config
        logger.debug(f"Configuration saved to {path}")

    def update(self, **kwargs: Any) -> PteroConfig:
        """Update selected settings and save. Environment overrides are not persisted."""
        config = self._read_stored()
        for key, value in kwargs.items():
            if not hasattr(config, key):
                raise ConfigurationError(f"Unknown configuration key: {key}")
            setattr(config, key, value)
        self.save(config)
        self._config = None
        return self.get()

    def clear(self) -> None:
        """Remove the configuration file."""
        path = self.get_config_path()
        if path.exists():
            path.unlink()
        self._config = None


_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_dir: Optional[Path] = None) -> ConfigManager:
    """Get the shared configuration manager, creating it if needed."""
    global _config_manager
    if _config_manager is None or config_dir is not None:
        _config_manager = ConfigManager(config_dir)
    return _config_manager


def get_config() -> PteroConfig:
    """Get the current configuration."""
    return get_config_manager().get()
