"""Process configuration for WPAI Bridge.

Settings are stored as JSON in ``~/.wpai/config.json`` (or under
``$WPAI_CONFIG_DIR``). Site content and options live elsewhere, in the
stores under ``site_dir``.
"""

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

_CONFIG_DIR_ENV = "WPAI_CONFIG_DIR"


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if needed."""
    override = os.environ.get(_CONFIG_DIR_ENV)
    config_dir = Path(override).expanduser() if override else Path.home() / ".wpai"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_path() -> Path:
    return get_config_dir() / "config.json"


class Settings(BaseModel):
    """Bridge settings. Unknown keys in the file are ignored."""

    host: str = "127.0.0.1"
    port: int = 8899
    site_dir: Path | None = None
    site_url: str = "http://localhost:8899"
    home_url: str = ""
    extension_directory_url: str = "https://api.wordpress.org/plugins/info/1.2/"
    http_timeout: float = 30.0
    cors_allowed_origins: list[str] = Field(default_factory=list)
    log_level: str = "INFO"

    def resolved_site_dir(self) -> Path:
        """Content root; defaults to ``<config dir>/site``."""
        if self.site_dir is not None:
            return Path(self.site_dir).expanduser()
        return get_config_dir() / "site"

    @classmethod
    def load(cls) -> Settings:
        """Load settings from disk, falling back to defaults."""
        path = get_config_path()
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return cls.model_validate(data)
        except (json.JSONDecodeError, OSError, ValidationError) as e:
            logger.warning("Could not read %s, using defaults: %s", path, e)
            return cls()

    def save(self) -> None:
        path = get_config_path()
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        try:
            path.chmod(0o600)
        except OSError:
            pass


@lru_cache
def get_settings() -> Settings:
    """Cached settings for the running process. Call ``cache_clear()`` after saving."""
    return Settings.load()
