"""
Application configuration for the Meilisearch platform.

Three values are configurable at runtime (host, index, API key). They are
kept in a ConfigStore; environment settings provide the defaults for keys
that were never written.
"""

import json
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

import httpx

from ftsmeili.platform.config import Settings, settings as default_settings
from ftsmeili.platform.exceptions import ConfigurationError
from ftsmeili.platform.logging import get_logger

logger = get_logger(__name__)

MEILISEARCH_HOST = "meilisearch_host"
MEILISEARCH_INDEX = "meilisearch_index"
MEILISEARCH_API_KEY = "meilisearch_api_key"

CONFIG_KEYS = (MEILISEARCH_HOST, MEILISEARCH_INDEX, MEILISEARCH_API_KEY)

_INDEX_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class ConfigStore(ABC):
    """Persistence for application configuration values."""

    @abstractmethod
    def load(self) -> Dict[str, str]:
        """Return every stored value."""
        pass

    @abstractmethod
    def save(self, values: Dict[str, str]) -> None:
        """Replace the stored values."""
        pass


class MemoryConfigStore(ConfigStore):
    def __init__(self, values: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(values or {})

    def load(self) -> Dict[str, str]:
        return dict(self._values)

    def save(self, values: Dict[str, str]) -> None:
        self._values = dict(values)


class JsonFileConfigStore(ConfigStore):
    """Stores configuration as a flat JSON object on disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning("config_file_unreadable", path=str(self.path), error=str(e))
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def save(self, values: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(values, indent=2), encoding="utf-8")


class ConfigService:
    """Read, validate and write the platform configuration."""

    def __init__(self, store: Optional[ConfigStore] = None, settings: Optional[Settings] = None):
        self._settings = settings or default_settings
        if store is None:
            path = self._settings.CONFIG_PATH
            store = JsonFileConfigStore(path) if path else MemoryConfigStore()
        self._store = store

    def _defaults(self) -> Dict[str, str]:
        return {
            MEILISEARCH_HOST: self._settings.MEILISEARCH_HOST,
            MEILISEARCH_INDEX: self._settings.MEILISEARCH_INDEX,
            MEILISEARCH_API_KEY: self._settings.MEILISEARCH_API_KEY,
        }

    def _get_value(self, key: str) -> str:
        stored = self._store.load()
        if key in stored:
            return stored[key]
        return self._defaults()[key]

    def get_config(self) -> Dict[str, str]:
        return {key: self._get_value(key) for key in CONFIG_KEYS}

    def set_config(self, data: Dict[str, Any]) -> None:
        """Store known keys from `data`; anything else is ignored."""
        stored = self._store.load()
        for key, value in data.items():
            if key in CONFIG_KEYS:
                stored[key] = str(value)
        self._store.save(stored)
        logger.info("config_updated", keys=sorted(k for k in data if k in CONFIG_KEYS))

    def get_index_name(self) -> str:
        index = self._get_value(MEILISEARCH_INDEX).strip()
        if index == "":
            raise ConfigurationError(key=MEILISEARCH_INDEX)
        return index

    def get_host(self) -> str:
        host = self._get_value(MEILISEARCH_HOST).strip()
        if host == "":
            raise ConfigurationError(key=MEILISEARCH_HOST)
        return host

    def get_api_key(self) -> str:
        return self._get_value(MEILISEARCH_API_KEY)

    def check_config(self, data: Dict[str, Any]) -> bool:
        """
        Validate a configuration update before it is stored.

        Rejects unknown keys, non-scalar values, host URLs that are not
        http(s) with a host part, and index names outside [A-Za-z0-9_-].
        Blank values are accepted and simply unset the key.
        """
        for key, value in data.items():
            if key not in CONFIG_KEYS:
                return False
            if not isinstance(value, (str, int, float, bool)):
                return False

            text = str(value).strip()
            if key == MEILISEARCH_HOST and text != "" and not self._is_valid_host(text):
                return False
            if key == MEILISEARCH_INDEX and text != "" and not _INDEX_NAME_PATTERN.match(text):
                return False

        return True

    @staticmethod
    def _is_valid_host(value: str) -> bool:
        try:
            url = httpx.URL(value)
        except (httpx.InvalidURL, TypeError, ValueError):
            return False
        return url.scheme in ("http", "https") and url.host != ""
