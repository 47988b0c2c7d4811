"""
Local key-value settings used by the order submission path.

The UI stores the endpoint URLs and the proxy API key here. Values are read
fresh on every lookup so a change made in the settings screen takes effect on
the next submission without a restart.
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

PROXY_URL = "PROXY_URL"
GOOGLE_SCRIPT_URL = "GOOGLE_SCRIPT_URL"
PROXY_API_KEY = "PROXY_API_KEY"

SETTINGS_FILE_ENV = "ORDER_SETTINGS_FILE"


class SettingsStore:
    """Minimal string key-value store."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class MemorySettingsStore(SettingsStore):
    def __init__(self, values: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(values or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)


class EnvSettingsStore(SettingsStore):
    """Settings backed by the process environment (and a .env file)."""

    def __init__(self):
        load_dotenv()

    def get(self, key: str) -> Optional[str]:
        return os.getenv(key)

    def set(self, key: str, value: str) -> None:
        os.environ[key] = value

    def remove(self, key: str) -> None:
        os.environ.pop(key, None)


class JsonFileSettingsStore(SettingsStore):
    """
    Settings persisted in a flat JSON object on disk.
    The file is re-read on every get; a missing or unreadable file counts as empty.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read settings file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Settings file %s is not a JSON object, ignoring it", self.path)
            return {}
        return data

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


def default_settings_store() -> SettingsStore:
    load_dotenv()
    settings_file = os.getenv(SETTINGS_FILE_ENV)
    if settings_file:
        return JsonFileSettingsStore(settings_file)
    return EnvSettingsStore()
