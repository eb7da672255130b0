from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional

API_KEY_NAME = "huggingFaceApiKey"
APP_DIR_NAME = "l10nscan"
CREDENTIALS_FILE_NAME = "credentials.json"

logger = logging.getLogger("l10nscan.credentials")


class SecretStore:
    """Key/value store for user-scoped secrets. One value per name."""

    def load(self, name: str) -> Optional[str]:
        raise NotImplementedError("load must be implemented in subclasses")

    def store(self, name: str, value: str) -> None:
        raise NotImplementedError("store must be implemented in subclasses")


class MemorySecretStore(SecretStore):
    def __init__(self, values: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(values or {})

    def load(self, name: str) -> Optional[str]:
        return self._values.get(name)

    def store(self, name: str, value: str) -> None:
        self._values[name] = value


def default_config_dir() -> Path:
    config_home = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(config_home) / APP_DIR_NAME


class FileSecretStore(SecretStore):
    """Secrets kept in a JSON object under the user's config directory.

    The file is created with mode 0600. A missing or corrupt file reads as
    empty; a corrupt file is overwritten on the next ``store``.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path or default_config_dir() / CREDENTIALS_FILE_NAME

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable credentials file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring credentials file %s: expected a JSON object", self.path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def load(self, name: str) -> Optional[str]:
        return self._read_all().get(name)

    def store(self, name: str, value: str) -> None:
        values = self._read_all()
        values[name] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(values, f, indent=2)
        os.chmod(self.path, 0o600)


def set_api_key(store: SecretStore, token: str, name: str = API_KEY_NAME) -> None:
    token = (token or "").strip()
    if not token:
        raise ValueError("Please enter a valid API key")
    store.store(name, token)
