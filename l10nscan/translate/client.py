"""Hugging Face inference client for the Helsinki-NLP opus-mt models.

Only two directions are wired up: ``en`` uses the French-to-English model and
``fr`` uses the English-to-French one. A 503 means the model is still being
loaded on the inference side; the client waits and resends the same request
a bounded number of times.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import requests

from ..core.errors import (
    MalformedResponseError,
    NoCredentialError,
    PermanentServiceError,
    TransientServiceError,
    TranslationError,
)
from .credentials import API_KEY_NAME, SecretStore

DEFAULT_LOGGER_NAME = "l10nscan"
DEFAULT_BASE_URL = "https://api-inference.huggingface.co/models"
MODEL_LOADING_STATUS = 503


@dataclass
class TranslationConfig:
    base_url: str = DEFAULT_BASE_URL
    models: Dict[str, str] = field(default_factory=lambda: {
        "en": "Helsinki-NLP/opus-mt-fr-en",
        "fr": "Helsinki-NLP/opus-mt-en-fr",
    })
    credential_name: str = API_KEY_NAME
    max_attempts: int = 3        # requests per literal, 503 retries included
    retry_delay: float = 20.0    # seconds to wait after a 503
    timeout: float = 60.0
    verify_tls: bool = True


def parse_translation(payload: Any) -> str:
    """Return ``translation_text`` of the first element of ``payload``."""
    if not isinstance(payload, list) or not payload:
        raise MalformedResponseError("expected a non-empty JSON array")
    first = payload[0]
    if not isinstance(first, dict):
        raise MalformedResponseError("expected the first array element to be an object")
    text = first.get("translation_text")
    if not isinstance(text, str) or not text:
        raise MalformedResponseError("missing or empty 'translation_text'")
    return text


class TranslationClient:
    def __init__(
        self,
        secret_store: SecretStore,
        config: Optional[TranslationConfig] = None,
        *,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.secret_store = secret_store
        self.config = config or TranslationConfig()
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self._sleep = sleep
        base_logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.logger = base_logger.getChild(self.__class__.__name__.lower())
        if not self.config.verify_tls:
            self.logger.warning(
                "TLS certificate verification is disabled for %s; do not use this in production",
                self.config.base_url,
            )

    def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> TranslationClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def endpoint_for(self, language: str) -> str:
        try:
            model = self.config.models[language]
        except KeyError:
            raise ValueError(
                f"Unsupported target language {language!r}; expected one of {sorted(self.config.models)}"
            ) from None
        return f"{self.config.base_url.rstrip('/')}/{model}"

    def request_translation(self, text: str, language: str) -> str:
        """Translate ``text`` into ``language`` or raise a ``TranslationError``."""
        url = self.endpoint_for(language)
        token = self.secret_store.load(self.config.credential_name)
        if not token:
            raise NoCredentialError(self.config.credential_name)

        headers = {"Authorization": f"Bearer {token}"}
        attempts = max(1, self.config.max_attempts)
        for attempt in range(1, attempts + 1):
            try:
                resp = self.session.post(
                    url,
                    json={"inputs": text},
                    headers=headers,
                    timeout=self.config.timeout,
                    verify=self.config.verify_tls,
                )
            except requests.exceptions.RequestException as exc:
                raise PermanentServiceError(f"Request to {url} failed: {exc}") from exc

            if resp.status_code == MODEL_LOADING_STATUS:
                if attempt == attempts:
                    break
                self.logger.info(
                    "Model at %s is loading; retrying in %.0fs (attempt %d/%d)",
                    url, self.config.retry_delay, attempt, attempts,
                )
                self._sleep(self.config.retry_delay)
                continue

            if not 200 <= resp.status_code < 300:
                raise PermanentServiceError(
                    f"{url} answered HTTP {resp.status_code}", status_code=resp.status_code
                )
            try:
                payload = resp.json()
            except ValueError as exc:
                raise MalformedResponseError(f"{url} returned a non-JSON body") from exc
            return parse_translation(payload)

        raise TransientServiceError(url, attempts)

    def translate(self, text: str, language: str) -> Optional[str]:
        """Like ``request_translation`` but returns ``None`` on any translation failure."""
        try:
            return self.request_translation(text, language)
        except NoCredentialError as exc:
            self.logger.debug("Skipping translation: %s", exc)
            return None
        except TranslationError as exc:
            self.logger.warning("Translation of %r into %s failed: %s", text, language, exc)
            return None
