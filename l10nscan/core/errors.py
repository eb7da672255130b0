from __future__ import annotations
from pathlib import Path
from typing import Optional


class L10nScanError(Exception):
    """Base class for every error raised by l10nscan."""


class FileReadError(L10nScanError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Unable to read {path}: {reason}")
        self.path = path
        self.reason = reason


class TranslationError(L10nScanError):
    """A single literal could not be translated."""


class NoCredentialError(TranslationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"No credential stored under {name!r}")
        self.name = name


class TransientServiceError(TranslationError):
    """The model kept answering 503 (still loading) until attempts ran out."""

    def __init__(self, url: str, attempts: int) -> None:
        super().__init__(f"{url} still unavailable after {attempts} attempt(s)")
        self.url = url
        self.attempts = attempts


class PermanentServiceError(TranslationError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(PermanentServiceError):
    """The response body does not match ``[{"translation_text": str}, ...]``."""
