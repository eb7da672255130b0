from typing import Any, Callable, Dict, List, Optional

import pytest

from l10nscan.translate.client import TranslationClient, TranslationConfig
from l10nscan.translate.credentials import API_KEY_NAME, MemorySecretStore


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None) -> None:
        self.status_code = status_code
        self.payload = payload

    def json(self) -> Any:
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


def ok(text: str) -> FakeResponse:
    return FakeResponse(200, [{"translation_text": text}])


def echo(url: str, body: Dict[str, Any]) -> FakeResponse:
    """Answer ``<lang>:<input>`` where lang is the model's target language."""
    return ok(f"{url.rsplit('-', 1)[-1]}:{body['inputs']}")


class FakeSession:
    """Stands in for ``requests.Session``; replays canned responses or calls ``handler``."""

    def __init__(self, *responses: Any, handler: Optional[Callable[[str, Dict[str, Any]], FakeResponse]] = None) -> None:
        self.responses = list(responses)
        self.handler = handler
        self.calls: List[Dict[str, Any]] = []

    def post(self, url, json=None, headers=None, timeout=None, verify=True):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout, "verify": verify})
        if self.handler is not None:
            return self.handler(url, json)
        r = self.responses.pop(0)
        if isinstance(r, Exception):
            raise r
        return r


@pytest.fixture()
def secret_store() -> MemorySecretStore:
    return MemorySecretStore({API_KEY_NAME: "hf_test_token"})


@pytest.fixture()
def sleeps() -> List[float]:
    return []


@pytest.fixture()
def make_client(secret_store, sleeps):
    def _make(session, store=None, **config) -> TranslationClient:
        return TranslationClient(
            store if store is not None else secret_store,
            TranslationConfig(**config),
            session=session,
            sleep=sleeps.append,
        )
    return _make


def write_dart(path, body: str):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")
    return path
