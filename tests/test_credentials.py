import json
import os
import stat
from pathlib import Path

import pytest

from l10nscan.translate.credentials import (
    API_KEY_NAME,
    FileSecretStore,
    MemorySecretStore,
    default_config_dir,
    set_api_key,
)


def test_default_location_follows_xdg(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert default_config_dir() == tmp_path / "l10nscan"
    assert FileSecretStore().path == tmp_path / "l10nscan" / "credentials.json"


def test_file_store_round_trip(tmp_path: Path):
    store = FileSecretStore(tmp_path / "cfg" / "credentials.json")
    assert store.load(API_KEY_NAME) is None
    store.store(API_KEY_NAME, "hf_one")
    store.store(API_KEY_NAME, "hf_two")
    store.store("other", "value")
    assert FileSecretStore(store.path).load(API_KEY_NAME) == "hf_two"
    assert json.loads(store.path.read_text()) == {API_KEY_NAME: "hf_two", "other": "value"}
    if os.name == "posix":
        assert stat.S_IMODE(store.path.stat().st_mode) == 0o600


def test_corrupt_file_reads_as_empty(tmp_path: Path):
    path = tmp_path / "credentials.json"
    path.write_text("{not json")
    store = FileSecretStore(path)
    assert store.load(API_KEY_NAME) is None
    store.store(API_KEY_NAME, "hf_fixed")
    assert store.load(API_KEY_NAME) == "hf_fixed"


def test_set_api_key_validates():
    store = MemorySecretStore()
    with pytest.raises(ValueError):
        set_api_key(store, "")
    set_api_key(store, " hf_x\n")
    assert store.load(API_KEY_NAME) == "hf_x"
