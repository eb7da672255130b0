import os
import sys
import json
import shutil
import subprocess
from pathlib import Path

import pytest


def run_cli(args, cwd=None, env=None, timeout=60):
    """
    Run the CLI as a subprocess: python -m l10nscan.cli <args>
    Returns CompletedProcess with stdout/stderr text captured.
    """
    cmd = [sys.executable, "-m", "l10nscan.cli"] + list(map(str, args))
    return subprocess.run(cmd, cwd=cwd, env=env, capture_output=True, text=True, timeout=timeout)


@pytest.fixture()
def dataset_dir(tmp_path: Path) -> Path:
    """
    Copy the embedded dataset into a temporary directory and return its path.
    """
    src = Path(__file__).parent / "assets" / "dataset"
    dst = tmp_path / "dataset"
    shutil.copytree(src, dst)
    return dst


@pytest.fixture()
def out_dir(tmp_path: Path) -> Path:
    d = tmp_path / "out"
    d.mkdir(parents=True, exist_ok=True)
    return d


@pytest.fixture()
def cli_env(tmp_path: Path) -> dict:
    """Environment with an isolated config dir so no real API key is picked up."""
    env = dict(os.environ)
    env["XDG_CONFIG_HOME"] = str(tmp_path / "config")
    return env


def load_json(p: Path):
    with p.open("r", encoding="utf-8") as f:
        return json.load(f)


def assert_exit_ok(proc):
    assert proc.returncode == 0, f"Non-zero exit:\nSTDOUT:\n{proc.stdout}\nSTDERR:\n{proc.stderr}"


def assert_file(p: Path):
    assert p.exists(), f"Expected file missing: {p}"
    return p
