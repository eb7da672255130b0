from __future__ import annotations
import chardet  # type: ignore
from pathlib import Path
from typing import Iterator

from .errors import FileReadError
from .models import DETAIL_PREFIX

BINARY_BYTES = bytes(range(0, 32)) + b"\x7f"


def is_likely_binary(data: bytes, control_threshold: float = 0.30) -> bool:
    if not data:
        return False
    if 0 in data:
        return True
    control = sum(1 for b in data if b in BINARY_BYTES and b not in (9, 10, 13))
    return (control / len(data)) > control_threshold


def read_source(path: Path, max_bytes: int = 20_000_000) -> str:
    """Read a whole source file as text.

    UTF-8 is tried first since Dart sources are UTF-8 by definition; the
    encoding guessed by chardet is the fallback. Raises ``FileReadError``
    when the file can't be opened, looks binary, or decodes with neither.
    """
    try:
        with path.open("rb") as f:
            data = f.read(max_bytes)
    except OSError as exc:
        raise FileReadError(path, exc.strerror or str(exc)) from exc

    if is_likely_binary(data[:4096]):
        raise FileReadError(path, "binary content")

    candidates = ["utf-8"]
    enc = chardet.detect(data).get("encoding")
    if enc and enc.lower() not in ("utf-8", "ascii"):
        candidates.append(enc)
    for candidate in candidates:
        try:
            return data.decode(candidate, errors="strict")
        except (LookupError, UnicodeDecodeError):
            continue
    raise FileReadError(path, "undecodable content")


def iter_literals(detail_block: str) -> Iterator[str]:
    """Yield the literals of a detail block, skipping blank lines."""
    for line in detail_block.splitlines():
        if line.startswith(DETAIL_PREFIX):
            line = line[len(DETAIL_PREFIX):]
        if line.strip():
            yield line


def display_name(source_path: str) -> str:
    return source_path.replace("\\", "/").rsplit("/", 1)[-1]
