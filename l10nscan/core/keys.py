"""Localization key synthesis.

A key is the source file's base name, squashed and lowercased, followed by
the literal's first word with its first character uppercased::

    >>> synthesize_key("/a/b/home_page.dart", "Hello world")
    'homepageHello'
"""
from __future__ import annotations
from typing import Dict, Tuple

from .utils import display_name

STRIPPED_CHARS = "_ :!?"


def _file_part(source_path: str) -> str:
    name = display_name(source_path)
    if "." in name:
        name = name[: name.rindex(".")]
    for ch in STRIPPED_CHARS:
        name = name.replace(ch, "")
    return name.lower()


def _first_word(literal_text: str) -> str:
    words = literal_text.split()
    if not words:
        return ""
    word = words[0]
    return word[:1].upper() + word[1:]


def synthesize_key(source_path: str, literal_text: str) -> str:
    return _file_part(source_path) + _first_word(literal_text)


class KeyRegistry:
    """Hands out unique keys for one output file.

    Asking again for a ``(source_path, literal_text)`` pair already seen
    returns its key with ``is_new=False``. A different pair whose
    synthesized key is taken gets the next free numeric suffix, starting at 2.
    """

    def __init__(self) -> None:
        self._by_pair: Dict[Tuple[str, str], str] = {}
        self._taken: Dict[str, Tuple[str, str]] = {}

    def __len__(self) -> int:
        return len(self._taken)

    def claim(self, source_path: str, literal_text: str) -> Tuple[str, bool]:
        pair = (source_path, literal_text)
        if pair in self._by_pair:
            return self._by_pair[pair], False
        base = synthesize_key(source_path, literal_text)
        key = base
        n = 2
        while key in self._taken:
            key = f"{base}{n}"
            n += 1
        self._by_pair[pair] = key
        self._taken[key] = pair
        return key, True
