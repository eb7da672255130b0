from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Tuple

DETAIL_PREFIX = "Hardcoded Text: "


@dataclass(frozen=True)
class Finding:
    source_path: str
    literal_text: str


@dataclass(frozen=True)
class FileReport:
    source_path: str
    detail_block: str  # newline-joined "Hardcoded Text: <literal>" lines

    @classmethod
    def from_findings(cls, source_path: str, findings: Iterable[Finding]) -> "FileReport":
        lines = [f"{DETAIL_PREFIX}{f.literal_text}" for f in findings]
        return cls(source_path=source_path, detail_block="\n".join(lines))


@dataclass(frozen=True)
class LocalizationEntry:
    key: str
    translated_text: str
    target_language: str


@dataclass(frozen=True)
class Summary:
    file_count: int
    text_count: int


@dataclass(frozen=True)
class GroupedResults:
    """Read-only, insertion-ordered mapping of source path to detail block.

    Instances are values: merging or filtering returns a new instance. The
    ``version`` counter is bumped by merges that add entries and is ignored
    by equality, so two results with the same content compare equal.
    """

    _entries: Mapping[str, str] = field(default_factory=dict)
    version: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_entries", MappingProxyType(dict(self._entries)))

    @classmethod
    def empty(cls) -> "GroupedResults":
        return cls({})

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __contains__(self, source_path: object) -> bool:
        return source_path in self._entries

    def __getitem__(self, source_path: str) -> str:
        return self._entries[source_path]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GroupedResults):
            return NotImplemented
        return dict(self._entries) == dict(other._entries)

    def __hash__(self) -> int:
        return hash(frozenset(self._entries.items()))

    def items(self) -> List[Tuple[str, str]]:
        return list(self._entries.items())

    def as_dict(self) -> Dict[str, str]:
        return dict(self._entries)
