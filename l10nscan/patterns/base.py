from __future__ import annotations
import re
from pathlib import Path
from typing import Iterator, List, Optional

from ..core.models import FileReport, Finding


class LiteralMatches:
    """Lazy view over the literals a regex captures in one file body.

    Each iteration rescans ``content`` from the start, so the same object
    can be walked any number of times.
    """

    def __init__(self, regex: re.Pattern, content: str) -> None:
        self._regex = regex
        self._content = content

    def __iter__(self) -> Iterator[str]:
        for m in self._regex.finditer(self._content):
            literal = m.group(1)
            if literal.strip():
                yield literal


class PatternPlugin:
    """
    Base class for matcher plugins. Subclasses set NAME, EXTENSIONS and
    REGEX; group 1 of REGEX must capture the literal text.
    """
    NAME: str = "base"
    EXTENSIONS: List[str] = []
    REGEX: re.Pattern = re.compile(r"(?!)")

    def handles(self, path: Path) -> bool:
        return path.suffix.lower().lstrip(".") in self.EXTENSIONS

    def extract(self, content: str) -> LiteralMatches:
        return LiteralMatches(self.REGEX, content)

    def findings(self, path: Path, content: str) -> List[Finding]:
        source_path = str(path)
        return [Finding(source_path=source_path, literal_text=t) for t in self.extract(content)]

    def report(self, path: Path, content: str) -> Optional[FileReport]:
        found = self.findings(path, content)
        if not found:
            return None
        return FileReport.from_findings(str(path), found)
