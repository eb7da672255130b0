from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from tqdm import tqdm

from ..translate.client import TranslationClient
from .keys import KeyRegistry
from .models import GroupedResults, LocalizationEntry
from .utils import iter_literals

DEFAULT_LOGGER_NAME = "l10nscan"
DEFAULT_LANGUAGES = ("en", "fr")
OUTPUT_SUBDIR = Path("lib") / "l10n_generated"


def resource_path(output_dir: Path, language: str) -> Path:
    return output_dir / f"app_{language}.arb"


class ResourceWriter:
    """Writes one ``.arb`` file per language from grouped findings.

    Literals are translated one at a time, in the order they appear in the
    grouped results, and each entry is appended to the file as soon as its
    translation comes back. Literals whose translation fails are left out.
    """

    def __init__(
        self,
        client: TranslationClient,
        *,
        logger: Optional[logging.Logger] = None,
        show_progress: bool = False,
    ) -> None:
        self.client = client
        base_logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.logger = base_logger.getChild(self.__class__.__name__.lower())
        self.show_progress = show_progress

    def _iter_keyed_literals(self, results: GroupedResults) -> Iterator[Tuple[str, str]]:
        registry = KeyRegistry()
        for source_path, block in results.items():
            for literal in iter_literals(block):
                key, is_new = registry.claim(source_path, literal)
                if not is_new:
                    self.logger.debug("Duplicate literal %r in %s; keeping key %s", literal, source_path, key)
                    continue
                yield key, literal

    def keyed_literals(self, results: GroupedResults) -> List[Tuple[str, str]]:
        return list(self._iter_keyed_literals(results))

    def entries(self, language: str, results: GroupedResults) -> Iterator[LocalizationEntry]:
        return self._translate(language, self.keyed_literals(results))

    def _translate(self, language: str, keyed: List[Tuple[str, str]]) -> Iterator[LocalizationEntry]:
        progress_bar = None
        if self.show_progress:
            progress_bar = tqdm(total=len(keyed), desc=f"Translating ({language})", unit="text")
        try:
            for key, literal in keyed:
                translated = self.client.translate(literal, language)
                if progress_bar is not None:
                    progress_bar.update(1)
                if translated is None:
                    continue
                yield LocalizationEntry(key=key, translated_text=translated, target_language=language)
        finally:
            if progress_bar is not None:
                progress_bar.close()

    def write(self, output_path: Path, language: str, results: GroupedResults) -> bool:
        output_path = Path(output_path)
        self.client.endpoint_for(language)  # raises ValueError before touching the file
        keyed = self.keyed_literals(results)
        written = 0
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with output_path.open("w", encoding="utf-8") as f:
                f.write("{")
                for entry in self._translate(language, keyed):
                    sep = ",\n" if written else "\n"
                    f.write(
                        f"{sep}  {json.dumps(entry.key, ensure_ascii=False)}: "
                        f"{json.dumps(entry.translated_text, ensure_ascii=False)}"
                    )
                    f.flush()
                    written += 1
                f.write("\n}\n")
        except OSError as exc:
            self.logger.error("Unable to write %s: %s", output_path, exc)
            return False

        if written < len(keyed):
            self.logger.warning(
                "%s: wrote %d of %d text(s); the rest failed to translate",
                output_path.name, written, len(keyed),
            )
        else:
            self.logger.info("%s: wrote %d text(s)", output_path.name, written)
        return True


def write_resources(
    writer: ResourceWriter,
    root: Path,
    results: GroupedResults,
    languages: Iterable[str] = DEFAULT_LANGUAGES,
    output_dir: Optional[Path] = None,
) -> Dict[str, bool]:
    """Write ``app_<lang>.arb`` for each language; defaults to ``<root>/lib/l10n_generated``."""
    out_dir = Path(output_dir) if output_dir is not None else Path(root) / OUTPUT_SUBDIR
    return {
        language: writer.write(resource_path(out_dir, language), language, results)
        for language in languages
    }
