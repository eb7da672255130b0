from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Dict, Iterable, Optional

from .core.aggregator import filter_results, render, summarize
from .core.loader import default_pattern_plugins
from .core.models import GroupedResults, Summary
from .core.scanner import DEFAULT_LOGGER_NAME, scan
from .core.writer import DEFAULT_LANGUAGES, ResourceWriter, write_resources
from .patterns.base import PatternPlugin
from .translate.client import TranslationClient, TranslationConfig
from .translate.credentials import SecretStore, set_api_key


SOURCE_SUBDIR = "lib"


class LocalizationSession:
    """The calls a front end needs: scan, filter, generate and set the API key.

    Operations are serialized; a trigger issued while another is running
    waits for it to finish. Scans cover ``<root>/lib`` unless ``scan_dir``
    names another directory (relative to ``root`` or absolute); a project
    without that directory scans as empty. A re-scan replaces the previous
    results unless ``merge_rescans`` is set, in which case files already
    reported keep their first result.
    """

    def __init__(
        self,
        root: Path,
        secret_store: SecretStore,
        *,
        pattern_plugins: Optional[Dict[str, PatternPlugin]] = None,
        client: Optional[TranslationClient] = None,
        translation_config: Optional[TranslationConfig] = None,
        merge_rescans: bool = False,
        output_dir: Optional[Path] = None,
        scan_dir: Optional[Path] = None,
        scanner_options: Optional[dict] = None,
        logger: Optional[logging.Logger] = None,
        show_progress: bool = False,
    ) -> None:
        self.root = Path(root).resolve()
        self.scan_root = (self.root / (SOURCE_SUBDIR if scan_dir is None else scan_dir)).resolve()
        self.secret_store = secret_store
        self.pattern_plugins = default_pattern_plugins() if pattern_plugins is None else pattern_plugins
        base_logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.logger = base_logger.getChild(self.__class__.__name__.lower())
        self._owns_client = client is None
        self.client = client if client is not None else TranslationClient(secret_store, translation_config, logger=base_logger)
        self.writer = ResourceWriter(self.client, logger=base_logger, show_progress=show_progress)
        self.merge_rescans = merge_rescans
        self.output_dir = output_dir
        self.scanner_options = dict(scanner_options or {})
        self.scanner_options.setdefault("logger", base_logger)
        self.scanner_options.setdefault("show_progress", show_progress)
        self.results = GroupedResults.empty()
        self._lock = threading.Lock()

    def trigger_scan(self) -> GroupedResults:
        with self._lock:
            existing = self.results if self.merge_rescans else GroupedResults.empty()
            if not self.scan_root.is_dir():
                self.logger.warning("No source directory at %s; nothing to scan", self.scan_root)
                self.results = existing
            else:
                self.results = scan(self.scan_root, self.pattern_plugins, existing, **self.scanner_options)
            return self.results

    def filter(self, query: str) -> GroupedResults:
        with self._lock:
            return filter_results(self.results, query)

    def summary(self) -> Summary:
        return summarize(self.results)

    def render(self, query: str = "", fmt: str = "html") -> str:
        return render(self.filter(query), fmt)

    def trigger_generate(self, languages: Iterable[str] = DEFAULT_LANGUAGES) -> Dict[str, bool]:
        with self._lock:
            outcome = write_resources(self.writer, self.root, self.results, languages, self.output_dir)
        for language, ok in outcome.items():
            if ok:
                self.logger.info("app_%s.arb generated", language)
        return outcome

    def set_credential(self, token: str) -> None:
        set_api_key(self.secret_store, token, self.client.config.credential_name)
        self.logger.info("API key updated")

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> LocalizationSession:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
