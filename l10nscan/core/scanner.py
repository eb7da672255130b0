from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from tqdm import tqdm

from ..patterns.base import PatternPlugin
from .aggregator import merge
from .errors import FileReadError
from .models import FileReport, GroupedResults
from .utils import read_source


DEFAULT_LOGGER_NAME = "l10nscan"
SLOW_SCAN_THRESHOLD_SECONDS = 2.0
DEFAULT_EXCLUDE_DIRS = [
    ".git",
    ".dart_tool",
    ".idea",
    ".fvm",
    ".pub-cache",
    "build",
    "node_modules",
    "Pods",
]


def configure_logging(verbose: bool = False, logger_name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Configure and return the package logger.

    This helper ensures the scanner has a configured logger even in script usage
    where ``logging.basicConfig`` was not called. Callers can provide their own
    logger name and set ``verbose`` to elevate the log level.
    """

    logger = logging.getLogger(logger_name)
    level = logging.INFO if verbose else logging.WARNING
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s - %(message)s")
        )
        logger.addHandler(handler)

    return logger


def _plugins_for(pattern_plugins: Dict[str, PatternPlugin], path: Path) -> List[PatternPlugin]:
    return [p for p in pattern_plugins.values() if p.handles(path)]


def _report_for(path: Path, plugins: Iterable[PatternPlugin], max_bytes: int) -> Optional[FileReport]:
    content = read_source(path, max_bytes=max_bytes)
    findings = []
    for plugin in plugins:
        findings.extend(plugin.findings(path, content))
    if not findings:
        return None
    return FileReport.from_findings(str(path), findings)


class DirectoryScanner:
    """Depth-first walk of ``root`` producing one FileReport per file with findings.

    Reports come back in traversal order whatever ``workers`` is set to;
    directory children are visited in sorted order.
    """

    def __init__(
        self,
        root: Path,
        pattern_plugins: Dict[str, PatternPlugin],
        exclude_dirs: Optional[List[str]] = None,
        max_file_size: int = 5_000_000,
        workers: int = 1,
        *,
        logger: Optional[logging.Logger] = None,
        verbose: bool = False,
        show_progress: bool = False,
        progress_desc: str = "Scanning files",
    ) -> None:
        self.root = Path(root).resolve()
        self.pattern_plugins = pattern_plugins
        self.exclude_dirs = set(DEFAULT_EXCLUDE_DIRS if exclude_dirs is None else exclude_dirs)
        self.max_file_size = max_file_size
        self.workers = max(1, workers)
        base_logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.logger = base_logger.getChild(self.__class__.__name__.lower())
        self.verbose = verbose
        if verbose:
            self.logger.setLevel(logging.INFO)
        self.show_progress = bool(show_progress)
        self.progress_desc = progress_desc
        self._slow_log_threshold = SLOW_SCAN_THRESHOLD_SECONDS

    def _iter_files(self) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(self.root, topdown=True):
            # prune in place so os.walk never descends into excluded dirs
            dirnames[:] = sorted(d for d in dirnames if d not in self.exclude_dirs)
            for name in sorted(filenames):
                p = Path(dirpath) / name
                if not _plugins_for(self.pattern_plugins, p):
                    continue
                try:
                    size = p.stat().st_size
                except OSError as exc:
                    self.logger.warning("Unable to stat %s: %s", p, exc)
                    continue
                if size > self.max_file_size:
                    self.logger.info("Skipping %s (%d bytes > %d)", self._format_display_path(p), size, self.max_file_size)
                    continue
                yield p

    def scan(self) -> List[FileReport]:
        files = list(self._iter_files())
        total_files = len(files)

        if self.verbose:
            self.logger.info("Discovered %d file(s) to scan", total_files)

        if not total_files:
            return []

        progress_bar = None
        if self.show_progress:
            progress_bar = tqdm(total=total_files, desc=self.progress_desc, unit="file")

        reports: List[FileReport] = []
        try:
            for report in self._iter_reports(files):
                if report is not None:
                    reports.append(report)
                if progress_bar is not None:
                    progress_bar.update(1)
        except KeyboardInterrupt:
            if self.verbose:
                self.logger.info("Scan interrupted by user")
            raise
        finally:
            if progress_bar is not None:
                progress_bar.close()

        self.logger.info("Found hardcoded text in %d of %d file(s)", len(reports), total_files)
        return reports

    def _iter_reports(self, files: List[Path]) -> Iterator[Optional[FileReport]]:
        if self.workers == 1:
            yield from map(self._scan_file, files)
            return
        # executor.map keeps input order, so grouping matches the serial walk
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            yield from executor.map(self._scan_file, files)

    def _scan_file(self, path: Path) -> Optional[FileReport]:
        display_path = self._format_display_path(path)
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug("Processing %s", display_path)

        start_time = time.perf_counter()
        try:
            return _report_for(path, _plugins_for(self.pattern_plugins, path), self.max_file_size)
        except FileReadError as exc:
            self.logger.warning("Skipping %s: %s", display_path, exc.reason)
            return None
        finally:
            duration = time.perf_counter() - start_time
            if self.logger.isEnabledFor(logging.DEBUG) and duration >= self._slow_log_threshold:
                self.logger.debug("Slow scan for %s took %.2fs", display_path, duration)

    def _format_display_path(self, path: Path) -> str:
        try:
            return str(path.relative_to(self.root))
        except ValueError:
            return str(path)


class SingleFileScanner:
    def __init__(
        self,
        file_path: Path,
        pattern_plugins: Dict[str, PatternPlugin],
        *,
        logger: Optional[logging.Logger] = None,
        verbose: bool = False,
    ) -> None:
        self.file_path = Path(file_path).resolve()
        self.pattern_plugins = pattern_plugins
        base_logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.logger = base_logger.getChild(self.__class__.__name__.lower())
        self.verbose = verbose
        if verbose:
            self.logger.setLevel(logging.INFO)

    def scan(self) -> Optional[FileReport]:
        plugins = _plugins_for(self.pattern_plugins, self.file_path)
        if not plugins:
            self.logger.warning("No active plugin handles %s", self.file_path)
            return None
        try:
            return _report_for(self.file_path, plugins, max_bytes=20_000_000)
        except FileReadError as exc:
            self.logger.warning("Skipping %s: %s", self.file_path, exc.reason)
            return None


def scan(
    root: Path,
    pattern_plugins: Dict[str, PatternPlugin],
    existing: Optional[GroupedResults] = None,
    **scanner_kwargs,
) -> GroupedResults:
    """Walk ``root`` and merge its reports into ``existing`` (or an empty result)."""
    reports = DirectoryScanner(root, pattern_plugins, **scanner_kwargs).scan()
    return merge(existing if existing is not None else GroupedResults.empty(), reports)
