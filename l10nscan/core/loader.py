from __future__ import annotations
import importlib
import pkgutil
from typing import Dict, Iterator, List, Type

from ..patterns.base import PatternPlugin

ALL_SELECTORS = ("all", "*")
DEFAULT_SELECTOR = "flutter"


def _iter_matcher_classes(pkg) -> Iterator[Type[PatternPlugin]]:
    for info in pkgutil.iter_modules(pkg.__path__, pkg.__name__ + "."):
        module = importlib.import_module(info.name)
        for obj in vars(module).values():
            if isinstance(obj, type) and issubclass(obj, PatternPlugin) and obj is not PatternPlugin:
                yield obj


def discover_pattern_plugins() -> Dict[str, PatternPlugin]:
    """Instantiate every matcher found under ``l10nscan.patterns``, keyed by NAME."""
    from .. import patterns as patterns_pkg  # lazy import
    plugins: Dict[str, PatternPlugin] = {}
    for cls in _iter_matcher_classes(patterns_pkg):
        name = cls.NAME.lower()
        if name not in plugins:
            plugins[name] = cls()
    return plugins


def plugins_for_extension(all_plugins: Dict[str, PatternPlugin], extension: str) -> Dict[str, PatternPlugin]:
    ext = extension.strip().lstrip(".").lower()
    return {name: p for name, p in all_plugins.items() if ext in p.EXTENSIONS}


def describe_plugins(all_plugins: Dict[str, PatternPlugin]) -> str:
    return ", ".join(
        f"{name} ({', '.join('.' + e for e in p.EXTENSIONS)})" for name, p in sorted(all_plugins.items())
    )


def select_pattern_plugins(all_plugins: Dict[str, PatternPlugin], selector: str) -> Dict[str, PatternPlugin]:
    """Resolve a comma-delimited selector into matchers.

    A token is a matcher name (``flutter``), a source extension (``dart`` or
    ``.dart``), or ``all``/``*``. Unknown tokens raise ``ValueError`` naming
    the matchers that are available.
    """
    tokens = [t.strip().lower() for t in (selector or "").split(",") if t.strip()]
    if not tokens:
        raise ValueError(f"No matcher selected; available: {describe_plugins(all_plugins)}")

    selected: Dict[str, PatternPlugin] = {}
    unknown: List[str] = []
    for token in tokens:
        if token in ALL_SELECTORS:
            selected.update(all_plugins)
        elif token in all_plugins:
            selected[token] = all_plugins[token]
        else:
            by_extension = plugins_for_extension(all_plugins, token)
            if by_extension:
                selected.update(by_extension)
            else:
                unknown.append(token)
    if unknown:
        raise ValueError(
            f"Unknown matcher selector(s): {', '.join(unknown)}; available: {describe_plugins(all_plugins)}"
        )
    return selected


def default_pattern_plugins() -> Dict[str, PatternPlugin]:
    return select_pattern_plugins(discover_pattern_plugins(), DEFAULT_SELECTOR)
