from __future__ import annotations
import html
from pathlib import Path
from typing import Dict, Iterable, List

from .models import FileReport, GroupedResults, Summary
from .utils import display_name, iter_literals

RENDER_FORMATS = ("html", "markdown")


def merge(existing: GroupedResults, incoming: Iterable[FileReport]) -> GroupedResults:
    """Add each report whose path is not already present (first write wins)."""
    entries: Dict[str, str] = existing.as_dict()
    added = 0
    for report in incoming:
        if report.source_path in entries or not report.detail_block.strip():
            continue
        entries[report.source_path] = report.detail_block
        added += 1
    if not added:
        return existing
    return GroupedResults(entries, version=existing.version + 1)


def count_texts(detail_block: str) -> int:
    return sum(1 for _ in iter_literals(detail_block))


def summarize(results: GroupedResults) -> Summary:
    return Summary(
        file_count=len(results),
        text_count=sum(count_texts(block) for _, block in results.items()),
    )


def filter_results(results: GroupedResults, query: str) -> GroupedResults:
    needle = (query or "").lower()
    kept = {path: block for path, block in results.items() if needle in block.lower()}
    return GroupedResults(kept, version=results.version)


def file_uri(source_path: str) -> str:
    path = Path(source_path)
    if path.is_absolute():
        return path.as_uri()
    return f"file://{source_path}"


def headline(summary: Summary) -> str:
    return (
        f"Found {summary.file_count} file(s) with hardcoded text(s) and "
        f"{summary.text_count} hardcoded text(s) in your project."
    )


def _render_html(results: GroupedResults) -> str:
    lines: List[str] = [f"<p>{html.escape(headline(summarize(results)))}</p>"]
    for path, block in results.items():
        literals = list(iter_literals(block))
        label = f"File: {display_name(path)}({len(literals)})"
        lines.append(f'<a href="{html.escape(file_uri(path), quote=True)}">{html.escape(label)}</a><br/>')
        for text in literals:
            lines.append(f"&nbsp;&nbsp;&nbsp;&nbsp;&bull; {html.escape(text)}<br/>")
        lines.append("<br/>")
    return "\n".join(lines)


def _render_markdown(results: GroupedResults) -> str:
    lines: List[str] = ["# Hardcoded Text Findings", "", headline(summarize(results)), ""]
    for path, block in results.items():
        literals = list(iter_literals(block))
        lines.append(f"[File: {display_name(path)}({len(literals)})]({file_uri(path)})")
        for text in literals:
            lines.append(f"  - {text}")
        lines.append("")
    return "\n".join(lines)


def render(results: GroupedResults, fmt: str = "html") -> str:
    if fmt == "html":
        return _render_html(results)
    if fmt == "markdown":
        return _render_markdown(results)
    raise ValueError(f"Unknown render format {fmt!r}; expected one of {RENDER_FORMATS}")
