from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict, List

from .aggregator import render, summarize
from .models import GroupedResults
from .utils import iter_literals


class Reporter:
    def __init__(self, out_dir: Path) -> None:
        self.out_dir = out_dir

    def write_all(self, results: GroupedResults) -> Dict[str, int]:
        self.out_dir.mkdir(parents=True, exist_ok=True)
        findings: List[Dict[str, Any]] = []
        for path, block in results.items():
            texts = list(iter_literals(block))
            findings.append({"file": path, "count": len(texts), "texts": texts})
        (self.out_dir / "findings.json").write_text(json.dumps(findings, indent=2, ensure_ascii=False), encoding="utf-8")
        (self.out_dir / "report.md").write_text(render(results, "markdown"), encoding="utf-8")
        (self.out_dir / "report.html").write_text(
            "<html>\n<body>\n" + render(results, "html") + "\n</body>\n</html>\n", encoding="utf-8"
        )

        summary = summarize(results)
        index = {"files": summary.file_count, "texts": summary.text_count, "artifacts": 5}
        # write an index.json and a summary.md
        (self.out_dir / "index.json").write_text(json.dumps(index, indent=2))
        lines = ["# Scan Summary", ""]
        for k, v in index.items():
            lines.append(f"- {k}: {v}")
        lines.append("")
        (self.out_dir / "summary.md").write_text("\n".join(lines))
        return index
