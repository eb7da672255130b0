import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .core.aggregator import filter_results, headline, merge, summarize
from .core.loader import discover_pattern_plugins, select_pattern_plugins
from .core.models import GroupedResults
from .core.reporting import Reporter
from .core.scanner import DEFAULT_EXCLUDE_DIRS, SingleFileScanner, configure_logging, scan
from .core.writer import DEFAULT_LANGUAGES
from .patterns.base import PatternPlugin
from .session import LocalizationSession
from .translate.client import TranslationConfig
from .translate.credentials import FileSecretStore, set_api_key


def _split(value: str) -> List[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="l10nscan",
        description="Find hardcoded UI text in Flutter sources and generate translated ARB files.",
    )
    sub = p.add_subparsers(dest="mode", required=True)

    # dir mode
    d = sub.add_parser("dir", help="Scan a directory recursively and write a report.")
    d.add_argument("path", type=Path, help="Directory to scan recursively.")
    d.add_argument("--plugin", default="flutter", help="Comma-delimited matchers by name or source extension, or 'all'.")
    d.add_argument("--out", type=Path, default=Path("./scan_output"), help="Output directory for the report.")
    d.add_argument("--filter", default="", help="Only report files whose texts contain this (case-insensitive).")
    d.add_argument("--workers", type=int, default=1, help="Number of worker threads for reading files.")
    d.add_argument("--exclude", default=",".join(DEFAULT_EXCLUDE_DIRS), help="Dir names to exclude, comma-separated.")
    d.add_argument("--max-file-size", type=int, default=5_000_000, help="Max file size in bytes to scan (default 5MB).")
    d.add_argument("--no-progress", action="store_true", help="Disable the progress bar during directory scans.")
    d.add_argument("--verbose", action="store_true", help="Enable verbose logging output.")

    # file mode
    f = sub.add_parser("file", help="Scan a single file and write a report.")
    f.add_argument("path", type=Path, help="File to scan.")
    f.add_argument("--plugin", default="flutter", help="Comma-delimited matchers by name or source extension, or 'all'.")
    f.add_argument("--out", type=Path, default=Path("./scan_output"), help="Output directory for the report.")
    f.add_argument("--verbose", action="store_true", help="Enable verbose logging output.")

    # generate mode
    g = sub.add_parser("generate", help="Scan a project and write translated ARB files.")
    g.add_argument("path", type=Path, help="Project root; files go to <path>/lib/l10n_generated by default.")
    g.add_argument("--plugin", default="flutter", help="Comma-delimited matchers by name or source extension, or 'all'.")
    g.add_argument("--languages", default=",".join(DEFAULT_LANGUAGES), help="Target languages, comma-separated.")
    g.add_argument("--output-dir", type=Path, default=None, help="Where to write app_<lang>.arb files.")
    g.add_argument("--scan-dir", type=Path, default=None, help="Directory to scan, relative to the project root (default: lib).")
    g.add_argument("--exclude", default=",".join(DEFAULT_EXCLUDE_DIRS), help="Dir names to exclude, comma-separated.")
    g.add_argument("--max-attempts", type=int, default=3, help="Requests per text when the model is loading (HTTP 503).")
    g.add_argument("--retry-delay", type=float, default=20.0, help="Seconds to wait after an HTTP 503.")
    g.add_argument("--timeout", type=float, default=60.0, help="HTTP timeout in seconds.")
    g.add_argument("--insecure", action="store_true", help="Skip TLS certificate verification for the inference API.")
    g.add_argument("--no-progress", action="store_true", help="Disable progress bars.")
    g.add_argument("--verbose", action="store_true", help="Enable verbose logging output.")

    # set-key mode
    k = sub.add_parser("set-key", help="Store the Hugging Face API token used for translation.")
    k.add_argument("token", help="API token, or '-' to read it from stdin.")
    k.add_argument("--verbose", action="store_true", help="Enable verbose logging output.")

    return p


def _activated_plugins(selector: str) -> Dict[str, PatternPlugin]:
    try:
        return select_pattern_plugins(discover_pattern_plugins(), selector)
    except ValueError as exc:
        print(f"{exc}. Exiting.", file=sys.stderr)
        return {}


def _report(results: GroupedResults, out_dir: Path) -> int:
    Reporter(out_dir).write_all(results)
    if not len(results):
        print("No hardcoded text found.")
    else:
        print(headline(summarize(results)))
    return 0


def run_dir(args: argparse.Namespace) -> int:
    if not args.path.is_dir():
        print(f"Not a directory: {args.path}", file=sys.stderr)
        return 2
    activated = _activated_plugins(args.plugin)
    if not activated:
        return 2

    results = scan(
        args.path,
        activated,
        exclude_dirs=_split(args.exclude),
        max_file_size=args.max_file_size,
        workers=args.workers,
        logger=configure_logging(verbose=args.verbose),
        verbose=args.verbose,
        show_progress=not args.no_progress,
    )
    return _report(filter_results(results, args.filter), args.out)


def run_file(args: argparse.Namespace) -> int:
    if not args.path.is_file():
        print(f"Not a file: {args.path}", file=sys.stderr)
        return 2
    activated = _activated_plugins(args.plugin)
    if not activated:
        return 2

    scanner = SingleFileScanner(
        file_path=args.path,
        pattern_plugins=activated,
        logger=configure_logging(verbose=args.verbose),
        verbose=args.verbose,
    )
    report = scanner.scan()
    return _report(merge(GroupedResults.empty(), [report] if report else []), args.out)


def run_generate(args: argparse.Namespace) -> int:
    if not args.path.is_dir():
        print(f"Not a directory: {args.path}", file=sys.stderr)
        return 2
    activated = _activated_plugins(args.plugin)
    if not activated:
        return 2
    languages = _split(args.languages)
    config = TranslationConfig(
        max_attempts=args.max_attempts,
        retry_delay=args.retry_delay,
        timeout=args.timeout,
        verify_tls=not args.insecure,
    )
    unknown = [lang for lang in languages if lang not in config.models]
    if not languages or unknown:
        print(f"Unsupported language(s): {', '.join(unknown) or '(none given)'}", file=sys.stderr)
        return 2

    with LocalizationSession(
        args.path,
        FileSecretStore(),
        pattern_plugins=activated,
        translation_config=config,
        output_dir=args.output_dir,
        scan_dir=args.scan_dir,
        scanner_options={"exclude_dirs": _split(args.exclude)},
        logger=configure_logging(verbose=args.verbose),
        show_progress=not args.no_progress,
    ) as session:
        results = session.trigger_scan()
        print(headline(summarize(results)))
        outcome = session.trigger_generate(languages)
    for language, ok in outcome.items():
        print(f"app_{language}.arb {'generated successfully' if ok else 'could not be written'}")
    return 0 if all(outcome.values()) else 1


def run_set_key(args: argparse.Namespace) -> int:
    configure_logging(verbose=args.verbose)
    token = sys.stdin.readline() if args.token == "-" else args.token
    store = FileSecretStore()
    try:
        set_api_key(store, token)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    print(f"API key stored in {store.path}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.mode == "dir":
        return run_dir(args)
    elif args.mode == "file":
        return run_file(args)
    elif args.mode == "generate":
        return run_generate(args)
    elif args.mode == "set-key":
        return run_set_key(args)
    else:
        parser.print_help()
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
