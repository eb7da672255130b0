from pathlib import Path
from .conftest import run_cli, load_json, assert_exit_ok


def test_max_file_size_skips_large_file(dataset_dir: Path, out_dir: Path, cli_env: dict):
    large = dataset_dir / "lib" / "large.dart"
    large.write_text('final t = Text("Too big to scan");\n' + "// padding\n" * 2000, encoding="utf-8")

    proc = run_cli(["dir", dataset_dir, "--out", out_dir, "--no-progress", "--max-file-size", "10000"], env=cli_env)
    assert_exit_ok(proc)
    texts = [t for item in load_json(out_dir / "findings.json") for t in item["texts"]]
    assert "Too big to scan" not in texts


def test_custom_exclude_list(dataset_dir: Path, out_dir: Path, cli_env: dict):
    # Replacing the default list with "screens" both prunes lib/screens and scans build/
    proc = run_cli(["dir", dataset_dir, "--out", out_dir, "--no-progress", "--exclude", "screens"], env=cli_env)
    assert_exit_ok(proc)
    names = {Path(i["file"]).name for i in load_json(out_dir / "findings.json")}
    assert "login_screen.dart" not in names
    assert {"main.dart", "generated_plugin.dart", "cache.dart"} <= names
