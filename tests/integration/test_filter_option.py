from pathlib import Path
from .conftest import run_cli, load_json, assert_exit_ok


def test_filter_is_case_insensitive(dataset_dir: Path, out_dir: Path, cli_env: dict):
    proc = run_cli(["dir", dataset_dir, "--out", out_dir, "--no-progress", "--filter", "PASSWORD"], env=cli_env)
    assert_exit_ok(proc)
    findings = load_json(out_dir / "findings.json")
    assert [Path(i["file"]).name for i in findings] == ["login_screen.dart"]


def test_filter_without_match_reports_nothing(dataset_dir: Path, out_dir: Path, cli_env: dict):
    proc = run_cli(["dir", dataset_dir, "--out", out_dir, "--no-progress", "--filter", "zzz-nothing"], env=cli_env)
    assert_exit_ok(proc)
    assert "No hardcoded text found." in proc.stdout
    assert load_json(out_dir / "findings.json") == []
