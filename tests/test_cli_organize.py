"""CLI integration tests for `shoebox organize` and `shoebox init`."""

from __future__ import annotations

import csv
import json
import os
from pathlib import Path

from click.testing import CliRunner

from shoebox.cli import cli


def _env_with_home(tmp_path: Path) -> dict[str, str]:
    """Return environment variables pointing HOME to a temp directory.

    Args:
        tmp_path: Temporary directory provided by pytest.

    Returns:
        dict[str, str]: Environment mapping with HOME set.
    """
    env = {key: value for key, value in os.environ.items() if not key.startswith("SHOEBOX__")}
    env["HOME"] = str(tmp_path / "home")
    return env


def _library(tmp_path: Path) -> Path:
    root = tmp_path / "Photos"
    incoming = root / "Incoming" / "card1"
    incoming.mkdir(parents=True)
    (incoming / "DJI_20250619224111_0001_D.MP4").write_bytes(b"drone footage")
    (incoming / "20250616_C0416.MP4").write_bytes(b"sony clip")
    (incoming / "notes.txt").write_text("not media", encoding="utf-8")
    return root


def test_cli_help_lists_commands() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "organize" in result.output
    assert "init" in result.output


def test_organize_preview_lists_plans_without_moving(tmp_path: Path) -> None:
    root = _library(tmp_path)
    runner = CliRunner()

    result = runner.invoke(cli, ["organize", "--root", str(root)], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert "Dry run" in result.output
    assert "Found 2 files to organize" in result.output
    assert "2025-06-19" in result.output
    assert "dry_run=True" in result.output
    assert (root / "Incoming" / "card1" / "DJI_20250619224111_0001_D.MP4").exists()
    assert not (root / "Originals").exists()
    assert not (tmp_path / "home" / ".shoebox" / "config.yaml").exists()


def test_organize_execute_moves_files_and_updates_manifest(tmp_path: Path) -> None:
    root = _library(tmp_path)
    runner = CliRunner()

    result = runner.invoke(
        cli, ["organize", "--root", str(root), "-x", "-m"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 0
    assert "organized=2" in result.output
    assert "manifest_added=2" in result.output
    day = root / "Originals" / "2025" / "2025-06-19"
    assert (day / "DJI_20250619224111_0001_D.MP4").read_bytes() == b"drone footage"
    assert (root / "Originals" / "2025" / "2025-06-16" / "20250616_C0416.MP4").exists()
    assert (root / "Incoming" / "card1" / "notes.txt").exists()

    manifest = root / "_Manifest" / "photo_manifest.csv"
    with manifest.open("r", encoding="utf-8", newline="") as fh:
        rows = list(csv.DictReader(fh))
    assert [row["filename"] for row in rows] == [
        "20250616_C0416.MP4",
        "DJI_20250619224111_0001_D.MP4",
    ]
    assert {row["source_folder"] for row in rows} == {"card1"}


def test_organize_execute_without_manifest_flag_leaves_ledger_alone(tmp_path: Path) -> None:
    root = _library(tmp_path)
    runner = CliRunner()

    result = runner.invoke(
        cli, ["organize", "--root", str(root), "-x"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 0
    assert not (root / "_Manifest").exists()


def test_organize_reports_empty_drop_folder(tmp_path: Path) -> None:
    root = tmp_path / "Photos"
    (root / "Incoming").mkdir(parents=True)
    runner = CliRunner()

    result = runner.invoke(cli, ["organize", "--root", str(root)], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert "No new files found in Incoming/" in result.output


def test_organize_missing_drop_folder_fails(tmp_path: Path) -> None:
    root = tmp_path / "Photos"
    root.mkdir()
    runner = CliRunner()

    result = runner.invoke(cli, ["organize", "--root", str(root)], env=_env_with_home(tmp_path))

    assert result.exit_code == 1
    assert "Incoming directory not found" in result.output


def test_organize_json_payload(tmp_path: Path) -> None:
    root = _library(tmp_path)
    runner = CliRunner()

    result = runner.invoke(
        cli, ["organize", "--root", str(root), "--json"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["context"]["dry_run"] is True
    assert payload["counts"]["discovered"] == 2
    assert payload["counts"]["organized"] == 2
    assert {plan["action"] for plan in payload["plans"]} == {"move"}
    assert payload["records"] == []
    assert payload["errors"] == []


def test_organize_json_reports_missing_drop_folder(tmp_path: Path) -> None:
    root = tmp_path / "Photos"
    root.mkdir()
    runner = CliRunner()

    result = runner.invoke(
        cli, ["organize", "--root", str(root), "--json"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 1
    payload = json.loads(result.output)
    assert payload["error"]["code"] == "missing_drop_folder"


def test_organize_json_rejects_quiet(tmp_path: Path) -> None:
    root = _library(tmp_path)
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["organize", "--root", str(root), "--json", "--quiet"],
        env=_env_with_home(tmp_path),
    )

    assert result.exit_code != 0
    assert "--json cannot be combined with --quiet" in result.output


def test_organize_summary_mode_prints_only_summary(tmp_path: Path) -> None:
    root = _library(tmp_path)
    runner = CliRunner()

    result = runner.invoke(
        cli, ["organize", "--root", str(root), "--summary"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 0
    assert "Found 2 files" not in result.output
    assert "Organize summary" in result.output


def test_organize_quiet_mode_is_silent(tmp_path: Path) -> None:
    root = _library(tmp_path)
    runner = CliRunner()

    result = runner.invoke(
        cli, ["organize", "--root", str(root), "--quiet"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 0
    assert result.output.strip() == ""


def test_init_creates_layout_and_reports_existing(tmp_path: Path) -> None:
    root = tmp_path / "Photos"
    (root / "Incoming").mkdir(parents=True)
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(cli, ["init", "--root", str(root)], env=env)

    assert result.exit_code == 0
    for name in ("Incoming", "Originals", "Exports", "_Manifest"):
        assert (root / name).is_dir()
    assert "Incoming/ (already exists)" in result.output
    assert "created=3" in result.output

    again = runner.invoke(cli, ["init", "--root", str(root)], env=env)

    assert again.exit_code == 0
    assert "created=0, existing=4" in again.output


def test_organize_honors_configured_layout(tmp_path: Path) -> None:
    root = tmp_path / "Photos"
    drop = root / "Inbox"
    drop.mkdir(parents=True)
    (drop / "20250616_C0001.MP4").write_bytes(b"clip")
    env = _env_with_home(tmp_path)
    env["SHOEBOX__LAYOUT__INCOMING_DIRNAME"] = "Inbox"
    env["SHOEBOX__LAYOUT__ORIGINALS_DIRNAME"] = "Archive"
    runner = CliRunner()

    result = runner.invoke(cli, ["organize", "--root", str(root), "-x"], env=env)

    assert result.exit_code == 0
    assert (root / "Archive" / "2025" / "2025-06-16" / "20250616_C0001.MP4").exists()


def test_log_level_option_overrides_configuration(tmp_path: Path) -> None:
    root = _library(tmp_path)
    env = _env_with_home(tmp_path)
    env["SHOEBOX__LOGGING__LEVEL"] = "not-a-level"
    runner = CliRunner()

    broken = runner.invoke(cli, ["organize", "--root", str(root)], env=env)
    fixed = runner.invoke(
        cli, ["organize", "--root", str(root), "--log-level", "error"], env=env
    )

    assert broken.exit_code == 1
    assert "Invalid configuration values" in broken.output
    assert fixed.exit_code == 0
    assert "Found 2 files to organize" in fixed.output
