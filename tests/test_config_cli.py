"""CLI tests for configuration commands."""

import os
from pathlib import Path
from typing import Any

from click.testing import CliRunner

from shoebox.cli import cli
from shoebox.config import ConfigManager


def _env_with_home(tmp_path: Path) -> dict[str, Any]:
    env = {key: value for key, value in os.environ.items() if not key.startswith("SHOEBOX__")}
    env["HOME"] = str(tmp_path)
    return env


def _config_path(tmp_path: Path) -> Path:
    return tmp_path / ".shoebox" / "config.yaml"


def test_config_view_displays_defaults(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["config", "view"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert "layout:" in result.output
    assert "Incoming" in result.output


def test_config_view_shows_environment_overrides(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    env["SHOEBOX__LAYOUT__INCOMING_DIRNAME"] = "Inbox"

    with_env = runner.invoke(cli, ["config", "view"], env=env)
    without_env = runner.invoke(cli, ["config", "view", "--no-env"], env=env)

    assert "Inbox" in with_env.output
    assert "Inbox" not in without_env.output


def test_config_set_updates_value_and_writes_diff(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(
        cli, ["config", "set", "layout.incoming_dirname", "--value", "Dropbox"], env=env
    )

    assert result.exit_code == 0
    assert "Dropbox" in result.output
    assert "Updated layout.incoming_dirname" in result.output

    config = ConfigManager(config_path=_config_path(tmp_path), env={}).load()
    assert config.layout.incoming_dirname == "Dropbox"


def test_config_set_rejects_invalid_value(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli, ["config", "set", "logging.level", "--value", "chatty"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code != 0
    assert "Invalid configuration values" in result.output
    assert not _config_path(tmp_path).exists()


def test_config_set_requires_dotted_key(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli, ["config", "set", "logging", "--value", "x"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code != 0
    assert "dotted path" in result.output
