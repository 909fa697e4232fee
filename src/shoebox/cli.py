"""Command line interface for Shoebox."""

from __future__ import annotations

import difflib
import logging
from pathlib import Path
from typing import Any

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax

from shoebox.config import ConfigError, ConfigManager, ShoeboxConfig
from shoebox.library import LibraryPaths, initialize_library
from shoebox.organization import MissingDropFolderError, MovedFileRecord, OrganizePlan, PlanAction
from shoebox.organization.pipeline import OrganizePipeline

console = Console()
log_console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    """Route log records through the shared rich console."""
    handler = RichHandler(console=log_console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _load_config(log_level: str | None = None) -> ShoeboxConfig:
    overrides = {"logging.level": log_level} if log_level else None
    return ConfigManager().load(cli_overrides=overrides)


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """
    if json_output:
        console.print_json(data={"error": {"code": code, "message": message}})
        raise SystemExit(1)

    raise click.ClickException(message) from original


def _emit_message(message: Any, *, mode: str, quiet: bool, summary_only: bool) -> None:
    """Conditionally print CLI output according to quiet/summary settings.

    Args:
        message: Renderable or string to emit.
        mode: Output mode identifier (`detail`, `summary`, `warning`, or `error`).
        quiet: Whether quiet mode is active.
        summary_only: Whether only summary lines should be emitted.
    """
    if quiet and mode != "error":
        return
    if summary_only and mode not in {"summary", "warning", "error"}:
        return
    console.print(message, soft_wrap=True)


def _format_summary_line(command: str, root: Path | str, metrics: dict[str, Any]) -> str:
    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]{command} summary for {escape(str(root))}: {parts}.[/green]"


def _display_path(path: Path, root: Path) -> str:
    try:
        return escape(str(path.relative_to(root)))
    except ValueError:
        return escape(str(path))


def _describe_plan(
    plan: OrganizePlan,
    record: MovedFileRecord | None,
    *,
    root: Path,
    committed: bool,
) -> str:
    source = _display_path(plan.source, root)
    destination = _display_path(plan.destination, root)
    if plan.action is PlanAction.SKIP_DUPLICATE:
        return f"  [yellow]Duplicate[/yellow] {source} (already at {destination})"
    note = " [cyan](renamed)[/cyan]" if plan.action is PlanAction.RENAME_COLLISION else ""
    if committed and record is not None:
        return f"  [green]Moved[/green] {source} → {destination}{note}"
    return f"  {source}\n    → {destination}{note}"


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="shoebox")
def cli() -> None:
    """Shoebox files photos and videos into a date-based archive."""


@cli.command()
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    help="Photo library root (defaults to the current directory).",
)
@click.option("-x", "--execute", is_flag=True, help="Move files instead of previewing.")
@click.option(
    "-m", "--update-manifest", is_flag=True, help="Record moved files in the manifest CSV."
)
@click.option("--json", "json_output", is_flag=True, help="Emit JSON describing the run.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Override the configured logging level for this run.",
)
@click.pass_context
def organize(
    ctx: click.Context,
    root: Path | None,
    execute: bool,
    update_manifest: bool,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
    log_level: str | None,
) -> None:
    """Move files from Incoming/ into Originals/YYYY/YYYY-MM-DD/.

    Without --execute nothing is changed on disk; the planned moves are only
    printed.
    """
    try:
        config = _load_config(log_level)
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
        return
    _configure_logging(config.logging.level)

    explicit_quiet = ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE
    explicit_summary = ctx.get_parameter_source("summary_mode") == ParameterSource.COMMANDLINE
    quiet_enabled = quiet if explicit_quiet else config.cli.quiet_default
    summary_only = summary_mode if explicit_summary else config.cli.summary_default

    if json_output:
        if explicit_quiet and quiet_enabled:
            raise click.ClickException("--json cannot be combined with --quiet.")
        if explicit_summary and summary_only:
            raise click.ClickException("--json cannot be combined with --summary.")
        quiet_enabled = False
        summary_only = False
    if quiet_enabled and summary_only:
        raise click.ClickException(
            "Quiet and summary modes cannot both be enabled. Adjust CLI defaults or flags."
        )

    def emit(message: Any, mode: str = "detail") -> None:
        if json_output:
            return
        _emit_message(message, mode=mode, quiet=quiet_enabled, summary_only=summary_only)

    paths = LibraryPaths.from_root(root or Path.cwd(), config.layout)
    update_manifest = update_manifest or config.organization.update_manifest_default
    pipeline = OrganizePipeline(paths, options=config.organization)

    try:
        captured = pipeline.discover()
    except MissingDropFolderError as exc:
        _handle_cli_error(
            str(exc), code="missing_drop_folder", json_output=json_output, original=exc
        )
        return

    emit(f"Incoming:  {escape(str(paths.incoming))}")
    emit(f"Originals: {escape(str(paths.originals))}")
    if not execute:
        emit("[yellow]Dry run: nothing will be moved. Pass --execute (-x) to apply.[/yellow]")
        if update_manifest:
            emit("[yellow]--update-manifest only applies with --execute.[/yellow]", "warning")
    if captured:
        emit(f"Found {len(captured)} files to organize")
    else:
        emit(f"No new files found in {escape(paths.incoming.name)}/")

    def progress(plan: OrganizePlan, record: MovedFileRecord | None) -> None:
        emit(_describe_plan(plan, record, root=paths.root, committed=execute))

    result = pipeline.run(
        commit=execute,
        update_manifest=update_manifest,
        progress=progress,
        captured=captured,
    )

    if json_output:
        console.print_json(
            data={
                "context": {
                    "root": paths.root.as_posix(),
                    "incoming": paths.incoming.as_posix(),
                    "originals": paths.originals.as_posix(),
                    "manifest": paths.manifest_file.as_posix(),
                    "dry_run": not execute,
                    "update_manifest": update_manifest,
                },
                "counts": result.counts(),
                "plans": [plan.model_dump(mode="json") for plan in result.plans],
                "records": [record.model_dump(mode="json") for record in result.records],
                "errors": list(result.errors),
            }
        )
        return

    if result.errors:
        emit("[red]Errors encountered:[/red]", "error")
        for entry in result.errors:
            emit(f"  - {escape(entry)}", "error")

    metrics: dict[str, Any] = {
        "organized": result.organized,
        "skipped_duplicates": result.skipped_duplicates,
    }
    if execute:
        metrics["manifest_added"] = result.manifest_added
        metrics["folders_removed"] = result.folders_removed
        metrics["failed"] = result.failed
    else:
        metrics["dry_run"] = True
    emit(_format_summary_line("Organize", paths.root, metrics), "summary")


@cli.command("init")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to set up as a photo library (defaults to the current directory).",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Override the configured logging level for this run.",
)
def init_library(root: Path | None, log_level: str | None) -> None:
    """Create the Incoming/, Originals/, Exports/ and _Manifest/ folders."""
    try:
        config = _load_config(log_level)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    _configure_logging(config.logging.level)

    paths = LibraryPaths.from_root(root or Path.cwd(), config.layout)
    console.print(f"Initializing photo library at {escape(str(paths.root))}", soft_wrap=True)
    try:
        created, existing = initialize_library(paths)
    except OSError as exc:
        raise click.ClickException(f"Failed to initialize library: {exc}") from exc

    descriptions = dict(paths.layout_directories())
    for directory, description in descriptions.items():
        if directory in existing:
            console.print(f"[yellow]⊘ {escape(directory.name)}/ (already exists)[/yellow]")
        else:
            console.print(f"[green]✓ {escape(directory.name)}/[/green] - {description}")

    metrics = {"created": len(created), "existing": len(existing)}
    console.print(_format_summary_line("Init", paths.root, metrics), soft_wrap=True)


@cli.group()
def config() -> None:
    """Inspect and update Shoebox configuration."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules."""
    try:
        effective = ConfigManager().load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(effective.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Args:
        key: Dotted path such as `layout.incoming_dirname`.
        value: YAML-literal value to write into the configuration file.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    manager = ConfigManager()
    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    before = [line for line in manager.read_text().splitlines() if not line.startswith("#")]
    try:
        manager.assign(key, parsed_value)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    after = [line for line in manager.read_text().splitlines() if not line.startswith("#")]

    diff = list(
        difflib.unified_diff(
            before,
            after,
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    )
    if not diff:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {escape(key.strip())}.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
