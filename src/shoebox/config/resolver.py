"""Merging of configuration sources."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import ShoeboxConfig

ENV_PREFIX = "SHOEBOX__"


def resolve_with_precedence(
    *,
    defaults: ShoeboxConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> ShoeboxConfig:
    """Layer configuration sources: defaults < file < environment < CLI.

    Every source may use nested mappings, dotted keys (`"logging.level"`), or
    a mix of both.

    Raises:
        ConfigError: If a source is malformed or the merged result is invalid.
    """
    merged = defaults.model_dump(mode="python")
    for source_name, source in (
        ("file", file_overrides),
        ("environment", env_overrides),
        ("cli", cli_overrides),
    ):
        if source:
            merged = merge_overrides(merged, expand_dotted(source, source_name=source_name))

    try:
        return ShoeboxConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def expand_dotted(source: Mapping[str, Any], *, source_name: str) -> dict[str, Any]:
    """Return `source` as nested dictionaries, splitting dotted keys.

    Raises:
        ConfigError: If `source` is not a mapping, a key is not a string, or a
            dotted key runs through a scalar value.
    """
    if not isinstance(source, Mapping):
        raise ConfigError(f"{source_name.capitalize()} overrides must be a mapping.")

    nested: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{source_name.capitalize()} override keys must be strings.")
        if isinstance(value, Mapping):
            value = expand_dotted(value, source_name=source_name)

        *parents, leaf = key.split(".")
        node = nested
        for segment in parents:
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                raise ConfigError(
                    f"{source_name.capitalize()} override {key!r} conflicts with an existing value."
                )
            node = child
        existing = node.get(leaf)
        node[leaf] = merge_overrides(existing, value) if _both_dicts(existing, value) else value
    return nested


def merge_overrides(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively overlay `overrides` onto a copy of `base`."""
    merged = dict(base)
    for key, value in overrides.items():
        current = merged.get(key)
        merged[key] = merge_overrides(current, value) if _both_dicts(current, value) else value
    return merged


def env_overrides_from(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect `SHOEBOX__SECTION__KEY` variables into nested overrides.

    Values are parsed as YAML scalars, so `true`, `10` and `null` arrive typed;
    anything YAML rejects is kept as the raw string.
    """
    overrides: dict[str, Any] = {}
    for name, raw in env.items():
        if not name.startswith(ENV_PREFIX):
            continue
        segments = [part.lower() for part in name[len(ENV_PREFIX) :].split("__") if part]
        if not segments:
            continue
        try:
            value: Any = yaml.safe_load(raw)
        except yaml.YAMLError:
            value = raw
        nested = expand_dotted({".".join(segments): value}, source_name="environment")
        overrides = merge_overrides(overrides, nested)
    return overrides


def _both_dicts(left: Any, right: Any) -> bool:
    return isinstance(left, dict) and isinstance(right, dict)


__all__ = [
    "ENV_PREFIX",
    "env_overrides_from",
    "expand_dotted",
    "merge_overrides",
    "resolve_with_precedence",
]
