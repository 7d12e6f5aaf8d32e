"""Configuration loading from pyproject.toml."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from autorelease.config.models import AutoreleaseConfig
from autorelease.exceptions import ConfigNotFoundError, ConfigValidationError

TOOL_KEY = "autorelease"
TOKEN_ENV_VAR = "GITHUB_TOKEN"


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Find pyproject.toml in ``start`` or one of its parents.

    Raises:
        ConfigNotFoundError: If no pyproject.toml exists up to the root
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    raise ConfigNotFoundError(f"No pyproject.toml found in {current} or its parents")


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Read and parse a pyproject.toml file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Config file not found: {path}")
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_autorelease_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.autorelease]`` table, or an empty dict."""
    tool = pyproject.get("tool", {})
    section = tool.get(TOOL_KEY, {})
    return dict(section) if isinstance(section, dict) else {}


def _merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, dict):
            base_value = merged.get(key)
            nested = _merge(base_value if isinstance(base_value, dict) else {}, value)
            if nested:
                merged[key] = nested
        else:
            merged[key] = value
    return merged


def load_config(
    path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> AutoreleaseConfig:
    """Load configuration for the project at ``path``.

    A missing pyproject.toml or ``[tool.autorelease]`` table yields the
    defaults. ``overrides`` (typically CLI flags) take precedence over file
    values; ``None`` values are ignored. The host token falls back to the
    ``GITHUB_TOKEN`` environment variable.

    Raises:
        ConfigValidationError: If the merged configuration is invalid
    """
    try:
        data = extract_autorelease_config(load_pyproject_toml(find_pyproject_toml(path)))
    except ConfigNotFoundError:
        data = {}

    data = _merge(data, overrides or {})

    github = data.setdefault("github", {})
    if isinstance(github, dict) and not github.get("token"):
        token = os.environ.get(TOKEN_ENV_VAR)
        if token:
            github["token"] = token

    try:
        return AutoreleaseConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid autorelease configuration:\n{e}") from e
