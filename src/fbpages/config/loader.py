"""Build an :class:`FbPagesConfig` from TOML files and the environment.

Sources, lowest priority first: model defaults, the XDG user file
(``fbpages/config.toml``), ``fbpages.toml`` in the working directory,
the file named by ``$FBPAGES_CONFIG``, an explicit ``path``, then
``overrides``. Tables merge key by key.

The Page Access Token and default Page ID come from the env vars named
by ``graph.access_token_env`` / ``graph.page_id_env`` unless a file
already set them. ``$PORT`` replaces ``server.port`` unconditionally.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from fbpages.core.errors import ConfigError

from .schema import FbPagesConfig

CONFIG_ENV = "FBPAGES_CONFIG"
PROJECT_FILE = "fbpages.toml"


def _user_config_path() -> Path:
    root = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(root) / "fbpages" / "config.toml"


def _config_files(explicit: str | Path | None) -> list[Path]:
    files = [p for p in (_user_config_path(), Path.cwd() / PROJECT_FILE) if p.is_file()]

    from_env = os.environ.get(CONFIG_ENV)
    if from_env:
        if not Path(from_env).is_file():
            msg = f"{CONFIG_ENV} points to non-existent file: {from_env}"
            raise ConfigError(msg)
        files.append(Path(from_env))

    if explicit is not None:
        if not Path(explicit).is_file():
            msg = f"Config file not found: {explicit}"
            raise ConfigError(msg)
        files.append(Path(explicit))
    return files


def _parse(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"Cannot read config file {path}: {e}"
        raise ConfigError(msg) from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` updated with ``override``; nested tables merge, ``base`` is untouched."""
    result = dict(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = _deep_merge(current, value)
        else:
            result[key] = value
    return result


def _resolve_env(config: FbPagesConfig) -> None:
    graph = config.graph
    if not graph.access_token and graph.access_token_env:
        graph.access_token = os.environ.get(graph.access_token_env) or None
    if not graph.page_id and graph.page_id_env:
        graph.page_id = os.environ.get(graph.page_id_env) or None

    server = config.server
    raw_port = os.environ.get(server.port_env) if server.port_env else None
    if raw_port:
        try:
            server.port = int(raw_port)
        except ValueError as e:
            msg = f"{server.port_env} must be an integer, got {raw_port!r}"
            raise ConfigError(msg) from e


def load_config(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> FbPagesConfig:
    """Load, merge and validate configuration.

    Raises:
        ConfigError: A named file is missing or unreadable, a file is not
            valid TOML, the merged data fails validation, or ``$PORT`` is
            not an integer.
    """
    data: dict[str, Any] = {}
    for config_file in _config_files(path):
        data = _deep_merge(data, _parse(config_file))
    if overrides:
        data = _deep_merge(data, overrides)

    try:
        config = FbPagesConfig.model_validate(data)
    except ValidationError as e:
        msg = f"Configuration validation failed: {e}"
        raise ConfigError(msg) from e

    _resolve_env(config)
    return config
