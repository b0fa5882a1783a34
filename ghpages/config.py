"""
config.py

Responsibility: resolve runtime settings into a typed, immutable `Settings`.

Sources, later ones win:
1) built-in defaults
2) optional `.gh-pages.yml` at the repository root (YAML mapping)
3) environment variables `GH_PAGES_TEMPLATE_URL`, `GH_PAGES_POLL_INTERVAL`, `GH_PAGES_POLL_ATTEMPTS`
"""

from __future__ import annotations

import dataclasses
import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".gh-pages.yml"

DEFAULT_TEMPLATE_URL = "https://cdn.jsdelivr.net/gh/thinhphoenix/github-pages@main/.github/workflows/deploy.yml"
DEFAULT_WORKFLOW_PATH = ".github/workflows/deploy.yml"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    template_url: str = DEFAULT_TEMPLATE_URL
    workflow_path: str = DEFAULT_WORKFLOW_PATH
    marker_branch: str = "public"
    poll_interval: float = 5.0
    poll_attempts: int = 60
    status_runs: int = 3
    log_runs: int = 10
    log_tail_lines: int = 80
    env_files: tuple[str, ...] = (".env", ".env.local", ".env.production", ".env.staging")
    build_commands: tuple[str, ...] = ("bun install", "bun run build")

    @property
    def workflow_file(self) -> str:
        """Workflow file name as the Actions API addresses it (e.g. `deploy.yml`)."""
        return Path(self.workflow_path).name


_ENV_OVERRIDES = {
    "GH_PAGES_TEMPLATE_URL": "template_url",
    "GH_PAGES_POLL_INTERVAL": "poll_interval",
    "GH_PAGES_POLL_ATTEMPTS": "poll_attempts",
}


def _coerce(name: str, raw: Any) -> Any:
    default = getattr(Settings, name)
    try:
        if isinstance(default, tuple):
            if isinstance(raw, str) or not isinstance(raw, (list, tuple)):
                raise TypeError("expected a list")
            return tuple(str(v) for v in raw)
        if isinstance(default, float):
            value = float(raw)
        elif isinstance(default, int):
            if isinstance(raw, bool):
                raise TypeError("expected an integer")
            value = int(raw)
        else:
            if not isinstance(raw, str) or not raw.strip():
                raise TypeError("expected a non-empty string")
            return raw.strip()
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for `{name}`: {raw!r} ({e})") from e
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(f"`{name}` must be a positive finite number, got {raw!r}")
    return value


def _read_file(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a YAML mapping at the top level.")
    return data


def load_settings(root: str | Path | None = None, *, environ: Mapping[str, str] | None = None) -> Settings:
    base = Path(root) if root is not None else Path.cwd()
    env = os.environ if environ is None else environ
    known = {f.name for f in dataclasses.fields(Settings)}

    values: dict[str, Any] = {}
    path = base / CONFIG_FILENAME
    if path.is_file():
        data = _read_file(path)
        unknown = sorted(str(k) for k in data if k not in known)
        if unknown:
            raise ConfigError(f"Unknown key(s) in {path}: {', '.join(unknown)}")
        for key, raw in data.items():
            values[key] = _coerce(key, raw)
        logger.debug("loaded settings from %s", path)

    for var, name in _ENV_OVERRIDES.items():
        raw = (env.get(var) or "").strip()
        if raw:
            values[name] = _coerce(name, raw)
            logger.debug("%s overridden by %s", name, var)

    return Settings(**values)
