"""
envfile.py

Responsibility: find and parse local env files holding GitHub Actions secrets.

Values are returned to the caller for upload and never cached here.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

ENV_STUB = "# GitHub Actions Secrets\n# Format: KEY=value\n\n"


class SecretsError(RuntimeError):
    pass


@dataclass(frozen=True)
class SecretEntry:
    key: str
    value: str

    def __repr__(self) -> str:
        return f"SecretEntry(key={self.key!r}, value=***)"


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse_env_text(text: str) -> list[SecretEntry]:
    """
    Parse `KEY=value` lines. Blank lines, `#` comments and lines without `=` are skipped.
    """
    out: list[SecretEntry] = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key.startswith("export "):
            key = key[len("export "):].strip()
        if not key:
            continue
        out.append(SecretEntry(key=key, value=_unquote(value.strip())))
    return out


def parse_env_file(path: str | Path) -> list[SecretEntry]:
    p = Path(path)
    if not p.is_file():
        raise SecretsError(f"Env file not found: {p}")
    return parse_env_text(p.read_text(encoding="utf-8"))


def find_env_files(candidates: Iterable[str], *, root: Path | None = None) -> list[str]:
    base = root or Path.cwd()
    return [name for name in candidates if (base / name).is_file()]


def write_env_stub(path: str | Path) -> Path:
    p = Path(path)
    p.write_text(ENV_STUB, encoding="utf-8")
    return p
