"""
shell.py

Responsibility: the single place where external processes (`git`, `gh`, build
tools) are spawned.

Callers get captured stdout back as text, or a `CommandError` that carries the
command and whatever the process wrote to stderr.
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Sequence

logger = logging.getLogger(__name__)


class CommandError(RuntimeError):
    def __init__(self, cmd: Sequence[str], returncode: int, stderr: str = "", stdout: str = "") -> None:
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stderr = stderr
        self.stdout = stdout
        detail = (stderr or stdout).strip()
        super().__init__(f"Command failed: {self.command_text}\n{detail}".rstrip())

    @property
    def command_text(self) -> str:
        return shlex.join(self.cmd)


class ToolMissingError(CommandError):
    def __init__(self, cmd: Sequence[str]) -> None:
        super().__init__(cmd, 127, stderr=f"{cmd[0]}: command not found")


def run(
    cmd: Sequence[str],
    *,
    cwd: Path | None = None,
    input_text: str | None = None,
) -> str:
    """
    Run a command and return its stdout, raising CommandError on a non-zero exit.
    """
    logger.debug("$ %s", shlex.join(cmd))
    try:
        proc = subprocess.run(
            list(cmd),
            cwd=str(cwd) if cwd else None,
            input=input_text,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=False,
        )
    except FileNotFoundError as e:
        raise ToolMissingError(cmd) from e
    if proc.returncode != 0:
        logger.debug("exit %s: %s", proc.returncode, proc.stderr.strip())
        raise CommandError(cmd, proc.returncode, stderr=proc.stderr, stdout=proc.stdout)
    return proc.stdout


def succeeds(cmd: Sequence[str], *, cwd: Path | None = None) -> bool:
    try:
        run(cmd, cwd=cwd)
    except CommandError:
        return False
    return True


def tool_available(name: str) -> bool:
    """True if `name` resolves on PATH and answers `--version`."""
    if shutil.which(name) is None:
        return False
    return succeeds([name, "--version"])
