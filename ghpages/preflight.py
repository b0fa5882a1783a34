"""Checks every command runs before touching the repository."""

from __future__ import annotations

from pathlib import Path

from ghpages import git, shell

__all__ = ["CLIError", "PreconditionError", "ensure_tools", "ensure_git_repo"]

INSTALL_HINTS = {
    "gh": "Install it at https://cli.github.com",
    "git": "Install it at https://git-scm.com/downloads",
}


class CLIError(RuntimeError):
    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class PreconditionError(CLIError):
    pass


def ensure_tools(*names: str) -> None:
    for name in names:
        if not shell.tool_available(name):
            label = "GitHub CLI" if name == "gh" else name
            raise PreconditionError(f"{label} not found", hint=INSTALL_HINTS.get(name))


def ensure_git_repo(cwd: Path | None = None) -> None:
    if not git.is_repository(cwd):
        raise PreconditionError("Not a git repository", hint="Run this command inside a git repository")
