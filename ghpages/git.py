"""
git.py

Responsibility: version control queries and operations, run through `shell.run`.

Nothing here knows about GitHub; remote-host API calls live in `github_client.py`.
"""

from __future__ import annotations

from pathlib import Path

from ghpages import shell
from ghpages.shell import CommandError


def is_repository(cwd: Path | None = None) -> bool:
    return shell.succeeds(["git", "rev-parse", "--git-dir"], cwd=cwd)


def current_branch(cwd: Path | None = None) -> str:
    """
    Name of the checked-out branch, falling back to `main` (detached HEAD, no commits).
    """
    try:
        name = shell.run(["git", "branch", "--show-current"], cwd=cwd).strip()
    except CommandError:
        return "main"
    return name or "main"


def has_changes(cwd: Path | None = None) -> bool:
    try:
        return bool(shell.run(["git", "status", "--porcelain"], cwd=cwd).strip())
    except CommandError:
        return False


def commit_all_and_push(message: str, branch: str, *, cwd: Path | None = None) -> None:
    shell.run(["git", "add", "."], cwd=cwd)
    shell.run(["git", "commit", "-m", message], cwd=cwd)
    shell.run(["git", "push", "origin", branch], cwd=cwd)


def remote_branch_exists(branch: str, *, remote: str = "origin", cwd: Path | None = None) -> bool:
    return shell.succeeds(["git", "ls-remote", "--exit-code", "--heads", remote, branch], cwd=cwd)


def _stash_head(cwd: Path | None = None) -> str | None:
    try:
        return shell.run(["git", "rev-parse", "-q", "--verify", "refs/stash"], cwd=cwd).strip() or None
    except CommandError:
        return None


def stash(cwd: Path | None = None) -> bool:
    """
    Stash tracked and untracked changes. Returns True when something was stashed.

    Decided by whether `refs/stash` moved, so git's (possibly localized) messages are never parsed.
    """
    before = _stash_head(cwd)
    shell.run(["git", "stash", "push", "--include-untracked"], cwd=cwd)
    return _stash_head(cwd) != before


def stash_pop(cwd: Path | None = None) -> None:
    shell.run(["git", "stash", "pop"], cwd=cwd)


def checkout(branch: str, *, cwd: Path | None = None) -> None:
    shell.run(["git", "checkout", branch], cwd=cwd)


def checkout_orphan(branch: str, *, cwd: Path | None = None) -> None:
    shell.run(["git", "checkout", "--orphan", branch], cwd=cwd)


def clear_index(cwd: Path | None = None) -> None:
    """Remove every tracked file from the index and working tree."""
    shell.run(["git", "rm", "-rf", "--quiet", "--ignore-unmatch", "."], cwd=cwd)


def commit_paths(paths: list[str], message: str, *, cwd: Path | None = None) -> None:
    """Stage exactly `paths` and commit, even when nothing changed."""
    if paths:
        shell.run(["git", "add", "-A", "--", *paths], cwd=cwd)
    shell.run(["git", "commit", "-m", message, "--allow-empty"], cwd=cwd)


def force_push(branch: str, *, remote: str = "origin", cwd: Path | None = None) -> None:
    shell.run(["git", "push", remote, branch, "--force"], cwd=cwd)


def fetch(branch: str, *, remote: str = "origin", cwd: Path | None = None) -> None:
    shell.run(["git", "fetch", remote, branch], cwd=cwd)
