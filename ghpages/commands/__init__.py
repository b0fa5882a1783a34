"""
Command handlers. Each module exposes `run(ctx, args) -> int` (the process exit code).
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from ghpages import preflight
from ghpages.config import Settings
from ghpages.github_client import GitHubClient


@dataclass
class Context:
    settings: Settings
    client: GitHubClient
    root: Path = field(default_factory=Path.cwd)
    sleep: Callable[[float], None] = time.sleep

    @property
    def workflow_path(self) -> Path:
        return self.root / self.settings.workflow_path


def require_repo(ctx: Context) -> None:
    """Tool and repository checks shared by every command that talks to GitHub."""
    preflight.ensure_tools("gh", "git")
    preflight.ensure_git_repo(ctx.root)
