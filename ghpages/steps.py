"""
steps.py

Responsibility: individually fallible provisioning steps with a three-way outcome.

Each step returns a `StepResult` instead of printing, so commands decide how to
render it and tests can drive the steps with a fake client.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from ghpages.github_client import GitHubClient, GitHubError

logger = logging.getLogger(__name__)


class Outcome(enum.Enum):
    OK = "ok"
    NOTE = "note"  # succeeded, nothing to change
    FAILED = "failed"


@dataclass(frozen=True)
class StepResult:
    outcome: Outcome
    message: str
    hint: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is not Outcome.FAILED


def set_write_permissions(client: GitHubClient) -> StepResult:
    """
    Set the default GITHUB_TOKEN permission to read/write.

    A rejected PUT is not a failure when the setting already reads `write`.
    """
    repo = client.repo_name()
    settings_url = f"https://github.com/{repo}/settings/actions"
    try:
        client.set_workflow_permissions("write")
        return StepResult(Outcome.OK, "Workflow permissions set to read/write")
    except GitHubError as e:
        logger.debug("setting workflow permissions failed: %s", e)

    try:
        current = client.get_workflow_permissions()
    except GitHubError as e:
        logger.debug("reading workflow permissions failed: %s", e)
        return StepResult(Outcome.FAILED, "Could not verify permissions", hint=settings_url)

    if current == "write":
        return StepResult(Outcome.NOTE, "Permissions already set to read/write")
    return StepResult(
        Outcome.FAILED,
        "Could not set permissions automatically",
        hint=f'Current: {current or "unknown"}. Set to "Read and write" at {settings_url}',
    )


def enable_actions(client: GitHubClient) -> StepResult:
    try:
        client.enable_actions()
    except GitHubError as e:
        logger.debug("enabling actions failed: %s", e)
        return StepResult(Outcome.NOTE, "Actions already enabled")
    return StepResult(Outcome.OK, "GitHub Actions enabled")


def enable_pages(client: GitHubClient, branch: str) -> StepResult:
    """
    Point Pages at `branch`. HTTP 409 means Pages is already enabled.
    """
    try:
        client.enable_pages(branch, "/")
    except GitHubError as e:
        if e.status == 409 or "409" in str(e):
            return StepResult(Outcome.NOTE, "GitHub Pages already enabled")
        logger.debug("enabling pages failed: %s", e)
        return StepResult(
            Outcome.FAILED,
            "Could not enable automatically",
            hint="Enable manually in Settings > Pages",
        )
    return StepResult(Outcome.OK, "GitHub Pages enabled")


def pages_url(client: GitHubClient) -> str | None:
    try:
        return client.get_pages().html_url
    except GitHubError as e:
        logger.debug("reading pages url failed: %s", e)
        return None
