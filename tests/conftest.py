from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from ghpages import console, preflight
from ghpages.commands import Context
from ghpages.config import Settings
from ghpages.github_client import GitHubError, Job, PagesInfo, WorkflowRun


class FakeClient:
    """In-memory stand-in for GitHubClient; records every call."""

    def __init__(self, repo: str = "octo/site") -> None:
        self.repo = repo
        self.calls: list[tuple[Any, ...]] = []
        self.permissions = "read"
        self.reject_permission_put = False
        self.pages: PagesInfo | None = None
        self.pages_error: GitHubError | None = None
        self.branches: list[str] = ["main"]
        self.runs: list[WorkflowRun] = []
        self.runs_error: GitHubError | None = None
        self.jobs: list[Job] = []
        self.logs = ""
        self.secrets = 0
        self.secrets_error: GitHubError | None = None
        self.upload_error: GitHubError | None = None
        self.dispatch_error: GitHubError | None = None

    def repo_name(self) -> str:
        return self.repo

    def list_branches(self) -> list[str]:
        self.calls.append(("list_branches",))
        return list(self.branches)

    def get_workflow_permissions(self) -> str:
        self.calls.append(("get_permissions",))
        return self.permissions

    def set_workflow_permissions(self, value: str = "write") -> None:
        self.calls.append(("set_permissions", value))
        if self.reject_permission_put:
            raise GitHubError("gh: Conflict (HTTP 409)", status=409)
        self.permissions = value

    def enable_actions(self) -> None:
        self.calls.append(("enable_actions",))

    def enable_pages(self, branch: str, path: str = "/") -> None:
        self.calls.append(("enable_pages", branch, path))
        if self.pages is not None:
            raise GitHubError("gh: GitHub Pages is already enabled. (HTTP 409)", status=409)
        self.pages = PagesInfo(
            html_url=f"https://{self.repo.split('/')[0]}.github.io/{self.repo.split('/')[1]}/",
            source_branch=branch,
            status="built",
            cname=None,
            https_enforced=True,
        )

    def get_pages(self) -> PagesInfo:
        self.calls.append(("get_pages",))
        if self.pages_error is not None:
            raise self.pages_error
        if self.pages is None:
            raise GitHubError("gh: Not Found (HTTP 404)", status=404)
        return self.pages

    def list_runs(self, workflow_file: str, *, limit: int) -> list[WorkflowRun]:
        self.calls.append(("list_runs", workflow_file, limit))
        if self.runs_error is not None:
            raise self.runs_error
        return self.runs[:limit]

    def list_jobs(self, run_id: int) -> list[Job]:
        self.calls.append(("list_jobs", run_id))
        return self.jobs

    def job_logs(self, job_id: int) -> str:
        self.calls.append(("job_logs", job_id))
        return self.logs

    def secret_count(self) -> int:
        self.calls.append(("secret_count",))
        if self.secrets_error is not None:
            raise self.secrets_error
        return self.secrets

    def set_secrets_from_file(self, env_path: str) -> None:
        self.calls.append(("set_secrets_from_file", env_path))
        if self.upload_error is not None:
            raise self.upload_error

    def set_secret(self, name: str, value: str) -> None:
        self.calls.append(("set_secret", name))

    def dispatch_workflow(self, workflow_file: str, ref: str) -> None:
        self.calls.append(("dispatch_workflow", workflow_file, ref))
        if self.dispatch_error is not None:
            raise self.dispatch_error
        self.branches.append("public")

    def called(self, name: str) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def make_ctx(tmp_path: Path) -> Callable[..., Context]:
    def _make(client: FakeClient, **overrides: Any) -> Context:
        settings = Settings(**{"poll_interval": 0.01, "poll_attempts": 3, **overrides})
        return Context(settings=settings, client=client, root=tmp_path, sleep=lambda _s: None)

    return _make


@pytest.fixture
def repo_ok(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pretend `gh`/`git` are installed and the cwd is a repository."""
    monkeypatch.setattr(preflight, "ensure_tools", lambda *names: None)
    monkeypatch.setattr(preflight, "ensure_git_repo", lambda cwd=None: None)


@pytest.fixture
def answers(monkeypatch: pytest.MonkeyPatch) -> Callable[..., list[str]]:
    """
    Script prompt answers in order. `select` answers are option values.
    Returns the list of questions asked.
    """

    def _script(*replies: str) -> list[str]:
        queue = list(replies)
        asked: list[str] = []

        def _next(question: str, *_a: Any, **_k: Any) -> str:
            asked.append(question)
            if not queue:
                raise AssertionError(f"unexpected prompt: {question}")
            return queue.pop(0)

        monkeypatch.setattr(console, "select", _next)
        monkeypatch.setattr(console, "ask", _next)
        return asked

    return _script
