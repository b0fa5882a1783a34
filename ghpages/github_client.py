"""
github_client.py

Responsibility: Isolate all GitHub interaction.

This module must be the only place that:
- Builds GitHub REST endpoints
- Invokes the GitHub CLI (`gh api`, `gh repo view`, `gh secret set`, `gh workflow run`)
- Interprets GitHub API responses / error output

Authentication is whatever `gh auth login` configured; no token handling here.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from ghpages import shell
from ghpages.shell import CommandError

logger = logging.getLogger(__name__)

_HTTP_STATUS_RE = re.compile(r"\(HTTP (\d{3})\)")


class GitHubError(RuntimeError):
    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


@dataclass(frozen=True)
class WorkflowRun:
    id: int
    run_number: int
    name: str
    status: str
    conclusion: str | None
    created_at: str
    html_url: str
    commit_message: str | None = None

    @property
    def state(self) -> str:
        return self.conclusion or self.status or "unknown"


@dataclass(frozen=True)
class JobStep:
    name: str
    status: str
    conclusion: str | None
    started_at: str | None = None
    completed_at: str | None = None


@dataclass(frozen=True)
class Job:
    id: int
    name: str
    status: str
    conclusion: str | None
    steps: list[JobStep] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.conclusion == "failure"


@dataclass(frozen=True)
class PagesInfo:
    html_url: str | None
    source_branch: str | None
    status: str | None
    cname: str | None
    https_enforced: bool | None


def _status_from_output(text: str) -> int | None:
    m = _HTTP_STATUS_RE.search(text or "")
    return int(m.group(1)) if m else None


def _first_line(text: str | None) -> str | None:
    if not text:
        return None
    return text.splitlines()[0] if text.strip() else None


def _run_from_json(data: dict[str, Any]) -> WorkflowRun:
    head = data.get("head_commit") or {}
    return WorkflowRun(
        id=int(data["id"]),
        run_number=int(data.get("run_number") or 0),
        name=str(data.get("name") or ""),
        status=str(data.get("status") or ""),
        conclusion=data.get("conclusion"),
        created_at=str(data.get("created_at") or ""),
        html_url=str(data.get("html_url") or ""),
        commit_message=_first_line(head.get("message")),
    )


def _job_from_json(data: dict[str, Any]) -> Job:
    steps = [
        JobStep(
            name=str(s.get("name") or ""),
            status=str(s.get("status") or ""),
            conclusion=s.get("conclusion"),
            started_at=s.get("started_at"),
            completed_at=s.get("completed_at"),
        )
        for s in data.get("steps") or []
    ]
    return Job(
        id=int(data["id"]),
        name=str(data.get("name") or ""),
        status=str(data.get("status") or ""),
        conclusion=data.get("conclusion"),
        steps=steps,
    )


Runner = Callable[..., str]


class GitHubClient:
    def __init__(self, repo: str | None = None, *, runner: Runner = shell.run) -> None:
        self._repo = repo
        self._runner = runner

    def _gh(self, args: Sequence[str], *, input_text: str | None = None) -> str:
        cmd = ["gh", *args]
        try:
            if input_text is None:
                return self._runner(cmd)
            return self._runner(cmd, input_text=input_text)
        except CommandError as e:
            logger.debug("gh %s failed (exit %s)", args[0], e.returncode)
            raise GitHubError(str(e), status=_status_from_output(e.stderr)) from e

    def _api(
        self,
        path: str,
        *,
        method: str = "GET",
        fields: dict[str, str | bool] | None = None,
        raw: bool = False,
    ) -> Any:
        args = ["api", "-X", method, path]
        for key, value in (fields or {}).items():
            if isinstance(value, bool):
                args.extend(["-F", f"{key}={str(value).lower()}"])
            else:
                args.extend(["-f", f"{key}={value}"])
        out = self._gh(args)
        if raw:
            return out
        if not out.strip():
            return None
        try:
            return json.loads(out)
        except json.JSONDecodeError as e:
            raise GitHubError(f"Unexpected response from {method} {path}: {e}") from e

    def repo_name(self) -> str:
        """
        `owner/name` of the repository in the current directory, looked up once per client.
        """
        if self._repo is None:
            name = self._gh(["repo", "view", "--json", "nameWithOwner", "-q", ".nameWithOwner"]).strip()
            if not name:
                raise GitHubError("Could not determine repository (is a GitHub remote configured?)")
            self._repo = name
        return self._repo

    def list_branches(self) -> list[str]:
        """
        Every branch name, across all pages of the listing.
        """
        out = self._gh(
            ["api", "--paginate", f"repos/{self.repo_name()}/branches?per_page=100", "--jq", ".[].name"]
        )
        return [line.strip() for line in out.splitlines() if line.strip()]

    def get_workflow_permissions(self) -> str:
        data = self._api(f"repos/{self.repo_name()}/actions/permissions/workflow") or {}
        return str(data.get("default_workflow_permissions") or "")

    def set_workflow_permissions(self, value: str = "write") -> None:
        self._api(
            f"repos/{self.repo_name()}/actions/permissions/workflow",
            method="PUT",
            fields={"default_workflow_permissions": value},
        )

    def enable_actions(self) -> None:
        self._api(
            f"repos/{self.repo_name()}/actions/permissions",
            method="PUT",
            fields={"enabled": True, "allowed_actions": "all"},
        )

    def enable_pages(self, branch: str, path: str = "/") -> None:
        self._api(
            f"repos/{self.repo_name()}/pages",
            method="POST",
            fields={"source[branch]": branch, "source[path]": path},
        )

    def get_pages(self) -> PagesInfo:
        data = self._api(f"repos/{self.repo_name()}/pages") or {}
        source = data.get("source") or {}
        return PagesInfo(
            html_url=data.get("html_url"),
            source_branch=source.get("branch"),
            status=data.get("status"),
            cname=data.get("cname"),
            https_enforced=data.get("https_enforced"),
        )

    def list_runs(self, workflow_file: str, *, limit: int) -> list[WorkflowRun]:
        data = self._api(f"repos/{self.repo_name()}/actions/workflows/{workflow_file}/runs?per_page={limit}") or {}
        return [_run_from_json(r) for r in (data.get("workflow_runs") or [])[:limit]]

    def list_jobs(self, run_id: int) -> list[Job]:
        data = self._api(f"repos/{self.repo_name()}/actions/runs/{run_id}/jobs") or {}
        return [_job_from_json(j) for j in data.get("jobs") or []]

    def job_logs(self, job_id: int) -> str:
        return self._api(f"repos/{self.repo_name()}/actions/jobs/{job_id}/logs", raw=True)

    def secret_count(self) -> int:
        data = self._api(f"repos/{self.repo_name()}/actions/secrets") or {}
        if "total_count" in data:
            return int(data["total_count"])
        return len(data.get("secrets") or [])

    def set_secrets_from_file(self, env_path: str) -> None:
        self._gh(["secret", "set", "-f", env_path, "--repo", self.repo_name()])

    def set_secret(self, name: str, value: str) -> None:
        # Value goes over stdin so it never appears in argv or the debug log.
        self._gh(["secret", "set", name, "--repo", self.repo_name()], input_text=value)

    def dispatch_workflow(self, workflow_file: str, ref: str) -> None:
        self._gh(["workflow", "run", workflow_file, "--ref", ref, "--repo", self.repo_name()])
