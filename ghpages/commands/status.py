"""
status.py

`gh-pages status`: read-only report on workflow file, Pages, marker branch,
recent runs and secrets. Every check is evaluated on its own; one failing
lookup never hides the others.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from rich.markup import escape

from ghpages import console, formatting, git, workflow
from ghpages.commands import Context, require_repo
from ghpages.github_client import GitHubError
from ghpages.steps import Outcome, StepResult

logger = logging.getLogger(__name__)


@dataclass
class Check:
    title: str
    result: StepResult
    details: list[tuple[str, str]] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)


def check_workflow(ctx: Context) -> Check:
    path = ctx.settings.workflow_path
    if workflow.workflow_exists(ctx.workflow_path):
        return Check("Workflow", StepResult(Outcome.OK, f"Found at [cyan]{path}[/cyan]"))
    return Check(
        "Workflow",
        StepResult(Outcome.FAILED, f"Not found at [cyan]{path}[/cyan]", hint="Run `gh-pages setup` to create one"),
    )


def check_pages(ctx: Context) -> Check:
    try:
        pages = ctx.client.get_pages()
    except GitHubError as e:
        logger.debug("pages lookup failed: %s", e)
        return Check("GitHub Pages", StepResult(Outcome.FAILED, "Not enabled", hint="Run `gh-pages deploy` to enable"))

    check = Check("GitHub Pages", StepResult(Outcome.OK, "Enabled"))
    if pages.html_url:
        check.details.append(("url", f"[cyan]{pages.html_url}[/cyan]"))
    if pages.source_branch:
        check.details.append(("source", f"[cyan]{pages.source_branch}[/cyan]"))
    if pages.status:
        color = "green" if pages.status == "built" else "yellow"
        check.details.append(("status", f"[{color}]{pages.status}[/{color}]"))
    if pages.cname:
        check.details.append(("domain", f"[cyan]{pages.cname}[/cyan]"))
    if pages.https_enforced is not None:
        check.details.append(("https", "[green]enforced[/green]" if pages.https_enforced else "[yellow]not enforced[/yellow]"))
    return check


def check_branch(ctx: Context) -> Check:
    marker = ctx.settings.marker_branch
    if git.remote_branch_exists(marker, cwd=ctx.root):
        return Check("Public branch", StepResult(Outcome.OK, f"Branch [cyan]{marker}[/cyan] exists on remote"))
    return Check(
        "Public branch",
        StepResult(Outcome.FAILED, f"Branch [cyan]{marker}[/cyan] not found", hint="Created after first deployment"),
    )


def check_runs(ctx: Context) -> Check:
    try:
        runs = ctx.client.list_runs(ctx.settings.workflow_file, limit=ctx.settings.status_runs)
    except GitHubError as e:
        logger.debug("run listing failed: %s", e)
        return Check(
            "Recent runs",
            StepResult(Outcome.FAILED, "Could not fetch runs", hint="Deploy workflow may not exist yet"),
        )
    if not runs:
        return Check("Recent runs", StepResult(Outcome.NOTE, "No runs found", hint="Workflow has not been triggered yet"))

    check = Check("Recent runs", StepResult(Outcome.OK, f"{len(runs)} recent run(s)"))
    for run in runs:
        style = formatting.status_style(run.conclusion, run.status)
        check.lines.append(
            f"{formatting.status_icon(run.conclusion, run.status)}  [{style}]{run.state}[/{style}]  "
            f"[dim]{formatting.relative_time(run.created_at)}[/dim]  "
            f"[dim]{escape(run.commit_message or 'No message')}[/dim]"
        )
    return check


def check_secrets(ctx: Context) -> Check:
    try:
        count = ctx.client.secret_count()
    except GitHubError as e:
        logger.debug("secret count failed: %s", e)
        return Check("Secrets", StepResult(Outcome.FAILED, "Could not check secrets"))
    if count > 0:
        return Check("Secrets", StepResult(Outcome.OK, f"{count} secret(s) configured"))
    return Check("Secrets", StepResult(Outcome.NOTE, "No secrets configured", hint="Run `gh-pages put secrets` to upload"))


CHECKS: list[tuple[str, Callable[[Context], Check]]] = [
    ("Workflow", check_workflow),
    ("GitHub Pages", check_pages),
    ("Public branch", check_branch),
    ("Recent runs", check_runs),
    ("Secrets", check_secrets),
]


def guarded(ctx: Context, title: str, fn: Callable[[Context], Check]) -> Check:
    try:
        return fn(ctx)
    except Exception as e:  # noqa: BLE001 - one broken check must not hide the rest
        logger.debug("%s check crashed: %s", title, e)
        return Check(title, StepResult(Outcome.FAILED, "Check failed", hint=str(e)))


def collect_status(ctx: Context) -> list[Check]:
    return [guarded(ctx, title, fn) for title, fn in CHECKS]


def render(check: Check) -> None:
    console.section(check.title)
    result = check.result
    if result.outcome is Outcome.FAILED:
        console.fail(result.message)
    else:
        console.ok(result.message)
    for key, value in check.details:
        console.log(f"  [dim]{key}[/dim]  {value}")
    if check.lines:
        console.blank()
        for line in check.lines:
            console.log(f"  {line}")
    if result.hint:
        console.info(escape(result.hint))


def run(ctx: Context, args: list[str]) -> int:
    require_repo(ctx)

    console.label("Status")
    console.kv("repo", ctx.client.repo_name())
    console.kv("branch", git.current_branch(ctx.root))

    for title, fn in CHECKS:
        with console.spinner(f"Checking {title.lower()}"):
            check = guarded(ctx, title, fn)
        render(check)
    console.blank()
    return 0
