"""
logs.py

`gh-pages logs`: pick a recent deploy run, show its jobs and steps, and
optionally dump the tail of a failed job's raw log.
"""

from __future__ import annotations

import logging

from rich.markup import escape

from ghpages import console, formatting
from ghpages.commands import Context, require_repo
from ghpages.github_client import GitHubError, Job, WorkflowRun

logger = logging.getLogger(__name__)

LINE_STYLES = {"error": "red", "warning": "yellow", "other": "dim"}


def run_label(run: WorkflowRun) -> str:
    return (
        f"{formatting.status_icon(run.conclusion, run.status)}  #{run.run_number} {run.state}  "
        f"[dim]{formatting.relative_time(run.created_at)}[/dim]  "
        f"[dim]{escape(run.commit_message or 'No message')}[/dim]"
    )


def render_jobs(jobs: list[Job]) -> None:
    for job in jobs:
        console.blank()
        console.log(
            f"{formatting.status_icon(job.conclusion, job.status)}  [bold]{escape(job.name)}[/bold]  "
            f"[dim]{job.conclusion or job.status}[/dim]"
        )
        if job.steps:
            console.blank()
            for step in job.steps:
                console.log(
                    f"    {formatting.status_icon(step.conclusion, step.status)}  {escape(step.name)}  "
                    f"[dim]{formatting.duration(step.started_at, step.completed_at)}[/dim]"
                )


def render_log(text: str, limit: int) -> None:
    lines, total = formatting.tail(text, limit)
    if total > limit:
        console.info(f"Showing last {limit} of {total} lines")
        console.blank()
    for line in lines:
        style = LINE_STYLES[formatting.classify_log_line(line)]
        console.log(f"  [{style}]{escape(line)}[/{style}]")


def show_failed_logs(ctx: Context, failed: list[Job]) -> None:
    console.blank()
    console.warn(f"{len(failed)} job(s) failed")
    console.blank()
    choice = console.select(
        "View full logs for a failed job?",
        [(str(j.id), escape(j.name)) for j in failed] + [("skip", "Skip")],
    )
    if choice == "skip":
        return

    console.blank()
    with console.spinner("Fetching logs"):
        try:
            text = ctx.client.job_logs(int(choice))
        except GitHubError as e:
            logger.debug("log download failed: %s", e)
            text = None
    if text is None:
        console.fail("Could not fetch logs")
        console.info("View logs on GitHub instead")
        return
    console.ok("Logs retrieved")
    console.blank()
    render_log(text, ctx.settings.log_tail_lines)


def run(ctx: Context, args: list[str]) -> int:
    require_repo(ctx)

    console.label("Logs", "workflow run history")
    console.kv("repo", ctx.client.repo_name())
    console.blank()

    with console.spinner("Fetching workflow runs"):
        try:
            runs = ctx.client.list_runs(ctx.settings.workflow_file, limit=ctx.settings.log_runs)
        except GitHubError as e:
            logger.debug("run listing failed: %s", e)
            runs = None
    if runs is None:
        console.fail("Could not fetch workflow runs")
        console.info("Deploy workflow may not exist yet")
        console.info("Run [cyan]gh-pages setup[/cyan] to create one")
        console.blank()
        return 0
    if not runs:
        console.ok("No runs found")
        console.info("Run [cyan]gh-pages deploy[/cyan] to trigger a deployment")
        console.blank()
        return 0

    console.ok(f"{len(runs)} run(s) found")
    console.blank()
    selected_id = console.select("Select a run:", [(str(r.id), run_label(r)) for r in runs])
    selected = next(r for r in runs if str(r.id) == selected_id)
    console.blank()

    with console.spinner("Fetching run details"):
        try:
            jobs = ctx.client.list_jobs(selected.id)
        except GitHubError as e:
            logger.debug("job listing failed: %s", e)
            jobs = None
    if jobs is None:
        console.fail("Could not fetch details")
        console.blank()
        return 0

    console.ok(f"{len(jobs)} job(s)")
    render_jobs(jobs)

    failed = [j for j in jobs if j.failed]
    if failed:
        show_failed_logs(ctx, failed)

    if selected.html_url:
        console.blank()
        console.info(f"[cyan]{selected.html_url}[/cyan]")
    console.blank()
    return 0
