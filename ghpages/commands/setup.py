"""
setup.py

`gh-pages setup`: install the deploy workflow and open up the repository settings it needs.

Flow:
1) tool / repository checks (fatal)
2) workflow file: download, or keep / overwrite / cancel when one exists
3) workflow permissions -> read/write
4) GitHub Actions enabled
"""

from __future__ import annotations

import logging

from ghpages import console, git, steps, workflow
from ghpages.commands import Context, require_repo
from ghpages.preflight import CLIError
from ghpages.steps import Outcome, StepResult
from ghpages.workflow import WorkflowError

logger = logging.getLogger(__name__)


def install_workflow(ctx: Context) -> StepResult:
    url = ctx.settings.template_url
    with console.spinner("Downloading workflow template"):
        try:
            content = workflow.fetch_template(url)
        except WorkflowError as e:
            console.fail("Failed to download workflow template")
            console.info(str(e))
            raise CLIError("Workflow template unavailable", hint=f"Download manually: {url}") from e
    console.ok("Workflow template downloaded")
    workflow.write_workflow(ctx.workflow_path, content)
    return StepResult(Outcome.OK, f"Created [cyan]{ctx.settings.workflow_path}[/cyan]")


def workflow_step(ctx: Context) -> StepResult | None:
    """
    Returns None when the user cancels.
    """
    if not workflow.workflow_exists(ctx.workflow_path):
        return install_workflow(ctx)

    console.warn(f"Workflow already exists at {ctx.settings.workflow_path}")
    action = console.select(
        "What would you like to do?",
        [
            ("overwrite", "Overwrite with latest template"),
            ("keep", "Keep existing"),
            ("abort", "Cancel"),
        ],
    )
    if action == "abort":
        return None
    if action == "keep":
        return StepResult(Outcome.NOTE, "Keeping existing workflow")
    return install_workflow(ctx)


def run(ctx: Context, args: list[str]) -> int:
    require_repo(ctx)

    console.label("Setup", "CI/CD for GitHub Pages")
    repo = ctx.client.repo_name()
    console.kv("repo", repo)
    console.kv("branch", git.current_branch(ctx.root))

    console.blank()
    result = workflow_step(ctx)
    if result is None:
        console.info("Cancelled.")
        console.blank()
        return 0
    console.report(result)

    console.blank()
    with console.spinner("Setting workflow permissions to read/write"):
        result = steps.set_write_permissions(ctx.client)
    console.report(result)

    with console.spinner("Enabling GitHub Actions"):
        result = steps.enable_actions(ctx.client)
    console.report(result)

    console.done("CI/CD setup complete")
    console.log("Your repo is configured for automatic deployment.")
    console.blank()
    console.log("[dim]Next steps:[/dim]")
    console.log("  [dim]1.[/dim] [cyan]gh-pages put secrets[/cyan]   Upload .env secrets")
    console.log("  [dim]2.[/dim] [cyan]gh-pages deploy[/cyan]        Trigger deployment")
    console.blank()
    logger.debug("setup finished for %s", repo)
    return 0
