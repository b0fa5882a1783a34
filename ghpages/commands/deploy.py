"""
deploy.py

`gh-pages deploy`: publish the site to the marker branch and point Pages at it.

Two paths, picked by whether the deploy workflow file exists:
- actions: push (or dispatch) and let the workflow build, then poll for the marker branch
- orphan: build locally and force-push the output to the marker branch
"""

from __future__ import annotations

import logging
import shlex
import shutil
import tempfile
from pathlib import Path

from ghpages import console, git, polling, shell, steps, workflow
from ghpages.commands import Context, require_repo
from ghpages.github_client import GitHubError
from ghpages.preflight import CLIError
from ghpages.shell import CommandError
from ghpages.steps import Outcome

logger = logging.getLogger(__name__)

PUBLISH_MESSAGE = "Deploy to GitHub Pages"


def choose_path(ctx: Context) -> str:
    return "actions" if workflow.workflow_exists(ctx.workflow_path) else "orphan"


def wait_for_deployment(ctx: Context, repo: str) -> bool:
    s = ctx.settings
    console.blank()
    with console.spinner("Waiting for deployment") as status:
        result = polling.wait_for_branch(
            ctx.client.list_branches,
            s.marker_branch,
            max_attempts=s.poll_attempts,
            interval=s.poll_interval,
            sleep=ctx.sleep,
            on_attempt=lambda n: status.update(f"Waiting for deployment ({n}/{s.poll_attempts})"),
        )
    if result.found:
        console.ok("Deployment completed")
        return True

    waited = int(s.poll_attempts * s.poll_interval)
    console.fail(f"Timed out after {waited // 60}m {waited % 60}s" if waited >= 60 else f"Timed out after {waited}s")
    if result.errors:
        console.info(f"{result.errors} branch lookup(s) failed along the way")
    console.info(f"Check: [cyan]https://github.com/{repo}/actions[/cyan]")
    return False


def enable_pages(ctx: Context) -> None:
    console.blank()
    with console.spinner("Enabling GitHub Pages"):
        result = steps.enable_pages(ctx.client, ctx.settings.marker_branch)
    console.report(result)
    if result.outcome is Outcome.FAILED:
        return

    url = steps.pages_url(ctx.client)
    if url:
        console.done(f"Live at [cyan]{url}[/cyan]")
    else:
        console.info("Site URL will be available shortly")


def trigger_workflow_deploy(ctx: Context) -> int:
    console.label("Deploy", "via GitHub Actions")
    repo = ctx.client.repo_name()
    branch = git.current_branch(ctx.root)
    console.kv("repo", repo)
    console.kv("branch", branch)
    console.blank()

    pushed = False
    if git.has_changes(ctx.root):
        console.warn("You have uncommitted changes")
        console.blank()
        action = console.select(
            "What would you like to do?",
            [
                ("commit", "Commit and push, then deploy"),
                ("deploy", "Deploy without committing"),
                ("abort", "Cancel"),
            ],
        )
        if action == "abort":
            console.info("Cancelled.")
            console.blank()
            return 0
        if action == "commit":
            message = console.ask("Commit message?", PUBLISH_MESSAGE)
            console.blank()
            with console.spinner("Committing and pushing"):
                try:
                    git.commit_all_and_push(message, branch, cwd=ctx.root)
                except CommandError as e:
                    raise CLIError("Failed to push", hint=str(e)) from e
            console.ok(f"Pushed to [cyan]{branch}[/cyan]")
            console.blank()
            console.info("Push will trigger the deploy workflow automatically.")
            pushed = True

    if not pushed:
        wf = ctx.settings.workflow_file
        with console.spinner("Triggering deploy workflow"):
            try:
                ctx.client.dispatch_workflow(wf, branch)
            except GitHubError as e:
                logger.debug("workflow dispatch failed: %s", e)
                raise CLIError("Failed to trigger workflow", hint=f"Try: gh workflow run {wf} --ref {branch}") from e
        console.ok("Deploy workflow triggered")

    if not wait_for_deployment(ctx, repo):
        console.blank()
        return 1
    enable_pages(ctx)
    console.blank()
    return 0


def default_build_folder(root: Path) -> str:
    folder = "dist"
    if (root / "out").exists():
        folder = "out"
    if (root / ".next").exists():
        folder = ".next"
    return folder


def run_build(ctx: Context) -> None:
    for command in ctx.settings.build_commands:
        shell.run(shlex.split(command), cwd=ctx.root)


def _copy_tree_contents(src: Path, dst: Path) -> list[str]:
    names: list[str] = []
    for entry in sorted(src.iterdir()):
        target = dst / entry.name
        if entry.is_dir():
            shutil.copytree(entry, target, dirs_exist_ok=True)
        else:
            shutil.copy2(entry, target)
        names.append(entry.name)
    return names


def publish_folder(ctx: Context, folder: str, source_branch: str) -> None:
    """
    Replace the marker branch contents with `folder` and force-push it.

    Local changes are stashed for the duration and restored afterwards, also on failure.
    """
    root = ctx.root
    marker = ctx.settings.marker_branch
    staging = Path(tempfile.mkdtemp(prefix="gh-pages-"))
    stashed = False
    switched = False
    try:
        shutil.copytree(root / folder, staging, dirs_exist_ok=True)
        stashed = git.stash(root)

        if git.remote_branch_exists(marker, cwd=root):
            git.fetch(marker, cwd=root)
            git.checkout(marker, cwd=root)
        else:
            git.checkout_orphan(marker, cwd=root)
        switched = True

        git.clear_index(root)
        shutil.rmtree(root / folder, ignore_errors=True)
        paths = _copy_tree_contents(staging, root)
        (root / ".nojekyll").touch()
        paths.append(".nojekyll")

        git.commit_paths(paths, PUBLISH_MESSAGE, cwd=root)
        git.force_push(marker, cwd=root)
    finally:
        shutil.rmtree(staging, ignore_errors=True)
        if switched:
            try:
                git.checkout(source_branch, cwd=root)
            except CommandError as e:
                logger.warning("could not switch back to %s: %s", source_branch, e)
        if stashed:
            try:
                git.stash_pop(root)
            except CommandError as e:
                logger.warning("could not restore stashed changes (see `git stash list`): %s", e)


def orphan_branch_deploy(ctx: Context) -> int:
    console.label("Deploy", "orphan branch")
    repo = ctx.client.repo_name()
    branch = git.current_branch(ctx.root)
    console.kv("repo", repo)
    console.kv("branch", branch)
    console.blank()
    console.info("No deploy workflow found. Building locally and pushing output.")
    console.blank()

    folder = console.ask("Build output folder?", default_build_folder(ctx.root))
    console.blank()

    with console.spinner("Building project"):
        try:
            run_build(ctx)
        except CommandError as e:
            raise CLIError("Build failed", hint=str(e)) from e
    console.ok("Build completed")

    if not (ctx.root / folder).is_dir():
        raise CLIError(f'Build output folder "{folder}" not found')

    marker = ctx.settings.marker_branch
    with console.spinner(f"Deploying {folder} to {marker} branch"):
        try:
            publish_folder(ctx, folder, branch)
        except (CommandError, OSError) as e:
            raise CLIError("Deployment failed", hint=str(e)) from e
    console.ok(f"Deployed to [cyan]{marker}[/cyan] branch")

    enable_pages(ctx)
    console.blank()
    return 0


def run(ctx: Context, args: list[str]) -> int:
    require_repo(ctx)

    if choose_path(ctx) == "actions":
        return trigger_workflow_deploy(ctx)

    choice = console.select(
        "No deploy workflow found. How would you like to deploy?",
        [
            ("orphan", "Deploy via orphan branch (build locally)"),
            ("setup", "Set up CI/CD first"),
        ],
    )
    if choice == "setup":
        console.blank()
        console.info("Run: [cyan]gh-pages setup[/cyan]")
        console.blank()
        return 0
    return orphan_branch_deploy(ctx)
