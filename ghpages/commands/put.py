"""
put.py

`gh-pages put secrets [path]`: upload KEY=value pairs from an env file as
repository secrets, or enter them one by one.
"""

from __future__ import annotations

import logging

from rich.markup import escape

from ghpages import console, envfile
from ghpages.commands import Context, require_repo
from ghpages.envfile import SecretsError
from ghpages.github_client import GitHubError
from ghpages.preflight import CLIError

logger = logging.getLogger(__name__)


def print_usage() -> None:
    console.blank()
    console.log("[dim]USAGE[/dim]")
    console.blank()
    console.log("  gh-pages put [cyan]<subcommand>[/cyan]")
    console.blank()
    console.log("[dim]SUBCOMMANDS[/dim]")
    console.blank()
    console.log("  [white]secrets[/white]   Upload secrets from .env to GitHub")
    console.blank()
    console.log("[dim]EXAMPLES[/dim]")
    console.blank()
    console.log("  [dim]$[/dim] gh-pages put secrets")
    console.log("  [dim]$[/dim] gh-pages put secrets .env.production")
    console.blank()


def manual_secrets(ctx: Context) -> int:
    """
    Prompt for name/value pairs until an empty name. Returns how many were set.
    """
    console.blank()
    console.log("Set secrets one at a time. Leave name empty to finish.")
    console.blank()

    count = 0
    while True:
        key = console.ask("Secret name (empty to finish)?").strip()
        if not key:
            break
        value = console.ask(f"Value for {escape(key)}?")
        if not value.strip():
            console.warn(f"Skipped {escape(key)} (empty value)")
            continue
        with console.spinner(f"Setting {escape(key)}"):
            try:
                ctx.client.set_secret(key, value)
                ok = True
            except GitHubError as e:
                logger.debug("setting secret %s failed: %s", key, e)
                ok = False
        if ok:
            console.ok(f"[cyan]{escape(key)}[/cyan] set")
            count += 1
        else:
            console.fail(f"Failed to set {escape(key)}")

    if count:
        console.blank()
        console.ok(f"{count} secret(s) configured")
    console.blank()
    return count


def pick_env_file(ctx: Context, explicit: str | None) -> str | None:
    """
    Resolve the env file to upload. None means there is nothing to upload (already handled).
    """
    if explicit:
        if not (ctx.root / explicit).is_file():
            raise CLIError(f"Env file not found: {explicit}")
        return explicit

    found = envfile.find_env_files(ctx.settings.env_files, root=ctx.root)
    if len(found) == 1:
        return found[0]
    if len(found) > 1:
        picked = console.select("Multiple .env files found. Which one?", [(f, f) for f in found])
        console.blank()
        return picked

    console.warn("No .env file found")
    console.blank()
    action = console.select(
        "What would you like to do?",
        [
            ("create", "Create a new .env file"),
            ("manual", "Set secrets manually"),
            ("skip", "Cancel"),
        ],
    )
    if action == "skip":
        console.info("Cancelled.")
        console.blank()
    elif action == "manual":
        manual_secrets(ctx)
    else:
        envfile.write_env_stub(ctx.root / ".env")
        console.ok("Created .env file")
        console.info("Add your secrets, then run this command again")
        console.blank()
    return None


def put_secrets(ctx: Context, explicit: str | None = None) -> int:
    require_repo(ctx)

    console.label("Put Secrets")
    console.kv("repo", ctx.client.repo_name())
    console.blank()

    env_path = pick_env_file(ctx, explicit)
    if env_path is None:
        return 0

    try:
        entries = envfile.parse_env_file(ctx.root / env_path)
    except SecretsError as e:
        raise CLIError(str(e)) from e
    if not entries:
        console.warn(f"{env_path} has no secrets")
        console.blank()
        return 0

    console.log(f"Found [white]{len(entries)}[/white] secret(s) in [cyan]{escape(env_path)}[/cyan]:")
    console.blank()
    for entry in entries:
        console.log(f"  [dim]·[/dim]  {escape(entry.key)}")
    console.blank()

    confirm = console.select("Upload these secrets to GitHub?", [("yes", "Yes, upload all"), ("no", "Cancel")])
    if confirm == "no":
        console.info("Cancelled.")
        console.blank()
        return 0

    console.blank()
    with console.spinner(f"Uploading secrets from {escape(env_path)}"):
        try:
            ctx.client.set_secrets_from_file(str(ctx.root / env_path))
            uploaded = True
        except GitHubError as e:
            logger.debug("secret upload failed: %s", e)
            uploaded = False
    if not uploaded:
        console.fail("Failed to upload secrets")
        console.info(f"Try: [yellow]gh secret set -f {escape(env_path)}[/yellow]")
        console.blank()
        return 1

    console.ok(f"{len(entries)} secret(s) uploaded")
    console.blank()
    console.ok("Secrets are now available in GitHub Actions")
    console.info("Access via: [cyan]${{ secrets.KEY_NAME }}[/cyan]")
    console.blank()
    return 0


def run(ctx: Context, args: list[str]) -> int:
    if not args or args[0].lower() != "secrets":
        print_usage()
        return 0
    return put_secrets(ctx, args[1] if len(args) > 1 else None)
