"""
cli.py

Responsibility: CLI entrypoint for gh-pages.

Dispatch:
- `setup`        -> commands/setup.py
- `deploy`       -> commands/deploy.py
- `status`       -> commands/status.py
- `logs`         -> commands/logs.py
- `put secrets`  -> commands/put.py

This module parses arguments, configures logging, builds the shared `Context`
and turns errors into exit codes. Command behavior lives in `commands/`.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Callable

from rich.markup import escape

from ghpages import __version__, console
from ghpages.commands import Context
from ghpages.commands import deploy, logs, put, setup, status
from ghpages.config import ConfigError, load_settings
from ghpages.console import Cancelled
from ghpages.github_client import GitHubClient, GitHubError
from ghpages.preflight import CLIError, PreconditionError
from ghpages.shell import CommandError
from ghpages.workflow import WorkflowError

__all__ = ["CLIError", "PreconditionError", "COMMANDS", "main"]

logger = logging.getLogger(__name__)

Handler = Callable[[Context, list[str]], int]

COMMANDS: dict[str, Handler] = {
    "setup": setup.run,
    "deploy": deploy.run,
    "status": status.run,
    "logs": logs.run,
    "put": put.run,
}


def _build_parser() -> argparse.ArgumentParser:
    # Help and version are rendered by us, so argparse's own -h is disabled.
    p = argparse.ArgumentParser(prog="gh-pages", add_help=False)
    p.add_argument("command", nargs="?", default=None)
    p.add_argument("args", nargs="*")
    p.add_argument("-h", "--help", action="store_true")
    p.add_argument("-v", "--version", action="store_true")
    p.add_argument("--verbose", action="store_true", help="Log external commands to stderr")
    return p


def _configure_logging(verbose: bool) -> None:
    debug = verbose or (os.environ.get("GH_PAGES_DEBUG") or "").strip() not in ("", "0")
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s" if not debug else "%(name)s: %(message)s",
        stream=sys.stderr,
    )


def _build_context(root: Path) -> Context:
    return Context(settings=load_settings(root), client=GitHubClient(), root=root)


def main(argv: list[str] | None = None, *, context_factory: Callable[[Path], Context] = _build_context) -> int:
    """
    Exit codes:
        0 - Success, help/version, or the user cancelled
        1 - Missing tool, not a repository, build timeout, failed command, unknown command
    """
    parser = _build_parser()
    args, unknown = parser.parse_known_args(argv)
    _configure_logging(args.verbose)

    if args.help or not args.command:
        console.print_help(__version__)
        return 0
    if args.version:
        console.print_banner(__version__)
        console.blank()
        return 0

    console.print_banner(__version__)
    command = args.command.lower()
    handler = COMMANDS.get(command)
    if handler is None:
        console.blank()
        console.log(f"[red]Unknown command:[/red] [bold]{escape(args.command)}[/bold]")
        console.print_help(__version__)
        return 1

    try:
        ctx = context_factory(Path.cwd())
        return int(handler(ctx, [*args.args, *unknown]))
    except Cancelled:
        console.blank()
        console.info("Cancelled.")
        console.blank()
        return 0
    except CLIError as e:
        console.fail(escape(str(e)))
        if e.hint:
            console.info(escape(e.hint))
        console.blank()
        return 1
    except (ConfigError, GitHubError, WorkflowError, CommandError) as e:
        logger.debug("%s failed", command, exc_info=True)
        console.fail(escape(str(e)))
        console.blank()
        return 1
    except KeyboardInterrupt:
        console.blank()
        console.fail("Interrupted")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
