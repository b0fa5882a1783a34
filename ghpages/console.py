"""
console.py

Responsibility: everything the user sees or types.

Output goes through a single Rich console with a two-space left gutter.
Prompts raise `Cancelled` on Ctrl+C / EOF so commands can treat that as a
clean exit of the current step.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Sequence

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from ghpages.steps import Outcome, StepResult

PAD = "  "

console = Console(highlight=False)


class Cancelled(Exception):
    pass


def log(msg: str = "") -> None:
    console.print(f"{PAD}{msg}")


def blank() -> None:
    console.print()


def label(text: str, sub: str | None = None) -> None:
    blank()
    log(f"[bold]{text}[/bold]  [dim]{sub}[/dim]" if sub else f"[bold]{text}[/bold]")
    blank()


def section(title: str) -> None:
    blank()
    log(f"[dim]{title.upper()}[/dim]")
    blank()


def kv(key: str, value: str) -> None:
    log(f"[dim]{key}[/dim]  [cyan]{escape(value)}[/cyan]")


def ok(msg: str) -> None:
    log(f"[green]✓[/green]  {msg}")


def fail(msg: str) -> None:
    log(f"[red]✗[/red]  {msg}")


def warn(msg: str) -> None:
    log(f"[yellow]![/yellow]  [yellow]{msg}[/yellow]")


def info(msg: str) -> None:
    log(f"[dim]›[/dim]  [dim]{msg}[/dim]")


def done(msg: str) -> None:
    blank()
    log(f"[bold green]✓[/bold green]  [bold]{msg}[/bold]")
    blank()


def report(result: StepResult) -> None:
    if result.outcome is Outcome.FAILED:
        fail(result.message)
    else:
        ok(result.message)
    if result.hint:
        info(escape(result.hint))


@contextmanager
def spinner(text: str) -> Iterator[object]:
    with console.status(f"{text}", spinner="dots") as status:
        yield status


def ask(question: str, default: str | None = None) -> str:
    try:
        if default is None:
            return Prompt.ask(f"{PAD}{question}", console=console, default="", show_default=False)
        return Prompt.ask(f"{PAD}{question}", console=console, default=default)
    except (KeyboardInterrupt, EOFError) as e:
        raise Cancelled() from e


def select(question: str, options: Sequence[tuple[str, str]]) -> str:
    """
    Numbered single choice. `options` are (value, label) pairs; returns the value.
    """
    if not options:
        raise ValueError("select() needs at least one option")
    log(f"[bold]{question}[/bold]")
    for i, (_value, text) in enumerate(options, start=1):
        log(f"  [cyan]{i}[/cyan]  {text}")
    choices = [str(i) for i in range(1, len(options) + 1)]
    try:
        picked = Prompt.ask(f"{PAD}Choice", console=console, choices=choices, default="1")
    except (KeyboardInterrupt, EOFError) as e:
        raise Cancelled() from e
    return options[int(picked) - 1][0]


def print_banner(version: str) -> None:
    blank()
    log(f"[bold]gh-pages[/bold] [dim]v{version}[/dim]")


def print_help(version: str) -> None:
    print_banner(version)
    blank()
    log("[dim]COMMANDS[/dim]")
    blank()
    log("  [white]deploy[/white]          Deploy your site to GitHub Pages")
    log("  [white]setup[/white]           Set up CI/CD workflow and permissions")
    log("  [white]status[/white]          Check deployment status")
    log("  [white]logs[/white]            View workflow run logs")
    log("  [white]put secrets[/white]     Upload .env secrets to GitHub")
    blank()
    log("[dim]FLAGS[/dim]")
    blank()
    log("  [white]-h, --help[/white]      Show this help")
    log("  [white]-v, --version[/white]   Show version")
    log("  [white]--verbose[/white]       Log external commands to stderr")
    blank()
