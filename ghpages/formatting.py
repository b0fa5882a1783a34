"""Plain-text formatting helpers for runs, jobs and logs."""

from __future__ import annotations

import re
from datetime import datetime, timezone

_ERROR_RE = re.compile(r"error", re.IGNORECASE)
_ERROR_COUNT_RE = re.compile(r"\d+ errors?", re.IGNORECASE)
_WARN_RE = re.compile(r"warn", re.IGNORECASE)


def parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def relative_time(value: str | None, *, now: datetime | None = None) -> str:
    dt = parse_timestamp(value)
    if dt is None:
        return ""
    now = now or datetime.now(timezone.utc)
    sec = int((now - dt).total_seconds())
    minutes, hours, days = sec // 60, sec // 3600, sec // 86400
    if sec < 60:
        return "just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 30:
        return f"{days}d ago"
    return dt.strftime("%Y-%m-%d")


def duration(start: str | None, end: str | None) -> str:
    s, e = parse_timestamp(start), parse_timestamp(end)
    if s is None or e is None:
        return ""
    sec = int((e - s).total_seconds())
    if sec < 1:
        return "<1s"
    if sec < 60:
        return f"{sec}s"
    return f"{sec // 60}m {sec % 60}s"


def status_icon(conclusion: str | None, status: str | None = None) -> str:
    if conclusion == "success":
        return "[green]✓[/green]"
    if conclusion == "failure":
        return "[red]✗[/red]"
    if conclusion == "skipped":
        return "[bright_black]-[/bright_black]"
    if status == "in_progress":
        return "[cyan]▶[/cyan]"
    return "[bright_black]○[/bright_black]"


def status_style(conclusion: str | None, status: str | None = None) -> str:
    if conclusion == "success":
        return "green"
    if conclusion == "failure":
        return "red"
    if status == "in_progress":
        return "cyan"
    return "yellow"


def classify_log_line(line: str) -> str:
    """
    Return `error`, `warning` or `other`. Summary counts like "0 errors" are not errors.
    """
    if _ERROR_RE.search(line) and not _ERROR_COUNT_RE.search(line):
        return "error"
    if _WARN_RE.search(line):
        return "warning"
    return "other"


def tail(text: str, limit: int) -> tuple[list[str], int]:
    """Last `limit` lines of `text`, plus the total line count."""
    lines = text.split("\n")
    return lines[-limit:] if len(lines) > limit else lines, len(lines)
