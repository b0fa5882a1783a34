from __future__ import annotations

from datetime import datetime, timezone

import pytest

from ghpages import formatting

NOW = datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "stamp, expected",
    [
        ("2026-03-10T11:59:30Z", "just now"),
        ("2026-03-10T11:15:00Z", "45m ago"),
        ("2026-03-10T03:00:00Z", "9h ago"),
        ("2026-03-01T12:00:00Z", "9d ago"),
        ("2025-12-01T12:00:00Z", "2025-12-01"),
        (None, ""),
        ("yesterday", ""),
    ],
)
def test_relative_time(stamp: str | None, expected: str) -> None:
    assert formatting.relative_time(stamp, now=NOW) == expected


@pytest.mark.parametrize(
    "start, end, expected",
    [
        ("2026-03-10T12:00:00Z", "2026-03-10T12:00:00Z", "<1s"),
        ("2026-03-10T12:00:00Z", "2026-03-10T12:00:42Z", "42s"),
        ("2026-03-10T12:00:00Z", "2026-03-10T12:03:05Z", "3m 5s"),
        (None, "2026-03-10T12:00:00Z", ""),
    ],
)
def test_duration(start: str | None, end: str | None, expected: str) -> None:
    assert formatting.duration(start, end) == expected


@pytest.mark.parametrize(
    "line, kind",
    [
        ("Error: Cannot find module 'vite'", "error"),
        ("npm ERR! code ELIFECYCLE", "other"),
        ("TypeError: x is undefined", "error"),
        ("Found 0 errors. Watching for file changes.", "other"),
        ("build finished with 3 errors", "other"),
        ("warning: LF will be replaced by CRLF", "warning"),
        ("npm WARN deprecated glob@7.2.3", "warning"),
        ("Run actions/checkout@v4", "other"),
    ],
)
def test_classify_log_line(line: str, kind: str) -> None:
    assert formatting.classify_log_line(line) == kind


def test_tail_truncates_to_most_recent_lines() -> None:
    text = "\n".join(f"line {i}" for i in range(200))
    lines, total = formatting.tail(text, 80)
    assert total == 200
    assert len(lines) == 80
    assert lines[0] == "line 120"
    assert lines[-1] == "line 199"


def test_tail_short_text_untouched() -> None:
    assert formatting.tail("a\nb", 80) == (["a", "b"], 2)


def test_status_icon_and_style() -> None:
    assert "✓" in formatting.status_icon("success")
    assert "✗" in formatting.status_icon("failure")
    assert "▶" in formatting.status_icon(None, "in_progress")
    assert formatting.status_style(None, "queued") == "yellow"
