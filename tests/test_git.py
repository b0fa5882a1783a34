from __future__ import annotations

import shutil
from pathlib import Path
from typing import Sequence

import pytest

from ghpages import git, shell
from ghpages.shell import CommandError

needs_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    def g(*args: str) -> None:
        shell.run(["git", *args], cwd=tmp_path)

    g("init", "-q")
    g("config", "user.email", "dev@example.invalid")
    g("config", "user.name", "Dev")
    g("config", "commit.gpgsign", "false")
    (tmp_path / "index.html").write_text("v1\n", encoding="utf-8")
    g("add", "index.html")
    g("commit", "-q", "-m", "init")
    return tmp_path


@needs_git
def test_stash_on_clean_tree_reports_nothing(repo: Path) -> None:
    assert git.stash(repo) is False
    assert not git.has_changes(repo)


@needs_git
def test_stash_includes_untracked_and_pop_restores(repo: Path) -> None:
    (repo / "index.html").write_text("v2\n", encoding="utf-8")
    (repo / "draft.md").write_text("wip\n", encoding="utf-8")

    assert git.stash(repo) is True
    assert not git.has_changes(repo)
    assert not (repo / "draft.md").exists()

    git.stash_pop(repo)
    assert (repo / "index.html").read_text(encoding="utf-8") == "v2\n"
    assert (repo / "draft.md").read_text(encoding="utf-8") == "wip\n"


@needs_git
def test_older_stash_is_not_mistaken_for_a_new_one(repo: Path) -> None:
    (repo / "index.html").write_text("old work\n", encoding="utf-8")
    assert git.stash(repo) is True

    assert git.stash(repo) is False


def test_stash_result_ignores_git_message_language(monkeypatch: pytest.MonkeyPatch) -> None:
    # A German git prints "Keine lokalen Änderungen zum Speichern" and leaves refs/stash alone.
    def fake_run(cmd: Sequence[str], *, cwd: Path | None = None, input_text: str | None = None) -> str:
        if list(cmd[:2]) == ["git", "rev-parse"]:
            return "1111111111111111111111111111111111111111\n"
        return "Keine lokalen Änderungen zum Speichern\n"

    monkeypatch.setattr(shell, "run", fake_run)
    assert git.stash() is False


def test_stash_without_any_previous_stash(monkeypatch: pytest.MonkeyPatch) -> None:
    heads = iter([None, "2222222222222222222222222222222222222222\n"])

    def fake_run(cmd: Sequence[str], *, cwd: Path | None = None, input_text: str | None = None) -> str:
        if list(cmd[:2]) == ["git", "rev-parse"]:
            head = next(heads)
            if head is None:
                raise CommandError(cmd, 1)
            return head
        return "Saved working directory and index state WIP on main\n"

    monkeypatch.setattr(shell, "run", fake_run)
    assert git.stash() is True
