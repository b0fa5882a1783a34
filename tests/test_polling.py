from __future__ import annotations

import pytest

from ghpages.polling import wait_for_branch


class Lister:
    def __init__(self, appear_on: int | None = None, fail_on: set[int] | None = None) -> None:
        self.appear_on = appear_on
        self.fail_on = fail_on or set()
        self.calls = 0

    def __call__(self) -> list[str]:
        self.calls += 1
        if self.calls in self.fail_on:
            raise RuntimeError("gh: Bad credentials (HTTP 401)")
        if self.appear_on is not None and self.calls >= self.appear_on:
            return ["main", "public"]
        return ["main"]


@pytest.mark.parametrize("k", [1, 2, 7, 10])
def test_found_after_exactly_k_attempts(k: int) -> None:
    lister = Lister(appear_on=k)
    sleeps: list[float] = []

    result = wait_for_branch(lister, "public", max_attempts=10, interval=5.0, sleep=sleeps.append)

    assert result.found is True
    assert result.attempts == k
    assert lister.calls == k
    # no sleep after the successful attempt
    assert sleeps == [5.0] * (k - 1)


def test_gives_up_after_max_attempts() -> None:
    lister = Lister(appear_on=None)
    sleeps: list[float] = []

    result = wait_for_branch(lister, "public", max_attempts=6, interval=2.5, sleep=sleeps.append)

    assert result.found is False
    assert result.attempts == 6
    assert lister.calls == 6
    assert sleeps == [2.5] * 5


def test_lookup_errors_do_not_abort() -> None:
    lister = Lister(appear_on=4, fail_on={1, 2, 3})

    result = wait_for_branch(lister, "public", max_attempts=10, interval=0, sleep=lambda _s: None)

    assert result.found is True
    assert result.attempts == 4
    assert result.errors == 3


def test_permanent_errors_run_to_timeout() -> None:
    lister = Lister(fail_on=set(range(1, 100)))

    result = wait_for_branch(lister, "public", max_attempts=5, interval=0, sleep=lambda _s: None)

    assert result.found is False
    assert result.attempts == 5
    assert result.errors == 5


def test_on_attempt_reports_each_attempt() -> None:
    seen: list[int] = []
    wait_for_branch(Lister(appear_on=3), "public", max_attempts=5, interval=0, sleep=lambda _s: None, on_attempt=seen.append)
    assert seen == [1, 2, 3]


def test_branch_name_must_match_exactly() -> None:
    result = wait_for_branch(
        lambda: ["public-old", "republic"], "public", max_attempts=2, interval=0, sleep=lambda _s: None
    )
    assert result.found is False


def test_rejects_zero_attempts() -> None:
    with pytest.raises(ValueError):
        wait_for_branch(lambda: [], "public", max_attempts=0)
