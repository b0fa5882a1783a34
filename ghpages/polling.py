"""
polling.py

Responsibility: wait for a marker branch to show up on the remote.

GitHub Actions runs asynchronously after a push or dispatch, so the only
completion signal is the branch the deploy job pushes. The loop polls at a
constant interval; a failed lookup counts as "not there yet".
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PollResult:
    found: bool
    attempts: int
    errors: int = 0


def wait_for_branch(
    list_branches: Callable[[], Iterable[str]],
    branch: str,
    *,
    max_attempts: int = 60,
    interval: float = 5.0,
    sleep: Callable[[float], None] = time.sleep,
    on_attempt: Callable[[int], None] | None = None,
) -> PollResult:
    """
    Call `list_branches` until `branch` appears or `max_attempts` calls were made.

    Lookup errors never end the loop early; they are counted in `PollResult.errors`.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    errors = 0
    for attempt in range(1, max_attempts + 1):
        if on_attempt is not None:
            on_attempt(attempt)
        try:
            names = set(list_branches())
        except Exception as e:  # noqa: BLE001 - any lookup failure means "not visible yet"
            errors += 1
            logger.debug("branch lookup failed on attempt %d: %s", attempt, e)
            names = set()

        if branch in names:
            logger.debug("branch %r found after %d attempt(s)", branch, attempt)
            return PollResult(found=True, attempts=attempt, errors=errors)

        if attempt < max_attempts:
            sleep(interval)

    logger.debug("branch %r not found after %d attempt(s)", branch, max_attempts)
    return PollResult(found=False, attempts=max_attempts, errors=errors)
