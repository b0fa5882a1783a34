from __future__ import annotations

from ghpages import steps
from ghpages.github_client import GitHubError
from ghpages.steps import Outcome


def test_set_permissions_twice_never_fails(client) -> None:
    first = steps.set_write_permissions(client)
    second = steps.set_write_permissions(client)

    assert first.outcome is Outcome.OK
    assert second.ok
    assert client.permissions == "write"


def test_rejected_put_with_write_already_set_is_a_note(client) -> None:
    client.permissions = "write"
    client.reject_permission_put = True

    result = steps.set_write_permissions(client)

    assert result.outcome is Outcome.NOTE
    assert "already" in result.message


def test_second_call_after_rejection_is_not_a_failure(client) -> None:
    assert steps.set_write_permissions(client).outcome is Outcome.OK
    client.reject_permission_put = True
    assert steps.set_write_permissions(client).outcome is Outcome.NOTE


def test_rejected_put_with_read_permissions_fails_with_settings_hint(client) -> None:
    client.reject_permission_put = True

    result = steps.set_write_permissions(client)

    assert result.outcome is Outcome.FAILED
    assert "https://github.com/octo/site/settings/actions" in (result.hint or "")
    assert "read" in (result.hint or "")


def test_unreadable_permissions_fail(client, monkeypatch) -> None:
    client.reject_permission_put = True

    def boom() -> str:
        raise GitHubError("gh: Forbidden (HTTP 403)", status=403)

    monkeypatch.setattr(client, "get_workflow_permissions", boom)

    result = steps.set_write_permissions(client)
    assert result.outcome is Outcome.FAILED
    assert result.message == "Could not verify permissions"


def test_enable_pages_then_again_reports_already_enabled(client) -> None:
    assert steps.enable_pages(client, "public").outcome is Outcome.OK
    again = steps.enable_pages(client, "public")
    assert again.outcome is Outcome.NOTE
    assert client.called("enable_pages") == [("enable_pages", "public", "/"), ("enable_pages", "public", "/")]


def test_enable_pages_other_error_is_non_fatal_failure(client, monkeypatch) -> None:
    def denied(branch: str, path: str = "/") -> None:
        raise GitHubError("gh: Resource not accessible (HTTP 403)", status=403)

    monkeypatch.setattr(client, "enable_pages", denied)

    result = steps.enable_pages(client, "public")
    assert result.outcome is Outcome.FAILED
    assert result.hint == "Enable manually in Settings > Pages"


def test_enable_actions_error_is_reported_as_note(client, monkeypatch) -> None:
    def refused() -> None:
        raise GitHubError("gh: Conflict (HTTP 409)", status=409)

    monkeypatch.setattr(client, "enable_actions", refused)
    assert steps.enable_actions(client).outcome is Outcome.NOTE


def test_pages_url_none_when_lookup_fails(client) -> None:
    assert steps.pages_url(client) is None
    client.enable_pages("public")
    assert steps.pages_url(client) == "https://octo.github.io/site/"
