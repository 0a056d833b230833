"""Unit tests for action models."""

import pytest
from repoctl.models.action import RepoAction, RepoRequest, StepResult


class TestRepoAction:
    """Tests for RepoAction enum."""

    def test_values_match_option_names(self) -> None:
        """Action values are the command-line option names."""
        assert [a.value for a in RepoAction] == ["enable", "disable", "refresh-keys"]


class TestRepoRequest:
    """Tests for RepoRequest."""

    def test_enable_requires_codename(self) -> None:
        """An enable request without codename is invalid."""
        with pytest.raises(ValueError, match="codename is required"):
            RepoRequest(RepoAction.ENABLE)

    def test_disable_without_codename(self) -> None:
        """Other actions need no codename."""
        request = RepoRequest(RepoAction.DISABLE)

        assert request.codename is None

    def test_immutable(self) -> None:
        """Requests cannot be modified."""
        request = RepoRequest(RepoAction.ENABLE, "bookworm")

        with pytest.raises(AttributeError):
            request.codename = "trixie"  # type: ignore[misc]


def test_step_result_defaults() -> None:
    """StepResult message defaults to empty."""
    assert StepResult("add_keys", changed=True).message == ""
