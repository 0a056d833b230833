"""Unit tests for channel to codename resolution."""

import pytest
from repoctl.core.errors import ConfigurationError
from repoctl.sources.channel import CHANNEL_SUFFIXES, Channel, parse_channel, resolve_codename


class TestResolveCodename:
    """Tests for resolve_codename()."""

    @pytest.mark.parametrize(
        ("channel", "expected"),
        [
            ("stable", "bookworm"),
            ("stable-proposed-updates", "bookworm-proposed-updates"),
            ("testers", "bookworm-testers"),
            ("developers", "bookworm-developers"),
        ],
    )
    def test_channel_names(self, channel: str, expected: str) -> None:
        """Each channel appends its fixed suffix to the base codename."""
        assert resolve_codename(channel, "bookworm") == expected

    def test_accepts_enum(self) -> None:
        """Channel members resolve the same as their names."""
        assert resolve_codename(Channel.TESTERS, "trixie") == "trixie-testers"

    def test_every_channel_has_a_suffix(self) -> None:
        """The suffix table covers all channels."""
        assert set(CHANNEL_SUFFIXES) == set(Channel)

    def test_unknown_channel_raises(self) -> None:
        """An unknown channel is a configuration error listing the choices."""
        with pytest.raises(ConfigurationError, match="Unknown repository channel 'unstable'"):
            resolve_codename("unstable", "bookworm")

    def test_empty_base_codename_raises(self) -> None:
        """The base codename must not be empty."""
        with pytest.raises(ConfigurationError, match="Base codename"):
            resolve_codename("stable", "")


class TestParseChannel:
    """Tests for parse_channel()."""

    def test_empty_name_raises(self) -> None:
        """An empty channel name is rejected."""
        with pytest.raises(ConfigurationError, match="cannot be empty"):
            parse_channel("")

    def test_case_sensitive(self) -> None:
        """Channel names are matched exactly."""
        with pytest.raises(ConfigurationError):
            parse_channel("Stable")
