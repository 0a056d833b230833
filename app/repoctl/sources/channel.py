"""Repository channels and their codenames.

A channel is a symbolic variant of the repository. Its codename is the
base distribution codename plus a fixed suffix, e.g. ``bookworm-testers``.
"""

from enum import Enum

from repoctl.core.errors import ConfigurationError


class Channel(str, Enum):
    """Repository variants.

    Attributes:
        STABLE: Released packages.
        STABLE_PROPOSED_UPDATES: Candidates for the next stable point release.
        TESTERS: Packages under testing.
        DEVELOPERS: Development snapshots.
    """

    STABLE = "stable"
    STABLE_PROPOSED_UPDATES = "stable-proposed-updates"
    TESTERS = "testers"
    DEVELOPERS = "developers"


CHANNEL_SUFFIXES: dict[Channel, str] = {
    Channel.STABLE: "",
    Channel.STABLE_PROPOSED_UPDATES: "-proposed-updates",
    Channel.TESTERS: "-testers",
    Channel.DEVELOPERS: "-developers",
}


def parse_channel(name: str) -> Channel:
    """Convert a channel name to a Channel.

    Raises:
        ConfigurationError: If the name is empty or not a known channel.
    """
    if not name:
        raise ConfigurationError("Repository channel cannot be empty")
    try:
        return Channel(name)
    except ValueError:
        choices = ", ".join(c.value for c in Channel)
        msg = f"Unknown repository channel '{name}' (expected one of: {choices})"
        raise ConfigurationError(msg) from None


def resolve_codename(channel: Channel | str, base_codename: str) -> str:
    """Resolve a channel to the codename used in the sources list.

    Args:
        channel: Channel or channel name.
        base_codename: Codename of the base distribution, e.g. ``bookworm``.

    Returns:
        The repository codename.

    Raises:
        ConfigurationError: If the channel is unknown or the base codename is empty.
    """
    if not isinstance(channel, Channel):
        channel = parse_channel(channel)
    if not base_codename:
        raise ConfigurationError("Base codename cannot be empty")
    return base_codename + CHANNEL_SUFFIXES[channel]
