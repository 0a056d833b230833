"""APT sources list generation and channel-to-codename mapping."""

from repoctl.sources.channel import CHANNEL_SUFFIXES, Channel, resolve_codename
from repoctl.sources.generator import SourcesListGenerator

__all__ = ["CHANNEL_SUFFIXES", "Channel", "SourcesListGenerator", "resolve_codename"]
