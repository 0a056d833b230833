"""Runtime configuration for repoctl.

Settings are layered, later layers winning:

1. Built-in defaults (see :mod:`repoctl.core.paths`)
2. System config file (/etc/repoctl/repoctl.toml)
3. Environment variables (REPOCTL_BASEURI, REPOCTL_BASE_CODENAME)
4. Command-line overrides

The result is a frozen :class:`RepoConfig` that is handed to every
component explicitly.

Example config file::

    [repository]
    base_uris = ["https://deb.example.org"]
    base_codename = "bookworm"

    [paths]
    sources_list = "/etc/apt/sources.list.d/example.list"

    [trust]
    legacy_fingerprint = "916B8D99C38EAF5E8ADC7A2A8D66066A2EEACCDA"
"""

import logging
import os
import re
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from repoctl.core.errors import ConfigurationError
from repoctl.core.paths import (
    CONFIG_PATH,
    DEFAULT_BASE_URIS,
    LEGACY_FINGERPRINT,
    LEGACY_KEYRING_PATH,
    SOURCE_KEY_PATH,
    SOURCES_LIST_PATH,
    TARGET_KEYRING_PATH,
    get_workspace_root,
)

logger = logging.getLogger(__name__)

ENV_BASE_URIS = "REPOCTL_BASEURI"
ENV_BASE_CODENAME = "REPOCTL_BASE_CODENAME"

_FINGERPRINT_RE = re.compile(r"^[0-9A-F]{40}$")


class RepoConfig(BaseModel):
    """Immutable configuration record for a single invocation.

    Attributes:
        base_uris: Repository root URIs, in the order they are written.
        base_codename: Base distribution codename. None means detect from the host.
        source_key: Packaged vendor public key.
        target_keyring: Keyring file owned by repoctl.
        legacy_keyring: Deprecated monolithic keyring shared with other tools.
        legacy_fingerprint: Fingerprint of the vendor key in the legacy keyring.
        sources_list: Repository definition file owned by repoctl.
        workspace_root: Parent directory for scoped key workspaces.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    base_uris: Annotated[
        tuple[str, ...],
        Field(min_length=1, description="Repository root URIs"),
    ] = DEFAULT_BASE_URIS
    base_codename: Annotated[
        str | None,
        Field(description="Base codename (None = detect from host)"),
    ] = None
    source_key: Path = SOURCE_KEY_PATH
    target_keyring: Path = TARGET_KEYRING_PATH
    legacy_keyring: Path = LEGACY_KEYRING_PATH
    legacy_fingerprint: str = LEGACY_FINGERPRINT
    sources_list: Path = SOURCES_LIST_PATH
    workspace_root: Path = Field(default_factory=get_workspace_root)

    @field_validator("base_uris")
    @classmethod
    def validate_base_uris(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Reject empty or whitespace-containing URIs."""
        for uri in v:
            if not uri or uri != uri.strip() or any(c.isspace() for c in uri):
                msg = f"invalid base URI: {uri!r}"
                raise ValueError(msg)
        return v

    @field_validator("base_codename")
    @classmethod
    def validate_base_codename(cls, v: str | None) -> str | None:
        """Reject an explicitly empty codename."""
        if v is not None and not v.strip():
            msg = "base codename cannot be empty"
            raise ValueError(msg)
        return v

    @field_validator("legacy_fingerprint")
    @classmethod
    def validate_fingerprint(cls, v: str) -> str:
        """Normalize the fingerprint to 40 upper-case hex digits."""
        fingerprint = v.replace(" ", "").upper()
        if not _FINGERPRINT_RE.match(fingerprint):
            msg = f"invalid key fingerprint: {v!r}"
            raise ValueError(msg)
        return fingerprint


def split_uris(value: str, source: str) -> tuple[str, ...]:
    """Split a space-separated URI list.

    Args:
        value: Raw value, e.g. from the environment or the command line.
        source: Where the value came from, for error messages.

    Returns:
        Tuple of URIs in their original order.

    Raises:
        ConfigurationError: If the value contains no URIs.
    """
    uris = tuple(value.split())
    if not uris:
        msg = f"{source} is empty; expected a space-separated list of URIs"
        raise ConfigurationError(msg)
    return uris


def _read_config_file(path: Path) -> dict[str, Any]:
    """Read the config file and flatten its sections into RepoConfig fields.

    Raises:
        ConfigurationError: If the file cannot be parsed or has unknown sections.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML syntax in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read config file {path}: {e}") from e

    logger.debug("Loaded config file %s", path)

    fields: dict[str, Any] = {}
    for section, values in data.items():
        if section == "theme":
            # Console colors, read by repoctl.core.theme
            continue
        if section not in ("repository", "paths", "trust"):
            raise ConfigurationError(f"Unknown section [{section}] in {path}")
        if not isinstance(values, dict):
            raise ConfigurationError(f"[{section}] in {path} must be a table")
        fields.update(values)

    return fields


def load_config(
    path: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    base_uris: str | None = None,
) -> RepoConfig:
    """Build the effective configuration.

    Args:
        path: Config file to read. If None, uses /etc/repoctl/repoctl.toml.
            A missing file is not an error.
        env: Environment to read overrides from. If None, uses os.environ.
        base_uris: Space-separated URI list from the command line.

    Returns:
        Validated, immutable RepoConfig.

    Raises:
        ConfigurationError: If any layer holds an invalid value.
    """
    config_path = path or CONFIG_PATH
    environ = os.environ if env is None else env

    fields = _read_config_file(config_path)

    if ENV_BASE_URIS in environ:
        fields["base_uris"] = split_uris(environ[ENV_BASE_URIS], ENV_BASE_URIS)
    if ENV_BASE_CODENAME in environ:
        codename = environ[ENV_BASE_CODENAME].strip()
        if not codename:
            raise ConfigurationError(f"{ENV_BASE_CODENAME} is empty")
        fields["base_codename"] = codename

    if base_uris is not None:
        fields["base_uris"] = split_uris(base_uris, "--baseuri")

    try:
        return RepoConfig.model_validate(fields)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
