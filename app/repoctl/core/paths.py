"""Well-known host paths and built-in defaults for repoctl.

Every path here is only a default; the effective values are carried by
:class:`repoctl.core.config.RepoConfig`.
"""

import tempfile
from pathlib import Path

# Application identifier for directory and file naming
APP_NAME = "repoctl"

# System-wide configuration file
CONFIG_PATH = Path("/etc/repoctl/repoctl.toml")

# Packaged vendor public key (read-only input)
SOURCE_KEY_PATH = Path("/usr/share/repoctl/derivative-signing-key.asc")

# Keyring file owned by repoctl inside apt's trusted key directory
TARGET_KEYRING_PATH = Path("/etc/apt/trusted.gpg.d/derivative.gpg")

# Deprecated monolithic keyring shared with other tools
LEGACY_KEYRING_PATH = Path("/etc/apt/trusted.gpg")

# Fingerprint of the vendor key as it was stored in the legacy keyring
LEGACY_FINGERPRINT = "916B8D99C38EAF5E8ADC7A2A8D66066A2EEACCDA"

SOURCES_LIST_PATH = Path("/etc/apt/sources.list.d/derivative.list")

OS_RELEASE_PATH = Path("/etc/os-release")

# Clearnet and onion endpoints of the same repository
DEFAULT_BASE_URIS: tuple[str, ...] = (
    "https://deb.whonix.org",
    "tor+http://deb.dds6qkxpwdeubwucdiaord2xgbbeyds25rbsgr73tbfpqpt4a6vjwsyd.onion",
)

REPOSITORY_COMPONENT = "main"


def get_workspace_root() -> Path:
    """Get the directory under which scoped key workspaces are created.

    Returns:
        Path to the system temporary directory.
    """
    return Path(tempfile.gettempdir())
