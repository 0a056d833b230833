"""Detection of the vendor key in the deprecated monolithic keyring."""

import logging

from repoctl.core.config import RepoConfig
from repoctl.keys.gpg import GpgHome
from repoctl.keys.workspace import key_workspace

logger = logging.getLogger(__name__)


class LegacyTrustDetector:
    """Check whether the legacy keyring still trusts the vendor key.

    The legacy keyring is shared with other tools and is never modified
    here.
    """

    def __init__(self, config: RepoConfig) -> None:
        self._config = config

    def is_present(self) -> bool:
        """Return True if the legacy fingerprint is in the legacy keyring.

        A missing or empty legacy keyring means the entry is absent.

        Raises:
            KeyOperationError: If the keyring exists but cannot be listed.
            WorkspaceError: If no key workspace can be created.
        """
        keyring = self._config.legacy_keyring
        fingerprint = self._config.legacy_fingerprint

        try:
            if keyring.stat().st_size == 0:
                logger.debug("Legacy keyring %s is empty", keyring)
                return False
        except FileNotFoundError:
            logger.debug("Legacy keyring %s does not exist", keyring)
            return False

        with key_workspace(self._config.workspace_root) as home:
            fingerprints = GpgHome(home).list_fingerprints(keyring)

        present = fingerprint in fingerprints
        logger.debug("Legacy key %s present in %s: %s", fingerprint, keyring, present)
        return present
