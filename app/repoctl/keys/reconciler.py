"""Reconciliation of the vendor key in apt's trusted key store.

The keyring file repoctl owns is either absent or holds exactly the
gpg-exported form of the packaged vendor key. It is always replaced
wholesale, never merged. The legacy entry in the shared monolithic
keyring is purged on enable, before every state-changing removal and
during key refreshes.
"""

import logging
import subprocess

from repoctl.core.config import RepoConfig
from repoctl.core.errors import IntegrityError, RepoctlError
from repoctl.keys.gpg import GpgHome
from repoctl.keys.legacy import LegacyTrustDetector
from repoctl.keys.workspace import key_workspace
from repoctl.models.action import StepResult
from repoctl.utils.fileio import write_atomic

logger = logging.getLogger(__name__)


class KeyStoreReconciler:
    """Bring the trusted key store to the requested state.

    Attributes:
        config: Effective configuration.
        detector: Legacy keyring detector.

    Example:
        >>> reconciler = KeyStoreReconciler(config)
        >>> results = reconciler.refresh_keys()
        >>> any(r.changed for r in results)
        True
    """

    def __init__(self, config: RepoConfig, detector: LegacyTrustDetector | None = None) -> None:
        self._config = config
        self._detector = detector or LegacyTrustDetector(config)

    @property
    def config(self) -> RepoConfig:
        """Return the configuration in use."""
        return self._config

    @property
    def detector(self) -> LegacyTrustDetector:
        """Return the legacy keyring detector."""
        return self._detector

    def remove_legacy(self) -> StepResult:
        """Delete the vendor key from the legacy keyring, if possible.

        Only the entry matching the legacy fingerprint is touched. Failure
        is logged and ignored: the legacy keyring may be read-only or
        missing, or the entry may already be gone, and a leftover legacy
        entry does not affect the keyring file repoctl owns.

        Returns:
            StepResult, changed only if gpg reported a successful deletion.
        """
        keyring = self._config.legacy_keyring
        fingerprint = self._config.legacy_fingerprint

        if not keyring.is_file():
            return StepResult("remove_legacy", changed=False, message=f"{keyring} does not exist")

        try:
            with key_workspace(self._config.workspace_root) as home:
                result = GpgHome(home).delete_key(keyring, fingerprint)
        except (RepoctlError, OSError, subprocess.SubprocessError) as e:
            logger.warning("Ignoring failure to remove legacy key %s: %s", fingerprint, e)
            return StepResult("remove_legacy", changed=False, message=f"removal failed: {e}")

        if not result.success:
            logger.debug(
                "Legacy key %s not removed from %s (exit %d): %s",
                fingerprint,
                keyring,
                result.returncode,
                result.stderr.strip(),
            )
            return StepResult(
                "remove_legacy", changed=False, message=f"{fingerprint} not in {keyring}"
            )

        logger.info("Removed legacy key %s from %s", fingerprint, keyring)
        return StepResult("remove_legacy", changed=True, message=f"removed {fingerprint}")

    def add_keys(self) -> StepResult:
        """Install the vendor key as the owned keyring file.

        The packaged key is imported into a throwaway keyring, the whole
        keyring is exported and the export replaces the target file.

        Raises:
            KeyOperationError: If import or export fails.
            IntegrityError: If the target file cannot be written or is missing afterwards.
            WorkspaceError: If no key workspace can be created.
        """
        target = self._config.target_keyring
        source = self._config.source_key

        with key_workspace(self._config.workspace_root) as home:
            gpg = GpgHome(home)
            gpg.import_key(source)
            data = gpg.export_keys()
            try:
                write_atomic(target, data)
            except OSError as e:
                msg = f"Cannot write keyring {target}: {e}"
                raise IntegrityError(msg) from e

        if not target.is_file():
            msg = f"Keyring {target} does not exist after writing it"
            raise IntegrityError(msg)

        logger.info("Installed %s from %s", target, source)
        return StepResult("add_keys", changed=True, message=f"wrote {target}")

    def remove_keys(self) -> list[StepResult]:
        """Remove the vendor key from the trusted key store.

        The legacy entry is purged first if present, then the owned
        keyring file is deleted. Nothing to remove is not an error.

        Raises:
            IntegrityError: If the keyring file still exists after deletion.
            KeyOperationError: If the legacy keyring cannot be inspected.
        """
        results: list[StepResult] = []

        if self._detector.is_present():
            results.append(self.remove_legacy())

        target = self._config.target_keyring
        if not (target.exists() or target.is_symlink()):
            results.append(
                StepResult("remove_keys", changed=False, message=f"{target} does not exist")
            )
            return results

        try:
            target.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            msg = f"Cannot delete keyring {target}: {e}"
            raise IntegrityError(msg) from e

        if target.exists() or target.is_symlink():
            msg = f"Keyring {target} still exists after deleting it"
            raise IntegrityError(msg)

        logger.info("Deleted %s", target)
        results.append(StepResult("remove_keys", changed=True, message=f"deleted {target}"))
        return results

    def refresh_keys(self) -> list[StepResult]:
        """Re-install the vendor key and migrate off the legacy keyring.

        A host that only had the legacy entry gets the owned keyring file
        once, when the legacy entry is purged. A host that already has the
        keyring file gets it rewritten from the packaged key. A host with
        neither is left alone.

        Raises:
            KeyOperationError: If the legacy check, import or export fails.
            IntegrityError: If the keyring file cannot be written.
        """
        results: list[StepResult] = []
        migrate = False

        if self._detector.is_present():
            results.append(self.remove_legacy())
            migrate = True

        target = self._config.target_keyring
        if target.exists() or migrate:
            results.append(self.add_keys())
        else:
            results.append(
                StepResult("refresh_keys", changed=False, message="repository keys not installed")
            )

        return results
