"""Trusted key store management.

This package owns every interaction with gpg: the throwaway keyring
workspace, detection of the deprecated monolithic keyring entry and the
reconciliation of the keyring file repoctl owns.
"""

from repoctl.keys.legacy import LegacyTrustDetector
from repoctl.keys.reconciler import KeyStoreReconciler
from repoctl.keys.workspace import acquire, key_workspace, release

__all__ = ["KeyStoreReconciler", "LegacyTrustDetector", "acquire", "key_workspace", "release"]
