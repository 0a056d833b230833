"""Thin wrapper around the gpg command line.

All commands run in batch mode against an isolated home directory. Key
listings use the machine-readable colon format together with long key
IDs and fingerprints.
"""

import logging
import os
from pathlib import Path

from repoctl.core.errors import KeyOperationError
from repoctl.utils.shell import CommandResult, run_command

logger = logging.getLogger(__name__)


class GpgHome:
    """gpg operations confined to one workspace directory.

    Attributes:
        homedir: The workspace used as gpg home directory.

    Example:
        >>> with key_workspace(root) as home:
        ...     gpg = GpgHome(home)
        ...     gpg.import_key(Path("/usr/share/vendor/key.asc"))
        ...     data = gpg.export_keys()
    """

    _GPG_TIMEOUT: float = 60.0
    _EXPORT_NAME = "export.gpg"

    def __init__(self, homedir: Path) -> None:
        self._homedir = homedir

    @property
    def homedir(self) -> Path:
        """Return the gpg home directory."""
        return self._homedir

    def _base_args(self, keyring: Path | None = None) -> list[str]:
        args = [
            "gpg",
            "--homedir",
            str(self._homedir),
            "--batch",
            "--no-tty",
            "--no-options",
        ]
        if keyring is not None:
            args.extend(["--no-default-keyring", "--keyring", str(keyring.absolute())])
        return args

    def _run(self, args: list[str]) -> CommandResult:
        logger.debug("Running: %s", " ".join(args))
        env = {**os.environ, "LC_ALL": "C"}
        try:
            return run_command(args, timeout=self._GPG_TIMEOUT, env=env)
        except OSError as e:
            msg = f"Cannot execute gpg: {e}"
            raise KeyOperationError(msg, command=" ".join(args), returncode=-1) from e

    def _run_checked(self, args: list[str], what: str) -> CommandResult:
        result = self._run(args)
        if not result.success:
            stderr = result.stderr.strip()
            msg = f"{what} failed: {stderr or 'gpg exited with status ' + str(result.returncode)}"
            raise KeyOperationError(
                msg,
                command=result.command_line,
                returncode=result.returncode,
                stderr=stderr,
            )
        return result

    def import_key(self, key_file: Path) -> None:
        """Import a public key file into the workspace keyring.

        Raises:
            KeyOperationError: If gpg cannot import the key.
        """
        self._run_checked([*self._base_args(), "--import", str(key_file)], f"Importing {key_file}")

    def export_keys(self) -> bytes:
        """Export every key in the workspace keyring in binary form.

        Returns:
            The exported OpenPGP key material.

        Raises:
            KeyOperationError: If gpg fails or produces no output.
        """
        output = self._homedir / self._EXPORT_NAME
        args = [*self._base_args(), "--yes", "--output", str(output), "--export"]
        result = self._run_checked(args, "Exporting keys")
        try:
            data = output.read_bytes()
        except OSError as e:
            msg = f"Exporting keys produced no output file: {e}"
            raise KeyOperationError(msg, command=result.command_line, returncode=0) from e
        if not data:
            msg = "Exporting keys produced an empty keyring"
            raise KeyOperationError(msg, command=result.command_line, returncode=0)
        return data

    def list_fingerprints(self, keyring: Path) -> set[str]:
        """List the fingerprints of the primary keys in a keyring file.

        The keyring is only read.

        Args:
            keyring: Keyring file to inspect.

        Returns:
            Upper-case fingerprints of all primary keys.

        Raises:
            KeyOperationError: If gpg cannot read the keyring.
        """
        args = [
            *self._base_args(keyring),
            "--with-colons",
            "--keyid-format",
            "long",
            "--with-fingerprint",
            "--list-keys",
        ]
        result = self._run_checked(args, f"Listing keys in {keyring}")
        return parse_primary_fingerprints(result.stdout)

    def delete_key(self, keyring: Path, fingerprint: str) -> CommandResult:
        """Delete one public key from a keyring file.

        The raw result is returned so callers decide whether failure matters.

        Args:
            keyring: Keyring file to modify.
            fingerprint: Full fingerprint of the key to delete.
        """
        args = [*self._base_args(keyring), "--yes", "--delete-keys", fingerprint]
        return self._run(args)


def parse_primary_fingerprints(colon_output: str) -> set[str]:
    """Extract primary key fingerprints from ``--with-colons`` output.

    A ``fpr`` record belongs to the ``pub`` or ``sub`` record preceding it;
    only those following a ``pub`` record are returned.

    Args:
        colon_output: stdout of ``gpg --with-colons --list-keys``.

    Returns:
        Set of upper-case fingerprints.
    """
    fingerprints: set[str] = set()
    current = ""
    for line in colon_output.splitlines():
        fields = line.split(":")
        record = fields[0]
        if record in ("pub", "sub", "sec", "ssb"):
            current = record
        elif record == "fpr" and current == "pub" and len(fields) > 9 and fields[9]:
            fingerprints.add(fields[9].upper())
    return fingerprints
