"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules. All host
paths are redirected into ``tmp_path`` and gpg is replaced by
:class:`FakeGpg`, which keeps just enough state to behave like the real
command for the operations repoctl uses.
"""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from repoctl.core.config import RepoConfig
from repoctl.utils.shell import CommandResult

LEGACY_FPR = "916B8D99C38EAF5E8ADC7A2A8D66066A2EEACCDA"
OTHER_FPR = "ABCDEF0123456789ABCDEF0123456789ABCDEF01"

SOURCE_KEY_TEXT = """-----BEGIN PGP PUBLIC KEY BLOCK-----

mQINBFLwLCUBEADtFAKEFAKEFAKEFAKEFAKEFAKEFAKE
-----END PGP PUBLIC KEY BLOCK-----
"""


def exported_form(key_bytes: bytes) -> bytes:
    """Return what FakeGpg exports after importing key_bytes."""
    return b"\x99\x02\x0d" + key_bytes


class FakeGpg:
    """Stand-in for the gpg binary, used as run_command side effect.

    Attributes:
        legacy: Fingerprints currently stored in the legacy keyring.
        calls: Argument lists of every invocation.
        fail_import: Make ``--import`` fail.
        fail_export: Make ``--export`` fail.
        fail_list: Make ``--list-keys`` fail.
        fail_delete: Make ``--delete-keys`` fail even for known keys.
    """

    def __init__(self) -> None:
        self.legacy: set[str] = set()
        self.calls: list[list[str]] = []
        self.imported: dict[str, bytes] = {}
        self.fail_import = False
        self.fail_export = False
        self.fail_list = False
        self.fail_delete = False

    def __call__(self, args: list[str], **kwargs: object) -> CommandResult:
        self.calls.append(list(args))
        homedir = args[args.index("--homedir") + 1]

        if "--import" in args:
            if self.fail_import:
                return self._result(args, 2, stderr="gpg: no valid OpenPGP data found.")
            key_file = Path(args[args.index("--import") + 1])
            self.imported[homedir] = key_file.read_bytes()
            return self._result(args, 0)

        if "--export" in args:
            if self.fail_export:
                return self._result(args, 2, stderr="gpg: export failed")
            output = Path(args[args.index("--output") + 1])
            data = self.imported.get(homedir)
            output.write_bytes(exported_form(data) if data is not None else b"")
            return self._result(args, 0)

        if "--list-keys" in args:
            if self.fail_list:
                return self._result(args, 2, stderr="gpg: keyblock resource: invalid")
            lines = []
            for fpr in sorted(self.legacy):
                lines.append(f"pub:-:4096:1:{fpr[-16:]}:1388334117:::-:::scSC::::::23::0:")
                lines.append(f"fpr:::::::::{fpr}:")
                lines.append("uid:-::::1388334117::HASH::Vendor Signing Key::::::::::0:")
            return self._result(args, 0, stdout="\n".join(lines) + "\n")

        if "--delete-keys" in args:
            fpr = args[-1]
            if self.fail_delete or fpr not in self.legacy:
                return self._result(args, 2, stderr=f'gpg: key "{fpr}" not found: Not found')
            self.legacy.discard(fpr)
            return self._result(args, 0)

        raise AssertionError(f"unexpected gpg call: {args}")

    def calls_with(self, flag: str) -> list[list[str]]:
        """Return the recorded calls containing flag."""
        return [call for call in self.calls if flag in call]

    @staticmethod
    def _result(
        args: list[str], returncode: int, stdout: str = "", stderr: str = ""
    ) -> CommandResult:
        return CommandResult(args=tuple(args), stdout=stdout, stderr=stderr, returncode=returncode)


@pytest.fixture
def fake_gpg() -> Iterator[FakeGpg]:
    """Patch gpg execution with a FakeGpg instance."""
    fake = FakeGpg()
    with patch("repoctl.keys.gpg.run_command", side_effect=fake):
        yield fake


@pytest.fixture
def repo_config(tmp_path: Path) -> RepoConfig:
    """Configuration with every host path inside tmp_path."""
    source_key = tmp_path / "usr" / "share" / "repoctl" / "signing-key.asc"
    source_key.parent.mkdir(parents=True)
    source_key.write_text(SOURCE_KEY_TEXT, encoding="utf-8")

    workspace_root = tmp_path / "tmp"
    workspace_root.mkdir()

    return RepoConfig(
        base_uris=("http://a.example", "tor+http://b.onion"),
        base_codename="bookworm",
        source_key=source_key,
        target_keyring=tmp_path / "etc" / "apt" / "trusted.gpg.d" / "derivative.gpg",
        legacy_keyring=tmp_path / "etc" / "apt" / "trusted.gpg",
        legacy_fingerprint=LEGACY_FPR,
        sources_list=tmp_path / "etc" / "apt" / "sources.list.d" / "derivative.list",
        workspace_root=workspace_root,
    )


@pytest.fixture
def legacy_keyring(repo_config: RepoConfig, fake_gpg: FakeGpg) -> Path:
    """Create a legacy keyring holding the vendor key and another owner's key."""
    repo_config.legacy_keyring.parent.mkdir(parents=True, exist_ok=True)
    repo_config.legacy_keyring.write_bytes(b"\x99legacy-keyring")
    fake_gpg.legacy.update({LEGACY_FPR, OTHER_FPR})
    return repo_config.legacy_keyring


@pytest.fixture
def expected_keyring(repo_config: RepoConfig) -> bytes:
    """Keyring content expected after installing the source key."""
    return exported_form(repo_config.source_key.read_bytes())
