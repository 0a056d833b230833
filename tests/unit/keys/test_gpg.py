"""Unit tests for the gpg command wrapper."""

from pathlib import Path
from unittest.mock import patch

import pytest
from conftest import LEGACY_FPR, OTHER_FPR, FakeGpg
from repoctl.core.errors import KeyOperationError
from repoctl.keys.gpg import GpgHome, parse_primary_fingerprints
from repoctl.utils.shell import CommandResult

SAMPLE_COLON_OUTPUT = f"""\
tru::1:1700000000:0:3:1:5
pub:-:4096:1:8D66066A2EEACCDA:1388334117:::-:::scSC::::::23::0:
fpr:::::::::{LEGACY_FPR}:
uid:-::::1388334117::HASH::Vendor Signing Key::::::::::0:
sub:-:4096:1:1111222233334444:1388334117::::::e::::::23:
fpr:::::::::1111111111111111111111111111111111111111:
pub:-:2048:1:89ABCDEF01234567:1200000000:::-:::scSC::::::23::0:
fpr:::::::::{OTHER_FPR.lower()}:
"""


class TestParsePrimaryFingerprints:
    """Tests for parse_primary_fingerprints()."""

    def test_returns_primary_keys_only(self) -> None:
        """Subkey fingerprints are not reported."""
        result = parse_primary_fingerprints(SAMPLE_COLON_OUTPUT)

        assert result == {LEGACY_FPR, OTHER_FPR}

    def test_empty_output(self) -> None:
        """An empty listing has no fingerprints."""
        assert parse_primary_fingerprints("") == set()


class TestGpgHome:
    """Tests for GpgHome commands."""

    def test_commands_are_confined_to_homedir(self, tmp_path: Path, fake_gpg: FakeGpg) -> None:
        """Every command passes --homedir and runs in batch mode."""
        key = tmp_path / "key.asc"
        key.write_bytes(b"key")
        gpg = GpgHome(tmp_path)

        gpg.import_key(key)
        gpg.export_keys()

        for call in fake_gpg.calls:
            assert call[:3] == ["gpg", "--homedir", str(tmp_path)]
            assert "--batch" in call

    def test_export_returns_keyring(self, tmp_path: Path, fake_gpg: FakeGpg) -> None:
        """export_keys() returns the bytes written by gpg --export."""
        key = tmp_path / "key.asc"
        key.write_bytes(b"key")
        gpg = GpgHome(tmp_path)

        gpg.import_key(key)

        assert gpg.export_keys() == b"\x99\x02\x0dkey"

    def test_import_failure_raises(self, tmp_path: Path, fake_gpg: FakeGpg) -> None:
        """A failing import raises KeyOperationError with command details."""
        fake_gpg.fail_import = True

        with pytest.raises(KeyOperationError, match="no valid OpenPGP data") as excinfo:
            GpgHome(tmp_path).import_key(tmp_path / "key.asc")

        assert excinfo.value.returncode == 2
        assert "--import" in excinfo.value.command

    def test_empty_export_raises(self, tmp_path: Path, fake_gpg: FakeGpg) -> None:
        """Exporting an empty keyring is an error."""
        with pytest.raises(KeyOperationError, match="empty keyring"):
            GpgHome(tmp_path).export_keys()

    def test_list_uses_keyring_read_only(self, tmp_path: Path, fake_gpg: FakeGpg) -> None:
        """list_fingerprints() reads the given keyring without the default one."""
        keyring = tmp_path / "trusted.gpg"
        fake_gpg.legacy.add(LEGACY_FPR)

        result = GpgHome(tmp_path).list_fingerprints(keyring)

        assert result == {LEGACY_FPR}
        call = fake_gpg.calls_with("--list-keys")[0]
        assert "--no-default-keyring" in call
        assert call[call.index("--keyring") + 1] == str(keyring)
        assert "--with-colons" in call
        assert "--with-fingerprint" in call

    def test_delete_returns_raw_result(self, tmp_path: Path, fake_gpg: FakeGpg) -> None:
        """delete_key() reports failure through the result, not an exception."""
        result = GpgHome(tmp_path).delete_key(tmp_path / "trusted.gpg", LEGACY_FPR)

        assert result.success is False

    def test_missing_gpg_binary_raises(self, tmp_path: Path) -> None:
        """A missing gpg executable becomes a KeyOperationError."""
        with (
            patch("repoctl.keys.gpg.run_command", side_effect=FileNotFoundError("gpg")),
            pytest.raises(KeyOperationError, match="Cannot execute gpg"),
        ):
            GpgHome(tmp_path).import_key(tmp_path / "key.asc")

    def test_runs_with_c_locale(self, tmp_path: Path) -> None:
        """gpg runs with LC_ALL=C so its output is not localized."""
        with patch("repoctl.keys.gpg.run_command") as mock_run:
            mock_run.return_value = CommandResult(args=(), stdout="", stderr="", returncode=0)
            GpgHome(tmp_path).list_fingerprints(tmp_path / "trusted.gpg")

        assert mock_run.call_args.kwargs["env"]["LC_ALL"] == "C"
