"""Detection of the host distribution codename."""

import logging
import shlex
from pathlib import Path

from repoctl.core.errors import ConfigurationError
from repoctl.core.paths import OS_RELEASE_PATH
from repoctl.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)


def read_os_release(path: Path = OS_RELEASE_PATH) -> dict[str, str]:
    """Parse an os-release file into a dictionary.

    Lines are ``KEY=value`` pairs; values may be shell-quoted. Comments,
    blank lines and malformed lines are skipped.

    Args:
        path: Path to the os-release file.

    Returns:
        Mapping of keys to unquoted values. Empty if the file is missing.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as e:
        logger.warning("Cannot read %s: %s", path, e)
        return {}

    fields: dict[str, str] = {}
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, raw_value = line.partition("=")
        try:
            parts = shlex.split(raw_value)
        except ValueError:
            logger.debug("Skipping malformed os-release line: %s", line)
            continue
        fields[key.strip()] = parts[0] if parts else ""
    return fields


def detect_base_codename(os_release: Path = OS_RELEASE_PATH) -> str:
    """Detect the base distribution codename of this host.

    Tries ``VERSION_CODENAME`` from os-release first, then falls back to
    ``lsb_release --short --codename``.

    Args:
        os_release: Path to the os-release file.

    Returns:
        The codename, e.g. ``bookworm``.

    Raises:
        ConfigurationError: If no codename can be determined.
    """
    codename = read_os_release(os_release).get("VERSION_CODENAME", "").strip()
    if codename:
        logger.debug("Base codename from %s: %s", os_release, codename)
        return codename

    if command_exists("lsb_release"):
        try:
            result = run_command(["lsb_release", "--short", "--codename"], timeout=10.0)
        except OSError as e:
            logger.debug("lsb_release failed: %s", e)
        else:
            codename = result.stdout.strip()
            if result.success and codename and codename != "n/a":
                logger.debug("Base codename from lsb_release: %s", codename)
                return codename

    msg = (
        "Cannot detect the base distribution codename. "
        "Set REPOCTL_BASE_CODENAME or use --codename."
    )
    raise ConfigurationError(msg)
