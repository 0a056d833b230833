"""Scoped key workspaces.

Every gpg operation runs with ``--homedir`` pointing at a freshly created,
owner-only directory so that neither root's own keyring nor the system
keyrings are used implicitly. A workspace lives for exactly one logical
operation and is removed afterwards, on error paths too.
"""

import logging
import os
import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from repoctl.core.errors import WorkspaceError
from repoctl.core.paths import APP_NAME

logger = logging.getLogger(__name__)

WORKSPACE_MODE = 0o700


def workspace_path(root: Path) -> Path:
    """Return the workspace location for this process under root."""
    return root / f"{APP_NAME}-keys-{os.getpid()}"


def acquire(root: Path) -> Path:
    """Create a new, empty, owner-only workspace directory.

    A stale directory left at the same location (for example by an
    interrupted earlier run that reused the pid) is removed first.

    Args:
        root: Parent directory for the workspace.

    Returns:
        Path to the created workspace.

    Raises:
        WorkspaceError: If the directory cannot be prepared.
    """
    path = workspace_path(root)
    try:
        if path.is_symlink() or path.is_file():
            path.unlink()
        elif path.exists():
            logger.debug("Removing stale workspace %s", path)
            shutil.rmtree(path)
        path.mkdir(mode=WORKSPACE_MODE, parents=False)
        # mkdir() honours the umask, chmod() does not
        os.chmod(path, WORKSPACE_MODE)
    except OSError as e:
        msg = f"Cannot create key workspace {path}: {e}"
        raise WorkspaceError(msg) from e

    logger.debug("Acquired key workspace %s", path)
    return path


def release(path: Path) -> None:
    """Remove a workspace directory.

    Failure is only logged: the workspace holds nothing but a copy of
    public key material and lives outside the trusted key directory.

    Args:
        path: Workspace returned by :func:`acquire`.
    """
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        return
    except OSError as e:
        logger.warning("Could not remove key workspace %s: %s", path, e)
        return
    logger.debug("Released key workspace %s", path)


@contextmanager
def key_workspace(root: Path) -> Iterator[Path]:
    """Acquire a workspace for the duration of a with-block.

    Example:
        >>> with key_workspace(Path("/tmp")) as home:
        ...     GpgHome(home).import_key(Path("vendor.asc"))
    """
    path = acquire(root)
    try:
        yield path
    finally:
        release(path)
