"""Durable file writes for files owned by repoctl."""

import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile

logger = logging.getLogger(__name__)


def write_atomic(path: Path, data: bytes, mode: int = 0o644) -> Path:
    """Replace a file's content atomically.

    The data is written to a temporary file in the target directory,
    fsynced, given its final permissions and then moved into place with
    os.replace(). A reader never observes a half-written file. The
    temporary file is cleaned up on failure.

    Args:
        path: Destination file.
        data: Complete new content.
        mode: Permission bits for the resulting file.

    Returns:
        The destination path.

    Raises:
        OSError: If the file cannot be written or moved into place.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except OSError:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise

    logger.debug("Wrote %d bytes to %s", len(data), path)
    return path


def sync_filesystems() -> None:
    """Flush all pending filesystem writes to disk."""
    logger.debug("Syncing filesystems")
    os.sync()
