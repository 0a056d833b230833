"""Generation of the repository's APT sources list file.

The file is owned entirely by repoctl: it is rewritten from scratch when
the repository is enabled and deleted when it is disabled.
"""

import logging

from repoctl.core.config import RepoConfig
from repoctl.core.errors import IntegrityError
from repoctl.core.paths import APP_NAME, REPOSITORY_COMPONENT
from repoctl.models.action import StepResult
from repoctl.utils.fileio import write_atomic

logger = logging.getLogger(__name__)

HEADER = f"""\
## This file has been generated by {APP_NAME}.
## Any manual changes will be lost the next time it runs.
##
## To disable the repository, run:
## sudo {APP_NAME} --disable
##
## To switch channels, run for example:
## sudo {APP_NAME} --enable --repository stable
"""

FOOTER = f"""\
## End of file generated by {APP_NAME}.
"""


class SourcesListGenerator:
    """Write, delete or leave alone the repository's sources list file."""

    def __init__(self, config: RepoConfig) -> None:
        self._config = config

    def render(self, codename: str) -> str:
        """Build the complete file content for a codename.

        One ``deb`` line per base URI, in configured order, each followed
        by its commented-out ``deb-src`` counterpart.

        Args:
            codename: Resolved repository codename.

        Returns:
            The file content.
        """
        blocks = [HEADER]
        for uri in self._config.base_uris:
            blocks.append(
                f"deb {uri} {codename} {REPOSITORY_COMPONENT}\n"
                f"#deb-src {uri} {codename} {REPOSITORY_COMPONENT}\n"
            )
        blocks.append(FOOTER)
        return "\n".join(blocks)

    def enable(self, codename: str) -> StepResult:
        """Regenerate the sources list file for a codename.

        Raises:
            IntegrityError: If the file cannot be written.
        """
        path = self._config.sources_list
        content = self.render(codename)
        try:
            write_atomic(path, content.encode("utf-8"))
        except OSError as e:
            msg = f"Cannot write sources list {path}: {e}"
            raise IntegrityError(msg) from e

        logger.info("Wrote %s for codename %s", path, codename)
        return StepResult("sources_enable", changed=True, message=f"wrote {path} ({codename})")

    def disable(self) -> StepResult:
        """Delete the sources list file if it exists.

        Raises:
            IntegrityError: If the file exists but cannot be deleted.
        """
        path = self._config.sources_list
        try:
            path.unlink()
        except FileNotFoundError:
            return StepResult("sources_disable", changed=False, message=f"{path} does not exist")
        except OSError as e:
            msg = f"Cannot delete sources list {path}: {e}"
            raise IntegrityError(msg) from e

        logger.info("Deleted %s", path)
        return StepResult("sources_disable", changed=True, message=f"deleted {path}")

    def refresh(self) -> StepResult:
        """Leave the sources list untouched; refreshing only concerns keys."""
        return StepResult("sources_refresh", changed=False, message="sources list unchanged")
