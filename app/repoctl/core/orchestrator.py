"""Sequencing of key store and sources list changes per action.

Each invocation is one transition: ``enable``, ``disable`` or
``refresh-keys``. Trust material is changed first, the sources list
second, and everything is flushed to disk before success is reported.
A legacy entry for the vendor key is purged by every transition.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from repoctl.keys.reconciler import KeyStoreReconciler
from repoctl.models.action import RepoAction, RepoRequest, StepResult
from repoctl.sources.generator import SourcesListGenerator
from repoctl.utils.fileio import sync_filesystems

if TYPE_CHECKING:
    from repoctl.core.config import RepoConfig

logger = logging.getLogger(__name__)


class Orchestrator:
    """Carry out a single repository transition request.

    Example:
        >>> orchestrator = Orchestrator(config)
        >>> results = orchestrator.run(RepoRequest(RepoAction.ENABLE, "bookworm"))
    """

    def __init__(
        self,
        config: RepoConfig,
        reconciler: KeyStoreReconciler | None = None,
        generator: SourcesListGenerator | None = None,
        sync: Callable[[], None] | None = None,
    ) -> None:
        self._config = config
        self._reconciler = reconciler or KeyStoreReconciler(config)
        self._generator = generator or SourcesListGenerator(config)
        self._sync = sync or sync_filesystems

    def run(self, request: RepoRequest) -> list[StepResult]:
        """Execute the request.

        Args:
            request: The action to perform, with its codename for ENABLE.

        Returns:
            Results of every step, in execution order.

        Raises:
            RepoctlError: If any integrity-critical step fails. Steps that
                already completed are not rolled back; re-running is safe.
        """
        logger.info("Running %s", request.action.value)
        results: list[StepResult] = []

        if request.action == RepoAction.ENABLE:
            if request.codename is None:
                msg = "A codename is required to enable the repository"
                raise ValueError(msg)
            if self._reconciler.detector.is_present():
                results.append(self._reconciler.remove_legacy())
            results.append(self._reconciler.add_keys())
            results.append(self._generator.enable(request.codename))
        elif request.action == RepoAction.DISABLE:
            results.append(self._reconciler.remove_legacy())
            results.extend(self._reconciler.remove_keys())
            results.append(self._generator.disable())
        elif request.action == RepoAction.REFRESH_KEYS:
            results.extend(self._reconciler.refresh_keys())
            results.append(self._generator.refresh())
        else:  # pragma: no cover
            msg = f"Unsupported action: {request.action}"
            raise ValueError(msg)

        self._sync()
        logger.info("%s finished: %d step(s)", request.action.value, len(results))
        return results
