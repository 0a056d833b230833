"""Data models for repoctl.

This package contains the action and result types shared by the
key store, sources list and orchestration layers.
"""

from repoctl.models.action import RepoAction, RepoRequest, StepResult

__all__ = ["RepoAction", "RepoRequest", "StepResult"]
