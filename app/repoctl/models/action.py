"""Action models for repository operations.

This module defines the actions an invocation can request and the
per-step results produced while carrying them out.
"""

from dataclasses import dataclass
from enum import Enum


class RepoAction(str, Enum):
    """Repository state transition requested by the operator.

    Attributes:
        ENABLE: Install the vendor key and write the sources list.
        DISABLE: Remove the vendor key (modern and legacy) and the sources list.
        REFRESH_KEYS: Re-export the vendor key and migrate away from the legacy keyring.
    """

    ENABLE = "enable"
    DISABLE = "disable"
    REFRESH_KEYS = "refresh-keys"


@dataclass(frozen=True, slots=True)
class RepoRequest:
    """A single transition request.

    Attributes:
        action: The requested action.
        codename: Resolved repository codename. Required for ENABLE only.
    """

    action: RepoAction
    codename: str | None = None

    def __post_init__(self) -> None:
        """Validate request data after initialization."""
        if self.action == RepoAction.ENABLE and not self.codename:
            msg = "A codename is required to enable the repository"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class StepResult:
    """Outcome of one reconciliation step.

    Attributes:
        step: Name of the operation, e.g. ``add_keys``.
        changed: Whether the host was modified.
        message: Human-readable description of what happened.
    """

    step: str
    changed: bool
    message: str = ""
