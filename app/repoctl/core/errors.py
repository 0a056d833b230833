"""Exception hierarchy for repoctl.

Configuration errors are raised before anything on the host is touched.
Integrity errors mean the trusted key store may now be inconsistent and
must be surfaced to the operator; the operation is safe to re-run.
"""


class RepoctlError(Exception):
    """Base exception for all repoctl errors."""


class ConfigurationError(RepoctlError):
    """Raised for invalid or missing options, settings or channel names."""


class WorkspaceError(RepoctlError):
    """Raised when a scoped key workspace cannot be created."""


class IntegrityError(RepoctlError):
    """Raised when a trust store post-condition does not hold."""


class KeyOperationError(IntegrityError):
    """Raised when a gpg invocation fails.

    Attributes:
        command: The command line that failed.
        returncode: Exit status of the command.
        stderr: Error output of the command.
    """

    def __init__(self, message: str, command: str, returncode: int, stderr: str = "") -> None:
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
