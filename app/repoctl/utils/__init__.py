"""Utility modules for repoctl.

This module exports commonly used utility functions.
"""

from repoctl.utils.fileio import sync_filesystems, write_atomic
from repoctl.utils.formatting import (
    apply_theme,
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from repoctl.utils.shell import CommandResult, command_exists, run_command

__all__ = [
    "CommandResult",
    "apply_theme",
    "command_exists",
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
    "sync_filesystems",
    "write_atomic",
]
