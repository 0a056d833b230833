"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console

from repoctl.core.theme import ThemeColors, bundled_colors


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances, started with the bundled palette
_bundled_theme = bundled_colors().to_rich()
console = Console(theme=_bundled_theme, color_system=_detect_color_system())
err_console = Console(theme=_bundled_theme, stderr=True, color_system=_detect_color_system())


def apply_theme(colors: ThemeColors) -> None:
    """Switch both shared consoles to another palette."""
    theme = colors.to_rich()
    console.push_theme(theme)
    err_console.push_theme(theme)


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
