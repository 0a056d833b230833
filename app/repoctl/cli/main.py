"""Main CLI application entry point.

Defines the Typer application, validates the requested action and maps
errors to exit codes:

- 0: success
- 1: key store or sources list operation failed, or unexpected error
- 2: invalid options or configuration (nothing was changed)
"""

import logging
import os
import shlex
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from repoctl import __version__
from repoctl.cli.display import show_results
from repoctl.core.config import RepoConfig, load_config
from repoctl.core.errors import ConfigurationError, KeyOperationError, RepoctlError
from repoctl.core.orchestrator import Orchestrator
from repoctl.core.osinfo import detect_base_codename
from repoctl.core.paths import CONFIG_PATH
from repoctl.core.theme import load_theme_colors
from repoctl.models.action import RepoAction, RepoRequest
from repoctl.sources.channel import Channel, resolve_codename
from repoctl.utils.formatting import (
    apply_theme,
    err_console,
    print_error,
    print_info,
    print_warning,
)

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2

app = typer.Typer(
    name="repoctl",
    help="Enable, disable or refresh the derivative APT repository and its signing key.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"repoctl version {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Send log records to stderr through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False, show_time=verbose)],
        force=True,
    )


def _select_action(enable: bool, disable: bool, refresh_keys: bool) -> RepoAction:
    """Return the single selected action.

    Raises:
        ConfigurationError: If zero or several actions are selected.
    """
    selected = [
        action
        for action, flag in (
            (RepoAction.ENABLE, enable),
            (RepoAction.DISABLE, disable),
            (RepoAction.REFRESH_KEYS, refresh_keys),
        )
        if flag
    ]
    if len(selected) != 1:
        msg = "Exactly one of --enable, --disable or --refresh-keys is required"
        raise ConfigurationError(msg)
    return selected[0]


def _resolve_request_codename(
    config: RepoConfig,
    codename: str | None,
    repository: str | None,
) -> str:
    """Determine the codename for --enable.

    Raises:
        ConfigurationError: If neither or both options are given, or a value is invalid.
    """
    if codename is not None and repository is not None:
        raise ConfigurationError("--codename and --repository are mutually exclusive")

    if codename is not None:
        codename = codename.strip()
        if not codename:
            raise ConfigurationError("--codename cannot be empty")
        return codename

    if repository is None:
        raise ConfigurationError("--enable requires --codename or --repository")
    if not repository.strip():
        raise ConfigurationError("--repository cannot be empty")

    base_codename = config.base_codename or detect_base_codename()
    return resolve_codename(repository.strip(), base_codename)


def build_request(
    action: RepoAction,
    config: RepoConfig,
    codename: str | None,
    repository: str | None,
) -> RepoRequest:
    """Validate the options for an action and build the request.

    Raises:
        ConfigurationError: If the options are invalid for the action.
    """
    if action == RepoAction.ENABLE:
        return RepoRequest(action, _resolve_request_codename(config, codename, repository))

    if codename is not None or repository is not None:
        print_warning(f"--codename and --repository are ignored with --{action.value}")
    return RepoRequest(action)


def rerun_command(request: RepoRequest, baseuri: str | None, config_path: Path | None) -> str:
    """Return the command line that repeats this request."""
    args = ["sudo", "repoctl", f"--{request.action.value}"]
    if request.codename is not None:
        args += ["--codename", request.codename]
    if baseuri is not None:
        args += ["--baseuri", baseuri]
    if config_path is not None:
        args += ["--config", str(config_path)]
    return shlex.join(args)


def _require_root() -> None:
    """Raise ConfigurationError unless running as root."""
    if os.geteuid() != 0:
        raise ConfigurationError("This command must be run as root (try sudo)")


def _failed_command(exc: BaseException) -> str | None:
    """Return the command line carried by a subprocess error, if any."""
    cmd = getattr(exc, "cmd", None)
    if isinstance(cmd, (list, tuple)):
        return " ".join(str(part) for part in cmd)
    if isinstance(cmd, str):
        return cmd
    return None


def _report_unexpected(exc: BaseException, command: str | None = None) -> None:
    """Print the diagnostic for an error that should never happen."""
    print_error(f"Unexpected error: {exc}")
    if command:
        print_info(f"Failed command: {command}")
    print_info("Re-run with --verbose and report this bug, including the output.")


@app.command()
def main(
    enable: Annotated[
        bool,
        typer.Option("--enable", help="Install the signing key and write the sources list."),
    ] = False,
    disable: Annotated[
        bool,
        typer.Option("--disable", help="Remove the signing key and the sources list."),
    ] = False,
    refresh_keys: Annotated[
        bool,
        typer.Option(
            "--refresh-keys",
            help="Re-install the signing key and migrate off the legacy keyring.",
        ),
    ] = False,
    codename: Annotated[
        str | None,
        typer.Option("--codename", help="Repository codename to use with --enable."),
    ] = None,
    repository: Annotated[
        str | None,
        typer.Option(
            "--repository",
            help=(
                "Repository channel to use with --enable: "
                + ", ".join(c.value for c in Channel)
                + "."
            ),
        ),
    ] = None,
    baseuri: Annotated[
        str | None,
        typer.Option("--baseuri", help="Space-separated list of repository base URIs."),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help=f"Configuration file (default: {CONFIG_PATH})."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Manage the derivative APT repository and its signing key.

    Examples:
        sudo repoctl --enable --repository stable
        sudo repoctl --enable --codename bookworm-testers
        sudo repoctl --disable
        sudo repoctl --refresh-keys
    """
    _configure_logging(verbose)
    apply_theme(load_theme_colors(config_path or CONFIG_PATH))

    try:
        action = _select_action(enable, disable, refresh_keys)
        config = load_config(config_path, base_uris=baseuri)
        request = build_request(action, config, codename, repository)
        _require_root()
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from e

    rerun = rerun_command(request, baseuri, config_path)
    try:
        results = Orchestrator(config).run(request)
    except KeyOperationError as e:
        print_error(str(e))
        print_info(f"Failed command: {e.command} (exit status {e.returncode})")
        print_info(f"The operation is safe to re-run: {rerun}")
        raise typer.Exit(code=EXIT_FAILURE) from e
    except RepoctlError as e:
        print_error(str(e))
        print_info(f"The operation is safe to re-run: {rerun}")
        raise typer.Exit(code=EXIT_FAILURE) from e
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        _report_unexpected(e, _failed_command(e))
        raise typer.Exit(code=EXIT_FAILURE) from e

    show_results(results, action)


if __name__ == "__main__":
    app()
