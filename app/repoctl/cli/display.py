"""Rich display functions for step results."""

from rich.table import Table

from repoctl.models.action import RepoAction, StepResult
from repoctl.utils.formatting import console, print_success


def create_results_table(results: list[StepResult], action: RepoAction) -> Table:
    """Create a Rich table displaying step results.

    Args:
        results: Step results in execution order.
        action: The action the steps belong to (used in the title).

    Returns:
        Rich Table configured for results display.
    """
    table = Table(
        title=f"Results: {action.value}",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=10, justify="center")
    table.add_column("Step", no_wrap=True)
    table.add_column("Details")

    for result in results:
        if result.changed:
            status = "[changed]changed[/changed]"
        else:
            status = "[unchanged]unchanged[/unchanged]"
        table.add_row(status, result.step, f"[muted]{result.message}[/muted]")

    return table


def print_results_summary(results: list[StepResult], action: RepoAction) -> None:
    """Print a one-line summary of the step results."""
    changed = sum(1 for r in results if r.changed)
    if changed:
        print_success(f"{action.value}: done, {changed} change(s) applied.")
    else:
        print_success(f"{action.value}: done, nothing to change.")


def show_results(results: list[StepResult], action: RepoAction) -> None:
    """Print the results table followed by the summary."""
    console.print(create_results_table(results, action))
    print_results_summary(results, action)
