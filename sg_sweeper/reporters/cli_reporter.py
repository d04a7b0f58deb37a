"""
CLI Reporter Module
===================

Rich terminal output for cleanup runs started from the command line.

Classes
-------
CLIReporter
    Renders per-group progress, the delete results table and a summary.

Example
-------
>>> from sg_sweeper.reporters import CLIReporter
>>>
>>> reporter = CLIReporter()
>>> reporter.report(response)

See Also
--------
rich : Python library for rich text and formatting.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from sg_sweeper.cleaners.security_group_cleaner import (
    DeleteResult,
    DeleteStatus,
    DeleteSummary,
)

if TYPE_CHECKING:
    from sg_sweeper.workflow import CleanupResponse

# Module logger
logger = logging.getLogger(__name__)

STATUS_STYLES = {
    DeleteStatus.DELETED: ("[green]✓[/green]", "green"),
    DeleteStatus.FAILED: ("[red]✗[/red]", "red"),
    DeleteStatus.DRY_RUN: ("[blue]~[/blue]", "blue"),
}


class CLIReporter:
    """
    Reporter for displaying cleanup results in the terminal.

    Parameters
    ----------
    console : Console, optional
        Rich Console instance. If not provided, creates a new one.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def print_run_header(self, region: str, dry_run: bool) -> None:
        """Print the header panel for a run."""
        header_text = Text()
        header_text.append("\nSecurity Group Cleanup\n", style="bold blue")
        header_text.append(f"Region: {region}", style="dim")
        self.console.print(Panel(header_text, border_style="blue"))

        if dry_run:
            self.console.print(
                Panel(
                    "[yellow bold]DRY-RUN MODE[/yellow bold]\n"
                    "No security groups will actually be deleted.",
                    border_style="yellow",
                )
            )

    def print_result(self, result: DeleteResult) -> None:
        """Print one line per processed security group."""
        icon, _ = STATUS_STYLES.get(result.status, ("?", "white"))
        status_text = {
            DeleteStatus.DELETED: "Deleted",
            DeleteStatus.FAILED: f"Failed: {result.error_message}",
            DeleteStatus.DRY_RUN: "Would delete",
        }.get(result.status, "Unknown")

        self.console.print(
            f"  {icon} {result.group_id} ({result.group_name}) - {status_text}"
        )

    def report(self, response: CleanupResponse) -> None:
        """
        Report the outcome of a cleanup run.

        Parameters
        ----------
        response : CleanupResponse
            Response returned by ``cleanup_unused_security_groups``.
        """
        if not response.ok:
            self.print_error(response.body.get("error", "Unknown error"))
            return

        summary = response.summary or DeleteSummary()
        if summary.results:
            self._print_results_table(summary)
        else:
            self.console.print("\n[green]No unused security groups found.[/green]")

        self._print_summary(summary, dry_run=bool(response.body.get("dryRun")))

        if response.metric is not None and not response.metric.published:
            self.print_warning(
                f"CloudWatch metric was not published: {response.metric.error}"
            )

    def _print_results_table(self, summary: DeleteSummary) -> None:
        table = Table(
            title="\nSecurity Group Cleanup Results",
            title_style="bold",
            show_lines=False,
        )
        table.add_column("#", style="dim", width=4)
        table.add_column("Security Group ID", style="cyan", no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Status")
        table.add_column("Error", style="dim", max_width=50)

        for i, result in enumerate(summary.results, 1):
            _, style = STATUS_STYLES.get(result.status, ("?", "white"))
            table.add_row(
                str(i),
                result.group_id,
                result.group_name,
                f"[{style}]{result.status.value}[/]",
                result.error_message or "",
            )

        self.console.print(table)

    def _print_summary(self, summary: DeleteSummary, dry_run: bool) -> None:
        self.console.print("\n[bold]Summary[/bold]")

        if dry_run:
            self.console.print(f"  Would delete: [blue]{summary.dry_run}[/blue]")
        else:
            self.console.print(f"  Deleted:  [green]{summary.deleted}[/green]")
            self.console.print(f"  Failed:   [red]{summary.failed}[/red]")

        self.console.print(f"  Total:    {summary.total}")

        if summary.failed > 0:
            self.console.print("\n[yellow]Some deletions failed. Common reasons:[/yellow]")
            self.console.print("  • Security group is referenced by another security group's rules")
            self.console.print("  • Security group is used by a resource not checked here")
            self.console.print("  • Insufficient IAM permissions")

    def print_error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"\n[red bold]Error:[/red bold] {message}")

    def print_warning(self, message: str) -> None:
        """Print a warning message."""
        self.console.print(f"\n[yellow bold]Warning:[/yellow bold] {message}")

    def __repr__(self) -> str:
        return "CLIReporter()"
