"""
SG Sweeper CLI

Runs the same cleanup as the Lambda handler from a workstation.
"""

import json
import sys
from typing import Optional

import click
from rich.console import Console

from . import __version__
from .core.aws_client import AWSClient, AWSClientError
from .core.config import CleanupSettings
from .core.logging import setup_logging
from .reporters.cli_reporter import CLIReporter
from .workflow import cleanup_unused_security_groups


console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="sg-sweeper")
def cli():
    """
    SG Sweeper: delete unused EC2 security groups.

    A security group is unused when no network interface, EC2 instance
    or Lambda function references it. Groups named "default" are never
    deleted.
    """
    pass


@cli.command("run")
@click.option(
    "--region",
    "-r",
    default=None,
    help="AWS region to clean (default: AWS_REGION or us-east-1)",
)
@click.option(
    "--profile",
    "-p",
    default=None,
    help="AWS profile name from ~/.aws/credentials",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Preview what would be deleted without actually deleting",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the raw response JSON instead of tables",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging level (default: LOG_LEVEL or INFO)",
)
def run_cleanup(
    region: Optional[str],
    profile: Optional[str],
    dry_run: bool,
    as_json: bool,
    log_level: Optional[str],
):
    """
    Delete unused security groups in one region.

    Examples:

        # Preview what would be deleted (safe)
        sg-sweeper run --dry-run

        # Delete in a specific region with a named profile
        sg-sweeper run --region eu-west-1 --profile production

        # Machine-readable output
        sg-sweeper run --json
    """
    settings = CleanupSettings.from_env().with_overrides(
        region=region,
        profile=profile,
        dry_run=dry_run or None,
        log_level=log_level.upper() if log_level else None,
    )
    setup_logging(level=settings.log_level)

    reporter = CLIReporter(console)
    if not as_json:
        reporter.print_run_header(settings.region, settings.dry_run)

    aws_client = AWSClient(region=settings.region, profile=settings.profile)
    response = cleanup_unused_security_groups(
        aws_client,
        settings,
        progress_callback=None if as_json else reporter.print_result,
    )

    if as_json:
        click.echo(json.dumps(response.to_dict(), indent=2))
    else:
        reporter.report(response)

    if not response.ok:
        sys.exit(1)


@cli.command("validate")
@click.option(
    "--profile",
    "-p",
    default=None,
    help="AWS profile name from ~/.aws/credentials",
)
@click.option(
    "--region",
    "-r",
    default="us-east-1",
    help="AWS region to use for validation",
)
def validate_credentials(profile: Optional[str], region: str):
    """Validate AWS credentials and show account info."""
    try:
        client = AWSClient(region=region, profile=profile)
        client.validate_credentials()
        account_id = client.get_account_id()

        console.print("\n[green bold]AWS credentials are valid![/green bold]")
        console.print(f"\n  Account ID: {account_id}")
        console.print(f"  Region: {region}")
        if profile:
            console.print(f"  Profile: {profile}")
        console.print()

    except AWSClientError as e:
        console.print(f"\n[red bold]Validation Failed:[/red bold] {str(e)}")
        sys.exit(1)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
