"""Command line entry point for azure-debug-info.

    azure-debug-info [--azure-environment NAME] [-v] [--debug] [--log-json]

Connects to Azure, logs identity and resource group information for every
visible subscription, then waits for SIGINT or SIGTERM.
"""

import logging
import platform
import sys

import click
import requests
from pydantic import ValidationError

from az_debug_info import __version__
from az_debug_info.azure_api import CredentialError
from az_debug_info.logs import setup_logging
from az_debug_info.report import connect, run_report
from az_debug_info.settings import load_settings
from az_debug_info.supervisor import SignalWaiter

AUTHOR = "webdevops.io"

logger = logging.getLogger(__name__)


class _UsageExitCommand(click.Command):
    """Print usage to stdout and exit 1 on invalid arguments."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as exc:
            click.echo(f"Error: {exc.format_message()}\n")
            click.echo(ctx.get_help())
            ctx.exit(1)


@click.command(cls=_UsageExitCommand)
@click.version_option(version=__version__, prog_name="azure-debug-info")
@click.option(
    "--azure-environment",
    default=None,
    help="Azure environment name [env: AZURE_ENVIRONMENT] (default: AzurePublicCloud).",
)
@click.option(
    "--no-azure-imds-probe",
    is_flag=True,
    default=False,
    help="Do not probe the instance metadata endpoint for a managed identity "
    "[env: AZURE_IMDS_PROBE=false].",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose logging [env: VERBOSE].",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug logging with caller information [env: DEBUG].",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Emit log lines as JSON [env: LOG_JSON].",
)
def cli(
    azure_environment: str | None,
    no_azure_imds_probe: bool,
    verbose: bool,
    debug: bool,
    log_json: bool,
) -> None:
    """Print Azure identity and resource inventory information."""
    flags = {
        "verbose": verbose,
        "debug": debug,
        "log_json": log_json,
    }
    try:
        settings = load_settings(
            azure_environment=azure_environment,
            azure_imds_probe=False if no_azure_imds_probe else None,
            **{name: True for name, enabled in flags.items() if enabled},
        )
    except ValidationError as exc:
        click.echo(f"Error: {exc}")
        sys.exit(1)

    setup_logging(settings)
    logger.info(
        "starting azure-debug-info v%s (Python %s; by %s)",
        __version__,
        platform.python_version(),
        AUTHOR,
    )
    logger.info(settings.model_dump_json())

    with SignalWaiter() as waiter:
        logger.info("init Azure connection")
        try:
            ctx = connect(settings)
            run_report(ctx)
        except (LookupError, CredentialError, requests.RequestException) as exc:
            logger.error("%s", exc)
            sys.exit(1)

        sig = waiter.wait()

    click.echo()
    click.echo(sig.name)
    logger.info("received %s, shutting down", sig.name)
