import logging
import os

import click

from foundryctl.cli.commands.install import install_cmd
from foundryctl.cli.commands.model import download_cmd, models_cmd, run_cmd
from foundryctl.cli.commands.service import configure_cmd, start_cmd, stop_cmd
from foundryctl.cli.commands.status import status_cmd
from foundryctl.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

DEBUG_ENV_VAR = "FOUNDRYCTL_DEBUG"


def configure_logging() -> None:
    """Enable debug logging if FOUNDRYCTL_DEBUG is set; warnings otherwise."""
    if os.getenv(DEBUG_ENV_VAR):
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="foundryctl")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Manage the Foundry Local service and discover its endpoint."""
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        try:
            ctx.obj = create_context()
        except ValueError as e:
            raise click.ClickException(str(e)) from e


cli.add_command(status_cmd)
cli.add_command(start_cmd)
cli.add_command(stop_cmd)
cli.add_command(configure_cmd)
cli.add_command(run_cmd)
cli.add_command(download_cmd)
cli.add_command(models_cmd)
cli.add_command(install_cmd)


def main() -> None:
    """CLI entry point used by the `foundryctl` console script."""
    configure_logging()
    cli()
