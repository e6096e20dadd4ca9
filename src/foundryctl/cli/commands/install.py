"""Install command implementation."""

import click

from foundryctl.cli.error_boundary import foundry_error_boundary
from foundryctl.cli.output import user_output
from foundryctl.core.context import FoundryContext
from foundryctl.core.operations import install_product


@click.command("install")
@click.option("-y", "--yes", is_flag=True, help="Install without asking for confirmation")
@click.pass_obj
@foundry_error_boundary
def install_cmd(ctx: FoundryContext, yes: bool) -> None:
    """Install Foundry Local with winget (Windows only)."""
    if not yes and not ctx.prober.is_installed():
        click.confirm("Install Foundry Local with winget?", abort=True, err=True)

    version = install_product(ctx)
    user_output(click.style("✓ ", fg="green") + f"Foundry Local {version} is installed.")
