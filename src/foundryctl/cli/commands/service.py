"""Service lifecycle commands: start, stop, configure."""

import click

from foundryctl.cli.error_boundary import foundry_error_boundary
from foundryctl.cli.json_output import emit_json
from foundryctl.cli.json_schemas import EndpointResponse
from foundryctl.cli.output import user_output
from foundryctl.core.context import FoundryContext
from foundryctl.core.operations import configure_integration, start_service, stop_service


@click.command("start")
@click.pass_obj
@foundry_error_boundary
def start_cmd(ctx: FoundryContext) -> None:
    """Start the service and prepare the default model in the background.

    Prints a confirmation once the service start is confirmed. The process
    then stays alive until the default model is downloaded and loaded, which
    can take several minutes. Run 'foundryctl status' from another shell to
    follow progress.
    """
    start_service(ctx)
    user_output(
        f"Foundry service starting. Preparing model '{ctx.config.default_model}' "
        "in the background; this process exits when preparation finishes. "
        "Run 'foundryctl status' from another shell to follow progress."
    )


@click.command("stop")
@click.pass_obj
@foundry_error_boundary
def stop_cmd(ctx: FoundryContext) -> None:
    """Stop the service."""
    stop_service(ctx)
    user_output("Foundry service stopped.")


@click.command("configure")
@click.option("--json", "output_json", is_flag=True, help="Output JSON format")
@click.pass_obj
@foundry_error_boundary
def configure_cmd(ctx: FoundryContext, output_json: bool) -> None:
    """Discover the endpoint and loaded model and save them to settings."""
    info = configure_integration(ctx)

    if output_json:
        emit_json(EndpointResponse.from_info(info).model_dump(mode="json"))
        return

    user_output(click.style("✓ ", fg="green") + f"Endpoint: {info.base_url}")
    user_output(f"  Model: {info.model_id}")
