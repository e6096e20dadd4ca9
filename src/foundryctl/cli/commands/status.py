"""Status command implementation."""

import click
from rich.console import Console

from foundryctl.cli.error_boundary import foundry_error_boundary
from foundryctl.cli.json_output import emit_json
from foundryctl.cli.json_schemas import StatusResponse
from foundryctl.cli.rendering import render_status
from foundryctl.core.context import FoundryContext
from foundryctl.core.operations import get_status


@click.command("status")
@click.option("--json", "output_json", is_flag=True, help="Output JSON format")
@click.pass_obj
@foundry_error_boundary
def status_cmd(ctx: FoundryContext, output_json: bool) -> None:
    """Show whether Foundry Local is installed, running and serving a model."""
    snapshot = get_status(ctx)
    model = ctx.config.default_model

    if output_json:
        emit_json(StatusResponse.from_snapshot(snapshot, model).model_dump(mode="json"))
        return

    Console(stderr=True).print(render_status(snapshot, model))
