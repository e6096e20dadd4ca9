"""Model commands: run, download, models."""

import click

from foundryctl.cli.error_boundary import foundry_error_boundary
from foundryctl.cli.output import machine_output, user_output
from foundryctl.core.context import FoundryContext
from foundryctl.core.operations import (
    download_model,
    list_available_models,
    list_cached_models,
    run_model,
)


@click.command("run")
@click.argument("model")
@click.pass_obj
@foundry_error_boundary
def run_cmd(ctx: FoundryContext, model: str) -> None:
    """Load MODEL into the running service."""
    run_model(ctx, model)
    user_output(f"Requested load of model '{model}'.")


@click.command("download")
@click.argument("model")
@click.pass_obj
@foundry_error_boundary
def download_cmd(ctx: FoundryContext, model: str) -> None:
    """Download MODEL into the local cache unless already cached."""
    download_model(ctx, model)
    user_output(f"Model '{model}' is cached.")


@click.command("models")
@click.option("--cached", is_flag=True, help="List models in the local cache instead")
@click.pass_obj
@foundry_error_boundary
def models_cmd(ctx: FoundryContext, cached: bool) -> None:
    """List available models, one per line."""
    models = list_cached_models(ctx) if cached else list_available_models(ctx)
    if not models:
        user_output("No models found.")
        return
    for name in models:
        machine_output(name)
