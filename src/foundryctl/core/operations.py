"""Caller-facing operations composed from the prober and driver.

Each operation returns a value or raises FoundryError, whose message is a
single descriptive line. Every call blocks on external programs; hosts
with a responsive thread must offload these calls first.
"""

import logging

from foundryctl.core.context import FoundryContext
from foundryctl.core.errors import NotInstalledError
from foundryctl.core.types import EndpointInfo, ServiceSnapshot
from foundryctl.status.aggregator import collect_status

logger = logging.getLogger(__name__)


def _require_installed(ctx: FoundryContext) -> None:
    if not ctx.prober.is_installed():
        raise NotInstalledError()


def get_status(ctx: FoundryContext) -> ServiceSnapshot:
    """Snapshot of the service; never fails because one field is unreadable."""
    return collect_status(ctx.prober, ctx.config.default_model)


def discover_and_save_endpoint(ctx: FoundryContext) -> EndpointInfo:
    """Discover the endpoint and hand it to the settings store."""
    info = ctx.driver.get_endpoint_info(ctx.config.model_id_policy)
    ctx.settings_store.update_llm_endpoint(info.base_url, info.model_id)
    logger.info("Configured LLM endpoint %s with model %s", info.base_url, info.model_id)
    return info


def prepare_default_model(ctx: FoundryContext) -> EndpointInfo:
    """Bring the configured default model to a usable, recorded endpoint.

    Waits for the service to become ready, makes sure the model is cached
    and loaded, then records the endpoint. Meant to run in the background
    after start_service().
    """
    config = ctx.config
    model = config.default_model

    ctx.driver.wait_for_ready(config.ready_policy)
    ctx.driver.ensure_model_downloaded(model)
    ctx.driver.wait_for_cached(model, config.cache_policy)
    ctx.driver.ensure_model_loaded(model, config.load_attempts, config.model_id_policy)
    return discover_and_save_endpoint(ctx)


def start_service(ctx: FoundryContext) -> None:
    """Start the service and prepare the default model in the background.

    Returns as soon as the bounded start completes or times out. Whether
    the background preparation succeeds is only visible in the log and in
    later get_status() calls.

    Raises:
        NotInstalledError: If Foundry Local is not installed
        ProcessSpawnError: If the start verb cannot be launched
        CommandFailedError: If the start verb fails before the timeout
    """
    _require_installed(ctx)
    ctx.driver.start_with_timeout(ctx.config.start_timeout_seconds)
    logger.info("Foundry service start requested")
    ctx.background.submit(
        f"prepare model {ctx.config.default_model}",
        lambda: prepare_default_model(ctx),
    )


def stop_service(ctx: FoundryContext) -> None:
    _require_installed(ctx)
    ctx.driver.stop_service()


def configure_integration(ctx: FoundryContext) -> EndpointInfo:
    """Make sure the service runs, discover its endpoint and record it.

    Raises:
        NotInstalledError: If Foundry Local is not installed
        FoundryError: If the service cannot be started or no endpoint and
            model id can be discovered
    """
    _require_installed(ctx)
    ctx.driver.ensure_service_running(ctx.config.start_timeout_seconds)
    ctx.driver.wait_for_ready(ctx.config.ready_policy)
    return discover_and_save_endpoint(ctx)


def run_model(ctx: FoundryContext, name: str) -> None:
    ctx.driver.load_model(name)


def download_model(ctx: FoundryContext, name: str) -> None:
    _require_installed(ctx)
    ctx.driver.ensure_model_downloaded(name)


def list_available_models(ctx: FoundryContext) -> list[str]:
    return ctx.prober.list_available_models()


def list_cached_models(ctx: FoundryContext) -> list[str]:
    return ctx.prober.list_cached_models()


def install_product(ctx: FoundryContext) -> str:
    """Install Foundry Local if needed and return the installed version."""
    return ctx.driver.install()
