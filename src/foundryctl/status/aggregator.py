"""Compose prober queries into one ServiceSnapshot."""

import logging

from foundryctl.core.errors import FoundryError
from foundryctl.core.prober import FoundryProber
from foundryctl.core.types import ServiceSnapshot

logger = logging.getLogger(__name__)


def collect_status(prober: FoundryProber, model_name: str) -> ServiceSnapshot:
    """Build a fresh snapshot of the service.

    Queries run in dependency order: installed, then running, then the
    endpoint, model id and cache membership only while running. A failed
    sub-query is logged and its field falls back to the absent value; it
    never fails the snapshot as a whole.

    Args:
        prober: Source of the individual observations
        model_name: Model whose cache membership is reported

    Returns:
        ServiceSnapshot for this moment
    """
    if not prober.is_installed():
        return ServiceSnapshot.not_installed()

    try:
        running = prober.is_service_running()
    except FoundryError as e:
        logger.warning("Failed to check Foundry service running status: %s", e)
        running = False

    if not running:
        return ServiceSnapshot(
            installed=True,
            running=False,
            endpoint_url=None,
            model_id=None,
            model_cached=False,
        )

    endpoint_url: str | None = None
    try:
        endpoint_url = prober.get_endpoint_url()
    except FoundryError as e:
        logger.warning("Failed to get Foundry endpoint url: %s", e)

    model_id: str | None = None
    try:
        model_id = prober.get_model_id()
    except FoundryError as e:
        logger.warning("Failed to get Foundry model id: %s", e)

    model_cached = False
    try:
        model_cached = prober.is_model_cached(model_name)
    except FoundryError as e:
        logger.warning("Failed to check whether model '%s' is cached: %s", model_name, e)

    return ServiceSnapshot(
        installed=True,
        running=True,
        endpoint_url=endpoint_url,
        model_id=model_id,
        model_cached=model_cached,
    )
