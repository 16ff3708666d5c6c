"""Factory function for instantiating directory search adapters."""

from escow.config.models import LookupConfig
from escow.logging import get_logger

from .base import BaseSearchAdapter
from .exceptions import AdapterConfigurationError
from .wam import WamSearchAdapter

logger = get_logger(__name__, component="adapter")

ADAPTER_MAP = {
    "wam": WamSearchAdapter,
}


def get_adapter(lookup_config: LookupConfig) -> BaseSearchAdapter:
    """Instantiate the adapter for the configured directory.

    Args:
        lookup_config: Lookup settings (directory, endpoint, timeout, user agent)

    Returns:
        Ready-to-use adapter; the caller closes it

    Raises:
        AdapterConfigurationError: If the directory is unknown or its settings are invalid
    """
    directory = str(lookup_config.directory).lower()
    adapter_class = ADAPTER_MAP.get(directory)

    if not adapter_class:
        supported = ", ".join(sorted(ADAPTER_MAP))
        raise AdapterConfigurationError(
            f"Unknown directory: {lookup_config.directory}. Supported directories: {supported}"
        )

    logger.debug(
        "Creating adapter instance",
        extra={
            "event": "adapter.created",
            "directory": directory,
            "adapter_class": adapter_class.__name__,
        },
    )

    try:
        return adapter_class(
            search_url=lookup_config.search_url,
            query_param=lookup_config.query_param,
            timeout=lookup_config.request_timeout,
            user_agent=lookup_config.user_agent,
        )
    except AdapterConfigurationError:
        raise
    except (TypeError, ValueError) as e:
        raise AdapterConfigurationError(f"Failed to create {directory} adapter: {e}") from e
