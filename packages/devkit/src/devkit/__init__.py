"""Common runtime devkit for service configuration and observability."""

from devkit.config import ServiceSettings, load_settings
from devkit.observability import configure_logging, configure_otel, configure_health_check_access_log_filter

__all__ = [
    "ServiceSettings",
    "configure_logging",
    "configure_otel",
    "configure_health_check_access_log_filter",
    "load_settings",
]
