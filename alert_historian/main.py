"""Wire the historian backend from environment settings."""

from __future__ import annotations

import logging

from . import config
from .historian import PrometheusBackend
from .logger import setup_logging
from .writers import HttpSeriesWriter, SeriesWriter

logger = logging.getLogger(__name__)


def build_writer(settings: config.Settings) -> HttpSeriesWriter:
    headers: dict[str, str] = {}
    if settings.API_TOKEN:
        headers["Authorization"] = f"Bearer {settings.API_TOKEN}"
    return HttpSeriesWriter(
        settings.WRITE_URL, timeout=settings.WRITE_TIMEOUT_S, headers=headers
    )


def build_backend(
    settings: config.Settings | None = None, writer: SeriesWriter | None = None
) -> PrometheusBackend:
    """Build a backend from ``settings`` (read from the environment if omitted).

    This is the process entry point for embedding the historian, so it also
    configures logging.

    Raises:
        ConfigError: If the datasource UID or metric name is empty.
    """
    setup_logging()
    if settings is None:
        settings = config.read_settings()
    config.validate_settings(settings)
    cfg = config.prometheus_config_from(settings)
    if writer is None:
        writer = build_writer(settings)
        logger.info("Writing alert state series via %s", settings.WRITE_URL)
    return PrometheusBackend(cfg, writer)
