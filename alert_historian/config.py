"""Central configuration for alert_historian."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_METRIC_NAME = "GRAFANA_ALERTS"
DEFAULT_WRITE_URL = "http://localhost:3000"
DEFAULT_WRITE_TIMEOUT_S = 10.0


class ConfigError(ValueError):
    """Raised when the historian is configured with missing values."""


@dataclass(frozen=True)
class PrometheusConfig:
    """Destination of the alert state series.

    Set once when the backend is built and never changed afterwards.
    """

    datasource_uid: str
    metric_name: str
    write_timeout_s: float | None = None


def new_prometheus_config(
    datasource_uid: str | None,
    metric_name: str | None,
    write_timeout_s: float | None = None,
) -> PrometheusConfig:
    """Validate and build a :class:`PrometheusConfig`.

    Raises:
        ConfigError: If the datasource UID or the metric name is empty.
    """
    if not datasource_uid:
        raise ConfigError("datasource UID must not be empty")
    if not metric_name:
        raise ConfigError("metric name must not be empty")
    return PrometheusConfig(
        datasource_uid=datasource_uid,
        metric_name=metric_name,
        write_timeout_s=write_timeout_s,
    )


@dataclass
class Settings:
    """Configuration settings for alert_historian.

    All settings are loaded from environment variables with sensible defaults.
    """

    DATASOURCE_UID: str | None
    METRIC_NAME: str
    WRITE_URL: str
    WRITE_TIMEOUT_S: float
    API_TOKEN: str | None


def read_settings() -> Settings:
    """Read all configuration from environment variables.

    Returns:
        Settings object with all configuration values.

    Note:
        An invalid or non-positive timeout falls back to the default.
    """
    datasource_uid = (os.environ.get("HISTORIAN_DATASOURCE_UID") or "").strip() or None
    metric_name = (
        os.environ.get("HISTORIAN_METRIC_NAME") or DEFAULT_METRIC_NAME
    ).strip()
    write_url = (os.environ.get("HISTORIAN_WRITE_URL") or DEFAULT_WRITE_URL).rstrip(
        "/"
    )
    try:
        timeout = float(os.environ.get("HISTORIAN_WRITE_TIMEOUT_S", "") or "10")
    except ValueError:
        timeout = DEFAULT_WRITE_TIMEOUT_S
    if timeout <= 0:
        timeout = DEFAULT_WRITE_TIMEOUT_S
    api_token = os.environ.get("HISTORIAN_API_TOKEN") or None

    return Settings(
        DATASOURCE_UID=datasource_uid,
        METRIC_NAME=metric_name,
        WRITE_URL=write_url,
        WRITE_TIMEOUT_S=timeout,
        API_TOKEN=api_token,
    )


def validate_settings(settings: Settings) -> None:
    """Log errors and warnings for settings that will not work.

    Building the backend still fails on an empty datasource UID or metric
    name; this only makes the cause visible at startup.
    """
    if settings.DATASOURCE_UID is None:
        logger.error("HISTORIAN_DATASOURCE_UID environment variable is not set")
    if not settings.METRIC_NAME:
        logger.error("HISTORIAN_METRIC_NAME is empty")
    if settings.API_TOKEN is None:
        logger.warning("HISTORIAN_API_TOKEN is not set; writes are unauthenticated.")


def prometheus_config_from(settings: Settings) -> PrometheusConfig:
    return new_prometheus_config(
        settings.DATASOURCE_UID,
        settings.METRIC_NAME,
        write_timeout_s=settings.WRITE_TIMEOUT_S,
    )
