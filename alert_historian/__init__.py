"""Record alert state transitions as Prometheus ALERTS series."""

from .config import ConfigError, PrometheusConfig, new_prometheus_config
from .historian import PrometheusBackend, QueryNotSupportedError
from .main import build_backend
from .models import EvalState, RuleMeta, StateTransition
from .samples import STALE_NAN, get_samples, is_stale_nan
from .writers import HttpSeriesWriter, SeriesWriter, WriteError

__all__ = [
    "ConfigError",
    "EvalState",
    "HttpSeriesWriter",
    "PrometheusBackend",
    "PrometheusConfig",
    "QueryNotSupportedError",
    "RuleMeta",
    "STALE_NAN",
    "SeriesWriter",
    "StateTransition",
    "WriteError",
    "build_backend",
    "get_samples",
    "is_stale_nan",
    "new_prometheus_config",
]
