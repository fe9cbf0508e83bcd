"""Translate one state transition into ALERTS samples."""

from __future__ import annotations

from dataclasses import dataclass

from .models.frame import STALE_NAN, STALE_NAN_BITS, float_bits, is_stale_nan
from .models.state import (
    EvalState,
    grafana_state,
    is_metric_emitting,
    prometheus_state,
)
from .models.transition import StateTransition

ACTIVE_VALUE = 1.0

__all__ = [
    "ACTIVE_VALUE",
    "STALE_NAN",
    "STALE_NAN_BITS",
    "Sample",
    "float_bits",
    "get_samples",
    "is_stale_nan",
]


@dataclass(frozen=True)
class Sample:
    value: float
    grafana_state: str
    prom_state: str

    @property
    def is_stale(self) -> bool:
        return is_stale_nan(self.value)


def _sample_for(state: EvalState, value: float) -> Sample:
    return Sample(
        value=value,
        grafana_state=grafana_state(state),
        prom_state=prometheus_state(state),
    )


def get_samples(tr: StateTransition) -> tuple[list[Sample], bool]:
    """Return the samples a transition emits and whether there are any.

    Leaving a metric-emitting state produces a stale marker for the old
    series, which always comes before the active sample for the new state.
    """
    prev, curr = tr.previous_state, tr.state
    samples: list[Sample] = []

    if is_metric_emitting(prev) and prev != curr:
        samples.append(_sample_for(prev, STALE_NAN))

    if is_metric_emitting(curr):
        samples.append(_sample_for(curr, ACTIVE_VALUE))

    return samples, len(samples) > 0
