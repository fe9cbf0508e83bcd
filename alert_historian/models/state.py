"""Alert evaluation states and their metric classification."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EvalState(Enum):
    NORMAL = "Normal"
    ALERTING = "Alerting"
    PENDING = "Pending"
    NO_DATA = "NoData"
    ERROR = "Error"
    RECOVERING = "Recovering"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class StateClass:
    emits_metric: bool
    prom_state: str


# Every EvalState member must have an entry; checked below at import time.
STATE_CLASSES: dict[EvalState, StateClass] = {
    EvalState.NORMAL: StateClass(emits_metric=False, prom_state="normal"),
    EvalState.ALERTING: StateClass(emits_metric=True, prom_state="firing"),
    EvalState.PENDING: StateClass(emits_metric=True, prom_state="pending"),
    EvalState.NO_DATA: StateClass(emits_metric=True, prom_state="nodata"),
    EvalState.ERROR: StateClass(emits_metric=True, prom_state="error"),
    EvalState.RECOVERING: StateClass(emits_metric=True, prom_state="firing"),
}

_unclassified = [s.name for s in EvalState if s not in STATE_CLASSES]
if _unclassified:
    raise RuntimeError(f"Unclassified evaluation states: {', '.join(_unclassified)}")


def is_metric_emitting(state: EvalState) -> bool:
    """Whether ``state`` shows up as an active series in the metrics backend."""
    return STATE_CLASSES[state].emits_metric


def prometheus_state(state: EvalState) -> str:
    """Map a Grafana evaluation state to the Prometheus ``alertstate`` label."""
    return STATE_CLASSES[state].prom_state


def grafana_state(state: EvalState) -> str:
    return state.value.lower()
