"""Build labelled data frames from state transitions."""

from __future__ import annotations

import logging
from typing import Mapping

from .models.frame import Field, Frame, FrameMeta
from .models.transition import RuleMeta, StateTransition
from .samples import Sample, get_samples

logger = logging.getLogger(__name__)

ALERT_NAME_LABEL = "alertname"
# Prometheus-style state: firing, pending, ...
ALERT_STATE_LABEL = "alertstate"
# Grafana-style state: alerting, pending, recovering, ...
GRAFANA_ALERT_STATE_LABEL = "grafana_alertstate"
ALERT_RULE_UID_LABEL = "rule_uid"


def is_internal_label(key: str) -> bool:
    """Labels wrapped in double underscores are internal and never exported."""
    return key.startswith("__") and key.endswith("__")


def build_labels(
    labels: Mapping[str, str], rule_uid: str, title: str, sample: Sample
) -> dict[str, str]:
    out = {k: v for k, v in labels.items() if not is_internal_label(k)}
    out[ALERT_RULE_UID_LABEL] = rule_uid
    out[ALERT_NAME_LABEL] = title
    out[ALERT_STATE_LABEL] = sample.prom_state
    out[GRAFANA_ALERT_STATE_LABEL] = sample.grafana_state
    return out


def frames_for(metric_name: str, rule: RuleMeta, tr: StateTransition) -> list[Frame]:
    """Convert a transition into one frame per sample.

    A transition between two metric-emitting states yields two frames: the
    stale marker for the previous state, then the active sample.
    """
    samples, ok = get_samples(tr)
    if not ok:
        return []

    frames: list[Frame] = []
    for sample in samples:
        labels = build_labels(tr.labels, tr.alert_rule_uid, rule.title, sample)
        logger.debug(
            "Creating metric with labels rule_uid=%s previous_state=%s "
            "current_state=%s last_evaluation_time=%s rule_title=%s labels=%s value=%s",
            tr.alert_rule_uid,
            tr.previous_state,
            tr.state,
            tr.last_evaluation_time,
            rule.title,
            labels,
            sample.value,
        )
        frames.append(
            Frame(
                name=metric_name,
                fields=[Field(name="", labels=labels, values=[sample.value])],
                meta=FrameMeta(),
            )
        )
    return frames
