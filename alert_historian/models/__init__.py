"""Dataclasses and enums shared across alert_historian."""

from .frame import Field, Frame, FrameMeta
from .state import EvalState, is_metric_emitting, prometheus_state
from .transition import RuleMeta, StateTransition

__all__ = [
    "EvalState",
    "Field",
    "Frame",
    "FrameMeta",
    "RuleMeta",
    "StateTransition",
    "is_metric_emitting",
    "prometheus_state",
]
