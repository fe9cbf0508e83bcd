"""State transition and rule metadata dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Mapping

from .state import EvalState


@dataclass(frozen=True)
class StateTransition:
    previous_state: EvalState
    state: EvalState
    labels: Mapping[str, str]
    alert_rule_uid: str
    org_id: int
    last_evaluation_time: datetime


@dataclass(frozen=True)
class RuleMeta:
    uid: str
    title: str
