"""Shared test fixtures and dummy writers."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any

from alert_historian.models import EvalState, RuleMeta, StateTransition

EVAL_TIME = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_transition(
    previous: EvalState,
    current: EvalState,
    labels: dict[str, str] | None = None,
    rule_uid: str = "rule-1",
    org_id: int = 1,
    at: datetime = EVAL_TIME,
) -> StateTransition:
    return StateTransition(
        previous_state=previous,
        state=current,
        labels=labels if labels is not None else {"instance": "host-1"},
        alert_rule_uid=rule_uid,
        org_id=org_id,
        last_evaluation_time=at,
    )


def make_rule(title: str = "High CPU", uid: str = "rule-1") -> RuleMeta:
    return RuleMeta(uid=uid, title=title)


class DummyWriter:
    """Dummy series writer recording every call."""

    def __init__(self, error: BaseException | None = None) -> None:
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def write_datasource(
        self, ds_uid, name, t, frames, org_id, extra_labels
    ) -> None:
        self.calls.append(
            {
                "ds_uid": ds_uid,
                "name": name,
                "t": t,
                "frames": list(frames),
                "org_id": org_id,
                "extra_labels": extra_labels,
            }
        )
        if self.error is not None:
            raise self.error


class BlockingWriter(DummyWriter):
    """Dummy writer that never finishes until released."""

    def __init__(self) -> None:
        super().__init__()
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def write_datasource(self, *args, **kwargs) -> None:
        await super().write_datasource(*args, **kwargs)
        self.started.set()
        await self.release.wait()
