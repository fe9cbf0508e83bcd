"""Prometheus-backed alert state historian.

Each :meth:`PrometheusBackend.record` call turns a batch of state transitions
into ALERTS frames and writes them with one detached task. The returned
future resolves exactly once, with ``None`` on success or no-op and with the
write's exception object otherwise. The exception is the future's *result*;
awaiting the future never raises it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

from .config import PrometheusConfig
from .frames import frames_for
from .models.frame import Frame
from .models.transition import RuleMeta, StateTransition
from .writers import SeriesWriter

logger = logging.getLogger(__name__)


class QueryNotSupportedError(RuntimeError):
    """The Prometheus historian only writes; reading history is unsupported."""


def _resolve(result: asyncio.Future, err: BaseException | None) -> None:
    if not result.done():
        result.set_result(err)


def _resolved(err: BaseException | None = None) -> asyncio.Future:
    result = asyncio.get_running_loop().create_future()
    result.set_result(err)
    return result


class PrometheusBackend:
    """Writes alert state transitions as series to a Prometheus datasource."""

    def __init__(self, cfg: PrometheusConfig, writer: SeriesWriter) -> None:
        logger.info(
            "Initializing remote Prometheus backend datasourceUID=%s",
            cfg.datasource_uid,
        )
        self.cfg = cfg
        self.writer = writer
        # Held only so detached write tasks are not garbage collected mid-flight.
        self._inflight: set[asyncio.Task] = set()

    async def query(self, query: Any) -> None:
        raise QueryNotSupportedError(
            "prometheus historian backend does not support querying"
        )

    def build_frames(
        self, rule: RuleMeta, transitions: Sequence[StateTransition]
    ) -> list[Frame]:
        frames: list[Frame] = []
        for tr in transitions:
            frames.extend(frames_for(self.cfg.metric_name, rule, tr))
        return frames

    def record(
        self,
        rule: RuleMeta,
        transitions: Sequence[StateTransition],
        timeout: float | None = None,
    ) -> asyncio.Future:
        """Write the series for ``transitions`` in the background.

        Must be called with a running event loop. The whole batch is tagged
        with the evaluation time and org ID of the first transition.

        Args:
            rule: Metadata of the rule the transitions belong to.
            transitions: Transitions from one evaluation of ``rule``.
            timeout: Deadline for the write in seconds. Defaults to the
                configured write timeout; ``None`` there means no deadline.

        Returns:
            A future resolving to ``None`` or to the write error.
        """
        if not transitions:
            return _resolved()

        frames = self.build_frames(rule, transitions)
        if not frames:
            logger.debug(
                "No frames generated for alert state metric, nothing to write"
            )
            return _resolved()

        first = transitions[0]
        _warn_if_mixed(rule, transitions)
        if timeout is None:
            timeout = self.cfg.write_timeout_s

        result = asyncio.get_running_loop().create_future()
        task = asyncio.create_task(
            self._write(first, frames, timeout),
            name=f"historian-write-{rule.uid}",
        )
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        task.add_done_callback(lambda t: _resolve(result, _task_outcome(t)))
        result.add_done_callback(lambda r: task.cancel() if r.cancelled() else None)
        return result

    async def _write(
        self, first: StateTransition, frames: list[Frame], timeout: float | None
    ) -> Exception | None:
        try:
            await asyncio.wait_for(
                self.writer.write_datasource(
                    self.cfg.datasource_uid,
                    self.cfg.metric_name,
                    first.last_evaluation_time,
                    frames,
                    first.org_id,
                    None,
                ),
                timeout=timeout,
            )
        except Exception as e:
            logger.error(
                "Failed to write alert state metrics batch rule_uid=%s frames=%d: %r",
                first.alert_rule_uid,
                len(frames),
                e,
            )
            return e
        return None

    async def wait_idle(self) -> None:
        """Wait until every write started so far has finished."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)


def _task_outcome(task: asyncio.Task) -> BaseException | None:
    if task.cancelled():
        logger.warning("Alert state metrics write was cancelled")
        return asyncio.CancelledError()
    err = task.exception()
    if err is not None:
        # _write returns ordinary exceptions; anything else escaped it.
        logger.error("Alert state metrics write aborted: %r", err)
        return err
    return task.result()


def _warn_if_mixed(rule: RuleMeta, transitions: Sequence[StateTransition]) -> None:
    orgs = {t.org_id for t in transitions}
    times = {t.last_evaluation_time for t in transitions}
    if len(orgs) > 1 or len(times) > 1:
        logger.warning(
            "Transitions for rule %s span %d orgs and %d evaluation times; "
            "writing with those of the first transition",
            rule.uid,
            len(orgs),
            len(times),
        )
