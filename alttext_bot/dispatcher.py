"""Bridges the webhook ack deadline and the slower reminder workflow.

Each accepted event runs as its own task. The caller waits for it only up
to `ack_timeout`; anything still running after that is detached and
finishes on its own, with its outcome reported through a done-callback.
"""

import asyncio
import logging
from enum import Enum
from typing import Protocol

from alttext_bot.dedup import EventDeduplicator
from alttext_bot.handler import HandleOutcome
from alttext_bot.models.slack import EventEnvelope

logger = logging.getLogger(__name__)


class EventHandler(Protocol):
    async def handle(self, envelope: EventEnvelope) -> HandleOutcome: ...


class DispatchStatus(str, Enum):
    DUPLICATE = "duplicate"
    COMPLETED = "completed"
    DETACHED = "detached"


class BackgroundDispatcher:
    """Deduplicates events and races their handling against a short timer."""

    def __init__(
        self,
        handler: EventHandler,
        deduplicator: EventDeduplicator,
        ack_timeout: float = 1.5,
    ):
        self._handler = handler
        self._deduplicator = deduplicator
        self._ack_timeout = ack_timeout
        self._tasks: set[asyncio.Task] = set()

    @property
    def deduplicator(self) -> EventDeduplicator:
        return self._deduplicator

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def dispatch(self, envelope: EventEnvelope) -> DispatchStatus:
        fingerprint = envelope.fingerprint
        if not self._deduplicator.should_process(fingerprint):
            return DispatchStatus.DUPLICATE

        task = asyncio.create_task(
            self._handler.handle(envelope), name=f"reminder:{fingerprint}"
        )
        self._tasks.add(task)
        task.add_done_callback(lambda t: self._on_done(t, fingerprint))

        done, _ = await asyncio.wait({task}, timeout=self._ack_timeout)
        if task in done:
            return DispatchStatus.COMPLETED

        logger.info(
            f"Event {fingerprint} still running after {self._ack_timeout}s, "
            "continuing in background"
        )
        return DispatchStatus.DETACHED

    def _on_done(self, task: asyncio.Task, fingerprint: str) -> None:
        self._tasks.discard(task)

        if task.cancelled():
            logger.warning(f"Processing of {fingerprint} was cancelled")
            return

        error = task.exception()
        if error is not None:
            logger.error(
                f"Background processing of {fingerprint} failed: {error!r}",
                exc_info=error,
            )
            return

        outcome: HandleOutcome = task.result()
        logger.info(f"Event {fingerprint} finished: {outcome.value}")
        if outcome.releases_fingerprint:
            self._deduplicator.release(fingerprint)

    async def drain(self, timeout: float) -> None:
        """Wait for detached tasks, cancelling whatever outlives `timeout`."""
        if not self._tasks:
            return

        logger.info(f"Waiting up to {timeout}s for {len(self._tasks)} background task(s)")
        _, pending = await asyncio.wait(set(self._tasks), timeout=timeout)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.wait(pending)
            logger.warning(f"Cancelled {len(pending)} unfinished background task(s)")
