"""Turns a message event into an alt text reminder."""

import logging
from collections.abc import Iterable
from enum import Enum

from alttext_bot.channels.base import BaseChannel, DeliveryStatus, EphemeralMessage
from alttext_bot.composer import compose_reminder
from alttext_bot.models.generation import suggestions_from
from alttext_bot.models.slack import EventEnvelope
from alttext_bot.pipeline import GenerationPipeline

logger = logging.getLogger(__name__)


class HandleOutcome(str, Enum):
    IGNORED = "ignored"
    NO_MISSING = "no_missing"
    NOTIFIED = "notified"
    NOTIFY_FAILED = "notify_failed"
    DUPLICATE_SEND = "duplicate_send"

    @property
    def releases_fingerprint(self) -> bool:
        """Whether the event should not keep its dedup slot."""
        return self in (HandleOutcome.IGNORED, HandleOutcome.NO_MISSING, HandleOutcome.DUPLICATE_SEND)


class ReminderHandler:
    """Detects images without alt text and reminds the poster."""

    def __init__(
        self,
        pipeline: GenerationPipeline,
        channel: BaseChannel,
        excluded_users: Iterable[str] = (),
    ):
        self._pipeline = pipeline
        self._channel = channel
        self._excluded_users = frozenset(excluded_users)

    async def handle(self, envelope: EventEnvelope) -> HandleOutcome:
        event = envelope.event
        if event is None:
            return HandleOutcome.IGNORED

        if event.is_bot_message:
            logger.info("Ignoring bot message")
            return HandleOutcome.IGNORED

        if event.user in self._excluded_users:
            logger.info(f"User {event.user} is excluded from alt text reminders")
            return HandleOutcome.IGNORED

        if event.files is None:
            logger.info("Message has no files")
            return HandleOutcome.IGNORED

        missing = event.images_missing_description
        logger.info(f"Found {len(missing)} image(s) missing alt text")
        if not missing:
            return HandleOutcome.NO_MISSING

        results = await self._pipeline.run(missing)
        text = compose_reminder(
            len(event.files),
            [attachment.name for attachment in missing],
            suggestions_from(results),
        )
        message = EphemeralMessage(
            channel=event.channel,
            user=event.user,
            text=text,
            thread_ts=event.thread_ts,
        )

        status = await self._channel.send_safe(message)
        if status is DeliveryStatus.SENT:
            return HandleOutcome.NOTIFIED
        if status is DeliveryStatus.DUPLICATE:
            return HandleOutcome.DUPLICATE_SEND
        return HandleOutcome.NOTIFY_FAILED
