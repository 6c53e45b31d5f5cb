"""Slack Events API webhook parser."""

import json
import logging

from pydantic import ValidationError

from alttext_bot.errors import MalformedPayload
from alttext_bot.models.slack import EventEnvelope
from alttext_bot.sources.base import BaseSource

logger = logging.getLogger(__name__)


class SlackSource(BaseSource):
    """Parser for Slack Events API request bodies."""

    @property
    def name(self) -> str:
        return "slack"

    def parse(self, body: bytes) -> EventEnvelope:
        try:
            payload = json.loads(body or b"{}")
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedPayload(f"Invalid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise MalformedPayload("Payload must be a JSON object")

        try:
            envelope = EventEnvelope.model_validate(payload)
        except ValidationError as e:
            raise MalformedPayload(f"Invalid payload: {e.error_count()} error(s)") from e

        if envelope.type == "event_callback" and envelope.event is None:
            raise MalformedPayload("event_callback without event")

        logger.debug(f"Parsed {envelope.type} envelope, event_id={envelope.event_id}")
        return envelope
