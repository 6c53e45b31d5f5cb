"""Slack ephemeral message channel."""

import logging

import httpx

from alttext_bot.channels.base import BaseChannel, EphemeralMessage
from alttext_bot.errors import NotificationFailure

logger = logging.getLogger(__name__)


class SlackEphemeralChannel(BaseChannel):
    """Posts reminders through `chat.postEphemeral`."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str,
        api_url: str = "https://slack.com/api",
    ):
        self._client = client
        self._token = token
        self._api_url = api_url.rstrip("/")

    @property
    def name(self) -> str:
        return "slack"

    @property
    def enabled(self) -> bool:
        return bool(self._token)

    async def send(self, message: EphemeralMessage) -> None:
        logger.info(
            f"Sending ephemeral message to user {message.user} in channel {message.channel}"
            + (f" (thread {message.thread_ts})" if message.thread_ts else "")
        )
        try:
            response = await self._client.post(
                f"{self._api_url}/chat.postEphemeral",
                json=message.model_dump(exclude_none=True),
                headers={"Authorization": f"Bearer {self._token}"},
            )
            response.raise_for_status()
            result = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise NotificationFailure(f"chat.postEphemeral request failed: {e}") from e

        if not result.get("ok"):
            error = result.get("error", "unknown_error")
            raise NotificationFailure(f"Slack API error: {error}", error_code=error)

        logger.info("Ephemeral message sent successfully")
