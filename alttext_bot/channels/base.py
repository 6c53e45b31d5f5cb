"""Base class for reminder delivery channels."""

import logging
from abc import ABC, abstractmethod
from enum import Enum

from pydantic import BaseModel

from alttext_bot.errors import NotificationFailure

logger = logging.getLogger(__name__)


class DeliveryStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    DUPLICATE = "duplicate"
    DISABLED = "disabled"


class EphemeralMessage(BaseModel):
    """A message visible only to `user` in `channel`."""

    channel: str
    user: str
    text: str
    thread_ts: str | None = None


class BaseChannel(ABC):
    """Abstract base class for reminder delivery channels."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Channel name for logging."""
        ...

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """Whether the channel is enabled."""
        ...

    @abstractmethod
    async def send(self, message: EphemeralMessage) -> None:
        """Deliver the message, raising NotificationFailure on error."""
        ...

    async def send_safe(self, message: EphemeralMessage) -> DeliveryStatus:
        """Send message with error handling."""
        if not self.enabled:
            return DeliveryStatus.DISABLED
        try:
            await self.send(message)
        except NotificationFailure as e:
            if e.is_duplicate:
                logger.warning(f"{self.name} reports message already sent: {e}")
                return DeliveryStatus.DUPLICATE
            logger.error(f"Failed to send to channel {self.name}: {e}")
            return DeliveryStatus.FAILED
        except Exception as e:
            logger.exception(f"Failed to send to channel {self.name}: {e}")
            return DeliveryStatus.FAILED
        return DeliveryStatus.SENT
