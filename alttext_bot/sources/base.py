"""Base class for webhook payload parsers."""

from abc import ABC, abstractmethod

from alttext_bot.models.slack import EventEnvelope


class BaseSource(ABC):
    """Abstract base class for webhook payload parsers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Source name identifier."""
        ...

    @abstractmethod
    def parse(self, body: bytes) -> EventEnvelope:
        """Parse a raw webhook body into an EventEnvelope."""
        ...
