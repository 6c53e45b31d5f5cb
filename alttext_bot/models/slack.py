"""Slack Events API payload models.

Only the fields the bot reads are declared. Unknown keys are ignored and
every model is frozen once parsed.
"""

from pydantic import BaseModel, ConfigDict, Field

# Thumbnail tiers in order of preference, largest first.
THUMBNAIL_TIERS: tuple[str, ...] = ("thumb_800", "thumb_720", "thumb_480", "thumb_360")


class Attachment(BaseModel):
    """A file shared in a message."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(default="")
    name: str = Field(default="")
    mimetype: str = Field(default="")
    alt_txt: str | None = Field(default=None, description="Accessibility description")

    thumb_360: str | None = None
    thumb_480: str | None = None
    thumb_720: str | None = None
    thumb_800: str | None = None
    url_private: str | None = None
    url_private_download: str | None = None

    @property
    def is_image(self) -> bool:
        return "image" in self.mimetype

    @property
    def missing_description(self) -> bool:
        # An alt_txt key that is present, even empty or null, counts as described.
        return self.is_image and "alt_txt" not in self.model_fields_set


class InboundEvent(BaseModel):
    """The inner `event` object of an `event_callback` envelope."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str = Field(default="")
    subtype: str | None = None
    channel: str = Field(default="")
    user: str = Field(default="")
    ts: str | None = None
    event_ts: str | None = None
    thread_ts: str | None = None
    files: list[Attachment] | None = None

    @property
    def is_bot_message(self) -> bool:
        return self.subtype == "bot_message"

    @property
    def images_missing_description(self) -> list[Attachment]:
        return [f for f in self.files or [] if f.missing_description]


class EventEnvelope(BaseModel):
    """Outer body of an Events API request."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str
    challenge: str | None = None
    event_id: str | None = None
    event: InboundEvent | None = None

    @property
    def fingerprint(self) -> str:
        """Dedup key: `<event_id | event_ts | ts>_<channel>_<user>`."""
        event = self.event or InboundEvent()
        key = self.event_id or event.event_ts or event.ts or ""
        return f"{key}_{event.channel}_{event.user}"
