"""Alt text generation result models."""

from enum import Enum

from pydantic import BaseModel, Field


class FailureReason(str, Enum):
    NO_SOURCE = "no_source"
    DOWNLOAD_FAILED = "download_failed"
    GENERATION_FAILED = "generation_failed"
    DEADLINE = "deadline"
    DISABLED = "disabled"


class ImageSource(BaseModel):
    """URL picked for download and whether it is a pre-resized thumbnail."""

    url: str
    variant: str
    is_thumbnail: bool


class GenerationResult(BaseModel):
    """Outcome of generating alt text for a single file."""

    filename: str
    alt_text: str | None = None
    failure: FailureReason | None = None
    elapsed: float = Field(default=0.0, description="Seconds spent on this file")

    @property
    def succeeded(self) -> bool:
        return bool(self.alt_text)

    @classmethod
    def success(cls, filename: str, alt_text: str, elapsed: float = 0.0) -> "GenerationResult":
        return cls(filename=filename, alt_text=alt_text, elapsed=elapsed)

    @classmethod
    def failed(cls, filename: str, reason: FailureReason, elapsed: float = 0.0) -> "GenerationResult":
        return cls(filename=filename, failure=reason, elapsed=elapsed)


def suggestions_from(results: dict[str, GenerationResult]) -> dict[str, str | None]:
    """Collapse results to filename -> alt text (None when unavailable)."""
    return {name: result.alt_text for name, result in results.items()}
