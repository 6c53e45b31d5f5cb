"""Configuration management for the alt text reminder bot."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROMPT = (
    "You are a helpful accessibility expert who generates descriptive alt texts "
    "for images in swedish to enable visually impaired users to perceive the "
    "image's subject and purpose. Focus on the most important visual elements. "
    "Do not include the word 'image' in the alt text. Keep the text to the point, "
    "but still descriptive."
)

DEFAULT_USER_PROMPT = (
    "Be short and concise. The text must be a maximum of 180 characters long"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Server settings
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)
    log_level: str = Field(default="INFO")

    # Slack
    slack_signing_secret: str
    slack_token: str
    slack_api_url: str = Field(default="https://slack.com/api")
    signature_max_age: int = Field(default=300)
    excluded_user_ids: str = Field(default="")
    no_retry_on_redelivery: bool = Field(default=False)

    # Alt text generation API
    alt_text_api_key: str | None = Field(
        default=None, validation_alias="ALT_TEXT_GENERATION_API_KEY"
    )
    alt_text_api_url: str = Field(
        default="https://useit-alttext.netlify.app/.netlify/functions/generate-alt-text"
    )
    alt_text_model: str = Field(default="gpt-4o-mini")
    alt_text_backend: str = Field(default="openai")
    alt_text_prompt: str = Field(default=DEFAULT_PROMPT)
    alt_text_user_prompt: str = Field(default=DEFAULT_USER_PROMPT)

    # Processing policy
    dedup_cache_size: int = Field(default=1000, gt=0)
    ack_timeout: float = Field(default=1.5)
    generation_budget: float = Field(default=20.0)
    shutdown_grace: float = Field(default=25.0)
    download_timeout: float = Field(default=20.0)
    generation_timeout: float = Field(default=24.0)
    max_attempts: int = Field(default=3, ge=1)
    rate_limit_backoff: float = Field(default=10.0)
    timeout_backoff: float = Field(default=5.0)

    # Image processing
    target_width: int = Field(default=800)
    thumbnail_quality: int = Field(default=80)
    full_size_quality: int = Field(default=85)
    thumbnail_size_ceiling: int = Field(default=3 * 1024 * 1024)

    @property
    def excluded_users(self) -> set[str]:
        return {uid.strip() for uid in self.excluded_user_ids.split(",") if uid.strip()}

    @property
    def suggestions_enabled(self) -> bool:
        return bool(self.alt_text_api_key)


@lru_cache
def get_settings() -> Settings:
    return Settings()
