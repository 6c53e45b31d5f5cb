"""Error taxonomy for the alt text reminder service."""


class AltTextError(Exception):
    """Base class for all service errors."""


class AuthenticationFailure(AltTextError):
    """Webhook signature is invalid or the request timestamp is stale."""


class MalformedPayload(AltTextError):
    """Webhook body could not be parsed into a known envelope."""


class DownloadFailure(AltTextError):
    """Fetching an image from the chat platform failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GenerationFailure(AltTextError):
    """Generation API answered with an error or without alt text."""


class RetryableError(AltTextError):
    """An attempt failed in a way that may succeed when retried."""


class RateLimited(RetryableError):
    """Remote side answered 429."""


class GenerationTimeout(RetryableError):
    """An attempt exceeded its time bound."""


class NotificationFailure(AltTextError):
    """Sending the reminder to the user failed."""

    def __init__(self, message: str, error_code: str = ""):
        super().__init__(message)
        self.error_code = error_code

    @property
    def is_duplicate(self) -> bool:
        return self.error_code == "already_exists"
