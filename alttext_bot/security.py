"""Slack request signature verification."""

import hashlib
import hmac
import logging
import time
from typing import Callable

from alttext_bot.errors import AuthenticationFailure

logger = logging.getLogger(__name__)


class SignatureVerifier:
    """Verifies `X-Slack-Signature` headers.

    The signature is `<version>=<hex>` where hex is the HMAC-SHA256 of
    `<version>:<timestamp>:<body>` keyed with the signing secret. Requests
    whose timestamp is more than `max_age` seconds away from now are
    rejected before the signature is looked at.
    """

    def __init__(
        self,
        secret: str,
        max_age: int = 300,
        clock: Callable[[], float] = time.time,
    ):
        self._secret = secret.encode("utf-8")
        self._max_age = max_age
        self._clock = clock

    def _generate_signature(self, version: str, timestamp: str, body: bytes) -> str:
        base = f"{version}:{timestamp}:".encode("utf-8") + body
        return hmac.new(self._secret, base, digestmod=hashlib.sha256).hexdigest()

    def verify(self, body: bytes, timestamp: str, signature: str) -> None:
        """Raise AuthenticationFailure unless the request is fresh and signed."""
        try:
            request_time = int(timestamp)
        except (TypeError, ValueError):
            raise AuthenticationFailure("Missing or invalid request timestamp")

        if abs(int(self._clock()) - request_time) > self._max_age:
            raise AuthenticationFailure("Request timestamp too old")

        version, sep, provided = (signature or "").partition("=")
        if not sep or not provided:
            raise AuthenticationFailure("Missing or malformed signature")

        expected = self._generate_signature(version, timestamp, body)
        if not hmac.compare_digest(
            expected.encode("ascii"), provided.encode("utf-8", "surrogateescape")
        ):
            raise AuthenticationFailure("Invalid signature")

    def is_valid(self, body: bytes, timestamp: str, signature: str) -> bool:
        try:
            self.verify(body, timestamp, signature)
        except AuthenticationFailure as e:
            logger.warning(f"Rejected webhook request: {e}")
            return False
        return True
