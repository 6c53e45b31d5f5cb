"""Authenticated downloads of files shared in Slack."""

import logging

import httpx

from alttext_bot.errors import DownloadFailure, RateLimited

logger = logging.getLogger(__name__)

USER_AGENT = "Slack-Alt-Text-Bot/1.0"


class SlackFileClient:
    """Downloads `url_private` / thumbnail URLs with the bot token."""

    def __init__(self, client: httpx.AsyncClient, token: str):
        self._client = client
        self._token = token

    async def download(self, url: str) -> bytes:
        response = await self._client.get(
            url,
            headers={
                "Authorization": f"Bearer {self._token}",
                "User-Agent": USER_AGENT,
            },
            follow_redirects=True,
        )

        if response.status_code == 429:
            raise RateLimited(f"Download rate limited: {url[:50]}")

        if response.is_error:
            logger.error(
                f"Failed to download image: {response.status_code} "
                f"{response.text[:500]}"
            )
            if response.status_code in (401, 403):
                logger.error(
                    "Authentication/authorization error: check that the bot token "
                    "is valid, has the 'files:read' scope and can access the file"
                )
            raise DownloadFailure(
                f"Failed to download image: {response.status_code}",
                status_code=response.status_code,
            )

        data = response.content
        logger.info(f"Downloaded image, size: {len(data) / 1024:.2f} KB")
        return data
