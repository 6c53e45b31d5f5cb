"""Per-image download, recompression and alt text generation."""

import base64
import logging
import time
from collections.abc import Awaitable, Callable, Sequence

from alttext_bot.clients.alt_text_api import AltTextClient
from alttext_bot.clients.slack_files import SlackFileClient
from alttext_bot.models.generation import FailureReason, GenerationResult, ImageSource
from alttext_bot.models.slack import Attachment
from alttext_bot.retry import RetryingCaller
from alttext_bot.selector import select_image_source
from alttext_bot.transcoder import transcode_async

logger = logging.getLogger(__name__)

Transcoder = Callable[[bytes, int, int], Awaitable[bytes]]


class GenerationPipeline:
    """Generates alt text suggestions for a batch of attachments.

    Attachments are handled one at a time, in order, to keep load on the
    rate-limited generation API bounded. A failure on one file never stops
    the batch. Once `budget` seconds have passed, files not yet started are
    recorded as failed with reason `deadline`.
    """

    def __init__(
        self,
        downloader: SlackFileClient,
        generator: AltTextClient | None,
        download_caller: RetryingCaller,
        generation_caller: RetryingCaller,
        budget: float = 20.0,
        target_width: int = 800,
        thumbnail_quality: int = 80,
        full_size_quality: int = 85,
        thumbnail_size_ceiling: int = 3 * 1024 * 1024,
        transcoder: Transcoder = transcode_async,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._downloader = downloader
        self._generator = generator
        self._download_caller = download_caller
        self._generation_caller = generation_caller
        self._budget = budget
        self._target_width = target_width
        self._thumbnail_quality = thumbnail_quality
        self._full_size_quality = full_size_quality
        self._thumbnail_size_ceiling = thumbnail_size_ceiling
        self._transcoder = transcoder
        self._clock = clock

    @property
    def enabled(self) -> bool:
        return self._generator is not None

    async def run(self, attachments: Sequence[Attachment]) -> dict[str, GenerationResult]:
        results: dict[str, GenerationResult] = {}

        if not self.enabled:
            logger.warning("Alt text API key not set, skipping alt text generation")
            for attachment in attachments:
                results[attachment.name] = GenerationResult.failed(
                    attachment.name, FailureReason.DISABLED
                )
            return results

        started = self._clock()
        for index, attachment in enumerate(attachments):
            elapsed = self._clock() - started
            if elapsed > self._budget:
                skipped = attachments[index:]
                logger.warning(
                    f"Generation budget of {self._budget:.0f}s exhausted after "
                    f"{elapsed:.1f}s, skipping {len(skipped)} file(s)"
                )
                for pending in skipped:
                    results[pending.name] = GenerationResult.failed(
                        pending.name, FailureReason.DEADLINE
                    )
                break

            file_started = self._clock()
            try:
                result = await self._process(attachment)
            except Exception as e:
                logger.exception(f"Unexpected error generating alt text for {attachment.name}: {e}")
                result = GenerationResult.failed(attachment.name, FailureReason.GENERATION_FAILED)
            result.elapsed = self._clock() - file_started
            results[attachment.name] = result

        succeeded = sum(1 for r in results.values() if r.succeeded)
        logger.info(
            f"Alt text generation completed in {self._clock() - started:.2f}s: "
            f"{succeeded} successful, {len(results) - succeeded} failed"
        )
        return results

    async def _process(self, attachment: Attachment) -> GenerationResult:
        name = attachment.name
        source = select_image_source(attachment)
        if source is None:
            return GenerationResult.failed(name, FailureReason.NO_SOURCE)

        logger.info(
            f"Processing image: {name} "
            f"(using {'thumbnail' if source.is_thumbnail else 'full-size'})"
        )
        data = await self._download_caller.call(lambda: self._downloader.download(source.url))
        if data is None:
            return GenerationResult.failed(name, FailureReason.DOWNLOAD_FAILED)

        image = await self._prepare(data, source)
        encoded = base64.b64encode(image).decode("ascii")

        generator = self._generator
        alt_text = await self._generation_caller.call(
            lambda: generator.generate(encoded, name)
        )
        if not alt_text:
            return GenerationResult.failed(name, FailureReason.GENERATION_FAILED)
        return GenerationResult.success(name, alt_text)

    async def _prepare(self, data: bytes, source: ImageSource) -> bytes:
        """Return the bytes to send: the original unless recompression shrinks it."""
        if source.is_thumbnail and len(data) < self._thumbnail_size_ceiling:
            logger.info(f"Thumbnail already optimized ({len(data) / 1024:.2f} KB), using as-is")
            return data

        quality = self._thumbnail_quality if source.is_thumbnail else self._full_size_quality
        try:
            compressed = await self._transcoder(data, self._target_width, quality)
        except (OSError, ValueError) as e:
            logger.warning(f"Compression failed, using original: {e}")
            return data

        if len(compressed) < len(data):
            reduction = (1 - len(compressed) / len(data)) * 100
            logger.info(f"Compressed to {len(compressed) / 1024:.2f} KB ({reduction:.1f}% reduction)")
            return compressed

        logger.info("Compression did not reduce size, using original")
        return data
