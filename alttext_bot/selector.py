"""Pick which variant of a shared image to download."""

import logging

from alttext_bot.models.generation import ImageSource
from alttext_bot.models.slack import THUMBNAIL_TIERS, Attachment

logger = logging.getLogger(__name__)

FULL_SIZE_VARIANTS: tuple[str, ...] = ("url_private", "url_private_download")


def select_image_source(attachment: Attachment) -> ImageSource | None:
    """Return the best URL to download for alt text generation.

    thumb_800 matches the resize target, so it is preferred, then the
    smaller tiers. The full-size image is used only when no thumbnail exists.
    """
    for tier in THUMBNAIL_TIERS:
        url = getattr(attachment, tier)
        if url:
            logger.info(f"Using {tier} for {attachment.name}")
            return ImageSource(url=url, variant=tier, is_thumbnail=True)

    for variant in FULL_SIZE_VARIANTS:
        url = getattr(attachment, variant)
        if url:
            logger.info(f"No thumbnail available, using full-size image for {attachment.name}")
            return ImageSource(url=url, variant=variant, is_thumbnail=False)

    logger.warning(f"No image URL found for {attachment.name}")
    return None
