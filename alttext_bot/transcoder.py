"""JPEG recompression for images sent to the generation API."""

import asyncio
import io

from PIL import Image


def transcode(data: bytes, width: int = 800, quality: int = 85) -> bytes:
    """Downscale to at most `width` pixels wide and re-encode as JPEG.

    Raises OSError or ValueError when the data cannot be decoded or encoded,
    including images over Pillow's decompression bomb limit.
    """
    try:
        image = Image.open(io.BytesIO(data))
    except Image.DecompressionBombError as e:
        raise ValueError(str(e)) from e

    with image:
        if image.width > width:
            height = max(1, round(image.height * width / image.width))
            image = image.resize((width, height), Image.Resampling.LANCZOS)
        if image.mode != "RGB":
            image = image.convert("RGB")

        output = io.BytesIO()
        image.save(output, format="JPEG", quality=quality, optimize=True)
        return output.getvalue()


async def transcode_async(data: bytes, width: int = 800, quality: int = 85) -> bytes:
    return await asyncio.to_thread(transcode, data, width, quality)
