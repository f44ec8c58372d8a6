"""
Raster image preparation with Pillow.

Embedded pictures are normalized before they reach the PDF canvas: they are
downscaled to the quality preset's maximum pixel dimension and re-encoded as
JPEG or PNG. Alpha is flattened onto white for JPEG output.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Optional, Tuple

from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from ..config import ImageQuality
from ..engine.geometry import EMU_PER_INCH

logger = logging.getLogger(__name__)

DEFAULT_DPI = 96.0

# DecompressionBombError does not derive from OSError.
_IMAGE_ERRORS = (UnidentifiedImageError, PILImage.DecompressionBombError, OSError, ValueError)


def image_pixel_size(data: bytes) -> Optional[Tuple[int, int]]:
    """Return ``(width, height)`` in pixels, or None when the bytes are not an image."""
    try:
        with PILImage.open(BytesIO(data)) as image:
            return image.size
    except _IMAGE_ERRORS as exc:
        logger.warning(f"Cannot read image header: {exc}")
        return None


def image_size_emu(data: bytes, dpi: float = DEFAULT_DPI) -> Optional[Tuple[int, int]]:
    """Intrinsic display size of an image in EMU, assuming ``dpi`` pixels per inch."""
    size = image_pixel_size(data)
    if size is None:
        return None
    width, height = size
    return int(width * EMU_PER_INCH / dpi), int(height * EMU_PER_INCH / dpi)


def prepare_image(data: bytes, quality: ImageQuality) -> bytes:
    """
    Downscale and re-encode image bytes for embedding.

    Returns the original bytes when Pillow cannot decode them; the renderer
    reports the failure when it tries to draw.
    """
    try:
        with PILImage.open(BytesIO(data)) as source:
            source.load()
            image = source.copy()
    except _IMAGE_ERRORS as exc:
        logger.warning(f"Image left unprocessed: {exc}")
        return data

    try:
        return _encode(image, quality)
    except _IMAGE_ERRORS as exc:
        logger.warning(f"Image re-encoding failed, keeping original bytes: {exc}")
        return data


def _encode(image: PILImage.Image, quality: ImageQuality) -> bytes:
    largest = max(image.size)
    if largest > quality.max_dimension:
        scale = quality.max_dimension / largest
        new_size = (max(1, int(image.width * scale)), max(1, int(image.height * scale)))
        logger.debug(f"Downscaling image {image.size} -> {new_size}")
        image = image.resize(new_size, PILImage.Resampling.LANCZOS)

    output = BytesIO()
    if quality.use_jpeg:
        if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
            rgba = image.convert("RGBA")
            flattened = PILImage.new("RGB", rgba.size, (255, 255, 255))
            flattened.paste(rgba, mask=rgba.split()[3])
            image = flattened
        elif image.mode != "RGB":
            image = image.convert("RGB")
        image.save(output, format="JPEG", quality=quality.jpeg_quality)
    else:
        if image.mode not in ("RGB", "RGBA", "L", "LA"):
            image = image.convert("RGBA")
        image.save(output, format="PNG")
    return output.getvalue()
