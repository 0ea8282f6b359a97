"""Client-side re-encoding of business card images before upload."""
import io
import logging
from pathlib import PurePath

from PIL import Image, UnidentifiedImageError

from mdm_console.core.errors import ConversionError
from mdm_console.core.models import PendingUpload

logger = logging.getLogger(__name__)

JPEG_QUALITY = 90
JPEG_TYPES = {"image/jpeg", "image/jpg", "image/pjpeg"}


def _jpeg_name(filename: str) -> str:
    stem = PurePath(filename or "card").stem or "card"
    return f"{stem}.jpg"


def ensure_jpeg(upload: PendingUpload, quality: int = JPEG_QUALITY) -> PendingUpload:
    """Return the upload as JPEG, re-encoding any other image format.

    Raises ``ConversionError`` when the bytes cannot be decoded or encoded; the
    caller must not fall back to sending the unconverted file.
    """

    if upload.content_type.lower() in JPEG_TYPES:
        return upload

    try:
        with Image.open(io.BytesIO(upload.content)) as image:
            if image.format == "JPEG":
                return PendingUpload(upload.filename, upload.content, "image/jpeg")
            image.load()
            if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
                rgba = image.convert("RGBA")
                # JPEG has no alpha channel; flatten onto white like a browser canvas would.
                converted = Image.new("RGB", rgba.size, (255, 255, 255))
                converted.paste(rgba, mask=rgba.split()[-1])
            else:
                converted = image.convert("RGB")
            buffer = io.BytesIO()
            converted.save(buffer, format="JPEG", quality=quality)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        logger.warning("Could not convert %s to JPEG: %s", upload.filename, exc)
        raise ConversionError(f"Could not convert {upload.filename or 'image'} to JPEG: {exc}") from exc

    logger.debug("Re-encoded %s (%s) as JPEG", upload.filename, upload.content_type)
    return PendingUpload(_jpeg_name(upload.filename), buffer.getvalue(), "image/jpeg")
