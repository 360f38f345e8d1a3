"""Uploaded image validation and preparation.

Core Functions:
- validate_images(): Enforce count, per-file size, MIME type and total size limits
- detect_mime_type(): Sniff the real format from magic bytes (filetype)
- compress_image(): Re-encode large images as JPEG before forwarding (Pillow)
- prepare_forwarded_images(): Pick the images actually sent to the model
"""

from io import BytesIO
from typing import Optional

import filetype
from PIL import Image

from src.models.errors import invalid_request
from src.models.models import ImageAttachment
from src.utils.config import config
from src.utils.logger import logger


ALLOWED_MIME_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")
MAX_FILENAME_LENGTH = 255


def safe_execute_sync(func, operation_name: str, log_level: str = "warning", default_return=None):
    """Run an optional operation, logging and returning default_return on failure.

    Used where a failure should degrade gracefully (e.g. keep the original
    image bytes when compression fails).
    """
    try:
        return func()
    except Exception as e:
        msg = f"{operation_name}: {e}"
        if log_level == "debug":
            logger.debug(msg)
        else:
            logger.warning(msg)
        return default_return


def normalize_mime_type(mime_type: str) -> str:
    """Map the non-standard image/jpg onto image/jpeg."""
    mime_type = (mime_type or "").lower()
    return "image/jpeg" if mime_type == "image/jpg" else mime_type


def detect_mime_type(image_bytes: bytes, declared: Optional[str] = None) -> str:
    """Detect the image MIME type from magic bytes, falling back to the declared type."""
    kind = safe_execute_sync(lambda: filetype.guess(image_bytes), "Detect image type", log_level="debug")
    if kind is not None and kind.mime in ALLOWED_MIME_TYPES:
        return normalize_mime_type(kind.mime)
    return normalize_mime_type(declared or "image/jpeg")


def validate_images(images: list[ImageAttachment]) -> None:
    """Validate uploaded images against the configured limits.

    Args:
        images: Uploaded images in upload order.

    Raises:
        GenerationError: INVALID_REQUEST describing the first violated limit.
    """
    if not images:
        return

    if len(images) > config.MAX_IMAGES:
        raise invalid_request(f"Too many images (maximum {config.MAX_IMAGES})")

    max_size = config.MAX_IMAGE_SIZE_MB * 1024 * 1024
    total_size = 0
    for image in images:
        name = image.filename or "image"
        if image.size == 0:
            raise invalid_request(f"Invalid image file: {name}")
        if image.size > max_size:
            raise invalid_request(f"Image exceeds {config.MAX_IMAGE_SIZE_MB}MB: {name}")
        if (image.mime_type or "").lower() not in ALLOWED_MIME_TYPES:
            raise invalid_request(
                f"Unsupported image type: {image.mime_type}. Supported types: {', '.join(ALLOWED_MIME_TYPES)}"
            )
        if image.filename and len(image.filename) > MAX_FILENAME_LENGTH:
            raise invalid_request(f"Image filename too long: {image.filename[:50]}...")
        total_size += image.size

    max_total = config.MAX_TOTAL_IMAGE_SIZE_MB * 1024 * 1024
    if total_size > max_total:
        raise invalid_request(
            f"Total image size too large: {total_size / 1024 / 1024:.1f}MB (max {config.MAX_TOTAL_IMAGE_SIZE_MB}MB)"
        )


def compress_image(image_bytes: bytes, max_width: int = 1024) -> bytes:
    """Compress image for API transmission using Pillow.

    Uses JPEG format with quality=85 + optimize + progressive. Resizes oversized
    images and converts color modes to RGB. Images smaller than
    COMPRESS_IMG_THRESHOLD_KB are returned untouched.

    Args:
        image_bytes: Raw image bytes to compress
        max_width: Maximum image width in pixels

    Returns:
        Compressed JPEG bytes, or the original bytes if below threshold or compression failed
    """
    size_kb = len(image_bytes) / 1024
    if size_kb < config.COMPRESS_IMG_THRESHOLD_KB:
        logger.debug(
            f"Image size {size_kb:.1f}KB below compression threshold "
            f"({config.COMPRESS_IMG_THRESHOLD_KB}KB), skipping compression"
        )
        return image_bytes

    def _compress():
        img = Image.open(BytesIO(image_bytes))

        # Convert RGBA/LA/P to RGB for JPEG
        if img.mode in ("RGBA", "LA", "P"):
            rgb_img = Image.new("RGB", img.size, (255, 255, 255))
            if img.mode == "RGBA":
                rgb_img.paste(img, mask=img.split()[-1])
            else:
                rgb_img.paste(img)
            img = rgb_img
        elif img.mode != "RGB":
            img = img.convert("RGB")

        if img.width > max_width:
            ratio = max_width / img.width
            img = img.resize((max_width, int(img.height * ratio)), Image.Resampling.LANCZOS)

        output = BytesIO()
        img.save(output, format="JPEG", quality=85, optimize=True, progressive=True)
        compressed_bytes = output.getvalue()

        logger.debug(
            f"Image compressed: {len(image_bytes) / 1024:.1f}KB → {len(compressed_bytes) / 1024:.1f}KB"
        )
        return compressed_bytes

    return safe_execute_sync(_compress, "Image compression", default_return=image_bytes)


def prepare_forwarded_images(images: list[ImageAttachment], limit: Optional[int] = None) -> list[ImageAttachment]:
    """Select the first `limit` images and prepare them for the model.

    Each forwarded image gets its sniffed MIME type and, when COMPRESS_IMG is
    enabled, compressed bytes (which are always JPEG).
    """
    limit = config.MAX_FORWARDED_IMAGES if limit is None else limit
    selected = images[:limit]
    if len(images) > limit:
        logger.debug(f"Forwarding {limit} of {len(images)} images to the model")

    prepared = []
    for image in selected:
        data = image.data
        mime_type = detect_mime_type(data, image.mime_type)
        if config.COMPRESS_IMG:
            compressed = compress_image(data)
            if compressed is not data:
                data, mime_type = compressed, "image/jpeg"
        prepared.append(ImageAttachment(data=data, mime_type=mime_type, filename=image.filename))
    return prepared
