"""Product image upload.

Images go to ``POST /products/upload-image`` as multipart form data and the
backend answers with the stored object key as plain text. Type and size are
checked before anything is sent. The backend also runs content moderation;
a flagged image comes back as an error naming what was detected.
"""

import re

import structlog

from shared.api import ApiError, MarketplaceClient

logger = structlog.get_logger(__name__)

ALLOWED_CONTENT_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp", "image/avif")
MAX_IMAGE_BYTES = 3 * 1024 * 1024

_DETECTED_PATTERN = re.compile(r"(?:detected|contains?)[:\s]+(?:an?\s+)?([\w\s-]+?)(?:\s*\(|[.,;]|$)", re.IGNORECASE)


class InvalidImage(ValueError):
    """The file was refused before upload (type or size)."""


class ImageRejected(Exception):
    """Content moderation refused the image."""

    def __init__(self, message: str, detected_item: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detected_item = detected_item


def validate_image(content: bytes, content_type: str) -> None:
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidImage(f"Invalid file type. Allowed types: {', '.join(ALLOWED_CONTENT_TYPES)}")
    if len(content) > MAX_IMAGE_BYTES:
        raise InvalidImage(f"File size exceeds the maximum limit of {MAX_IMAGE_BYTES // (1024 * 1024)}MB")


def detected_item_from(error: ApiError) -> str | None:
    """Pull the flagged object's name out of a moderation error."""
    payload = error.payload if isinstance(error.payload, dict) else {}
    for key in ("detected_object", "detectedObject"):
        if payload.get(key):
            return str(payload[key])
    detected = payload.get("detectedObjects") or payload.get("detected_objects")
    if isinstance(detected, list) and detected:
        # Entries look like "knife (87.12%)"
        return str(detected[0]).split(" (")[0]

    match = _DETECTED_PATTERN.search(error.message or "")
    return match.group(1).strip() if match else None


def _is_moderation_rejection(error: ApiError) -> bool:
    if error.status_code == 422:
        return True
    return error.status_code == 400 and "rejected" in (error.message or "").lower()


class ImageUploader:
    def __init__(
        self,
        client: MarketplaceClient,
        public_url: str = "http://localhost:9000",
        bucket: str = "product-images",
    ) -> None:
        self.client = client
        self.public_url = public_url.rstrip("/")
        self.bucket = bucket

    def upload(self, filename: str, content: bytes, content_type: str) -> str:
        """Upload one image and return its object key."""
        validate_image(content, content_type)

        try:
            key = self.client.post(
                "/products/upload-image",
                files={"file": (filename, content, content_type)},
                auth=True,
                raw_text=True,
            )
        except ApiError as exc:
            if not _is_moderation_rejection(exc):
                raise
            item = detected_item_from(exc)
            message = f"Image rejected: {item} is not allowed on the marketplace" if item else exc.message
            logger.info("Image rejected by moderation", filename=filename, detected_item=item)
            raise ImageRejected(message, detected_item=item) from exc

        return key.strip()

    def image_url(self, object_key: str) -> str:
        """Public URL for a stored image. Absolute URLs pass through unchanged."""
        if object_key.startswith(("http://", "https://")):
            return object_key
        clean = object_key.replace("/browser/", "").lstrip("/")
        return f"{self.public_url}/{self.bucket}/{clean}"
