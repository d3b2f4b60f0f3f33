"""Image hosting for style uploads (Cloudinary unsigned uploads)."""

import logging
from typing import Optional

import httpx
from litestar.exceptions import ValidationException

from app import config

logger = logging.getLogger("Omifem.images")

MAX_IMAGE_BYTES = 5 * 1024 * 1024
UPLOAD_TIMEOUT = 30.0


class ImageUploadError(RuntimeError):
    """The image host rejected the upload or could not be reached."""


def validate_image(content: bytes, content_type: Optional[str]) -> None:
    """Reject non-images and files over 5MB before any network call."""
    if not content_type or not content_type.startswith("image/"):
        raise ValidationException("Please select an image file")
    if not content:
        raise ValidationException("Please select an image")
    if len(content) > MAX_IMAGE_BYTES:
        raise ValidationException("Image size should be less than 5MB")


def upload_url(cloud_name: str) -> str:
    return f"https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"


async def upload_image(content: bytes, filename: str, content_type: str) -> str:
    """Upload an image and return its durable URL.
    
    Without Cloudinary settings the placeholder image URL is returned so
    styles can still be created.
    """
    validate_image(content, content_type)

    if not config.image_hosting_configured():
        logger.warning("Image hosting not configured, using placeholder image")
        return config.PLACEHOLDER_IMAGE_URL

    url = upload_url(config.CLOUDINARY_CLOUD_NAME)
    logger.info(f"Uploading image {filename} ({len(content)} bytes)")

    async with httpx.AsyncClient() as client:
        try:
            response = await client.post(
                url,
                data={
                    "upload_preset": config.CLOUDINARY_UPLOAD_PRESET,
                    "folder": config.CLOUDINARY_FOLDER,
                },
                files={"file": (filename, content, content_type)},
                timeout=UPLOAD_TIMEOUT,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = ""
            try:
                detail = e.response.json().get("error", {}).get("message", "")
            except ValueError:
                pass
            logger.error(f"Image upload failed: {e.response.status_code} {detail}")
            raise ImageUploadError(
                f"Failed to upload image: {detail or f'Upload failed with status: {e.response.status_code}'}"
            ) from e
        except httpx.TimeoutException as e:
            logger.error("Timeout uploading image")
            raise ImageUploadError("Image upload timed out. Please try again.") from e
        except httpx.RequestError as e:
            logger.error(f"Request error uploading image: {e}")
            raise ImageUploadError(f"Failed to connect to image host: {e}") from e

    secure_url = response.json().get("secure_url")
    if not secure_url:
        raise ImageUploadError("Image host did not return a URL")
    return secure_url
