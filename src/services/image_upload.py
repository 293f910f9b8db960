"""Image upload adapter - unsigned uploads to Cloudinary."""

from typing import Optional
import httpx

from src.utils.app_config import AppConfig
from src.utils.errors import NetworkError
from src.utils.logging import get_structured_logger, log_timing

logger = get_structured_logger(__name__)

CLOUDINARY_UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"


async def upload_image(
    filename: str,
    content: bytes,
    config: Optional[AppConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """Upload one image and return its public ``secure_url``."""
    config = config or AppConfig.from_env()
    if not config.cloudinary_cloud_name or not config.cloudinary_upload_preset:
        raise NetworkError(
            "CLOUDINARY_CLOUD_NAME and CLOUDINARY_UPLOAD_PRESET must be set",
            user_message="Failed to upload image. Please try again."
        )

    url = CLOUDINARY_UPLOAD_URL.format(cloud_name=config.cloudinary_cloud_name)
    files = {"file": (filename, content)}
    data = {"upload_preset": config.cloudinary_upload_preset}

    with log_timing("upload_image", logger=logger, size_bytes=len(content)):
        try:
            if client is not None:
                response = await client.post(url, data=data, files=files)
            else:
                async with httpx.AsyncClient(timeout=config.http_timeout_seconds * 3) as own_client:
                    response = await own_client.post(url, data=data, files=files)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Image upload failed", error=str(e))
            raise NetworkError(f"Upload failed: {e}", user_message="Failed to upload image. Please try again.")

    secure_url = payload.get("secure_url")
    if not secure_url:
        raise NetworkError("Upload response had no secure_url", user_message="Failed to upload image. Please try again.")
    return secure_url
