import asyncio
import logging
import cloudinary
import cloudinary.uploader
from nestly.config import settings
import uuid

logger = logging.getLogger(__name__)

# Larger files are skipped by the image upload endpoint
MAX_IMAGE_SIZE = 5 * 1024 * 1024

_cloudinary_configured = False


def _ensure_cloudinary_configured():
    """Ensure Cloudinary is configured"""
    global _cloudinary_configured
    if not _cloudinary_configured:
        if not settings.CLOUDINARY_CLOUD_NAME or not settings.CLOUDINARY_API_KEY or not settings.CLOUDINARY_API_SECRET:
            raise ValueError("Cloudinary credentials not configured. Please set CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY, and CLOUDINARY_API_SECRET in .env")
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            secure=True
        )
        _cloudinary_configured = True


def upload_image_sync(file_content: bytes, file_name: str, folder: str = "listings") -> str:
    """
    Upload an image to Cloudinary (synchronous)
    Returns: the https URL of the stored image
    """
    _ensure_cloudinary_configured()
    try:
        file_extension = file_name.rsplit('.', 1)[-1].lower() if '.' in file_name else ''
        public_id = f"{uuid.uuid4()}"

        result = cloudinary.uploader.upload(
            file_content,
            public_id=public_id,
            resource_type="image",
            folder=folder,
            format=file_extension or None
        )
        return result["secure_url"]
    except Exception as e:
        raise ValueError(f"Failed to upload file to Cloudinary: {str(e)}")


async def upload_image(file_content: bytes, file_name: str, folder: str = "listings") -> str:
    """Async wrapper for uploading an image"""
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(None, upload_image_sync, file_content, file_name, folder)


def upload_listing_images_sync(files) -> list:
    """
    Upload (file_name, content) pairs, skipping files over MAX_IMAGE_SIZE.
    Returns the list of uploaded URLs in input order.
    """
    urls = []
    for file_name, content in files:
        if len(content) > MAX_IMAGE_SIZE:
            logger.warning(f"Skipping {file_name}: {len(content)} bytes exceeds upload limit")
            continue
        urls.append(upload_image_sync(content, file_name, folder="listings"))
    return urls


async def upload_listing_images(files) -> list:
    """Async wrapper for uploading listing images"""
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(None, upload_listing_images_sync, files)
