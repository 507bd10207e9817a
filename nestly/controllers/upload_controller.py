import logging
from fastapi import APIRouter, HTTPException, Depends, UploadFile, File, status
from typing import List, Optional
from nestly.schemas.payment import UploadResponse
from nestly.services.cloudinary_service import upload_listing_images
from nestly.utils.dependencies import get_current_user
from nestly.utils.errors import error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["Uploads"])


@router.post("", response_model=UploadResponse)
async def upload_images(
    images: Optional[List[UploadFile]] = File(None),
    user: dict = Depends(get_current_user)
):
    """Upload listing images; files over 5 MB are skipped"""
    if not images:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No files provided"
        )

    files = [(image.filename or "image", await image.read()) for image in images]

    try:
        urls = await upload_listing_images(files)
    except ValueError as e:
        logger.error(f"Image upload failed for {user['id']}: {e}")
        return error_response("Failed to upload files", e)

    logger.info(f"Uploaded {len(urls)}/{len(files)} images for {user['id']}")
    return UploadResponse(urls=urls)
