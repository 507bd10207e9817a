import logging
from fastapi import APIRouter, HTTPException, Depends, UploadFile, File, Form, status
from typing import Optional
from nestly.schemas.user import (
    UserResponse,
    RoleUpdateRequest,
    RoleUpdateResponse,
    CreditsResponse,
    CreditsUpdateRequest,
    CreditsUpdateResponse,
)
from nestly.services.user_service import (
    get_user_by_id,
    update_profile,
    update_role,
    verify_owner,
    get_credits,
    update_credits,
)
from nestly.services.cloudinary_service import upload_image
from nestly.utils.dependencies import get_current_user, require_admin, is_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def _user_not_found():
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="User not found"
    )


@router.put("/profile", response_model=UserResponse)
async def update_my_profile(
    name: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    bio: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    user: dict = Depends(get_current_user)
):
    """Update own profile (multipart form, optional avatar image)"""
    update_data = {}
    for key, value in (("name", name), ("phone", phone), ("location", location), ("bio", bio)):
        if value is not None:
            update_data[key] = value

    if avatar is not None and avatar.filename:
        try:
            content = await avatar.read()
            update_data["avatar"] = await upload_image(content, avatar.filename, folder="avatars")
        except ValueError as e:
            logger.error(f"Avatar upload failed for {user['id']}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to upload avatar"
            )

    updated = await update_profile(user["id"], update_data)
    if not updated:
        raise _user_not_found()
    return UserResponse(**updated)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, user: dict = Depends(get_current_user)):
    """Get user by ID"""
    found = await get_user_by_id(user_id)
    if not found:
        raise _user_not_found()
    return UserResponse(**found)


@router.put("/{user_id}/role", response_model=RoleUpdateResponse)
async def update_user_role(
    user_id: str,
    request: RoleUpdateRequest,
    user: dict = Depends(get_current_user)
):
    """
    Change a role. Admins can change anyone; users can change their own role,
    and may only become ADMIN while no admin exists or when whitelisted.
    """
    try:
        updated = await update_role(user_id, request.role, actor=user)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except PermissionError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )

    if not updated:
        raise _user_not_found()
    return RoleUpdateResponse(**updated)


@router.post("/{user_id}/verify-owner", response_model=UserResponse)
async def verify_owner_endpoint(user_id: str, admin: dict = Depends(require_admin)):
    """Mark an owner as verified (Admin only)"""
    updated = await verify_owner(user_id)
    if not updated:
        raise _user_not_found()
    return UserResponse(**updated)


@router.get("/{user_id}/credits", response_model=CreditsResponse)
async def get_user_credits(user_id: str, user: dict = Depends(get_current_user)):
    """Credit balance (self or admin)"""
    if user["id"] != user_id and not is_admin(user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden"
        )

    credits = await get_credits(user_id)
    if not credits:
        raise _user_not_found()
    return CreditsResponse(**credits)


@router.put("/{user_id}/credits", response_model=CreditsUpdateResponse)
async def update_user_credits(
    user_id: str,
    request: CreditsUpdateRequest,
    admin: dict = Depends(require_admin)
):
    """Set, add or subtract credits (Admin only)"""
    if request.action not in ("set", "add", "subtract"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid action"
        )

    result = await update_credits(user_id, request.credits, request.action)
    if not result:
        raise _user_not_found()
    return CreditsUpdateResponse(**result)
