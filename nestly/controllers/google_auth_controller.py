import logging
from fastapi import APIRouter, HTTPException, status
from nestly.services.google_auth_service import verify_google_token
from nestly.services.auth_service import get_or_create_user_from_google
from nestly.controllers.auth_controller import issue_token
from nestly.schemas.auth import GoogleTokenRequest, TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth/google", tags=["Google Authentication"])


@router.post("/login", response_model=TokenResponse)
async def google_login(request: GoogleTokenRequest):
    """
    Login with Google OAuth token

    Args:
        request: Contains the Google ID token

    Returns:
        JWT access token and the user
    """
    try:
        google_info = await verify_google_token(request.token)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e)
        )

    try:
        user = await get_or_create_user_from_google(google_info)
    except Exception as e:
        logger.error(f"Google login failed for {google_info.get('email')}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error during Google authentication: {str(e)}"
        )

    return issue_token(user)
