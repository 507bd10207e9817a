from google.auth.transport import requests
from google.oauth2 import id_token
from nestly.config import settings
from typing import Dict


async def verify_google_token(token: str) -> Dict[str, str]:
    """
    Verify Google ID token and return user info

    Args:
        token: Google ID token from frontend

    Returns:
        Dictionary with user info: email, name, picture, google_id

    Raises:
        ValueError: If token is invalid
    """
    try:
        if not settings.GOOGLE_CLIENT_ID:
            raise ValueError("Google Client ID not configured")

        # Clock skew tolerance handles small time differences between client and server
        idinfo = id_token.verify_oauth2_token(
            token,
            requests.Request(),
            settings.GOOGLE_CLIENT_ID,
            clock_skew_in_seconds=10
        )

        if idinfo['iss'] not in ['accounts.google.com', 'https://accounts.google.com']:
            raise ValueError('Wrong issuer.')

        if not idinfo.get("email"):
            raise ValueError("Google account has no email address")

        return {
            "email": idinfo["email"],
            "name": idinfo.get("name", ""),
            "picture": idinfo.get("picture", ""),
            "google_id": idinfo["sub"]
        }
    except ValueError as e:
        raise ValueError(f"Invalid Google token: {str(e)}")
    except Exception as e:
        raise ValueError(f"Error verifying Google token: {str(e)}")
