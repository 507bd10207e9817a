from fastapi import APIRouter, HTTPException, Depends, status
from nestly.schemas.auth import SignupRequest, LoginRequest, TokenResponse
from nestly.schemas.user import UserResponse
from nestly.services.auth_service import register_user, authenticate_user
from nestly.utils.security import create_access_token
from nestly.utils.dependencies import get_current_user

router = APIRouter(prefix="/auth", tags=["Authentication"])


def issue_token(user: dict) -> TokenResponse:
    access_token = create_access_token(
        data={
            "sub": user["id"],
            "email": user["email"],
            "role": user["role"],
            "type": "user"
        }
    )
    return TokenResponse(access_token=access_token, token_type="bearer", user=UserResponse(**user))


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(request: SignupRequest):
    """Register a new user (USER or OWNER)"""
    try:
        user = await register_user(
            email=request.email,
            password=request.password,
            name=request.name,
            phone=request.phone,
            role=request.role,
        )
        return UserResponse(**user)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """Login with email/password and get access token"""
    user = await authenticate_user(email=request.email, password=request.password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )

    return issue_token(user)


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current logged-in user"""
    return UserResponse(**user)
