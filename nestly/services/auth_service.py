import logging
import secrets
import uuid
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import select
from nestly.database.connection import AsyncSessionLocal
from nestly.models.user import User
from nestly.services.user_service import user_to_dict
from nestly.utils.security import verify_password, get_password_hash

logger = logging.getLogger(__name__)

SIGNUP_ROLES = ("USER", "OWNER")


async def register_user(
    email: str,
    password: str,
    name: Optional[str] = None,
    phone: Optional[str] = None,
    role: Optional[str] = None,
) -> dict:
    """Register a new user with email/password credentials"""
    role = role or "USER"
    if role not in SIGNUP_ROLES:
        raise ValueError("Invalid role")

    async with AsyncSessionLocal() as session:
        stmt = select(User).where(User.email == email.lower())
        result = await session.execute(stmt)
        if result.scalar_one_or_none():
            raise ValueError("User already exists")

        now = datetime.now(timezone.utc)
        new_user = User(
            id=str(uuid.uuid4()),
            email=email.lower(),
            password=get_password_hash(password),
            name=name or None,
            phone=phone or None,
            role=role,
            owner_verified=False,
            credits=0,
            created_at=now,
            updated_at=now,
        )

        session.add(new_user)
        await session.commit()
        await session.refresh(new_user)

        logger.info(f"User registered: {new_user.id} ({new_user.role})")
        return user_to_dict(new_user)


async def authenticate_user(email: str, password: str) -> Optional[dict]:
    """Authenticate user and return user data if valid"""
    async with AsyncSessionLocal() as session:
        stmt = select(User).where(User.email == email.lower())
        result = await session.execute(stmt)
        user = result.scalar_one_or_none()

        if not user:
            return None

        if not verify_password(password, user.password):
            logger.warning(f"Invalid password for user: {user.id}")
            return None

        return user_to_dict(user)


async def get_or_create_user_from_google(google_info: dict) -> dict:
    """Get existing user or create a new one from Google OAuth, refreshing name/avatar"""
    email = google_info["email"].lower()

    async with AsyncSessionLocal() as session:
        stmt = select(User).where(User.email == email)
        result = await session.execute(stmt)
        user = result.scalar_one_or_none()

        if user:
            name = google_info.get("name")
            picture = google_info.get("picture")
            changed = False
            if name and name != user.name:
                user.name = name
                changed = True
            if picture and picture != user.avatar:
                user.avatar = picture
                changed = True
            if changed:
                await session.commit()
                await session.refresh(user)
            return user_to_dict(user)

        now = datetime.now(timezone.utc)
        new_user = User(
            id=str(uuid.uuid4()),
            email=email,
            # Google users never log in with a password
            password=get_password_hash(secrets.token_urlsafe(32)),
            name=google_info.get("name") or None,
            avatar=google_info.get("picture") or None,
            role="USER",
            owner_verified=False,
            credits=0,
            created_at=now,
            updated_at=now,
        )

        session.add(new_user)
        await session.commit()
        await session.refresh(new_user)

        logger.info(f"User created from Google: {new_user.id}")
        return user_to_dict(new_user)
