import logging
from typing import Optional, Dict, List
from sqlalchemy import select, func, delete, update, or_
from nestly.database.connection import AsyncSessionLocal
from nestly.models.user import User
from nestly.models.listing import Listing
from nestly.models.review import Review
from nestly.models.saved_listing import SavedListing
from nestly.models.conversation import Conversation
from nestly.models.message import Message
from nestly.utils.admin_whitelist import is_admin_email_allowed

logger = logging.getLogger(__name__)

VALID_ROLES = ("USER", "OWNER", "ADMIN")


def user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "phone": user.phone,
        "avatar": user.avatar,
        "location": user.location,
        "bio": user.bio,
        "role": user.role,
        "ownerVerified": bool(user.owner_verified),
        "createdAt": user.created_at.isoformat() if user.created_at else "",
        "updatedAt": user.updated_at.isoformat() if user.updated_at else "",
    }


async def get_user_by_id(user_id: str) -> Optional[dict]:
    """Get user by ID"""
    async with AsyncSessionLocal() as session:
        user = await session.get(User, user_id)
        if not user:
            return None
        return user_to_dict(user)


async def get_users_for_admin() -> List[dict]:
    """All non-admin users, newest first"""
    async with AsyncSessionLocal() as session:
        stmt = (
            select(User)
            .where(User.role != "ADMIN")
            .order_by(User.created_at.desc())
        )
        result = await session.execute(stmt)
        return [user_to_dict(u) for u in result.scalars().all()]


async def delete_user(user_id: str) -> bool:
    """
    Delete a user together with their listings, reviews, bookmarks and
    support conversations. Conversations they were assigned to as admin
    become unassigned.
    """
    async with AsyncSessionLocal() as session:
        user = await session.get(User, user_id)
        if not user:
            return False

        owned_listings = select(Listing.id).where(Listing.owner_id == user_id)
        own_conversations = select(Conversation.id).where(Conversation.user_id == user_id)

        await session.execute(
            delete(Review).where(or_(Review.user_id == user_id, Review.listing_id.in_(owned_listings)))
        )
        await session.execute(
            delete(SavedListing).where(
                or_(SavedListing.user_id == user_id, SavedListing.listing_id.in_(owned_listings))
            )
        )
        await session.execute(delete(Listing).where(Listing.owner_id == user_id))
        await session.execute(
            delete(Message).where(
                or_(Message.sender_id == user_id, Message.conversation_id.in_(own_conversations))
            )
        )
        await session.execute(delete(Conversation).where(Conversation.user_id == user_id))
        await session.execute(
            update(Conversation).where(Conversation.admin_id == user_id).values(admin_id=None)
        )

        await session.delete(user)
        await session.commit()
        logger.info(f"User {user_id} deleted with their listings and support history")
        return True


async def update_profile(user_id: str, update_data: Dict) -> Optional[dict]:
    """Update name/phone/location/bio/avatar; empty strings clear the field"""
    async with AsyncSessionLocal() as session:
        user = await session.get(User, user_id)
        if not user:
            return None

        for key in ("name", "phone", "location", "bio", "avatar"):
            if key in update_data:
                setattr(user, key, update_data[key] or None)

        await session.commit()
        await session.refresh(user)
        return user_to_dict(user)


async def _admin_exists(session) -> bool:
    stmt = select(func.count()).select_from(User).where(User.role == "ADMIN")
    result = await session.execute(stmt)
    return (result.scalar_one() or 0) > 0


async def update_role(target_id: str, role: str, actor: dict) -> Optional[dict]:
    """
    Change a user's role.

    Admins may change anyone. A user may change their own role between USER
    and OWNER; promoting oneself to ADMIN is only allowed while no admin exists
    yet or when the email is whitelisted in ADMIN_EMAILS.
    """
    if role not in VALID_ROLES:
        raise ValueError("Invalid role")

    actor_is_admin = actor.get("role") == "ADMIN"
    if not actor_is_admin and actor.get("id") != target_id:
        raise PermissionError("Forbidden")

    async with AsyncSessionLocal() as session:
        user = await session.get(User, target_id)
        if not user:
            return None

        if role == "ADMIN" and not actor_is_admin:
            bootstrap = not await _admin_exists(session) or is_admin_email_allowed(user.email)
            if not bootstrap:
                raise PermissionError("Only an admin can grant the ADMIN role")

        user.role = role
        await session.commit()
        await session.refresh(user)
        return {"id": user.id, "email": user.email, "name": user.name, "role": user.role}


async def verify_owner(user_id: str) -> Optional[dict]:
    async with AsyncSessionLocal() as session:
        user = await session.get(User, user_id)
        if not user:
            return None
        user.owner_verified = True
        await session.commit()
        await session.refresh(user)
        return user_to_dict(user)


async def get_credits(user_id: str) -> Optional[dict]:
    async with AsyncSessionLocal() as session:
        user = await session.get(User, user_id)
        if not user:
            return None
        return {
            "credits": user.credits or 0,
            "userId": user.id,
            "email": user.email,
            "name": user.name,
        }


async def update_credits(user_id: str, credits: float, action: str = "set") -> Optional[dict]:
    """Apply a credits change; subtract never goes below zero"""
    async with AsyncSessionLocal() as session:
        user = await session.get(User, user_id)
        if not user:
            return None

        current = user.credits or 0
        if action == "add":
            new_credits = current + credits
        elif action == "subtract":
            new_credits = max(0, current - credits)
        else:
            action = "set"
            new_credits = credits

        user.credits = new_credits
        await session.commit()
        await session.refresh(user)

        return {
            "success": True,
            "userId": user.id,
            "email": user.email,
            "name": user.name,
            "previousCredits": current,
            "newCredits": user.credits or 0,
            "action": action,
        }
