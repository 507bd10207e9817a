"""
Chat Service - support conversations between users and admins
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, List, Dict
from sqlalchemy import select, update, func, or_, desc, asc
from nestly.database.connection import AsyncSessionLocal
from nestly.database.table_resolver import try_resolve_table, clear_table_cache, CONVERSATION, MESSAGE
from nestly.models.conversation import Conversation
from nestly.models.message import Message
from nestly.models.user import User

logger = logging.getLogger(__name__)

CONVERSATION_STATUSES = ("open", "closed", "pending")
DEFAULT_SUBJECT = "Support Request"


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def conversation_to_dict(conversation: Conversation, unread: Optional[int] = None) -> dict:
    data = {
        "id": conversation.id,
        "user_id": conversation.user_id,
        "admin_id": conversation.admin_id,
        "subject": conversation.subject,
        "status": conversation.status,
        "created_at": _iso(conversation.created_at),
        "updated_at": _iso(conversation.updated_at),
        "last_message_at": _iso(conversation.last_message_at),
    }
    if unread is not None:
        data["unread"] = unread
    return data


def message_to_dict(message: Message) -> dict:
    return {
        "id": message.id,
        "conversation_id": message.conversation_id,
        "sender_id": message.sender_id,
        "content": message.content,
        "read": bool(message.read),
        "created_at": _iso(message.created_at),
    }


def _is_participant(conversation: Conversation, user: dict) -> bool:
    if user.get("role") == "ADMIN":
        return True
    return user.get("id") in (conversation.user_id, conversation.admin_id)


async def list_conversations(user: dict, status: Optional[str] = None) -> List[dict]:
    """
    Conversations visible to the user, most recently active first.

    Admins see every conversation; anyone else sees the ones they take part in.
    Each item carries `unread`: messages from the other side not yet read.
    """
    async with AsyncSessionLocal() as session:
        conditions = []
        if status and status != "all":
            conditions.append(Conversation.status == status)
        if user.get("role") != "ADMIN":
            conditions.append(
                or_(Conversation.user_id == user["id"], Conversation.admin_id == user["id"])
            )

        stmt = select(Conversation).where(*conditions).order_by(desc(Conversation.last_message_at))
        result = await session.execute(stmt)
        conversations = result.scalars().all()

        if not conversations:
            return []

        unread_stmt = (
            select(Message.conversation_id, func.count())
            .where(
                Message.conversation_id.in_([c.id for c in conversations]),
                Message.read.is_(False),
                Message.sender_id != user["id"],
            )
            .group_by(Message.conversation_id)
        )
        unread_result = await session.execute(unread_stmt)
        unread_map = {conversation_id: count for conversation_id, count in unread_result.all()}

        return [conversation_to_dict(c, unread_map.get(c.id, 0)) for c in conversations]


async def _first_admin_id(session) -> Optional[str]:
    stmt = select(User.id).where(User.role == "ADMIN").order_by(asc(User.created_at)).limit(1)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def create_conversation(user: dict, subject: Optional[str] = None, admin_id: Optional[str] = None) -> dict:
    """Open a conversation; non-admins are auto-assigned the first admin when none is given"""
    async with AsyncSessionLocal() as session:
        if not admin_id and user.get("role") != "ADMIN":
            admin_id = await _first_admin_id(session)

        now = datetime.now(timezone.utc)
        conversation = Conversation(
            id=str(uuid.uuid4()),
            user_id=user["id"],
            admin_id=admin_id or None,
            subject=subject or DEFAULT_SUBJECT,
            status="open",
            created_at=now,
            updated_at=now,
            last_message_at=now,
        )
        session.add(conversation)
        await session.commit()
        await session.refresh(conversation)

        logger.info(f"Conversation {conversation.id} opened by {user['id']} (admin: {admin_id})")
        return conversation_to_dict(conversation)


async def update_conversation_status(conversation_id: str, status: Optional[str], user: dict) -> Optional[dict]:
    if user.get("role") != "ADMIN":
        raise PermissionError("Forbidden")
    if status is not None and status not in CONVERSATION_STATUSES:
        raise ValueError("Invalid status")

    async with AsyncSessionLocal() as session:
        conversation = await session.get(Conversation, conversation_id)
        if not conversation:
            return None

        if status:
            conversation.status = status
            conversation.updated_at = datetime.now(timezone.utc)
            await session.commit()
            await session.refresh(conversation)

        return conversation_to_dict(conversation)


async def get_messages(conversation_id: str, user: dict) -> Optional[List[dict]]:
    """Messages oldest first; the other side's unread messages become read"""
    async with AsyncSessionLocal() as session:
        conversation = await session.get(Conversation, conversation_id)
        if not conversation:
            return None
        if not _is_participant(conversation, user):
            raise PermissionError("Forbidden")

        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(asc(Message.created_at), asc(Message.id))
        )
        result = await session.execute(stmt)
        messages = [message_to_dict(m) for m in result.scalars().all()]

        unread_ids = [m["id"] for m in messages if not m["read"] and m["sender_id"] != user["id"]]
        if unread_ids:
            await session.execute(
                update(Message).where(Message.id.in_(unread_ids)).values(read=True)
            )
            await session.commit()

        return messages


async def post_message(conversation_id: str, content: str, user: dict) -> Optional[dict]:
    """Append a message; a closed conversation is reopened"""
    content = (content or "").strip()
    if not content:
        raise ValueError("conversationId and content are required")

    async with AsyncSessionLocal() as session:
        conversation = await session.get(Conversation, conversation_id)
        if not conversation:
            return None
        if not _is_participant(conversation, user):
            raise PermissionError("Forbidden")

        now = datetime.now(timezone.utc)
        message = Message(
            id=str(uuid.uuid4()),
            conversation_id=conversation_id,
            sender_id=user["id"],
            content=content,
            read=False,
            created_at=now,
        )
        session.add(message)

        if conversation.status == "closed":
            conversation.status = "open"
        conversation.last_message_at = now
        conversation.updated_at = now

        await session.commit()
        await session.refresh(message)
        return message_to_dict(message)


async def get_chat_status() -> Dict:
    """Whether the chat tables are reachable; re-probes instead of trusting the cache"""
    clear_table_cache(CONVERSATION)
    clear_table_cache(MESSAGE)
    conversations_table = await try_resolve_table(CONVERSATION)
    messages_table = await try_resolve_table(MESSAGE)
    ready = bool(conversations_table and messages_table)
    return {
        "ready": ready,
        "conversationsTable": conversations_table,
        "messagesTable": messages_table,
        "message": "Chat tables are ready" if ready else "Chat tables are missing; run the database migrations",
    }
