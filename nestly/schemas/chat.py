from pydantic import BaseModel
from typing import Optional


class ConversationResponse(BaseModel):
    id: str
    user_id: str
    admin_id: Optional[str] = None
    subject: Optional[str] = None
    status: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    last_message_at: Optional[str] = None
    unread: Optional[int] = None


class ConversationCreateRequest(BaseModel):
    subject: Optional[str] = None
    adminId: Optional[str] = None


class ConversationUpdateRequest(BaseModel):
    status: Optional[str] = None  # 'open', 'closed' or 'pending'


class MessageResponse(BaseModel):
    id: str
    conversation_id: str
    sender_id: str
    content: str
    read: bool
    created_at: Optional[str] = None


class MessageCreateRequest(BaseModel):
    conversationId: str
    content: str


class ChatStatusResponse(BaseModel):
    ready: bool
    conversationsTable: Optional[str] = None
    messagesTable: Optional[str] = None
    message: str
