from fastapi import APIRouter, HTTPException, Depends, Query, status
from typing import List, Optional
from nestly.schemas.chat import (
    ConversationResponse,
    ConversationCreateRequest,
    ConversationUpdateRequest,
    MessageResponse,
    MessageCreateRequest,
)
from nestly.services.chat_service import (
    list_conversations,
    create_conversation,
    update_conversation_status,
    get_messages,
    post_message,
)
from nestly.utils.dependencies import get_current_user

router = APIRouter(prefix="/chat", tags=["Support Chat"])


def _conversation_not_found():
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Conversation not found"
    )


def _forbidden(e: PermissionError):
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=str(e)
    )


@router.get("/conversations", response_model=List[ConversationResponse])
async def get_conversations(
    status_filter: Optional[str] = Query(None, alias="status"),
    user: dict = Depends(get_current_user)
):
    """Conversations visible to the caller with unread counts"""
    return await list_conversations(user, status_filter)


@router.post("/conversations", response_model=ConversationResponse, status_code=status.HTTP_201_CREATED)
async def open_conversation(
    request: ConversationCreateRequest,
    user: dict = Depends(get_current_user)
):
    """Start a support conversation"""
    return await create_conversation(user, subject=request.subject, admin_id=request.adminId)


@router.patch("/conversations/{conversation_id}", response_model=ConversationResponse)
async def patch_conversation(
    conversation_id: str,
    request: ConversationUpdateRequest,
    user: dict = Depends(get_current_user)
):
    """Change conversation status (Admin only)"""
    try:
        conversation = await update_conversation_status(conversation_id, request.status, user)
    except PermissionError as e:
        raise _forbidden(e)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not conversation:
        raise _conversation_not_found()
    return conversation


@router.get("/messages", response_model=List[MessageResponse])
async def get_conversation_messages(
    conversationId: Optional[str] = Query(None),
    user: dict = Depends(get_current_user)
):
    """Messages of a conversation, oldest first; marks incoming ones read"""
    if not conversationId:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="conversationId is required"
        )

    try:
        messages = await get_messages(conversationId, user)
    except PermissionError as e:
        raise _forbidden(e)

    if messages is None:
        raise _conversation_not_found()
    return messages


@router.post("/messages", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    request: MessageCreateRequest,
    user: dict = Depends(get_current_user)
):
    """Post a message; reopens closed conversations"""
    try:
        message = await post_message(request.conversationId, request.content, user)
    except PermissionError as e:
        raise _forbidden(e)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not message:
        raise _conversation_not_found()
    return message
