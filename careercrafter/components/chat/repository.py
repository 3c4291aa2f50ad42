"""Assistant transcript storage, one conversation per user email."""

from __future__ import annotations

from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models.chat import ChatConversation, ChatMessage
from ...platform.errors import PersistenceError
from ...services.user_store import normalize_email
from ...shared.utils import isoformat_or_none, utcnow
from .rules import GREETING


def get_conversation(db: Session, email: str) -> ChatConversation | None:
    return (
        db.query(ChatConversation)
        .filter(ChatConversation.user_email == normalize_email(email))
        .first()
    )


def get_or_create_conversation(db: Session, email: str, *, greeting: str | None = GREETING) -> ChatConversation:
    """Return the transcript for ``email``, creating it (with an optional greeting) on first use."""
    email = normalize_email(email)
    conversation = get_conversation(db, email)
    if conversation:
        return conversation
    conversation = ChatConversation(user_email=email)
    if greeting:
        conversation.messages.append(ChatMessage(role="assistant", content=greeting))
    db.add(conversation)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        conversation = get_conversation(db, email)
        if conversation is None:
            raise PersistenceError("Failed to create conversation")
        return conversation
    except Exception as exc:
        db.rollback()
        raise PersistenceError("Failed to create conversation") from exc
    db.refresh(conversation)
    return conversation


def append_turn(db: Session, conversation: ChatConversation, user_text: str, assistant_text: str) -> tuple[ChatMessage, ChatMessage]:
    """Stage one user message and its reply. Does not commit."""
    user_message = ChatMessage(role="user", content=user_text)
    assistant_message = ChatMessage(role="assistant", content=assistant_text)
    conversation.messages.append(user_message)
    conversation.messages.append(assistant_message)
    conversation.updated_at = utcnow()
    db.flush()
    return user_message, assistant_message


def reset_conversation(db: Session, conversation: ChatConversation, greeting: str) -> None:
    """Replace the transcript with a single greeting. Does not commit."""
    conversation.messages.clear()
    conversation.messages.append(ChatMessage(role="assistant", content=greeting))
    conversation.updated_at = utcnow()
    db.flush()


def history_for_prompt(conversation: ChatConversation) -> List[Dict[str, str]]:
    return [{"role": message.role, "content": message.content} for message in conversation.messages]


def serialize_message(message: ChatMessage) -> Dict[str, Any]:
    return {
        "id": message.id,
        "role": message.role,
        "content": message.content,
        "timestamp": isoformat_or_none(message.created_at),
    }


def serialize_conversation(conversation: ChatConversation) -> Dict[str, Any]:
    return {
        "id": conversation.id,
        "userEmail": conversation.user_email,
        "messages": [serialize_message(message) for message in conversation.messages],
        "createdAt": isoformat_or_none(conversation.created_at),
        "updatedAt": isoformat_or_none(conversation.updated_at),
    }
