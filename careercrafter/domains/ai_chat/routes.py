from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...components.chat.responder import ChatResponder, build_default_responder
from ...components.chat.service import ChatService
from ...platform.database import get_db
from ...platform.request_context import set_user_email
from ...schemas.chat import ChatMessageRequest

router = APIRouter(prefix="/ai-chatbot", tags=["AI Chatbot"])


def get_chat_responder() -> ChatResponder:
    return build_default_responder()


def get_chat_service(
    db: Session = Depends(get_db),
    responder: ChatResponder = Depends(get_chat_responder),
) -> ChatService:
    return ChatService(db, responder)


@router.get("/chat/{email}")
def get_chat(email: str, service: ChatService = Depends(get_chat_service)):
    set_user_email(email)
    return service.get_chat(email)


@router.post("/chat/{email}/message")
def send_chat_message(
    email: str,
    data: ChatMessageRequest,
    service: ChatService = Depends(get_chat_service),
):
    set_user_email(email)
    return service.send_message(email, data.message)


@router.get("/user-status/{email}")
def get_user_status(email: str, service: ChatService = Depends(get_chat_service)):
    set_user_email(email)
    return service.user_status(email)


@router.delete("/chat/{email}")
def clear_chat(email: str, service: ChatService = Depends(get_chat_service)):
    set_user_email(email)
    return service.clear_chat(email)
