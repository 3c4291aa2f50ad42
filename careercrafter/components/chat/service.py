"""Assistant turn pipeline: gate, answer, charge, record."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from ...platform.config import ChatMeteringPolicy, settings
from ...platform.errors import PersistenceError, ValidationError
from ...services.user_store import get_user_by_email, normalize_email
from .intents import ChatIntent, classify_intent
from .job_search import extract_search_skills, format_job_search_reply, free_messages_footer, search_jobs
from .metering import USER_NOT_FOUND, AccessDecision, admit_turn, charge_for_reply, check_access, reset_usage
from .repository import (
    append_turn,
    get_conversation,
    get_or_create_conversation,
    history_for_prompt,
    reset_conversation,
    serialize_conversation,
    serialize_message,
)
from .responder import ChatResponder
from .rules import (
    CHAT_CLEARED_MESSAGE,
    FALLBACK_REPLY,
    FRESH_START_GREETING,
    UPSELL_TEMPLATE,
    USER_NOT_FOUND_REPLY,
)

logger = logging.getLogger("careercrafter.chat")


def _require_email(email: str | None) -> str:
    cleaned = normalize_email(email)
    if not cleaned:
        raise ValidationError("User email is required")
    return cleaned


class ChatService:
    def __init__(self, db: Session, responder: ChatResponder, policy: ChatMeteringPolicy | None = None):
        self.db = db
        self.responder = responder
        self.policy = policy or settings.chat_policy

    def get_chat(self, email: str) -> Dict[str, Any]:
        conversation = get_or_create_conversation(self.db, _require_email(email))
        return serialize_conversation(conversation)

    def _denied_reply(self, decision: AccessDecision) -> str:
        if decision.reason == USER_NOT_FOUND:
            return USER_NOT_FOUND_REPLY
        return UPSELL_TEMPLATE.format(free_messages=self.policy.free_messages)

    def _answer(
        self, text: str, history: List[Dict[str, str]], decision: AccessDecision
    ) -> tuple[str, List[Dict[str, Any]], bool]:
        """Return ``(reply, jobs, billable)``; the canned fallback is never billable."""
        intent = classify_intent(text)
        logger.info("Assistant intent=%s tier=%s", intent.value, decision.tier.value)
        if intent == ChatIntent.JOB_SEARCH:
            jobs = search_jobs(self.db, text)
            return format_job_search_reply(jobs, extract_search_skills(text)), jobs, True
        try:
            reply = self.responder.reply(
                text,
                history,
                tier=decision.tier.value,
                remaining_free=decision.remaining_free if decision.is_free else None,
            )
        except Exception as exc:
            logger.warning("Assistant reply generation failed: %s", exc)
            return FALLBACK_REPLY, [], False
        return reply, [], True

    def send_message(self, email: str, message: str | None) -> Dict[str, Any]:
        email = _require_email(email)
        text = (message or "").strip()
        if not text:
            raise ValidationError("Message is required")

        conversation = get_or_create_conversation(self.db, email, greeting=None)
        history = history_for_prompt(conversation)
        decision = admit_turn(self.db, email, self.policy)

        jobs: List[Dict[str, Any]] = []
        billable = False
        if not decision.allowed:
            reply = self._denied_reply(decision)
        else:
            reply, jobs, billable = self._answer(text, history, decision)
            if decision.is_free:
                # The counter already includes this turn.
                reply += free_messages_footer(decision.remaining_free - 1)

        credits_used = 0
        try:
            if billable:
                user = get_user_by_email(self.db, email)
                if user is not None:
                    credits_used = charge_for_reply(self.db, user, reply, decision, self.policy)
            user_message, assistant_message = append_turn(self.db, conversation, text, reply)
            self.db.commit()
        except Exception as exc:
            self.db.rollback()
            logger.error("Failed to record assistant turn for %s: %s", email, exc)
            raise PersistenceError("Error processing message") from exc

        snapshot = check_access(self.db, email, self.policy)
        logger.info(
            "Assistant turn user=%s allowed=%s tier=%s credits_used=%d message_count=%d",
            email,
            decision.allowed,
            decision.tier.value,
            credits_used,
            snapshot.message_count,
        )
        return {
            "userMessage": serialize_message(user_message),
            "assistantMessage": serialize_message(assistant_message),
            "userAccess": snapshot.to_payload(),
            "jobs": jobs,
        }

    def user_status(self, email: str) -> Dict[str, Any]:
        email = _require_email(email)
        decision = check_access(self.db, email, self.policy)
        user = get_user_by_email(self.db, email)
        return {
            "userAccess": decision.to_payload(),
            "user": {
                "email": user.email if user else None,
                "isPremium": user.is_premium if user else None,
                "aiCredits": user.ai_credits if user else None,
                "currentPlan": user.current_plan if user else None,
                "role": user.role if user else None,
            },
        }

    def clear_chat(self, email: str) -> Dict[str, Any]:
        email = _require_email(email)
        conversation = get_conversation(self.db, email)
        try:
            if conversation is not None:
                reset_conversation(self.db, conversation, FRESH_START_GREETING)
            if self.policy.clear_resets_free_messages:
                reset_usage(self.db, email)
            self.db.commit()
        except Exception as exc:
            self.db.rollback()
            logger.error("Failed to clear assistant chat for %s: %s", email, exc)
            raise PersistenceError("Error clearing chat") from exc
        logger.info("Assistant chat cleared user=%s", email)
        return {"message": CHAT_CLEARED_MESSAGE}
