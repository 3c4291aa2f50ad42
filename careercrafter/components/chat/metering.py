"""Usage metering and access gate for assistant turns.

The tier is never stored. It is derived on every request from the persisted
user-message count (``chat_usage``) and the user's premium flag and credit
balance. Counter and balance changes are single conditional ``UPDATE``
statements so concurrent turns cannot both claim the last free message.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from decimal import ROUND_CEILING, Decimal
from typing import Any, Dict, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models.chat import ChatUsageState
from ...models.user import User
from ...platform.config import ChatMeteringPolicy
from ...platform.errors import PersistenceError
from ...services.credit_ledger_service import apply_credit_delta
from ...services.user_store import get_user_by_email, normalize_email
from ...shared.utils import utcnow

logger = logging.getLogger("careercrafter.chat.metering")

USER_NOT_FOUND = "User not found"
INSUFFICIENT_CREDITS = "Insufficient credits"


class Tier(str, enum.Enum):
    FREE = "free"
    PREMIUM = "premium"
    CREDITS = "credits"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    tier: Tier
    message_count: int
    remaining_free: int
    credits: Optional[int] = None
    reason: Optional[str] = None
    required: Optional[int] = None

    @property
    def is_free(self) -> bool:
        return self.allowed and self.tier == Tier.FREE

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "allowed": self.allowed,
            "tier": self.tier.value,
            "remainingFree": self.remaining_free,
            "messageCount": self.message_count,
        }
        if self.credits is not None:
            payload["credits"] = self.credits
        if self.reason:
            payload["reason"] = self.reason
        if self.required is not None:
            payload["required"] = self.required
        return payload


def evaluate_access(user: User | None, message_count: int, policy: ChatMeteringPolicy) -> AccessDecision:
    """Pure tier decision for a user who has already sent ``message_count`` messages."""
    count = max(0, int(message_count or 0))
    remaining = max(0, policy.free_messages - count)

    if user is None:
        return AccessDecision(
            allowed=False,
            tier=Tier.BLOCKED,
            message_count=count,
            remaining_free=remaining,
            reason=USER_NOT_FOUND,
        )

    credits = int(user.ai_credits or 0)
    if count < policy.free_messages:
        return AccessDecision(allowed=True, tier=Tier.FREE, message_count=count, remaining_free=remaining)
    if user.is_premium:
        return AccessDecision(
            allowed=True, tier=Tier.PREMIUM, message_count=count, remaining_free=0, credits=credits
        )
    if credits >= policy.min_credits_required:
        return AccessDecision(
            allowed=True, tier=Tier.CREDITS, message_count=count, remaining_free=0, credits=credits
        )
    return AccessDecision(
        allowed=False,
        tier=Tier.BLOCKED,
        message_count=count,
        remaining_free=0,
        credits=credits,
        reason=INSUFFICIENT_CREDITS,
        required=policy.min_credits_required,
    )


def credits_for_reply(reply_length: int, policy: ChatMeteringPolicy) -> int:
    """``ceil(length * rate)`` in decimal arithmetic so 300 * 0.1 is exactly 30."""
    length = max(0, int(reply_length or 0))
    cost = Decimal(length) * Decimal(str(policy.credits_per_character))
    return int(cost.to_integral_value(rounding=ROUND_CEILING))


# ---------------------------------------------------------------------------
# Persisted usage counter
# ---------------------------------------------------------------------------


def get_usage(db: Session, email: str) -> ChatUsageState | None:
    return db.query(ChatUsageState).filter(ChatUsageState.user_email == normalize_email(email)).first()


def current_message_count(db: Session, email: str) -> int:
    usage = get_usage(db, email)
    return int(usage.user_messages_count or 0) if usage else 0


def _get_or_create_usage(db: Session, email: str) -> ChatUsageState:
    usage = get_usage(db, email)
    if usage:
        return usage
    db.add(ChatUsageState(user_email=email, user_messages_count=0))
    try:
        db.commit()
    except IntegrityError:
        # Another request created the row first.
        db.rollback()
    except Exception as exc:
        db.rollback()
        raise PersistenceError("Failed to initialise chat usage") from exc
    usage = get_usage(db, email)
    if usage is None:
        raise PersistenceError("Failed to initialise chat usage")
    return usage


def check_access(db: Session, email: str, policy: ChatMeteringPolicy) -> AccessDecision:
    """Read-only decision for the next turn."""
    user = get_user_by_email(db, email)
    return evaluate_access(user, current_message_count(db, email), policy)


def admit_turn(db: Session, email: str, policy: ChatMeteringPolicy) -> AccessDecision:
    """Count one user-authored turn and decide whether it may be answered.

    Returns the decision as of *before* this turn, so a FREE decision's
    ``remaining_free`` includes the message being sent. Unknown users are
    denied without touching the counter.
    """
    email = normalize_email(email)
    user = get_user_by_email(db, email)
    if user is None:
        return evaluate_access(None, current_message_count(db, email), policy)

    usage = _get_or_create_usage(db, email)
    now = utcnow()
    try:
        claimed = db.execute(
            update(ChatUsageState)
            .where(
                ChatUsageState.id == usage.id,
                ChatUsageState.user_messages_count < policy.free_messages,
            )
            .values(
                user_messages_count=ChatUsageState.user_messages_count + 1,
                last_activity_at=now,
            )
            .execution_options(synchronize_session=False)
        ).rowcount
        if not claimed:
            db.execute(
                update(ChatUsageState)
                .where(ChatUsageState.id == usage.id)
                .values(
                    user_messages_count=ChatUsageState.user_messages_count + 1,
                    last_activity_at=now,
                )
                .execution_options(synchronize_session=False)
            )
        db.commit()
    except Exception as exc:
        db.rollback()
        logger.error("Failed to record chat turn for %s: %s", email, exc)
        raise PersistenceError("Failed to record chat usage") from exc

    db.refresh(usage)
    db.refresh(user)
    count_before = int(usage.user_messages_count or 0) - 1
    if not claimed:
        count_before = max(count_before, policy.free_messages)
    decision = evaluate_access(user, count_before, policy)
    logger.info(
        "Chat turn admitted=%s user=%s tier=%s message_count=%d",
        decision.allowed,
        email,
        decision.tier.value,
        count_before + 1,
    )
    return decision


def charge_for_reply(
    db: Session,
    user: User,
    reply: str,
    decision: AccessDecision,
    policy: ChatMeteringPolicy,
) -> int:
    """Deduct credits for an answered paid turn. Does not commit.

    Free and denied turns are never charged. Returns the credits used.
    """
    if not decision.allowed or decision.tier == Tier.FREE:
        return 0
    cost = credits_for_reply(len(reply or ""), policy)
    user.last_ai_chat_at = utcnow()
    if cost <= 0:
        return 0
    apply_credit_delta(
        db,
        user=user,
        delta=-cost,
        reason="ai_chat_reply",
        metadata={"tier": decision.tier.value, "reply_chars": len(reply or "")},
        allow_negative=True,
    )
    logger.info("Deducted %d credits from %s", cost, user.email)
    return cost


def reset_usage(db: Session, email: str) -> None:
    usage = get_usage(db, email)
    if usage is None:
        return
    usage.user_messages_count = 0
    usage.last_activity_at = utcnow()
