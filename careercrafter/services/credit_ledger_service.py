from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from ..models.ai_credit_ledger import AiCreditLedger
from ..models.user import User

logger = logging.getLogger("careercrafter.credits")


def apply_credit_delta(
    db: Session,
    *,
    user: User,
    delta: int,
    reason: str,
    external_ref: str | None = None,
    metadata: dict[str, Any] | None = None,
    allow_negative: bool = False,
) -> tuple[AiCreditLedger, bool]:
    """Atomically move a user's AI credit balance and record a ledger entry.

    The balance change is a single ``UPDATE ... SET ai_credits = ai_credits +
    :delta`` so concurrent turns cannot lose updates. Returns ``(entry,
    created)``; ``created`` is False when ``external_ref`` was already applied.
    Does not commit.
    """
    if external_ref:
        existing = (
            db.query(AiCreditLedger)
            .filter(AiCreditLedger.external_ref == external_ref)
            .first()
        )
        if existing:
            return existing, False

    delta = int(delta)
    stmt = update(User).where(User.id == user.id)
    if not allow_negative and delta < 0:
        stmt = stmt.where(User.ai_credits + delta >= 0)
    result = db.execute(
        stmt.values(ai_credits=User.ai_credits + delta).execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise ValueError("insufficient_credits")
    db.refresh(user, ["ai_credits"])
    next_balance = int(user.ai_credits or 0)

    entry = AiCreditLedger(
        user_id=user.id,
        delta=delta,
        balance_after=next_balance,
        reason=reason,
        external_ref=external_ref,
        entry_metadata=metadata or {},
    )
    db.add(entry)
    db.flush()
    logger.info(
        "Credit ledger entry user_id=%s delta=%d balance_after=%d reason=%s",
        user.id,
        delta,
        next_balance,
        reason,
    )
    return entry, True


def serialize_ledger_entry(entry: AiCreditLedger) -> dict:
    return {
        "id": entry.id,
        "delta": entry.delta,
        "balanceAfter": entry.balance_after,
        "reason": entry.reason,
        "externalRef": entry.external_ref,
        "metadata": entry.entry_metadata or {},
        "createdAt": entry.created_at.isoformat() if entry.created_at else None,
    }
