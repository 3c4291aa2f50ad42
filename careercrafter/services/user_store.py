"""User store operations needed by the AI core.

Profile CRUD lives elsewhere; this module only reads users and moves the
fields the assistant gate depends on (credits, premium flag).
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from ..models.user import User
from ..platform.errors import NotFoundError, PersistenceError, ValidationError
from .credit_ledger_service import apply_credit_delta

logger = logging.getLogger("careercrafter.users")


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def get_user_by_id(db: Session, user_id: int | str | None) -> User | None:
    try:
        resolved = int(str(user_id).strip())
    except (TypeError, ValueError):
        return None
    return db.query(User).filter(User.id == resolved).first()


def get_user_by_email(db: Session, email: str | None) -> User | None:
    cleaned = normalize_email(email)
    if not cleaned:
        return None
    return db.query(User).filter(User.email == cleaned).first()


def get_user(db: Session, ident: int | str | None) -> User | None:
    """Resolve a user by numeric id or by email."""
    if isinstance(ident, str) and "@" in ident:
        return get_user_by_email(db, ident)
    return get_user_by_id(db, ident)


def increment_credits(
    db: Session,
    email: str,
    delta: int,
    *,
    reason: str = "credit_grant",
    external_ref: str | None = None,
) -> User:
    user = get_user_by_email(db, email)
    if not user:
        raise NotFoundError("User not found")
    try:
        apply_credit_delta(
            db,
            user=user,
            delta=delta,
            reason=reason,
            external_ref=external_ref,
        )
    except ValueError as exc:
        db.rollback()
        raise ValidationError(str(exc)) from exc
    try:
        db.commit()
    except Exception as exc:
        db.rollback()
        logger.error("Failed to persist credit change for %s: %s", user.email, exc)
        raise PersistenceError("Failed to update credits") from exc
    db.refresh(user)
    return user


def set_premium_flag(db: Session, email: str, is_premium: bool, *, plan: str | None = None) -> User:
    user = get_user_by_email(db, email)
    if not user:
        raise NotFoundError("User not found")
    user.is_premium = bool(is_premium)
    if plan is not None:
        user.current_plan = plan
    try:
        db.commit()
    except Exception as exc:
        db.rollback()
        logger.error("Failed to persist premium flag for %s: %s", user.email, exc)
        raise PersistenceError("Failed to update premium status") from exc
    db.refresh(user)
    logger.info("Premium flag set user=%s is_premium=%s plan=%s", user.email, user.is_premium, plan)
    return user
