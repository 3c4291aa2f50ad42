"""
CareerCrafter service layer.

Store operations shared by the matching and chat components.
"""

from .credit_ledger_service import apply_credit_delta
from .user_store import get_user, get_user_by_email, get_user_by_id, increment_credits, set_premium_flag
