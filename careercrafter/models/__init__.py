from .user import User
from .job import Job
from .match_run import MatchRun
from .chat import ChatConversation, ChatMessage, ChatUsageState
from .ai_credit_ledger import AiCreditLedger

__all__ = [
    "User",
    "Job",
    "MatchRun",
    "ChatConversation",
    "ChatMessage",
    "ChatUsageState",
    "AiCreditLedger",
]
