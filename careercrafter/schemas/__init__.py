from .chat import ChatMessageRequest
from .matching import MatchRequest

__all__ = [
    "ChatMessageRequest",
    "MatchRequest",
]
