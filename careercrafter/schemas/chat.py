from typing import Optional

from pydantic import BaseModel, Field


class ChatMessageRequest(BaseModel):
    # Blank or missing text is rejected by the service with a 400.
    message: Optional[str] = Field(default=None, max_length=4000)
