from typing import Optional, Union

from pydantic import BaseModel, Field, StrictInt, StrictStr


class MatchRequest(BaseModel):
    # Strict so a JSON boolean is not coerced to user 1.
    user_id: Optional[Union[StrictInt, StrictStr]] = Field(default=None, alias="userId")

    model_config = {"populate_by_name": True}
