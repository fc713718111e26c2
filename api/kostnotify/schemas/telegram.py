import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class BindingRegister(BaseModel):
    user_id: Optional[uuid.UUID] = Field(None, description="User to bind. Either user_id or phone.")
    phone: Optional[str] = Field(None, description="Registered phone number of the user")
    chat_id: str = Field(..., min_length=1, max_length=64, description="Telegram chat id")
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @model_validator(mode="after")
    def check_user_reference(self) -> "BindingRegister":
        if not self.user_id and not self.phone:
            raise ValueError("Either user_id or phone is required")
        return self


class BindingResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    phone: Optional[str] = None
    chat_id: str
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_active: bool
    registered_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SendTestMessage(BaseModel):
    chat_id: str = Field(..., min_length=1, max_length=64)
    message: Optional[str] = Field(None, description="Defaults to the standard test message")
