import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class DispatchRequest(BaseModel):
    user_id: uuid.UUID
    event_type: str = Field(..., description="payment_received, payment_reminder or rental_approved")
    payload: dict[str, Any] = Field(default_factory=dict)


class DeliveryResultResponse(BaseModel):
    channel: str
    success: bool
    target: Optional[str] = None
    error: Optional[str] = None

    model_config = {"from_attributes": True}


class NotificationResponse(BaseModel):
    id: uuid.UUID
    type: str
    title: str
    message: str
    data: dict
    is_read: bool
    read_at: Optional[datetime] = None
    action_url: Optional[str] = None
    priority: str
    created_at: datetime

    model_config = {"from_attributes": True}
