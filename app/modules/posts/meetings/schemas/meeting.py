from typing import Optional
from datetime import datetime
from pydantic import Field, field_validator

from app.modules.user_management.schemas.user import AuthorSummary, CamelModel

class MeetingRequestCreate(CamelModel):
    date: str = Field(default="", validate_default=True)
    time: str = Field(default="", validate_default=True)
    message: str = Field(default="", validate_default=True)

    @field_validator("date", "time", "message", mode="before")
    @classmethod
    def require_value(cls, v, info):
        text = str(v).strip() if v is not None else ""
        if not text:
            raise ValueError(f"Meeting {info.field_name} is required")
        return text

class MeetingRequestOut(CamelModel):
    """Meeting request returned to client"""
    id: str
    post_id: str
    requester: Optional[AuthorSummary] = None
    recipient_id: str
    date: str
    time: str
    message: str
    status: str
    created_at: datetime
    updated_at: datetime
