from typing import Any, Dict, List, Optional
from datetime import datetime
import json
from pydantic import BaseModel, field_validator

from app.modules.user_management.schemas.user import CamelModel

class ProfileUser(CamelModel):
    id: str
    username: Optional[str] = None
    email: Optional[str] = None

class ProfileUpdate(CamelModel):
    """Fields accepted by create-or-update; omitted fields are left untouched"""
    first_name: Optional[str] = None
    surname: Optional[str] = None
    age: Optional[int] = None
    dob: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    social_links: Optional[Dict[str, str]] = None
    investment_interests: Optional[List[str]] = None
    investment_stage: Optional[str] = None
    location: Optional[Dict[str, Any]] = None

    @field_validator("social_links", "location", mode="before")
    @classmethod
    def parse_json_object(cls, v):
        # multipart forms carry nested objects as JSON strings
        if isinstance(v, str):
            if not v.strip():
                return None
            try:
                return json.loads(v)
            except ValueError:
                raise ValueError("must be a JSON object")
        return v

    @field_validator("investment_interests", mode="before")
    @classmethod
    def split_interests(cls, v):
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("age", mode="before")
    @classmethod
    def blank_age(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

class Profile(CamelModel):
    """Profile model returned to client"""
    id: str
    user: Optional[ProfileUser] = None
    first_name: Optional[str] = None
    surname: Optional[str] = None
    age: Optional[int] = None
    dob: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    social_links: Optional[Dict[str, str]] = None
    investment_interests: List[str] = []
    investment_stage: Optional[str] = None
    location: Optional[Dict[str, Any]] = None
    profile_picture: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class ProfilePagination(BaseModel):
    current: int
    pages: int
    total: int

class ProfileListResponse(BaseModel):
    success: bool = True
    data: List[Profile]
    pagination: ProfilePagination
