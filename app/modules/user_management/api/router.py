from typing import Any, Optional
import json
import logging
import math

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile as StarletteUploadFile

from app.db.session import get_db
from app.deps import get_current_user
from app.core.exceptions import NotFoundError, ValidationError
from app.core.responses import ApiResponse, MessageResponse
from app.core.storage import r2_storage
from app.modules.feed.services.feed import clamp_pagination
from app.modules.user_management.models.user import User
from app.modules.user_management.schemas.profile import (
    Profile as ProfileSchema, ProfileUpdate, ProfileListResponse, ProfilePagination
)
from app.modules.user_management.services.profile import (
    get_profile_by_user, upsert_profile, list_profiles, delete_profile
)

router = APIRouter()
logger = logging.getLogger("app")

def _validate_profile(db: Session, user_id: str):
    """Return the user's profile or raise NotFoundError"""
    profile = get_profile_by_user(db, user_id)
    if not profile:
        raise NotFoundError("Profile not found")
    return profile

@router.get("/me", response_model=ApiResponse[ProfileSchema])
def read_my_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Get the current user's profile"""
    profile = _validate_profile(db, current_user.id)
    return ApiResponse(data=ProfileSchema.model_validate(profile))

@router.post("", response_model=ApiResponse[ProfileSchema])
async def create_or_update_profile(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Create the current user's profile, or update the supplied fields of it"""
    picture = None
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        data = {}
        for key, value in form.items():
            if isinstance(value, StarletteUploadFile):
                if key == "profilePicture" and value.filename:
                    picture = value
            else:
                data[key] = value
    else:
        try:
            data = json.loads(await request.body() or b"{}")
        except ValueError:
            raise ValidationError("Request body must be valid JSON")
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")

    profile_in = ProfileUpdate.model_validate(data)
    picture_url = await r2_storage.upload_file(picture, "profile_pictures") if picture else None
    profile, created = upsert_profile(db, current_user.id, profile_in, picture_url)

    if created:
        response.status_code = status.HTTP_201_CREATED
    message = "Profile created successfully" if created else "Profile updated successfully"
    return ApiResponse(data=ProfileSchema.model_validate(profile), message=message)

@router.get("/user/{user_id}", response_model=ApiResponse[ProfileSchema])
def read_profile_by_user_id(
    user_id: str,
    db: Session = Depends(get_db),
) -> Any:
    """Get a profile by its owner's user ID"""
    profile = _validate_profile(db, user_id)
    return ApiResponse(data=ProfileSchema.model_validate(profile))

@router.get("", response_model=ProfileListResponse)
def read_profiles(
    db: Session = Depends(get_db),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    interests: Optional[str] = Query(None, description="Comma separated investment interests"),
    stage: Optional[str] = Query(None, description="Investment stage"),
    country: Optional[str] = Query(None, description="Substring of the profile's country"),
) -> Any:
    """List profiles with optional filters"""
    page_number, page_size = clamp_pagination(page, limit)
    wanted = [item.strip() for item in (interests or "").split(",") if item.strip()]
    profiles, total = list_profiles(
        db, page=page_number, limit=page_size, interests=wanted, stage=stage, country=country
    )
    return ProfileListResponse(
        data=[ProfileSchema.model_validate(profile) for profile in profiles],
        pagination=ProfilePagination(
            current=page_number,
            pages=math.ceil(total / page_size) if total else 0,
            total=total,
        ),
    )

@router.delete("", response_model=MessageResponse)
def delete_my_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Delete the current user's profile"""
    delete_profile(db, current_user.id)
    return MessageResponse(message="Profile deleted successfully")
