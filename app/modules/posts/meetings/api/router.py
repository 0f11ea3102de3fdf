from typing import Any, List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.deps import get_current_user
from app.core.responses import ApiResponse
from app.modules.user_management.models.user import User
from app.modules.posts.meetings.schemas.meeting import MeetingRequestCreate, MeetingRequestOut
from app.modules.posts.meetings.services.meeting import (
    request_meeting, get_post_meeting_requests, to_meeting_out
)

router = APIRouter()

@router.post("/meeting", response_model=ApiResponse[MeetingRequestOut], status_code=status.HTTP_201_CREATED)
def create_meeting_request(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post whose author to meet"),
    request_in: MeetingRequestCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Ask the author of a post for a meeting"""
    meeting = request_meeting(db, post_id, request_in, current_user.id)
    return ApiResponse(data=to_meeting_out(meeting), message="Meeting request sent successfully")

@router.get("/meetings", response_model=ApiResponse[List[MeetingRequestOut]])
def read_meeting_requests(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post"),
    current_user: User = Depends(get_current_user),
) -> Any:
    """List meeting requests on a post; only its author may see them"""
    meetings = get_post_meeting_requests(db, post_id, current_user.id)
    return ApiResponse(data=[to_meeting_out(meeting) for meeting in meetings])
