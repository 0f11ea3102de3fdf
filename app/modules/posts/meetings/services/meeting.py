from typing import List
import uuid
import logging
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import ForbiddenError, NotFoundError
from app.modules.posts.models.post import Post
from app.modules.posts.meetings.models.meeting import MeetingRequest
from app.modules.posts.meetings.schemas.meeting import MeetingRequestCreate, MeetingRequestOut
from app.modules.user_management.schemas.user import author_summary

logger = logging.getLogger(__name__)

def to_meeting_out(meeting: MeetingRequest) -> MeetingRequestOut:
    return MeetingRequestOut(
        id=meeting.id,
        post_id=meeting.post_id,
        requester=author_summary(meeting.requester),
        recipient_id=meeting.recipient_id,
        date=meeting.date,
        time=meeting.time,
        message=meeting.message,
        status=meeting.status,
        created_at=meeting.created_at,
        updated_at=meeting.updated_at,
    )

def get_meeting_request(db: Session, post_id: str, requester_id: str):
    """Get meeting request by post and requester"""
    return (
        db.query(MeetingRequest)
        .options(joinedload(MeetingRequest.requester))
        .filter(MeetingRequest.post_id == post_id, MeetingRequest.requester_id == requester_id)
        .first()
    )

def request_meeting(db: Session, post_id: str, request_in: MeetingRequestCreate, requester_id: str) -> MeetingRequest:
    """Record a meeting request; a repeat request from the same user replaces the details"""
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise NotFoundError("Post not found")

    existing_request = get_meeting_request(db, post_id, requester_id)
    if existing_request:
        existing_request.date = request_in.date
        existing_request.time = request_in.time
        existing_request.message = request_in.message
        existing_request.status = "pending"
        db.commit()
        logger.info(f"Updated meeting request {existing_request.id} on post {post_id}")
        return get_meeting_request(db, post_id, requester_id)

    meeting = MeetingRequest(
        id=str(uuid.uuid4()),
        post_id=post_id,
        requester_id=requester_id,
        recipient_id=post.author_id,
        date=request_in.date,
        time=request_in.time,
        message=request_in.message,
        status="pending",
    )
    db.add(meeting)
    db.commit()
    logger.info(f"User {requester_id} requested a meeting on post {post_id}")
    return get_meeting_request(db, post_id, requester_id)

def get_post_meeting_requests(db: Session, post_id: str, requester_id: str) -> List[MeetingRequest]:
    """Meeting requests on a post, visible to the post author only"""
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise NotFoundError("Post not found")
    if post.author_id != requester_id:
        raise ForbiddenError("Only the post author can view meeting requests")

    return (
        db.query(MeetingRequest)
        .options(joinedload(MeetingRequest.requester))
        .filter(MeetingRequest.post_id == post_id)
        .order_by(MeetingRequest.created_at.asc())
        .all()
    )
