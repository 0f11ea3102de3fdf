from typing import List, Optional, Tuple
import uuid
import logging
from sqlalchemy.orm import Session

from app.modules.feed.services.feed import LIKE_ESCAPE, contains_pattern
from app.modules.user_management.models.profile import Profile
from app.modules.user_management.schemas.profile import ProfileUpdate

logger = logging.getLogger(__name__)

PROFILE_SCAN_BATCH = 200

def get_profile_by_user(db: Session, user_id: str) -> Optional[Profile]:
    """Get profile by its owner's user ID"""
    return db.query(Profile).filter(Profile.user_id == user_id).first()

def upsert_profile(
    db: Session, user_id: str, profile_in: ProfileUpdate, profile_picture: Optional[str] = None
) -> Tuple[Profile, bool]:
    """Create or update the user's profile; returns (profile, created)"""
    update_data = profile_in.model_dump(exclude_unset=True)
    if profile_picture:
        update_data["profile_picture"] = profile_picture

    profile = get_profile_by_user(db, user_id)
    created = profile is None
    if created:
        profile = Profile(id=str(uuid.uuid4()), user_id=user_id, investment_interests=[])
        db.add(profile)

    for field, value in update_data.items():
        setattr(profile, field, value)

    db.commit()
    db.refresh(profile)
    logger.info(f"{'Created' if created else 'Updated'} profile for user {user_id}")
    return profile, created

def list_profiles(
    db: Session,
    page: int = 1,
    limit: int = 10,
    interests: Optional[List[str]] = None,
    stage: Optional[str] = None,
    country: Optional[str] = None,
) -> Tuple[List[Profile], int]:
    """Filter and page profiles; returns (page of profiles, total matches)"""
    query = db.query(Profile)
    if stage:
        query = query.filter(Profile.investment_stage == stage)
    if country:
        query = query.filter(
            Profile.location["country"].as_string().ilike(contains_pattern(country), escape=LIKE_ESCAPE)
        )
    query = query.order_by(Profile.created_at.desc(), Profile.id.desc())
    skip = (page - 1) * limit

    if not interests:
        total = query.order_by(None).count()
        if skip >= total:
            return [], total
        return query.offset(skip).limit(limit).all(), total

    # interests live in a JSON array; scan in batches and keep only the requested window
    wanted = set(interests)
    window, total = [], 0
    for profile in query.yield_per(PROFILE_SCAN_BATCH):
        if not wanted.intersection(profile.investment_interests or []):
            continue
        if skip <= total < skip + limit:
            window.append(profile)
        total += 1
    return window, total

def delete_profile(db: Session, user_id: str) -> bool:
    profile = get_profile_by_user(db, user_id)
    if not profile:
        return False
    db.delete(profile)
    db.commit()
    return True
