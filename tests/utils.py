"""Builders shared by the unit and integration tests."""
import uuid

from app.core.security import create_access_token
from app.modules.posts.schemas.post import PostCreate
from app.modules.posts.services.post import create_post
from app.modules.user_management.models.user import User


def make_user(db, username, **fields):
    user = User(
        id=str(uuid.uuid4()),
        email=f"{username}@example.com",
        username=username,
        is_active=fields.pop("is_active", True),
        is_verified=fields.pop("is_verified", True),
        **fields,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_header(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


def make_post(db, author, title="Post", content="Body", created_at=None, **fields):
    post = create_post(db, PostCreate(title=title, content=content, **fields), author.id)
    if created_at is not None:
        post.created_at = created_at
        db.commit()
    return post
