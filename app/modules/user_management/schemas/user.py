from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    """Base for wire models: snake_case in Python, camelCase in JSON"""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)

class AuthorSummary(CamelModel):
    """Minimal author projection embedded in posts and comments"""
    id: str
    username: Optional[str] = None
    display_name: str
    avatar: Optional[str] = None

def author_summary(user) -> Optional[AuthorSummary]:
    """Project a User row down to the fields safe to embed in feed items"""
    if user is None:
        return None
    return AuthorSummary(
        id=user.id,
        username=user.username,
        display_name=user.display_name,
        avatar=user.profile_picture,
    )
