# Import all models here so Base.metadata knows every table
from app.db.session import Base

# Import all models below
from app.modules.user_management.models.user import User
from app.modules.user_management.models.profile import Profile
from app.modules.posts.models.post import Post, PostTag
from app.modules.posts.comments.models.comment import Comment
from app.modules.posts.likes.models.like import PostLike
from app.modules.posts.meetings.models.meeting import MeetingRequest
