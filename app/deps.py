from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.core import security
from app.core.config import settings
from app.core.exceptions import ForbiddenError, UnauthenticatedError
from app.db.session import get_db
from app.modules.user_management.models.user import User
from app.modules.user_management.services.user import get_user

# Tokens are issued by the external auth service; this app only validates them
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=settings.AUTH_TOKEN_URL, auto_error=False)

def get_current_user(db: Session = Depends(get_db), token: Optional[str] = Depends(oauth2_scheme)) -> User:
    """
    Dependency for getting current authenticated user
    """
    if not token:
        raise UnauthenticatedError("Not authenticated")

    user_id = security.verify_access_token(token)
    if not user_id:
        raise UnauthenticatedError("Could not validate credentials")

    user = get_user(db, user_id=user_id)
    if not user:
        raise UnauthenticatedError("User not found")

    if not user.is_active:
        raise ForbiddenError("Inactive user")

    return user