"""Token introspection for clients holding a token from the auth service"""
from fastapi import APIRouter, Depends

from app.deps import get_current_user
from app.modules.auth.schemas.auth import TokenValidation
from app.modules.user_management.models.user import User

router = APIRouter()

@router.get("/validate-token", response_model=TokenValidation)
async def validate_token(current_user: User = Depends(get_current_user)) -> TokenValidation:
    """Validate the current user's token and return who it belongs to"""
    return TokenValidation(
        user_id=current_user.id,
        username=current_user.username,
        is_verified=bool(current_user.is_verified),
    )
