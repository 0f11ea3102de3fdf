from fastapi import APIRouter, Depends
from app.core.storage import r2_storage
from app.core.config import settings
from app.modules.media.service import MediaService
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.API_V1_STR}/media", tags=["media"])

def get_media_service():
    return MediaService(r2_storage)

@router.get("/{path:path}")
async def serve_media(path: str, media_service: MediaService = Depends(get_media_service)):
    """Serve an uploaded image by its storage key"""
    return await media_service.get_media(path)
