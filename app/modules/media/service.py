from app.core.storage import R2Storage
from app.core.exceptions import NotFoundError, StoreUnavailableError
import logging
import mimetypes
from pathlib import Path
from botocore.exceptions import BotoCoreError, ClientError
from starlette.responses import FileResponse, StreamingResponse

logger = logging.getLogger(__name__)

class MediaService:
    def __init__(self, r2_storage: R2Storage):
        self.r2_storage = r2_storage

    def _local_path(self, path: str) -> Path:
        root = self.r2_storage.local_root.resolve()
        file_path = (root / path).resolve()
        # keys never climb out of the upload directory
        if root not in file_path.parents:
            raise NotFoundError("File not found")
        return file_path

    async def get_media(self, path: str):
        """Stream a stored blob from R2, or from local uploads when R2 is not configured"""
        if self.r2_storage.client:
            try:
                obj = self.r2_storage.client.get_object(Bucket=self.r2_storage.bucket, Key=path)
            except ClientError as e:
                if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                    raise NotFoundError("File not found") from e
                logger.error(f"Failed to retrieve file {path} from R2: {str(e)}")
                raise StoreUnavailableError("Failed to retrieve media file") from e
            except BotoCoreError as e:
                logger.error(f"Failed to retrieve file {path} from R2: {str(e)}")
                raise StoreUnavailableError("Failed to retrieve media file") from e

            return StreamingResponse(
                obj["Body"].iter_chunks(),
                media_type=obj.get("ContentType") or "application/octet-stream",
                headers={"Cache-Control": "public, max-age=86400"},
            )

        file_path = self._local_path(path)
        if not file_path.is_file():
            logger.warning(f"File {path} not found in local storage")
            raise NotFoundError("File not found")

        content_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
        return FileResponse(
            file_path,
            media_type=content_type,
            headers={"Cache-Control": "public, max-age=86400"},
        )
