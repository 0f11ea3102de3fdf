import os
import uuid
import logging
from pathlib import Path
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile

from .config import settings
from .exceptions import StoreUnavailableError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = [".jpg", ".jpeg", ".png", ".gif", ".webp"]

class R2Storage:
    """Blob store for uploaded images: Cloudflare R2 when configured, local disk otherwise"""

    def __init__(self):
        self.client = None
        self.bucket = settings.R2_BUCKET_NAME
        self.public_url = settings.R2_PUBLIC_URL.rstrip("/")
        self.base_url = settings.BASE_URL.rstrip("/")
        self.local_root = Path(settings.UPLOAD_DIRECTORY)

        if all([settings.R2_ENDPOINT, settings.R2_ACCESS_KEY_ID, settings.R2_SECRET_ACCESS_KEY]):
            try:
                logger.info("Creating S3 client for R2 storage...")
                self.client = boto3.client(
                    's3',
                    endpoint_url=settings.R2_ENDPOINT,
                    aws_access_key_id=settings.R2_ACCESS_KEY_ID,
                    aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY
                )
                logger.info(f"R2Storage S3 client initialized for bucket '{self.bucket}'")
            except (BotoCoreError, ClientError) as e:
                logger.error(f"Failed to create S3 client: {str(e)}")
                logger.warning("R2 storage will not be available, falling back to local storage")
        else:
            missing = [
                name for name in ("R2_ENDPOINT", "R2_ACCESS_KEY_ID", "R2_SECRET_ACCESS_KEY")
                if not getattr(settings, name)
            ]
            logger.info(f"R2 storage not configured (missing: {', '.join(missing)}), using local uploads")

    def media_url(self, key: str) -> str:
        """Public URL for a stored key"""
        if self.client and self.public_url:
            return f"{self.public_url}/{key}"
        return f"{self.base_url}{settings.API_V1_STR}/media/{key}"

    def key_from_url(self, url: str) -> Optional[str]:
        proxy_prefix = f"{self.base_url}{settings.API_V1_STR}/media/"
        if self.public_url and url.startswith(f"{self.public_url}/"):
            return url[len(self.public_url) + 1:]
        if url.startswith(proxy_prefix):
            return url[len(proxy_prefix):]
        return None

    @staticmethod
    def validate_image(file: UploadFile) -> str:
        """Return the lower-cased extension of an acceptable image upload"""
        file_extension = os.path.splitext(file.filename or "")[1].lower()
        if file_extension not in ALLOWED_IMAGE_EXTENSIONS:
            raise ValidationError(
                f"Unsupported file format. Please use one of: {', '.join(ALLOWED_IMAGE_EXTENSIONS)}"
            )
        return file_extension

    async def upload_file(self, file: UploadFile, prefix: str = "post_images") -> str:
        """Persist an upload and return the URL to store on the owning record"""
        file_extension = self.validate_image(file)
        content = await file.read()
        if len(content) > settings.MAX_UPLOAD_SIZE:
            raise ValidationError("File too large. Images must be 5MB or less.")

        key = f"{prefix}/{uuid.uuid4().hex}{file_extension}"
        logger.info(f"[UPLOAD] Storing '{file.filename}' as '{key}'")

        if self.client:
            try:
                self.client.put_object(
                    Bucket=self.bucket,
                    Key=key,
                    Body=content,
                    ContentType=file.content_type or 'application/octet-stream'
                )
            except (BotoCoreError, ClientError) as e:
                logger.error(f"[UPLOAD] Failed to upload to R2: {str(e)}")
                raise StoreUnavailableError("Failed to upload media") from e
        else:
            local_path = self.local_root / key
            try:
                local_path.parent.mkdir(parents=True, exist_ok=True)
                local_path.write_bytes(content)
            except OSError as e:
                logger.error(f"[UPLOAD] Failed to save file locally: {str(e)}")
                raise StoreUnavailableError("Failed to save media") from e

        return self.media_url(key)

    def delete_file(self, url: str) -> bool:
        """Delete a stored file by its URL; returns False when nothing was removed"""
        if not url:
            return False
        key = self.key_from_url(url)
        if key is None:
            logger.warning(f"URL {url} doesn't match any expected media URL pattern")
            return False

        if self.client:
            try:
                self.client.delete_object(Bucket=self.bucket, Key=key)
            except (BotoCoreError, ClientError) as e:
                logger.error(f"Failed to delete '{key}' from R2: {str(e)}")
                return False
            logger.info(f"Deleted '{key}' from R2")
            return True

        local_path = self.local_root / key
        if local_path.is_file():
            local_path.unlink()
            logger.info(f"Deleted local file {local_path}")
            return True
        return False

# Global instance for app-wide usage
r2_storage = R2Storage()
