# Defines application-wide settings using pydantic-settings' BaseSettings
# Manages environment variables for various aspects of the application:
# API configuration (version, project name)
# Token validation settings shared with the external auth service
# Database connection details
# Blob storage (Cloudflare R2) and feed pagination limits


import os
import json
from typing import Annotated, List, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # API configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Venture Connect API"
    VERSION: str = "0.1.0"

    # Server URLs
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")

    # Tokens are issued by the auth service and signed with the shared secret
    SECRET_KEY: str = os.getenv("SECRET_KEY", "development_secret_key")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days
    ALGORITHM: str = "HS256"
    AUTH_TOKEN_URL: str = os.getenv("AUTH_TOKEN_URL", "/api/v1/userAuth/login")

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./venture_connect.db")

    # CORS
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = [
        "http://localhost:3000",     # Local development
        "http://localhost:5000",     # Static explore client
    ]

    # File uploads
    UPLOAD_DIRECTORY: str = os.getenv("UPLOAD_DIRECTORY", "uploads")
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024  # 5 MB

    # Cloudflare R2 Storage
    R2_ENDPOINT: str = os.getenv("R2_ENDPOINT", "")
    R2_ACCESS_KEY_ID: str = os.getenv("R2_ACCESS_KEY_ID", "")
    R2_SECRET_ACCESS_KEY: str = os.getenv("R2_SECRET_ACCESS_KEY", "")
    R2_BUCKET_NAME: str = os.getenv("R2_BUCKET_NAME", "venture-connect-media")
    R2_PUBLIC_URL: str = os.getenv("R2_PUBLIC_URL", "")

    # Feed pagination
    FEED_PAGE_SIZE: int = 10
    FEED_MAX_PAGE_SIZE: int = 50

    # Development settings - set these differently in production
    DEBUG: bool = os.getenv("DEBUG", "False").lower() in ["true", "1", "t"]
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, str):
            # Handle JSON string format
            try:
                return json.loads(v)
            except ValueError:
                return []
        return v

# Create settings instance
settings = Settings()
