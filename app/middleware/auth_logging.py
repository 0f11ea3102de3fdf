from fastapi import Request
import logging
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("app")

# Every write under the API requires a bearer token
WRITE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}

class AuthLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        auth_header = request.headers.get("Authorization")
        path = request.url.path

        if not auth_header and request.method in WRITE_METHODS:
            logger.warning(f"Protected endpoint {request.method} {path} accessed without auth header")

        response = await call_next(request)

        if response.status_code in (401, 403):
            logger.warning(f"Auth error: {response.status_code} on {request.method} {path}")

        return response
