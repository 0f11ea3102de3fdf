# Error taxonomy raised by the services and translated into
# {"success": false, "message": ...} responses by the handlers in app.main

from fastapi import status


class AppError(Exception):
    """Base class for errors that map onto an HTTP status"""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed required field"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class UnauthenticatedError(AppError):
    """Missing or invalid bearer token on a protected route"""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class ForbiddenError(AppError):
    """Authenticated, but not the author of the resource"""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not enough permissions"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class StoreUnavailableError(AppError):
    """Downstream persistence failure"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Service temporarily unavailable"
