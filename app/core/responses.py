from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")

class ApiResponse(BaseModel, Generic[T]):
    """Success envelope shared by every JSON route"""
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None

class MessageResponse(BaseModel):
    success: bool = True
    message: str

class ErrorResponse(BaseModel):
    success: bool = False
    message: str
