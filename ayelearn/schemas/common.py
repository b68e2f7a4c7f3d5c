# ayelearn/schemas/common.py
from typing import Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")

StatusValue = Literal["active", "inactive"]

PHONE_PATTERN = r"^\+?[1-9]\d{0,15}$"


class ErrorItem(BaseModel):
    field: str
    message: str


class ApiResponse(BaseModel, Generic[T]):
    """Envelope shared by every endpoint."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    errors: Optional[List[ErrorItem]] = None


class ImageUploadResponse(BaseModel):
    success: bool = True
    message: str
    imagePath: str
