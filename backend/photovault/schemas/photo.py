"""Photo schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .tag import TagResponse


class PhotoCreate(BaseModel):
    """Register an object that was uploaded through a presigned URL."""
    name: Optional[str] = None
    description: Optional[str] = None
    folder_id: Optional[int] = None
    image_path: str
    size_in_bytes: int = Field(default=0, ge=0)
    width: Optional[int] = Field(default=None, ge=0)
    height: Optional[int] = Field(default=None, ge=0)

    @field_validator('image_path')
    @classmethod
    def validate_image_path(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("image_path cannot be empty")
        return v


class PhotoUpdate(BaseModel):
    id: int
    name: Optional[str] = None
    description: Optional[str] = None


class PhotoMoveRequest(BaseModel):
    ids: List[int] = Field(default_factory=list)
    folder_id: int


class PhotoResponse(BaseModel):
    """A photo with its resolved tags. ``tags`` is always present."""
    id: int
    name: Optional[str] = None
    description: Optional[str] = None
    folder_id: Optional[int] = None
    image_path: str
    uploaded_at: Optional[datetime] = None
    size_in_bytes: int = 0
    width: Optional[int] = None
    height: Optional[int] = None
    tags: List[TagResponse] = []

    model_config = {"from_attributes": True}


class PhotoSearchResponse(BaseModel):
    data: List[PhotoResponse]


class PhotoUpdatedResponse(BaseModel):
    message: str
    data: PhotoResponse
