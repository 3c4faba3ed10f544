"""Folder and folder-contents schemas."""

from typing import List, Optional

from pydantic import BaseModel, field_validator

from .photo import PhotoResponse


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name cannot be empty")
    return v


class FolderCreate(BaseModel):
    name: str
    description: Optional[str] = None
    parent_id: Optional[int] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)


class FolderUpdate(BaseModel):
    folder_id: int
    name: str
    description: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)


class FolderResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    parent_id: Optional[int] = None

    model_config = {"from_attributes": True}


class ChildFolderResponse(FolderResponse):
    """Direct child annotated with totals over its whole subtree."""
    total_photo_count: int = 0
    total_size_in_bytes: int = 0


class Breadcrumb(BaseModel):
    id: int
    name: str


class FolderContents(BaseModel):
    folder: FolderResponse
    photos: List[PhotoResponse]
    child_folders: List[ChildFolderResponse]
    breadcrumbs: List[Breadcrumb]


class FolderCreatedResponse(BaseModel):
    message: str
    id: int


class FolderSummary(BaseModel):
    id: int
    name: str
    description: Optional[str] = None


class FolderUpdatedResponse(BaseModel):
    message: str
    data: FolderSummary
