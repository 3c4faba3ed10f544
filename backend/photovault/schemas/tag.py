"""Tag schemas."""

from typing import List

from pydantic import BaseModel, Field, field_validator

MAX_LABEL_LENGTH = 100


class TagResponse(BaseModel):
    id: int
    tag: str


class OwnedTagResponse(TagResponse):
    """Entry of the caller's tag list."""
    user_id: int


class TagCreate(BaseModel):
    """Attach a label to a photo, creating the tag if needed."""
    photo_id: int
    tag: str

    @field_validator('tag')
    @classmethod
    def validate_tag(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Tag cannot be empty")
        if len(v) > MAX_LABEL_LENGTH:
            raise ValueError(f"Tag cannot exceed {MAX_LABEL_LENGTH} characters")
        return v


class SetPhotoTagsRequest(BaseModel):
    """Replace the full tag set of every listed photo."""
    photo_ids: List[int] = Field(default_factory=list)
    tag_ids: List[int] = Field(default_factory=list)


class PhotoTags(BaseModel):
    id: int
    tags: List[TagResponse] = []


class SetPhotoTagsResponse(BaseModel):
    message: str
    updated_photos: List[PhotoTags]
