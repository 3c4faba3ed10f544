"""Presigned upload URLs for direct-to-bucket uploads."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator

from ..core.auth import AuthContext, require_auth
from ..storage import BlobStore, get_blob_store

router = APIRouter(tags=["uploads"])


class PresignRequest(BaseModel):
    filename: str

    @field_validator('filename')
    @classmethod
    def validate_filename(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("filename cannot be empty")
        return v


class PresignResponse(BaseModel):
    presigned_url: str
    public_url: str


@router.post("/generate-presigned-url", response_model=PresignResponse)
def generate_presigned_url(
    request: PresignRequest,
    auth: AuthContext = Depends(require_auth),
    blob_store: BlobStore = Depends(get_blob_store),
):
    target = blob_store.generate_upload_url(request.filename)
    return PresignResponse(presigned_url=target.presigned_url, public_url=target.public_url)
