"""Schemas shared by several routers."""

from typing import List

from pydantic import BaseModel, Field


class IdListRequest(BaseModel):
    """Body of bulk delete requests."""
    ids: List[int] = Field(default_factory=list)


class MessageResponse(BaseModel):
    message: str
