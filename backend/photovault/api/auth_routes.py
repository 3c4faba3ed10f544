"""Account endpoints.

    POST /signup  -- create an account (and its root folder)
    POST /signin  -- exchange email/password for a bearer token
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..database import get_db
from ..services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


class SignupRequest(BaseModel):
    name: str = Field(..., description="Display name, also used for the root folder")
    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Password (min 8 characters)")

    model_config = {
        "json_schema_extra": {
            "examples": [{"name": "admin", "email": "admin@example.com", "password": "correct horse"}]
        }
    }


class SigninRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    token: str


@router.post("/signup", response_class=PlainTextResponse)
def signup(request: SignupRequest, db: Session = Depends(get_db)):
    auth_service.register_user(db, request.name, request.email, request.password)
    return PlainTextResponse("User registered.")


@router.post("/signin", response_model=TokenResponse)
def signin(request: SigninRequest, db: Session = Depends(get_db)):
    user = auth_service.authenticate(db, request.email, request.password)
    return TokenResponse(token=auth_service.issue_token(user))
