"""Authentication gate exposed as a FastAPI dependency.

``require_auth`` turns a bearer token into an ``AuthContext`` or raises
401. Every photo, folder and tag endpoint depends on it and scopes its
queries by ``AuthContext.user_id``.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .config import settings
from .token_factory import TokenPayload, decode_token
from ..database import get_db
from ..exceptions import AuthenticationError

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Authenticated principal available to every protected endpoint."""

    user_id: int
    root_folder: Optional[int] = None


def require_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    db: Session = Depends(get_db),
) -> AuthContext:
    """Require a valid bearer token and return the caller's AuthContext."""
    if credentials is None:
        raise AuthenticationError("Missing authentication token")

    payload = decode_token(
        credentials.credentials, settings.jwt_secret_key, settings.jwt_algorithm
    )
    if payload is None:
        raise AuthenticationError("Invalid or expired token")

    return _load_auth_context(payload, db)


def _load_auth_context(payload: TokenPayload, db: Session) -> AuthContext:
    """Confirm the token's user still exists and fill in the root folder."""
    from ..models.user import User

    user = db.query(User).filter(User.id == payload.user_id).first()
    if user is None:
        logger.warning("Token presented for unknown user", extra={"user_id": payload.user_id})
        raise AuthenticationError("User not found")

    root_folder = payload.root_folder if payload.root_folder is not None else user.root_folder_id
    return AuthContext(user_id=user.id, root_folder=root_folder)
