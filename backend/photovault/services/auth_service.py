"""Account service: signup, credential checks and token issuing.

Passwords are hashed with bcrypt via passlib and never stored or logged in
plaintext. Every new account gets a root folder named after the user.
"""

import logging

from passlib.hash import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.token_factory import create_token
from ..exceptions import AuthenticationError, ValidationError
from ..models.folder import Folder
from ..models.user import User
from .transaction import commit

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def register_user(db: Session, name: str, email: str, password: str) -> User:
    """Create a user and their root folder in one transaction.

    Raises ValidationError if the email is taken or inputs are invalid.
    """
    email = email.strip().lower()
    name = name.strip()
    if not email or "@" not in email:
        raise ValidationError("Valid email address required", field="email")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters", field="password"
        )
    if not name:
        raise ValidationError("Name required", field="name")

    if db.query(User).filter(User.email == email).first() is not None:
        raise ValidationError("Email already registered", field="email")

    user = User(name=name, email=email, password_hash=bcrypt.hash(password))
    db.add(user)
    try:
        db.flush()
    except IntegrityError as e:
        # Lost a race with a concurrent signup for the same address.
        db.rollback()
        raise ValidationError("Email already registered", field="email") from e

    root = Folder(user_id=user.id, name=name, parent_id=None)
    db.add(root)
    db.flush()
    user.root_folder_id = root.id

    commit(db, "register_user")
    db.refresh(user)
    logger.info("User registered", extra={"user_id": user.id, "root_folder": user.root_folder_id})
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """Validate credentials and return the user. Raises AuthenticationError."""
    email = email.strip().lower()
    user = db.query(User).filter(User.email == email).first()

    if user is None or not bcrypt.verify(password, user.password_hash):
        logger.info("Sign-in rejected", extra={"email": email})
        raise AuthenticationError("Invalid email or password")

    return user


def issue_token(user: User) -> str:
    return create_token(
        user_id=user.id,
        root_folder=user.root_folder_id,
        secret=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_hours=settings.token_expire_hours,
    )
