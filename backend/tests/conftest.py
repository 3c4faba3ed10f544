"""Shared test fixtures for the PhotoVault backend test suite.

Tests run against a throwaway SQLite file (or ``TEST_DATABASE_URL``).
Tables are created by importing the app and emptied before every test.
The S3 bucket is replaced by an in-memory FakeBlobStore that records
deletes and can be told which keys are missing or failing.
"""

import os

# Test database and settings before any app imports.
os.environ["DATABASE_URL"] = os.environ.get(
    "TEST_DATABASE_URL",
    "sqlite:///./photovault_test.db",
)
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-photovault"
os.environ["S3_BUCKET_NAME"] = "photovault-test"
os.environ["LOG_FORMAT"] = "text"

import pytest
from fastapi.testclient import TestClient

from photovault.database import Base, get_db, SessionLocal
from photovault.main import app
from photovault.exceptions import BlobNotFoundError, BlobStoreError
from photovault.schemas.folder import FolderCreate
from photovault.schemas.photo import PhotoCreate
from photovault.services import auth_service
from photovault.services.folder_service import FolderService
from photovault.services.photo_service import PhotoService
from photovault.storage import BlobStore, UploadTarget, get_blob_store


class FakeBlobStore(BlobStore):
    """In-memory bucket. Keys in ``missing`` or ``failing`` make delete raise."""

    def __init__(self):
        self.deleted = []
        self.missing = set()
        self.failing = set()
        self.presigned = []

    def generate_upload_url(self, filename: str) -> UploadTarget:
        key = f"{len(self.presigned) + 1}-{filename}"
        self.presigned.append(key)
        return UploadTarget(
            presigned_url=f"https://photovault-test.s3.example.com/{key}?X-Amz-Signature=abc",
            public_url=f"https://photovault-test.s3.example.com/{key}",
            key=key,
        )

    def delete(self, key: str) -> None:
        if key in self.failing:
            raise BlobStoreError(key, "AccessDenied")
        if key in self.missing:
            raise BlobNotFoundError(key)
        self.deleted.append(key)


@pytest.fixture(autouse=True)
def _clean_tables():
    """Empty every table before each test, children first."""
    db = SessionLocal()
    try:
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()
    finally:
        db.close()
    yield


@pytest.fixture()
def db():
    """Per-test database session."""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def blob_store():
    return FakeBlobStore()


@pytest.fixture()
def client(db, blob_store):
    """TestClient sharing the test session and the fake bucket."""

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    """Factory: register a user and return ``(user, auth_headers)``."""

    def _make(name: str = "admin", email: str = None, password: str = "password123"):
        user = auth_service.register_user(db, name, email or f"{name}@example.com", password)
        token = auth_service.issue_token(user)
        return user, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture()
def make_folder(db):
    """Factory: create a folder owned by *user* under *parent_id*."""

    def _make(user, name: str, parent_id=None, description=None):
        return FolderService(db).create_folder(
            user.id, FolderCreate(name=name, parent_id=parent_id, description=description)
        )

    return _make


@pytest.fixture()
def make_photo(db):
    """Factory: register a photo whose object key is *key*."""

    def _make(user, folder_id, key: str, size: int = 100, name: str = None):
        return PhotoService(db).create_photo(
            user.id,
            PhotoCreate(
                name=name or key,
                folder_id=folder_id,
                image_path=f"https://photovault-test.s3.example.com/{key}",
                size_in_bytes=size,
                width=640,
                height=480,
            ),
        )

    return _make
