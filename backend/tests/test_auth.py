"""Tests for signup/signin and the bearer-token gate."""

import time

from photovault.core.config import settings
from photovault.core.token_factory import _sign, create_token, decode_token
from photovault.models.folder import Folder
from photovault.models.user import User


class TestTokenFactory:

    def test_create_and_decode(self):
        token = create_token(7, 42, "test-secret")
        payload = decode_token(token, "test-secret")
        assert payload is not None
        assert payload.user_id == 7
        assert payload.root_folder == 42

    def test_wrong_secret_returns_none(self):
        token = create_token(7, 42, "correct-secret")
        assert decode_token(token, "wrong-secret") is None

    def test_expired_token_returns_none(self):
        token = create_token(7, 42, "secret", expires_hours=-1)
        assert decode_token(token, "secret") is None

    def test_malformed_token_returns_none(self):
        assert decode_token("not.a.token", "secret") is None
        assert decode_token("", "secret") is None

    def test_legacy_sub_claim_accepted(self):
        token = _sign({"sub": "9", "exp": int(time.time()) + 60}, "secret")
        payload = decode_token(token, "secret")
        assert payload.user_id == 9
        assert payload.root_folder is None

    def test_token_without_subject_rejected(self):
        token = _sign({"exp": int(time.time()) + 60}, "secret")
        assert decode_token(token, "secret") is None


class TestSignup:

    def test_signup_creates_user_and_root_folder(self, client, db):
        resp = client.post("/signup", json={
            "name": "admin", "email": "admin@example.com", "password": "password123",
        })
        assert resp.status_code == 200

        user = db.query(User).filter(User.email == "admin@example.com").one()
        root = db.query(Folder).filter(Folder.id == user.root_folder_id).one()
        assert root.name == "admin"
        assert root.parent_id is None
        assert root.user_id == user.id

    def test_password_is_hashed(self, client, db):
        client.post("/signup", json={
            "name": "admin", "email": "admin@example.com", "password": "password123",
        })
        user = db.query(User).one()
        assert user.password_hash != "password123"

    def test_duplicate_email_rejected(self, client):
        body = {"name": "admin", "email": "admin@example.com", "password": "password123"}
        client.post("/signup", json=body)
        resp = client.post("/signup", json=body)
        assert resp.status_code == 400
        assert resp.json()["error"] == "VALIDATION_ERROR"

    def test_short_password_rejected(self, client):
        resp = client.post("/signup", json={
            "name": "admin", "email": "admin@example.com", "password": "short",
        })
        assert resp.status_code == 400


class TestSignin:

    def test_signin_returns_usable_token(self, client, make_user):
        user, _ = make_user("admin")
        resp = client.post("/signin", json={"email": "admin@example.com", "password": "password123"})
        assert resp.status_code == 200

        token = resp.json()["token"]
        payload = decode_token(token, settings.jwt_secret_key)
        assert payload.user_id == user.id
        assert payload.root_folder == user.root_folder_id

        files = client.get(
            f"/files/{user.root_folder_id}", headers={"Authorization": f"Bearer {token}"}
        )
        assert files.status_code == 200

    def test_wrong_password_returns_401(self, client, make_user):
        make_user("admin")
        resp = client.post("/signin", json={"email": "admin@example.com", "password": "nope-nope"})
        assert resp.status_code == 401
        assert resp.json()["error"] == "UNAUTHORIZED"

    def test_unknown_email_returns_401(self, client):
        resp = client.post("/signin", json={"email": "ghost@example.com", "password": "password123"})
        assert resp.status_code == 401


class TestAuthGate:

    def test_missing_token_returns_401(self, client):
        resp = client.get("/photos")
        assert resp.status_code == 401
        assert resp.json()["error"] == "UNAUTHORIZED"

    def test_garbage_token_returns_401(self, client):
        resp = client.get("/photos", headers={"Authorization": "Bearer garbage"})
        assert resp.status_code == 401

    def test_token_signed_with_other_key_returns_401(self, client, make_user):
        user, _ = make_user("admin")
        token = create_token(user.id, user.root_folder_id, "some-other-secret")
        resp = client.get("/photos", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    def test_token_for_deleted_user_returns_401(self, client):
        token = create_token(999999, None, settings.jwt_secret_key)
        resp = client.get("/photos", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    def test_legacy_token_accepted(self, client, make_user):
        user, _ = make_user("admin")
        token = _sign({"sub": str(user.id), "exp": int(time.time()) + 60}, settings.jwt_secret_key)
        resp = client.get("/photos", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 200
