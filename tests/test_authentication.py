"""
Test Case Suite: Authentication Module
Test ID Range: TC-001 to TC-012

Validates signup, credential login, Google login, token handling and the
current-user endpoint.
"""

import pytest
from datetime import timedelta
from httpx import AsyncClient
from nestly.controllers import google_auth_controller
from nestly.utils.security import create_access_token, decode_access_token

TEST_PASSWORD = "secret123"


class TestSignup:
    """
    Test Case TC-001: Signup With Valid Data
    Description: A new user can register as USER or OWNER
    Expected Result: 201 with the created user, email stored lowercase
    """
    @pytest.mark.asyncio
    async def test_tc001_signup_valid(self, client: AsyncClient):
        """TC-001: Signup with valid data"""
        response = await client.post("/api/auth/signup", json={
            "email": "New.Owner@Example.com",
            "password": "hunter22",
            "name": "New Owner",
            "role": "OWNER",
        })
        assert response.status_code == 201

        data = response.json()
        assert data["email"] == "new.owner@example.com"
        assert data["role"] == "OWNER"
        assert data["ownerVerified"] is False
        assert "password" not in data

    """
    Test Case TC-002: Signup With Existing Email
    Description: The same email cannot register twice
    Expected Result: 400 "User already exists"
    """
    @pytest.mark.asyncio
    async def test_tc002_signup_duplicate(self, client: AsyncClient, make_user):
        """TC-002: Duplicate signup"""
        await make_user(email="taken@example.com")

        response = await client.post("/api/auth/signup", json={
            "email": "taken@example.com",
            "password": "hunter22",
        })
        assert response.status_code == 400
        assert response.json()["detail"] == "User already exists"

    @pytest.mark.asyncio
    async def test_tc003_signup_validation(self, client: AsyncClient):
        """TC-003: Short passwords and ADMIN self-signup are rejected"""
        response = await client.post("/api/auth/signup", json={"email": "a@example.com", "password": "123"})
        assert response.status_code == 422

        response = await client.post("/api/auth/signup", json={
            "email": "b@example.com",
            "password": "hunter22",
            "role": "ADMIN",
        })
        assert response.status_code == 400


class TestLogin:
    """
    Test Case TC-004: Login With Valid Credentials
    Description: A registered user receives a bearer token and their profile
    Expected Result: 200 with access_token carrying sub, role and type
    """
    @pytest.mark.asyncio
    async def test_tc004_login_valid(self, client: AsyncClient, make_user):
        """TC-004: Login with valid credentials"""
        user = await make_user(role="OWNER", email="owner@example.com")

        response = await client.post("/api/auth/login", json={
            "email": "owner@example.com",
            "password": TEST_PASSWORD,
        })
        assert response.status_code == 200

        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["user"]["id"] == user.id

        payload = decode_access_token(data["access_token"])
        assert payload["sub"] == user.id
        assert payload["role"] == "OWNER"
        assert payload["type"] == "user"

    @pytest.mark.asyncio
    async def test_tc005_login_wrong_password(self, client: AsyncClient, make_user):
        """TC-005: Wrong password returns 401"""
        await make_user(email="owner@example.com")

        response = await client.post("/api/auth/login", json={
            "email": "owner@example.com",
            "password": "not-the-password",
        })
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_tc006_login_unknown_email(self, client: AsyncClient, db_session):
        """TC-006: Unknown email returns 401"""
        response = await client.post("/api/auth/login", json={
            "email": "nobody@example.com",
            "password": TEST_PASSWORD,
        })
        assert response.status_code == 401


class TestCurrentUser:
    """
    Test Case TC-007: Get Current User
    Description: /auth/me resolves the bearer token to the user
    Expected Result: 200 with the user, 401 without or with a bad token
    """
    @pytest.mark.asyncio
    async def test_tc007_me(self, client: AsyncClient, regular_user):
        """TC-007: Current user"""
        user, headers = regular_user

        response = await client.get("/api/auth/me", headers=headers)
        assert response.status_code == 200
        assert response.json()["id"] == user.id

    @pytest.mark.asyncio
    async def test_tc008_me_unauthorized(self, client: AsyncClient, db_session):
        """TC-008: Missing or invalid token"""
        response = await client.get("/api/auth/me")
        assert response.status_code == 401

        response = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_tc009_expired_token(self, client: AsyncClient, regular_user):
        """TC-009: Expired tokens are rejected"""
        user, _ = regular_user
        token = create_access_token(
            data={"sub": user.id, "email": user.email, "role": user.role, "type": "user"},
            expires_delta=timedelta(minutes=-1),
        )
        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_tc010_wrong_token_type(self, client: AsyncClient, regular_user):
        """TC-010: Tokens of another type are forbidden"""
        user, _ = regular_user
        token = create_access_token(data={"sub": user.id, "type": "service"})
        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403


class TestGoogleLogin:
    """
    Test Case TC-011: Google Login Creates User
    Description: First Google login creates a USER; later logins refresh name/avatar
    Expected Result: 200 with token; same user id on the second login
    """
    @pytest.mark.asyncio
    async def test_tc011_google_login(self, client: AsyncClient, db_session, monkeypatch):
        """TC-011: Google login"""
        info = {
            "email": "Google.User@gmail.com",
            "name": "Google User",
            "picture": "https://lh3.googleusercontent.com/a/1",
            "google_id": "1234567890",
        }

        async def fake_verify(token):
            return dict(info)

        monkeypatch.setattr(google_auth_controller, "verify_google_token", fake_verify)

        first = await client.post("/api/auth/google/login", json={"token": "id-token"})
        assert first.status_code == 200
        user = first.json()["user"]
        assert user["email"] == "google.user@gmail.com"
        assert user["role"] == "USER"
        assert user["avatar"] == info["picture"]

        info["name"] = "Renamed User"
        second = await client.post("/api/auth/google/login", json={"token": "id-token"})
        assert second.status_code == 200
        assert second.json()["user"]["id"] == user["id"]
        assert second.json()["user"]["name"] == "Renamed User"

    @pytest.mark.asyncio
    async def test_tc012_google_login_invalid_token(self, client: AsyncClient, db_session, monkeypatch):
        """TC-012: Invalid Google token returns 401"""
        async def fake_verify(token):
            raise ValueError("Invalid Google token: bad signature")

        monkeypatch.setattr(google_auth_controller, "verify_google_token", fake_verify)

        response = await client.post("/api/auth/google/login", json={"token": "forged"})
        assert response.status_code == 401
