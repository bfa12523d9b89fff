import pytest
from httpx import AsyncClient
from fastapi import status


def registration(username: str, password: str = "StrongPass123!", **overrides) -> dict:
    payload = {
        "email": f"{username}@example.com",
        "username": username,
        "full_name": username.title(),
        "password": password,
        "confirm_password": password,
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
class TestAuth:
    """Operator registration and sign-in"""

    async def test_register_operator(self, client: AsyncClient):
        payload = registration("dispatcher")

        response = await client.post("/api/v1/auth/register", json=payload)
        assert response.status_code == status.HTTP_201_CREATED

        data = response.json()
        assert data["email"] == "dispatcher@example.com"
        assert data["username"] == "dispatcher"
        assert "hashed_password" not in data

    async def test_register_duplicate_email(self, client: AsyncClient, user):
        payload = registration("someoneelse", email=user.email)

        response = await client.post("/api/v1/auth/register", json=payload)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Email already registered"

    async def test_register_duplicate_username(self, client: AsyncClient, user):
        payload = registration(user.username, email="fresh@example.com")

        response = await client.post("/api/v1/auth/register", json=payload)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Username already taken"

    async def test_register_password_mismatch(self, client: AsyncClient):
        payload = registration("mismatch", confirm_password="OtherPass123!")

        response = await client.post("/api/v1/auth/register", json=payload)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    async def test_register_then_login(self, client: AsyncClient):
        await client.post("/api/v1/auth/register", json=registration("courier"))

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "courier@example.com", "password": "StrongPass123!"}
        )
        assert response.status_code == status.HTTP_200_OK

        data = response.json()
        assert data["access_token"]
        assert data["token_type"] == "bearer"
        assert data["expires_in"] > 0
        assert data["user"]["email"] == "courier@example.com"
        assert data["user"]["last_login"] is not None

    async def test_login_unknown_email(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "nonexistent@example.com", "password": "wrongpassword"}
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_login_wrong_password(self, client: AsyncClient, user):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": user.email, "password": "WrongPass123"}
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Incorrect email or password"

    async def test_me_returns_signed_in_operator(self, client: AsyncClient, auth_headers: dict):
        response = await client.get("/api/v1/auth/me", headers=auth_headers)
        assert response.status_code == status.HTTP_200_OK

        data = response.json()
        assert data["email"] == "operator@example.com"
        assert data["username"] == "operator"

    async def test_me_requires_token(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me")
        assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)

    async def test_me_rejects_forged_token(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
