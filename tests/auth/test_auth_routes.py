from datetime import datetime, timedelta, timezone

from fastapi import status

from codeitout.business.services import encode_token, issue_session
from codeitout.data.schemas import UserRole


# Test user registration
def test_register_success(client, user_repository):
    user_data = {"email": "new@example.com", "password": "password123", "name": "New"}

    response = client.post("/api/v1/auth/register", json=user_data)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["message"] == "User registered successfully"
    assert data["user"]["email"] == user_data["email"]
    assert data["user"]["role"] == "USER"
    assert "password_hash" not in data["user"]
    assert "jwt" in response.cookies

    set_cookie = response.headers["set-cookie"]
    assert "HttpOnly" in set_cookie
    assert "SameSite=strict" in set_cookie
    assert "Max-Age=604800" in set_cookie

    assert len(user_repository.users) == 1


def test_register_existing_email(client, regular_user, user_repository):
    user_data = {"email": regular_user.email, "password": "password123", "name": "Dup"}

    response = client.post("/api/v1/auth/register", json=user_data)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "already exists" in response.json()["detail"]
    assert "jwt" not in response.cookies
    assert [u.email for u in user_repository.users.values()] == [regular_user.email]


def test_register_invalid_email(client):
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "not-an-email", "password": "password123"},
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


# Test user login
def test_login_success(client, regular_user):
    response = client.post(
        "/api/v1/auth/login",
        json={"email": regular_user.email, "password": "password123"},
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["user"]["id"] == str(regular_user.id)
    assert "jwt" in response.cookies


def test_login_wrong_password(client, regular_user):
    response = client.post(
        "/api/v1/auth/login",
        json={"email": regular_user.email, "password": "wrongpassword"},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert "Invalid credentials" in response.json()["detail"]
    assert "jwt" not in response.cookies


def test_login_unknown_email(client):
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "ghost@example.com", "password": "password123"},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert "User not found" in response.json()["detail"]


# Test session check
def test_check_returns_current_user(user_client, regular_user):
    response = user_client.get("/api/v1/auth/check")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["user"]["email"] == regular_user.email


def test_check_reflects_role_from_store(user_client, regular_user):
    # Role changes apply on the next request without a new token
    regular_user.role = UserRole.ADMIN

    response = user_client.get("/api/v1/auth/check")

    assert response.json()["user"]["role"] == "ADMIN"


def test_check_without_cookie(client):
    response = client.get("/api/v1/auth/check")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert "No token provided" in response.json()["detail"]


def test_check_with_invalid_token(client):
    client.cookies.set("jwt", "not-a-token")

    response = client.get("/api/v1/auth/check")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_check_with_expired_token(client, regular_user):
    expired = encode_token(
        {
            "id": str(regular_user.id),
            "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
        }
    )
    client.cookies.set("jwt", expired)

    response = client.get("/api/v1/auth/check")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_check_for_deleted_user(client, user_repository, regular_user):
    client.cookies.set("jwt", issue_session(regular_user.id))
    user_repository.users.clear()

    response = client.get("/api/v1/auth/check")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert "User not found" in response.json()["detail"]


# Test logout
def test_logout_clears_cookie(user_client):
    response = user_client.post("/api/v1/auth/logout")

    assert response.status_code == status.HTTP_200_OK
    assert "logged out successfully" in response.json()["message"]
    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith("jwt=")
    assert "Max-Age=0" in set_cookie


def test_logout_requires_session(client):
    response = client.post("/api/v1/auth/logout")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_register_then_check_with_issued_cookie(client):
    client.post(
        "/api/v1/auth/register",
        json={"email": "flow@example.com", "password": "password123"},
    )

    response = client.get("/api/v1/auth/check")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["user"]["email"] == "flow@example.com"
