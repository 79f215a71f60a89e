"""Tests for user registration endpoints."""

from fastapi import status


def test_register_returns_token(client) -> None:
    """Test registering a user returns a token."""
    response = client.post(
        "/api/v1/users/",
        json={"email": "New.Person@Example.org", "name": "New Person"},
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["user"]["email"] == "new.person@example.org"
    assert data["token_type"] == "bearer"

    me = client.get(
        "/api/v1/users/me",
        headers={"Authorization": f"Bearer {data['access_token']}"},
    )
    assert me.status_code == status.HTTP_200_OK
    assert me.json()["id"] == data["user"]["id"]


def test_register_duplicate_email(client, test_user) -> None:
    """Test registering an email twice."""
    response = client.post("/api/v1/users/", json={"email": test_user.email})
    assert response.status_code == status.HTTP_409_CONFLICT


def test_register_invalid_email(client) -> None:
    """Test registering with an invalid email."""
    response = client.post("/api/v1/users/", json={"email": "no-at-sign"})
    assert response.status_code == 422


def test_me_requires_token(client) -> None:
    """Test that the profile endpoint requires a token."""
    response = client.get("/api/v1/users/me")
    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}
