"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RegisterRequest(BaseModel):
    """Schema for registering a new user."""

    email: str = Field(..., min_length=3, max_length=320)
    name: str | None = Field(None, max_length=200)
    image: str | None = None

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if "@" not in value:
            raise ValueError("email must contain '@'")
        return value


class UserResponse(BaseModel):
    """Public profile fields of a user."""

    id: str
    email: str
    name: str | None
    image: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RegisterResponse(BaseModel):
    """Registration result carrying a bearer token for the new user."""

    user: UserResponse
    access_token: str
    token_type: str = "bearer"
