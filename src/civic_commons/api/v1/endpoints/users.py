"""User registration and profile endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from sqlalchemy.exc import IntegrityError

from civic_commons.api.v1.dependencies import CurrentUserDep, SessionDep
from civic_commons.core.security import create_access_token
from civic_commons.models import User
from civic_commons.schemas.user import RegisterRequest, RegisterResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register_user(payload: RegisterRequest, db: SessionDep) -> RegisterResponse:
    """Register a user and return a bearer token for them."""
    existing = db.query(User).filter(User.email == payload.email).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    user = User(email=payload.email, name=payload.name, image=payload.image)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        ) from err
    db.refresh(user)
    logger.info("Registered user %s", user.id)

    return RegisterResponse(
        user=UserResponse.model_validate(user),
        access_token=create_access_token(user.id),
    )


@router.get("/me", response_model=UserResponse)
def read_current_user(current_user: CurrentUserDep) -> User:
    """Return the authenticated user's profile."""
    return current_user
