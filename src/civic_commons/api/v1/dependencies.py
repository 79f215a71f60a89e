"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from civic_commons.core.security import decode_access_token
from civic_commons.db.session import get_db
from civic_commons.models import User
from civic_commons.services.locations import LocationService
from civic_commons.services.membership import MembershipService

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _resolve_user(token: str, db: Session) -> User:
    user_id = decode_access_token(token)
    if user_id is None:
        raise _credentials_exception()
    user = db.get(User, user_id)
    if user is None:
        raise _credentials_exception("User not found")
    return user


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from the bearer token.

    Raises:
        HTTPException: 401 if the token is invalid or the user does not exist.
    """
    return _resolve_user(credentials.credentials, db)


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)],
    db: SessionDep,
) -> User | None:
    """Like ``get_current_user`` but anonymous callers get ``None``.

    A token that is present but invalid is still rejected.
    """
    if credentials is None:
        return None
    return _resolve_user(credentials.credentials, db)


def get_membership_service(db: SessionDep) -> MembershipService:
    """Build the membership service around the request's session."""
    return MembershipService(db)


# Type aliases for dependency injection
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
MembershipServiceDep = Annotated[MembershipService, Depends(get_membership_service)]


def get_location_service(db: SessionDep) -> LocationService:
    return LocationService(db)


LocationServiceDep = Annotated[LocationService, Depends(get_location_service)]
