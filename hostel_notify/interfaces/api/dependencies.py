"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from hostel_notify.domain.access_policy import AccessPolicy, get_access_policy
from hostel_notify.domain.entities import Actor
from hostel_notify.infrastructure.security import actor_from_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def resolve_actor(token: str) -> Actor:
    """Resolve the authenticated actor for the provided token."""

    try:
        return actor_from_token(token)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


def get_current_actor(token: str = Depends(oauth2_scheme)) -> Actor:
    """Return the actor identified by the bearer token."""

    return resolve_actor(token)


def get_policy() -> AccessPolicy:
    """Return the access policy built from the current settings."""

    return get_access_policy()

