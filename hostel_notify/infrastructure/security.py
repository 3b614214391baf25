"""Token helpers for the demo authentication layer."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from hostel_notify.config import get_settings
from hostel_notify.domain.entities import Actor

ALGORITHM = "HS256"

settings = get_settings()


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode({**data, "exp": expire}, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


def create_actor_token(actor: Actor, expires_delta: timedelta | None = None) -> str:
    """Issue a token whose claims identify ``actor``."""

    return create_access_token({"sub": str(actor.id), "role": actor.role}, expires_delta)


def actor_from_token(token: str) -> Actor:
    """Decode ``token`` into the :class:`Actor` it was issued for."""

    payload = decode_access_token(token)
    subject = payload.get("sub")
    role = payload.get("role")
    if subject is None or not isinstance(role, str) or not role:
        raise ValueError("Token is missing the actor claims")
    try:
        user_id = int(subject)
    except (TypeError, ValueError) as exc:
        raise ValueError("Token subject is not a user id") from exc
    return Actor(id=user_id, role=role)
