from datetime import timedelta

import bcrypt
import jwt

from lexiassist.config import Settings
from lexiassist.models.base import utcnow


def hash_password(password: str) -> str:
    # bcrypt only looks at the first 72 bytes and rejects longer input
    secret = password.encode("utf-8")[:72]
    return bcrypt.hashpw(secret, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8")[:72], password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(settings: Settings, user_id: str) -> str:
    expires = utcnow() + timedelta(minutes=settings.access_token_expire_minutes)
    return jwt.encode(
        {"sub": user_id, "exp": expires},
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def authenticate(settings: Settings, token: str) -> str | None:
    """user id carried by a valid, unexpired token; None otherwise"""
    try:
        payload = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm],
        )
    except jwt.PyJWTError:
        return None
    return payload.get("sub")
