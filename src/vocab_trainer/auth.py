"""Password hashing and JWT access tokens."""

from datetime import datetime, timedelta, timezone

import jwt
import structlog
from passlib.context import CryptContext

from vocab_trainer.config import get_settings

logger = structlog.get_logger()

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Create a signed token whose subject is the user id.

    Args:
        user_id: User identifier.
        expires_delta: Lifetime; defaults to ``jwt_expire_days`` from settings.
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "iat": now,
        "exp": now + (expires_delta or timedelta(days=settings.jwt_expire_days)),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> str | None:
    """Return the user id carried by ``token``, or None if it is invalid or expired."""
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        logger.info("token_expired")
        return None
    except jwt.InvalidTokenError as e:
        logger.info("token_invalid", error=str(e))
        return None
    subject = claims.get("sub")
    return subject if isinstance(subject, str) and subject else None
