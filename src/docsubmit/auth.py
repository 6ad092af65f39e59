"""JWT identity tokens for the authenticated submission variant."""

from datetime import datetime, timedelta, timezone

import jwt

from docsubmit.config import Settings, get_settings


def create_identity_token(
    email: str,
    subject: str | None = None,
    expires_in: timedelta = timedelta(hours=1),
    settings: Settings | None = None,
) -> str:
    settings = settings or get_settings()
    expire = datetime.now(timezone.utc) + expires_in
    payload = {
        "sub": subject or email,
        "email": email,
        "type": "identity",
        "exp": expire,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_identity_token(token: str, settings: Settings | None = None) -> dict:
    """Decode and validate a JWT. Raises jwt.PyJWTError on failure."""
    settings = settings or get_settings()
    return jwt.decode(
        token, settings.secret_key, algorithms=[settings.jwt_algorithm]
    )
