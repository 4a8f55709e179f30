from datetime import datetime, timedelta, timezone

import jwt

from fleet_market.core import config

REQUIRED_CLAIMS = ["sub", "exp"]


def create_access_token(email: str, expires_minutes: int | None = None) -> str:
    """Issue a dashboard token for the dealer with ``email``."""
    issued_at = datetime.now(timezone.utc)
    lifetime = timedelta(minutes=expires_minutes or config.JWT_EXPIRES_MINUTES)
    payload = {"sub": email.strip().lower(), "iat": issued_at, "exp": issued_at + lifetime}
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    # Tokens without an expiry or subject are rejected outright.
    return jwt.decode(
        token,
        config.JWT_SECRET_KEY,
        algorithms=[config.JWT_ALGORITHM],
        options={"require": REQUIRED_CLAIMS},
    )
