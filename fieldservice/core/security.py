from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt

from fieldservice.core.config import settings


def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Mint a token for an owning account, signed the way the identity provider signs them.

    The ``sub`` claim carries the owner id that scopes every read and write.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"exp": expire, "sub": str(subject)}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    # Raises jose.JWTError on bad signature or expiry
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
