"""
API Dependencies Module

This module provides FastAPI dependency functions resolving the owning account
of a request and the shared application objects (label cache).
Tokens are issued by the external identity provider; this service only verifies them.
"""
from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from fieldservice.core.security import decode_access_token
from fieldservice.services.labels import LabelCache

# auto_error=False allows us to check cookies as a fallback
reusable_bearer = HTTPBearer(auto_error=False)


def get_current_owner(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(reusable_bearer),
) -> str:
    """
    Dependency that returns the owning account id of the current request.

    Supports two ways of presenting the token:
    1. Bearer token in Authorization header (for API clients)
    2. HTTP-only cookie (for browser clients)

    Every query issued on behalf of the request is filtered by the returned id.

    Returns:
        str: The owner id taken from the token's ``sub`` claim

    Raises:
        HTTPException 401: If no token is provided
        HTTPException 403: If the token is invalid, expired or has no subject
    """
    token = credentials.credentials if credentials else None

    # Fall back to the cookie, stored as "Bearer <token>"
    if not token:
        token = request.cookies.get("access_token")
        if token and token.startswith("Bearer "):
            token = token.replace("Bearer ", "", 1)

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = decode_access_token(token)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Could not validate credentials",
        )

    owner_id = payload.get("sub")
    if not owner_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Token missing subject (sub)",
        )
    return owner_id


def get_label_cache(request: Request) -> LabelCache:
    """The label cache created by the application factory."""
    return request.app.state.label_cache
