from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from typing import Optional
from uuid import UUID
import logging

from maintrack.core.config import settings

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is a 401, not FastAPI's default 403
bearer_scheme = HTTPBearer(auto_error=False)


def decode_token(token: str) -> dict:
    """Verify a token issued by the identity provider and return its claims."""
    options = {"verify_aud": settings.AUTH_JWT_AUDIENCE is not None}
    return jwt.decode(
        token,
        settings.AUTH_JWT_SECRET,
        algorithms=[settings.AUTH_JWT_ALGORITHM],
        audience=settings.AUTH_JWT_AUDIENCE,
        options=options,
    )


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> UUID:
    """
    Resolve the authenticated user id from the bearer token.
    Returns 401 if the token is missing, invalid or carries no usable subject.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None or not credentials.credentials:
        raise credentials_exception

    try:
        payload = decode_token(credentials.credentials)
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        raise credentials_exception

    subject = payload.get("sub")
    if subject is None:
        logger.warning("Token missing 'sub' field")
        raise credentials_exception

    try:
        return UUID(str(subject))
    except ValueError:
        logger.warning(f"Token subject is not a UUID: {subject}")
        raise credentials_exception
