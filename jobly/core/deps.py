"""
FastAPI dependencies for authentication and authorization.

Tokens are trusted as issued: the username and admin flag come straight from
the JWT claims, without a database round trip.
"""

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from typing import Optional

from jobly.core.exceptions import AppError
from jobly.core.security import JWTError, decode_token

# HTTP Bearer token scheme (Authorization: Bearer <token>)
security = HTTPBearer(auto_error=False)


class TokenUser(BaseModel):
    """Identity carried by an access token."""
    username: str
    is_admin: bool = False


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenUser:
    """
    Extract and validate the current user from the Bearer token.

    Raises:
        AppError UNAUTHORIZED: If the token is missing, invalid or expired
    """
    if credentials is None:
        raise AppError.unauthorized("Must be logged in")

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise AppError.unauthorized("Could not validate credentials")

    username = payload.get("sub")
    if username is None:
        raise AppError.unauthorized("Could not validate credentials")

    return TokenUser(username=username, is_admin=payload.get("is_admin", False))


async def get_admin_user(user: TokenUser = Depends(get_current_user)) -> TokenUser:
    """
    Require an admin token.

    Raises:
        AppError FORBIDDEN: If the user is not an admin
    """
    if not user.is_admin:
        raise AppError.forbidden("Admin privileges required")
    return user


async def get_authorized_user(
    username: str,
    user: TokenUser = Depends(get_current_user),
) -> TokenUser:
    """
    Require a token for the user named in the path, or an admin token.

    Used on /users/{username} routes; ``username`` is the path parameter.

    Raises:
        AppError FORBIDDEN: If the token belongs to someone else
    """
    if not user.is_admin and user.username != username:
        raise AppError.forbidden("Not authorized for this user")
    return user
