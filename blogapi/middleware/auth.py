"""Auth dependencies for protected routes.

A request is authenticated only when its bearer token verifies AND is still on
the owner's allow-list, so logout and blocking take effect immediately.
"""
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from blogapi.database import get_db
from blogapi.models import User
from blogapi.services.auth import TokenAuthority, get_token_authority
from blogapi.services.errors import (
    AccountBlockedError,
    AuthenticationError,
    ForbiddenError,
    MissingTokenError,
    TokenRevokedError,
    UserNotFoundError,
)
from blogapi.services.sessions import SessionRegistry

bearer_scheme = HTTPBearer(auto_error=False)


def extract_bearer_token(credentials: HTTPAuthorizationCredentials | None) -> str:
    """Return the token from a literal ``Bearer <token>`` authorization header."""
    if not credentials:
        raise MissingTokenError()
    if credentials.scheme != "Bearer" or not credentials.credentials:
        raise MissingTokenError("Not authorized, malformed authorization header")
    return credentials.credentials


def resolve_user(db, authority: TokenAuthority, token: str) -> User:
    user_id = authority.verify(token)
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise UserNotFoundError()
    if not SessionRegistry(db).is_active(user.id, token):
        raise TokenRevokedError()
    if user.is_blocked:
        raise AccountBlockedError()
    return user


async def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    return extract_bearer_token(credentials)


async def get_current_user_required(
    token: str = Depends(get_bearer_token),
    db=Depends(get_db),
    authority: TokenAuthority = Depends(get_token_authority),
) -> User:
    """Require an authenticated, allow-listed, unblocked user."""
    return resolve_user(db, authority, token)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db=Depends(get_db),
    authority: TokenAuthority = Depends(get_token_authority),
) -> User | None:
    """Get current user if a valid session is presented. Returns None otherwise."""
    if not credentials:
        return None
    try:
        return resolve_user(db, authority, extract_bearer_token(credentials))
    except (AuthenticationError, AccountBlockedError):
        return None


async def require_admin(user: User = Depends(get_current_user_required)) -> User:
    """Require the authenticated user to hold the admin role."""
    if not user.is_admin:
        raise ForbiddenError()
    return user
