"""
Dependencies for API endpoints in TradeJournal

This module provides common dependencies for API endpoints.
"""

from typing import Any, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.orm import Session

from tradejournal.core.config import Settings, get_settings
from tradejournal.core.exceptions import AuthenticationError, AuthorizationError, NotFoundError
from tradejournal.core.security import decode_access_token
from tradejournal.db.session import get_db
from tradejournal.models.user import User
from tradejournal.repositories.user import UserRepository
from tradejournal.schemas.token import TokenPayload

__all__ = [
    "get_db",
    "get_settings",
    "get_current_user",
    "get_current_admin",
    "resolve_target_user_id",
    "get_owned_record",
]

# OAuth2 scheme for token authentication; missing tokens are reported as AuthenticationError
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_current_user(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(oauth2_scheme),
    settings: Settings = Depends(get_settings),
) -> User:
    """
    Get current user from token

    Args:
        db: Database session
        token: JWT token
        settings: Application settings

    Returns:
        User: Current user

    Raises:
        AuthenticationError: If the token is missing or invalid, or the user is unknown or inactive
    """
    if not token:
        raise AuthenticationError()

    payload = decode_access_token(token, settings)
    try:
        token_data = TokenPayload(**payload)
    except SchemaValidationError:
        raise AuthenticationError("Could not validate credentials")

    if token_data.sub is None:
        raise AuthenticationError("Could not validate credentials")

    user = UserRepository(db).get(token_data.sub)
    if not user or not user.is_active:
        raise AuthenticationError("Could not validate credentials")

    return user


def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    """
    Get current user, requiring the admin role

    Raises:
        AuthorizationError: If the user is not an admin
    """
    if not current_user.is_admin:
        raise AuthorizationError("The user doesn't have enough privileges")

    return current_user


def resolve_target_user_id(current_user: User, user_id: Optional[int]) -> int:
    """
    Pick the user an operation acts on

    Non-admins may only act on themselves.

    Raises:
        AuthorizationError: If a non-admin names another user
    """
    if user_id is None or user_id == current_user.id:
        return current_user.id
    if not current_user.is_admin:
        raise AuthorizationError()
    return user_id


def get_owned_record(record: Any, current_user: User, label: str) -> Any:
    """
    Check that a loaded record exists and is visible to the user

    Raises:
        NotFoundError: If the record is None
        AuthorizationError: If it belongs to someone else and the user is not admin
    """
    if record is None:
        raise NotFoundError(f"{label} not found")
    if record.user_id != current_user.id and not current_user.is_admin:
        raise AuthorizationError()
    return record
