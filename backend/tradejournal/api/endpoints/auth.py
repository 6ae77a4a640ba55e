"""
Authentication API endpoints for TradeJournal

This module provides API endpoints for user authentication and management.
"""

from datetime import timedelta
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from tradejournal.api.deps import get_current_user, get_db, get_settings
from tradejournal.core.config import Settings
from tradejournal.core.exceptions import AuthenticationError, ValidationError
from tradejournal.core.security import create_access_token
from tradejournal.models.user import User
from tradejournal.repositories.user import UserRepository
from tradejournal.schemas.token import Token
from tradejournal.schemas.user import User as UserSchema, UserCreate, UserUpdate

router = APIRouter()


@router.post("/register", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
def create_user(*, db: Session = Depends(get_db), user_in: UserCreate) -> Any:
    """
    Create a new user.
    """
    repository = UserRepository(db)

    if repository.get_by_email(email=user_in.email):
        raise ValidationError("A user with this email already exists.")

    if repository.get_by_username(username=user_in.username):
        raise ValidationError("A user with this username already exists.")

    user = repository.create(obj_in=user_in)
    return UserSchema.from_user(user)


@router.post("/login", response_model=Token)
def login_for_access_token(
    db: Session = Depends(get_db),
    form_data: OAuth2PasswordRequestForm = Depends(),
    settings: Settings = Depends(get_settings),
) -> Any:
    """
    OAuth2 compatible token login, get an access token for future requests.
    """
    repository = UserRepository(db)

    user = repository.authenticate(email=form_data.username, password=form_data.password)
    if not user:
        raise AuthenticationError("Incorrect email or password")

    if not user.is_active:
        raise ValidationError("Inactive user")

    access_token_expires = timedelta(minutes=settings.access_token_expire_minutes)
    access_token = create_access_token(
        subject=str(user.id), expires_delta=access_token_expires, settings=settings
    )

    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/me", response_model=UserSchema)
def read_users_me(current_user: User = Depends(get_current_user)) -> Any:
    """
    Get current user.
    """
    return UserSchema.from_user(current_user)


@router.put("/me", response_model=UserSchema)
def update_user_me(
    *,
    db: Session = Depends(get_db),
    user_in: UserUpdate,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Update current user.
    """
    repository = UserRepository(db)

    if user_in.email and user_in.email != current_user.email and repository.get_by_email(email=user_in.email):
        raise ValidationError("A user with this email already exists.")

    user = repository.update(db_obj=current_user, obj_in=user_in)
    return UserSchema.from_user(user)
