"""
User repository for TradeJournal

This module provides a repository for user operations.
"""

from typing import Any, Dict, Optional, Union

from sqlalchemy.orm import Session

from tradejournal.core.security import get_password_hash, verify_password
from tradejournal.models.user import User
from tradejournal.repositories.base import BaseRepository
from tradejournal.schemas.user import UserCreate, UserUpdate


class UserRepository(BaseRepository[User, UserCreate, UserUpdate]):
    """Repository for user operations"""

    def __init__(self, db: Session):
        """
        Initialize the repository

        Args:
            db: Database session
        """
        super().__init__(User, db)

    def get_by_email(self, email: str) -> Optional[User]:
        """
        Get a user by email

        Args:
            email: User's email

        Returns:
            Optional[User]: User or None if not found
        """
        return self.db.query(User).filter(User.email == email).first()

    def get_by_username(self, username: str) -> Optional[User]:
        """
        Get a user by username

        Args:
            username: User's username

        Returns:
            Optional[User]: User or None if not found
        """
        return self.db.query(User).filter(User.username == username).first()

    def create(self, *, obj_in: UserCreate, role: str = "user") -> User:
        """
        Create a new user

        Args:
            obj_in: User create schema
            role: 'user' or 'admin'

        Returns:
            User: Created user
        """
        db_obj = User(
            email=obj_in.email,
            username=obj_in.username,
            full_name=obj_in.full_name,
            hashed_password=get_password_hash(obj_in.password),
            is_active=obj_in.is_active,
            role=role,
        )

        self.db.add(db_obj)
        self.db.commit()
        self.db.refresh(db_obj)

        return db_obj

    def update(
        self,
        *,
        db_obj: User,
        obj_in: Union[UserUpdate, Dict[str, Any]]
    ) -> User:
        """
        Update a user

        Args:
            db_obj: User to update
            obj_in: User update schema or dictionary

        Returns:
            User: Updated user
        """
        if isinstance(obj_in, dict):
            update_data = dict(obj_in)
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        # Handle password separately
        if update_data.get("password"):
            update_data["hashed_password"] = get_password_hash(update_data.pop("password"))
        update_data.pop("password", None)

        return super().update(db_obj=db_obj, obj_in=update_data)

    def authenticate(self, *, email: str, password: str) -> Optional[User]:
        """
        Authenticate a user

        Args:
            email: User's email
            password: User's password

        Returns:
            Optional[User]: User or None if authentication fails
        """
        user = self.get_by_email(email=email)

        if not user:
            return None

        if not verify_password(password, user.hashed_password):
            return None

        return user

    def set_tradovate_tokens(self, user: User, environment: str, tokens: Optional[str], expires_at) -> User:
        """Store or clear the Tradovate token blob of one environment"""
        user.set_tradovate_tokens(environment, tokens, expires_at)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
