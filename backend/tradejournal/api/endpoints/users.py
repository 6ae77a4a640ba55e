"""
User administration API endpoints for TradeJournal
"""

from typing import Any, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tradejournal.api.deps import get_current_admin, get_db
from tradejournal.models.user import User
from tradejournal.repositories.user import UserRepository
from tradejournal.schemas.user import User as UserSchema

router = APIRouter()


@router.get("", response_model=List[UserSchema])
def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
) -> Any:
    """
    Get all users (admin only).
    """
    return [UserSchema.from_user(user) for user in UserRepository(db).filter()]
