"""
Database base model for TradeJournal

This module provides the base SQLAlchemy model that every record inherits from.
"""

from typing import Any, Dict

import sqlalchemy as sa
from sqlalchemy.orm import as_declarative, declared_attr

from tradejournal.utils.time_utils import utcnow


@as_declarative()
class Base:
    """Base class for all database models"""
    __name__: str

    # Generate tablename automatically based on class name
    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower()

    # Common columns for all models
    id = sa.Column(sa.Integer, primary_key=True, index=True)
    created_at = sa.Column(sa.DateTime, default=utcnow)
    updated_at = sa.Column(sa.DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert model instance to dictionary"""
        return {c.name: getattr(self, c.name) for c in self.__table__.columns}
