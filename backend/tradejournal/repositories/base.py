"""
Base repository for TradeJournal

This module provides a base repository class for database operations. It
mirrors the record-store contract the journal was built against: equality
filters, a sort key (``"-field"`` for descending) and an optional limit.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import asc, desc
from sqlalchemy.orm import Query, Session

from tradejournal.core.exceptions import ValidationError
from tradejournal.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class BaseRepository(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """Base repository for CRUD operations"""

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Initialize the repository

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    def get(self, id: Any) -> Optional[ModelType]:
        """
        Get a record by ID

        Args:
            id: Record ID

        Returns:
            Optional[ModelType]: Record or None if not found
        """
        return self.db.query(self.model).filter(self.model.id == id).first()

    def _apply_sort(self, query: Query, sort: Optional[str]) -> Query:
        if not sort:
            return query.order_by(asc(self.model.id))
        descending = sort.startswith("-")
        column = self.model.__table__.columns.get(sort.lstrip("-+"))
        if column is None:
            raise ValidationError(f"Unknown sort field: {sort}")
        if descending:
            return query.order_by(desc(column), desc(self.model.id))
        return query.order_by(asc(column), asc(self.model.id))

    def filter(
        self,
        filters: Optional[Dict[str, Any]] = None,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[ModelType]:
        """
        Get records matching every filter

        Args:
            filters: Attribute/value pairs compared for equality
            sort: Attribute to sort by, prefixed with '-' for descending
            limit: Maximum number of records to return

        Returns:
            List[ModelType]: Matching records
        """
        query = self.db.query(self.model)

        if filters:
            for attr_name, attr_value in filters.items():
                query = query.filter(getattr(self.model, attr_name) == attr_value)

        query = self._apply_sort(query, sort)
        if limit:
            query = query.limit(limit)
        return query.all()

    def first(self, filters: Dict[str, Any], sort: Optional[str] = None) -> Optional[ModelType]:
        """Get the first record matching the filters"""
        records = self.filter(filters, sort=sort, limit=1)
        return records[0] if records else None

    def create(self, *, obj_in: Union[CreateSchemaType, Dict[str, Any]], **extra: Any) -> ModelType:
        """
        Create a new record

        Args:
            obj_in: Create schema or dictionary
            extra: Additional column values, e.g. the owning user_id

        Returns:
            ModelType: Created record
        """
        if isinstance(obj_in, dict):
            obj_in_data = dict(obj_in)
        else:
            obj_in_data = obj_in.model_dump()
        obj_in_data.update(extra)

        db_obj = self.model(**obj_in_data)
        self.db.add(db_obj)
        self.db.commit()
        self.db.refresh(db_obj)

        return db_obj

    def update(
        self,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """
        Update a record

        Args:
            db_obj: Database object to update
            obj_in: Update schema or dictionary

        Returns:
            ModelType: Updated record
        """
        obj_data = db_obj.to_dict()

        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        for field in obj_data:
            if field in update_data and field != "id":
                setattr(db_obj, field, update_data[field])

        self.db.add(db_obj)
        self.db.commit()
        self.db.refresh(db_obj)

        return db_obj

    def delete(self, *, id: int) -> Optional[ModelType]:
        """
        Delete a record

        Args:
            id: Record ID

        Returns:
            ModelType: Deleted record
        """
        obj = self.get(id)
        if obj is None:
            return None
        self.db.delete(obj)
        self.db.commit()

        return obj
