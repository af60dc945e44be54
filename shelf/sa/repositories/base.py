# shelf/sa/repositories/base.py
from enum import Enum
from typing import Any, Dict, List, Optional, Type
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from shelf.sa.models import Base

PROTECTED_FIELDS = {'id', 'owner', 'created_at', 'updated_at'}

class OwnedRepository:
    """Repository for records that belong to a single owner.

    Every query is filtered by the owner the repository was created for, so a
    record created by someone else behaves exactly like a missing record.
    """

    model: Type[Base]

    def __init__(self, session: Session, owner: str):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
            owner: Identity of the user whose records are visible
        """
        self.session = session
        self.owner = owner

    def _query(self):
        return self.session.query(self.model).filter(self.model.owner == self.owner)

    def _columns(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        columns = self.model.__table__.columns.keys()
        cleaned = {}
        for name, value in fields.items():
            if name in PROTECTED_FIELDS or name not in columns:
                raise ValueError(f"Unknown or read-only field '{name}' for {self.model.__name__}")
            cleaned[name] = value.value if isinstance(value, Enum) else value
        return cleaned

    def get_by_id(self, record_id: str):
        """Get a record by its ID.

        Args:
            record_id: The ID of the record to retrieve

        Returns:
            The record if found and owned by the caller, None otherwise
        """
        return self._query().filter(self.model.id == record_id).one_or_none()

    def list(self, **equals) -> List[Any]:
        """List records matching simple equality predicates.

        Args:
            equals: Column name to value pairs, e.g. book_id="..."

        Returns:
            List of matching records ordered by creation time
        """
        query = self._query()
        for name, value in self._columns(equals).items():
            query = query.filter(getattr(self.model, name) == value)
        return query.order_by(self.model.created_at, self.model.id).all()

    def count(self, **equals) -> int:
        """Count records matching simple equality predicates."""
        query = self._query()
        for name, value in self._columns(equals).items():
            query = query.filter(getattr(self.model, name) == value)
        return query.count()

    def create(self, **fields):
        """Create a new record owned by the caller.

        Args:
            fields: Column values for the new record

        Returns:
            The created record

        Raises:
            ValueError: If the record violates a constraint
        """
        record = self.model(owner=self.owner, **self._columns(fields))
        self.session.add(record)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise ValueError(f"Could not create {self.model.__name__}: {e.orig}") from e
        return record

    def update(self, record_id: str, **fields):
        """Update an existing record.

        Args:
            record_id: The ID of the record to update
            fields: Column values to change

        Returns:
            The updated record if found, None otherwise
        """
        record = self.get_by_id(record_id)
        if not record:
            return None

        for name, value in self._columns(fields).items():
            setattr(record, name, value)

        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise ValueError(f"Could not update {self.model.__name__}: {e.orig}") from e
        return record

    def delete(self, record_id: str) -> bool:
        """Delete a record.

        Args:
            record_id: The ID of the record to delete

        Returns:
            True if the record was deleted, False if not found

        Raises:
            ValueError: If other records still reference it
        """
        record = self.get_by_id(record_id)
        if not record:
            return False

        self.session.delete(record)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise ValueError(f"{self.model.__name__} '{record_id}' is still referenced: {e.orig}") from e
        return True
