# shelf/collaborator.py
"""Asynchronous client for the managed data service.

Each entity type is reached through a ModelClient exposing get, list, create,
update and delete. Filters are plain equality predicates; joins, search and
sorting happen on the caller's side. The service assigns ids and timestamps
and only ever shows the caller its own records.
"""
import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Iterable, List, Optional, Type

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from .errors import CascadeError, CollaboratorError, RecordNotFoundError
from .schemas import Book, Folder, Tag, BookTag, InsightMemo
from .sa.database import Database
from .sa.repositories import (
    OwnedRepository, BookRepository, FolderRepository, TagRepository,
    BookTagRepository, InsightMemoRepository
)
from .utils.log import get_logger


class ModelClient(ABC):
    """CRUD operations on one entity type.

    Implementations should report failures as CollaboratorError. Callers still
    treat any other Exception raised by a client (a dropped connection, a
    timeout) as a failed call.
    """

    entity: str = "Record"

    @abstractmethod
    async def get(self, record_id: str) -> Optional[BaseModel]:
        """Return the record, or None when it does not exist"""

    @abstractmethod
    async def list(self, **equals) -> List[BaseModel]:
        """Return the records matching every equality predicate"""

    @abstractmethod
    async def create(self, **fields) -> BaseModel:
        """Create a record; the service assigns id and timestamps"""

    @abstractmethod
    async def update(self, record_id: str, **fields) -> BaseModel:
        """Apply a partial update; raises RecordNotFoundError for unknown ids"""

    @abstractmethod
    async def delete(self, record_id: str) -> None:
        """Delete a record; raises RecordNotFoundError for unknown ids"""


@dataclass
class DataCollaborator:
    """The five entity clients of the data service"""
    books: ModelClient
    folders: ModelClient
    tags: ModelClient
    book_tags: ModelClient
    memos: ModelClient


class SqlModelClient(ModelClient):
    """ModelClient backed by an owner-scoped SQLAlchemy repository."""

    def __init__(self, database: Database, repository: Type[OwnedRepository],
                 schema: Type[BaseModel], owner: str):
        self.database = database
        self.repository = repository
        self.schema = schema
        self.owner = owner
        self.entity = schema.__name__
        self.logger = get_logger(self.__class__.__name__)

    def _call(self, operation: str, action):
        """Run one unit of work in a worker thread so concurrent calls overlap"""
        return asyncio.to_thread(self._work, operation, action)

    def _work(self, operation: str, action):
        try:
            with self.database.session_scope() as session:
                return action(self.repository(session, self.owner))
        except CollaboratorError:
            raise
        except (SQLAlchemyError, ValueError) as e:
            self.logger.error(f"{self.entity}.{operation} failed: {e}")
            raise CollaboratorError(f"{self.entity}.{operation} failed: {e}") from e

    def _to_schema(self, record) -> BaseModel:
        return self.schema.model_validate(record)

    async def get(self, record_id: str) -> Optional[BaseModel]:
        def action(repo):
            record = repo.get_by_id(record_id)
            return self._to_schema(record) if record else None
        return await self._call("get", action)

    async def list(self, **equals) -> List[BaseModel]:
        return await self._call("list", lambda repo: [self._to_schema(r) for r in repo.list(**equals)])

    async def create(self, **fields) -> BaseModel:
        return await self._call("create", lambda repo: self._to_schema(repo.create(**fields)))

    async def update(self, record_id: str, **fields) -> BaseModel:
        def action(repo):
            record = repo.update(record_id, **fields)
            if record is None:
                raise RecordNotFoundError(self.entity, record_id)
            return self._to_schema(record)
        return await self._call("update", action)

    async def delete(self, record_id: str) -> None:
        def action(repo):
            if not repo.delete(record_id):
                raise RecordNotFoundError(self.entity, record_id)
        await self._call("delete", action)


class SqlCollaborator(DataCollaborator):
    """Data collaborator reading and writing a SQL database as one owner."""

    def __init__(self, database: Database, owner: str):
        self.database = database
        self.owner = owner
        super().__init__(
            books=SqlModelClient(database, BookRepository, Book, owner),
            folders=SqlModelClient(database, FolderRepository, Folder, owner),
            tags=SqlModelClient(database, TagRepository, Tag, owner),
            book_tags=SqlModelClient(database, BookTagRepository, BookTag, owner),
            memos=SqlModelClient(database, InsightMemoRepository, InsightMemo, owner),
        )


async def settle_all(calls: Iterable[Awaitable[Any]]) -> List[Any]:
    """Run every call concurrently and wait for all of them to settle.

    Raises:
        CascadeError: If any call failed; the others have still completed
    """
    calls = list(calls)
    if not calls:
        return []
    results = await asyncio.gather(*calls, return_exceptions=True)
    failures = [r for r in results if isinstance(r, BaseException)]
    if failures:
        raise CascadeError(failures, total=len(results))
    return results
