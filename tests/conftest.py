# tests/conftest.py
import asyncio
from types import SimpleNamespace

import pytest

from shelf.collaborator import DataCollaborator, ModelClient, SqlCollaborator
from shelf.constants import BookStatus, MemoType
from shelf.errors import CollaboratorError
from shelf.loader import load_listing, load_book_detail
from shelf.mutations import MutationCoordinator
from shelf.notifications import Notifier
from shelf.sa.database import Database
from shelf.store import EntityStore

KINDS = ('books', 'folders', 'tags', 'book_tags', 'memos')


class FlakyClient(ModelClient):
    """Wraps a real client; records every call and raises for the operations in `failing`."""

    def __init__(self, inner: ModelClient, kind: str, log: list):
        self.inner = inner
        self.entity = inner.entity
        self.kind = kind
        self.log = log
        self.failing = {}
        self.calls = []

    async def _call(self, operation, *args, **kwargs):
        self.calls.append((operation, args, kwargs))
        self.log.append((self.kind, operation))
        if operation in self.failing:
            raise self.failing[operation](f"{self.entity}.{operation} unavailable")
        return await getattr(self.inner, operation)(*args, **kwargs)

    async def get(self, record_id):
        return await self._call('get', record_id)

    async def list(self, **equals):
        return await self._call('list', **equals)

    async def create(self, **fields):
        return await self._call('create', **fields)

    async def update(self, record_id, **fields):
        return await self._call('update', record_id, **fields)

    async def delete(self, record_id):
        return await self._call('delete', record_id)


class FlakyCollaborator(DataCollaborator):
    def __init__(self, inner: DataCollaborator):
        self.log = []
        super().__init__(**{kind: FlakyClient(getattr(inner, kind), kind, self.log) for kind in KINDS})

    def fail(self, kind: str, operation: str, error=CollaboratorError) -> None:
        getattr(self, kind).failing[operation] = error

    def reset_calls(self) -> None:
        for kind in KINDS:
            getattr(self, kind).calls.clear()
        self.log.clear()

    def writes(self):
        """Every create/update/delete sent, in order, as (kind, operation) pairs"""
        return [entry for entry in self.log if entry[1] in ('create', 'update', 'delete')]

    def call_count(self) -> int:
        return sum(len(getattr(self, kind).calls) for kind in KINDS)


class ManualClock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def database(tmp_path):
    """Fresh SQLite database per test"""
    db = Database(f"sqlite:///{tmp_path / 'shelf.db'}")
    db.init_db()
    yield db
    db.engine.dispose()


@pytest.fixture
def sql_collaborator(database):
    return SqlCollaborator(database, "alice")


@pytest.fixture
def collaborator(sql_collaborator):
    return FlakyCollaborator(sql_collaborator)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def notifier(clock):
    return Notifier(ttl=4.0, clock=clock)


@pytest.fixture
def store():
    return EntityStore()


@pytest.fixture
def coordinator(store, collaborator, notifier):
    return MutationCoordinator(store, collaborator, notifier)


async def _seed(c: DataCollaborator) -> SimpleNamespace:
    work = await c.folders.create(name="Work", status=BookStatus.READING, color="#8B5CF6")
    dune = await c.books.create(title="Dune", author="Frank Herbert", status=BookStatus.READING,
                                memo_count=2, folder_id=work.id)
    emma = await c.books.create(title="Emma", author="Jane Austen", status=BookStatus.READING, memo_count=0)
    ulysses = await c.books.create(title="Ulysses", author="James Joyce", status=BookStatus.TO_READ, memo_count=0)
    classic = await c.tags.create(name="classic")
    emma_classic = await c.book_tags.create(book_id=emma.id, tag_id=classic.id)
    dune_classic = await c.book_tags.create(book_id=dune.id, tag_id=classic.id)
    quote = await c.memos.create(book_id=dune.id, type=MemoType.QUOTE,
                                 content="Fear is the mind-killer.", source_page="8")
    summary = await c.memos.create(book_id=dune.id, type=MemoType.SUMMARY,
                                   content="The spice must flow.", pinned=True)
    return SimpleNamespace(
        work=work, dune=dune, emma=emma, ulysses=ulysses, classic=classic,
        emma_classic=emma_classic, dune_classic=dune_classic, quote=quote, summary=summary,
    )


@pytest.fixture
def shelf(collaborator, store):
    """Seeded shelf for owner alice, with the listing and Dune's detail loaded into the store"""
    data = asyncio.run(_seed(collaborator))
    asyncio.run(load_listing(store, collaborator))
    asyncio.run(load_book_detail(store, collaborator, data.dune.id))
    collaborator.reset_calls()
    return data
