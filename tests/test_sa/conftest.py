# tests/test_sa/conftest.py
import pytest
from sqlalchemy.orm import Session

from shelf.sa.models import Book, Folder, Tag, BookTag, InsightMemo

@pytest.fixture(scope="function")
def db_session(database):
    """Create a new database session for a test"""
    session: Session = database.get_session()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def sample_folder(db_session):
    """Create a sample folder for testing."""
    folder = Folder(owner="alice", name="Work", status="READING", color="#8B5CF6")
    db_session.add(folder)
    db_session.commit()
    return folder

@pytest.fixture
def sample_book(db_session, sample_folder):
    """Create a sample book inside the sample folder."""
    book = Book(
        owner="alice",
        title="Dune",
        author="Frank Herbert",
        status="READING",
        memo_count=0,
        folder_id=sample_folder.id
    )
    db_session.add(book)
    db_session.commit()
    return book

@pytest.fixture
def sample_tag(db_session):
    """Create a sample tag for testing."""
    tag = Tag(owner="alice", name="classic")
    db_session.add(tag)
    db_session.commit()
    return tag

@pytest.fixture
def sample_book_with_relationships(db_session, sample_book, sample_tag):
    """Create a sample book with a tag link and a memo."""
    db_session.add(BookTag(owner="alice", book_id=sample_book.id, tag_id=sample_tag.id))
    db_session.add(InsightMemo(owner="alice", book_id=sample_book.id, type="QUOTE",
                               content="Fear is the mind-killer."))
    db_session.commit()
    return sample_book

@pytest.fixture
def foreign_book(db_session):
    """A book owned by somebody else."""
    book = Book(owner="bob", title="Emma", status="READING")
    db_session.add(book)
    db_session.commit()
    return book
