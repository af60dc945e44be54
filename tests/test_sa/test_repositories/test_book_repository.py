# tests/test_sa/test_repositories/test_book_repository.py

import pytest
from shelf.constants import BookStatus
from shelf.sa.repositories import BookRepository, FolderRepository

@pytest.fixture
def book_repo(db_session):
    """Fixture to create a BookRepository instance for alice."""
    return BookRepository(db_session, "alice")

@pytest.fixture
def folder_repo(db_session):
    """Fixture to create a FolderRepository instance for alice."""
    return FolderRepository(db_session, "alice")

def test_create_book(book_repo):
    """Test creating a book stores enum values and stamps the owner"""
    book = book_repo.create(title="Emma", author="Jane Austen", status=BookStatus.READ)
    assert book.id is not None
    assert book.owner == "alice"
    assert book.status == "READ"

def test_create_rejects_protected_fields(book_repo):
    """Test that id, owner and timestamps cannot be set by the caller"""
    with pytest.raises(ValueError, match="read-only field 'owner'"):
        book_repo.create(title="Emma", owner="bob")

def test_create_rejects_unknown_fields(book_repo):
    """Test that unknown columns are refused"""
    with pytest.raises(ValueError, match="'isbn'"):
        book_repo.create(title="Emma", isbn="123")

def test_get_by_id(book_repo, sample_book):
    """Test retrieving a book by its ID"""
    book = book_repo.get_by_id(sample_book.id)
    assert book is not None
    assert book.title == "Dune"

def test_get_by_id_hides_other_owners(book_repo, foreign_book):
    """Test that another owner's book behaves like a missing one"""
    assert book_repo.get_by_id(foreign_book.id) is None
    assert book_repo.update(foreign_book.id, title="Mine now") is None
    assert book_repo.delete(foreign_book.id) is False

def test_list_filters_by_equality(book_repo, sample_book, sample_folder, foreign_book):
    """Test list with equality predicates, scoped to the owner"""
    assert [b.id for b in book_repo.list()] == [sample_book.id]
    assert [b.id for b in book_repo.list(folder_id=sample_folder.id)] == [sample_book.id]
    assert book_repo.list(status=BookStatus.READ) == []

def test_get_in_folder_none_means_root(book_repo, sample_book):
    """Test that folder None lists books outside any folder"""
    loose = book_repo.create(title="Emma", status=BookStatus.READING)
    assert [b.id for b in book_repo.get_in_folder(None)] == [loose.id]

def test_get_by_status(book_repo, sample_book):
    """Test listing the books of one status"""
    assert [b.title for b in book_repo.get_by_status("READING")] == ["Dune"]
    assert book_repo.get_by_status("TO_READ") == []

def test_search_books(book_repo, sample_book):
    """Test case-insensitive search on title or author"""
    book_repo.create(title="Emma", author="Jane Austen")
    assert [b.title for b in book_repo.search("herb")] == ["Dune"]
    assert [b.title for b in book_repo.search("EMM")] == ["Emma"]
    assert book_repo.search("tolstoy") == []

def test_update_book(book_repo, sample_book):
    """Test partial update of a book"""
    book = book_repo.update(sample_book.id, status=BookStatus.READ, folder_id=None)
    assert book.status == "READ"
    assert book.folder_id is None
    assert book.title == "Dune"

def test_count(book_repo, sample_book):
    """Test counting books"""
    assert book_repo.count() == 1
    assert book_repo.count(status="READ") == 0

def test_delete_book(book_repo, sample_book):
    """Test deleting a book"""
    assert book_repo.delete(sample_book.id) is True
    assert book_repo.get_by_id(sample_book.id) is None

def test_delete_book_with_memos_is_refused(book_repo, sample_book_with_relationships):
    """Test that a book still referenced by memos cannot be deleted"""
    with pytest.raises(ValueError, match="still referenced"):
        book_repo.delete(sample_book_with_relationships.id)
    assert book_repo.get_by_id(sample_book_with_relationships.id) is not None

def test_folders_by_status(folder_repo, sample_folder):
    """Test listing the folders of a status bucket"""
    assert [f.name for f in folder_repo.get_by_status("READING")] == ["Work"]
    assert folder_repo.get_by_status("READ") == []

def test_delete_folder_with_books_is_refused(folder_repo, sample_folder, sample_book):
    """Test that a folder still holding books cannot be deleted"""
    with pytest.raises(ValueError, match="still referenced"):
        folder_repo.delete(sample_folder.id)
    assert folder_repo.get_by_id(sample_folder.id) is not None
    assert sample_book.folder_id == sample_folder.id
