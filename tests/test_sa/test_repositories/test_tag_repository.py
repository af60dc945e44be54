# tests/test_sa/test_repositories/test_tag_repository.py

import pytest
from shelf.sa.repositories import TagRepository, BookTagRepository

@pytest.fixture
def tag_repo(db_session):
    """Fixture to create a TagRepository instance for alice."""
    return TagRepository(db_session, "alice")

@pytest.fixture
def link_repo(db_session):
    """Fixture to create a BookTagRepository instance for alice."""
    return BookTagRepository(db_session, "alice")

def test_get_by_name(tag_repo, sample_tag):
    """Test looking up a tag by name"""
    assert tag_repo.get_by_name("classic").id == sample_tag.id
    assert tag_repo.get_by_name("missing") is None

def test_get_by_name_is_owner_scoped(db_session, sample_tag):
    """Test that another owner does not see alice's tag"""
    assert TagRepository(db_session, "bob").get_by_name("classic") is None

def test_get_tags_by_book(tag_repo, sample_book_with_relationships):
    """Test retrieving the tags of a book"""
    tag_repo.create(name="unused")
    tags = tag_repo.get_tags_by_book(sample_book_with_relationships.id)
    assert [t.name for t in tags] == ["classic"]

def test_create_link(link_repo, sample_book, sample_tag):
    """Test linking a book to a tag"""
    link = link_repo.create(book_id=sample_book.id, tag_id=sample_tag.id)
    assert link_repo.get_link(sample_book.id, sample_tag.id).id == link.id
    assert [l.id for l in link_repo.list(tag_id=sample_tag.id)] == [link.id]

def test_create_duplicate_link(link_repo, sample_book_with_relationships, sample_tag):
    """Test that linking the same pair twice raises an error"""
    with pytest.raises(ValueError, match="already tagged"):
        link_repo.create(book_id=sample_book_with_relationships.id, tag_id=sample_tag.id)
    assert link_repo.count() == 1
