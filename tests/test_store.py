# tests/test_store.py
import pytest

from shelf.constants import BookStatus
from shelf.schemas import Book, BookTag, InsightMemo
from shelf.store import EntityStore


def _book(id, **kwargs):
    return Book(id=id, title=kwargs.pop('title', id.upper()), **kwargs)


@pytest.fixture
def populated():
    return EntityStore(
        books=[_book("a"), _book("b", folder_id="f1"), _book("c", folder_id="f1")],
        book_tags=[BookTag(id="l1", book_id="a", tag_id="t1")],
        memos=[InsightMemo(id="m1", book_id="b", content="x")],
    )


def test_reads_return_copies(populated):
    """Test that callers cannot mutate the store through a read"""
    books = populated.books
    books.clear()
    assert len(populated.books) == 3


def test_get_and_lookups(populated):
    """Test record lookups"""
    assert populated.get('books', "b").title == "B"
    assert populated.get('books', "zz") is None
    assert populated.get('books', None) is None
    assert [b.id for b in populated.books_in_folder("f1")] == ["b", "c"]
    assert [m.id for m in populated.memos_for_book("b")] == ["m1"]
    assert populated.find_link("a", "t1").id == "l1"
    assert populated.find_link("b", "t1") is None


def test_unknown_collection(populated):
    """Test that an unknown collection name raises KeyError"""
    with pytest.raises(KeyError, match="Unknown collection"):
        populated.all('authors')


def test_patch_returns_previous_values(populated):
    """Test that patch replaces fields and reports what they were"""
    before = populated.revision
    previous = populated.patch('books', "b", status=BookStatus.READ, folder_id=None)
    assert previous == {'status': BookStatus.TO_READ, 'folder_id': "f1"}
    assert populated.get('books', "b").status is BookStatus.READ
    assert populated.revision == before + 1


def test_patch_missing_record(populated):
    """Test that patching a record that is not loaded raises KeyError"""
    with pytest.raises(KeyError):
        populated.patch('books', "zz", title="nope")


def test_remove_and_restore_keep_positions(populated):
    """Test that restore puts records back where they were"""
    removed = populated.remove_where('books', lambda b: b.id in ("a", "c"))
    assert [b.id for b in populated.books] == ["b"]

    populated.restore('books', removed)
    assert [b.id for b in populated.books] == ["a", "b", "c"]


def test_restore_skips_records_already_present(populated):
    """Test that restoring twice does not duplicate records"""
    removed = populated.remove('books', "a")
    populated.restore('books', removed)
    populated.restore('books', removed)
    assert [b.id for b in populated.books] == ["a", "b", "c"]


def test_remove_nothing_leaves_revision(populated):
    """Test that a removal matching nothing is not a write"""
    before = populated.revision
    assert populated.remove('books', "zz") == []
    assert populated.revision == before


def test_add_prepend_and_upsert(populated):
    """Test add at either end and upsert in place"""
    populated.add('memos', InsightMemo(id="m0", book_id="b", content="new"), prepend=True)
    assert [m.id for m in populated.memos] == ["m0", "m1"]

    populated.upsert('books', _book("b", title="Renamed"))
    assert [b.title for b in populated.books] == ["A", "Renamed", "C"]
    populated.upsert('books', _book("d"))
    assert [b.id for b in populated.books][-1] == "d"


def test_add_link_dedupes(populated):
    """Test that a second link for the same pair is ignored"""
    assert populated.add_link(BookTag(id="l2", book_id="a", tag_id="t1")) is False
    assert populated.add_link(BookTag(id="l3", book_id="b", tag_id="t1")) is True
    assert [l.id for l in populated.links_for_tag("t1")] == ["l1", "l3"]


def test_replace_where(populated):
    """Test replacing the memos of one book"""
    populated.replace_where('memos', lambda m: m.book_id == "b",
                            [InsightMemo(id="m9", book_id="b", content="fresh")])
    assert [m.id for m in populated.memos] == ["m9"]
