# tests/test_views.py
from datetime import datetime, timedelta, UTC

import pytest

from shelf.constants import BookStatus, MemoFilter, MemoType
from shelf.schemas import Book, Folder, Tag, BookTag, InsightMemo
from shelf.store import EntityStore
from shelf.views import (
    ListingFilter, build_listing, build_memo_list, filter_memos, sort_memos,
    status_counts, tags_for_book, visible_books
)

T0 = datetime(2024, 5, 1, tzinfo=UTC)


@pytest.fixture
def store():
    return EntityStore(
        books=[
            Book(id="b1", title="Dune", author="Frank Herbert", status=BookStatus.READING),
            Book(id="b2", title="Neuromancer", author="William Gibson", status=BookStatus.READING, folder_id="f1"),
            Book(id="b3", title="Emma", author="Jane Austen", status=BookStatus.READING),
            Book(id="b4", title="Ulysses", author=None, status=BookStatus.TO_READ),
            Book(id="b5", title="Hamlet", author="Shakespeare", status=BookStatus.READ, folder_id="f2"),
        ],
        folders=[
            Folder(id="f1", name="Cyberpunk", status=BookStatus.READING),
            Folder(id="f2", name="Plays", status=BookStatus.READ),
        ],
        tags=[Tag(id="t1", name="classic"), Tag(id="t2", name="sf")],
        book_tags=[
            BookTag(id="l1", book_id="b3", tag_id="t1"),
            BookTag(id="l2", book_id="b1", tag_id="t2"),
            BookTag(id="l3", book_id="b2", tag_id="t2"),
        ],
    )


def _ids(records):
    return [r.id for r in records]


def test_only_active_status_is_visible(store):
    """Test that no visible book has another status"""
    for status in BookStatus:
        for folder_id in (None, "f1", "f2"):
            flt = ListingFilter(active_status=status, open_folder_id=folder_id)
            assert all(b.status == status for b in build_listing(store, flt).books)


def test_root_view_hides_books_in_folders(store):
    """Test root shows only folderless books and the folders of the status"""
    view = build_listing(store, ListingFilter(active_status=BookStatus.READING))
    assert _ids(view.books) == ["b1", "b3"]
    assert _ids(view.folders) == ["f1"]


def test_open_folder_shows_its_books_and_no_folders(store):
    """Test opening a folder, then closing it again"""
    flt = ListingFilter(active_status=BookStatus.READING, open_folder_id="f1")
    view = build_listing(store, flt)
    assert view.folders == []
    assert _ids(view.books) == ["b2"]

    flt.open_folder_id = None
    view = build_listing(store, flt)
    assert _ids(view.folders) == ["f1"]
    assert "b2" not in _ids(view.books)


def test_search_matches_title_or_author_case_insensitively(store):
    """Test the search stage"""
    flt = ListingFilter(active_status=BookStatus.READING, search_query="AUSTEN")
    assert _ids(visible_books(store.books, store.book_tags, flt)) == ["b3"]
    flt.search_query = "du"
    assert _ids(visible_books(store.books, store.book_tags, flt)) == ["b1"]


def test_search_handles_missing_author(store):
    """Test that a book without author can still match on title"""
    flt = ListingFilter(active_status=BookStatus.TO_READ, search_query="ulys")
    assert _ids(visible_books(store.books, store.book_tags, flt)) == ["b4"]


def test_search_stays_within_folder_scope(store):
    """Test that search does not reach into folders from the root view"""
    flt = ListingFilter(active_status=BookStatus.READING, search_query="neuro")
    assert visible_books(store.books, store.book_tags, flt) == []


def test_tag_filter(store):
    """Test the tag stage, applied after the folder scope"""
    flt = ListingFilter(active_status=BookStatus.READING, selected_tag_id="t2")
    assert _ids(visible_books(store.books, store.book_tags, flt)) == ["b1"]
    flt.open_folder_id = "f1"
    assert _ids(visible_books(store.books, store.book_tags, flt)) == ["b2"]


def test_no_match_is_empty(store):
    """Test that filters matching nothing give empty lists"""
    flt = ListingFilter(active_status=BookStatus.READING, search_query="zzz")
    assert build_listing(store, flt).books == []


def test_status_counts_ignore_search_and_tag(store):
    """Test that the three counts never depend on other filters"""
    expected = {BookStatus.TO_READ: 1, BookStatus.READING: 3, BookStatus.READ: 1}
    for flt in (
        ListingFilter(),
        ListingFilter(search_query="dune"),
        ListingFilter(selected_tag_id="t1"),
        ListingFilter(active_status=BookStatus.READ, open_folder_id="f2", search_query="x"),
    ):
        assert build_listing(store, flt).status_counts == expected


def test_status_change_moves_counts(store):
    """Test a book leaving the READING view after becoming READ"""
    flt = ListingFilter(active_status=BookStatus.READING)
    assert "b1" in _ids(build_listing(store, flt).books)

    store.patch('books', "b1", status=BookStatus.READ)
    view = build_listing(store, flt)
    assert "b1" not in _ids(view.books)
    assert view.status_counts[BookStatus.READING] == 2
    assert view.status_counts[BookStatus.READ] == 2


def test_folder_counts_are_live(store):
    """Test that folder counts follow the store"""
    flt = ListingFilter()
    assert build_listing(store, flt).folder_counts == {"f1": 1, "f2": 1}
    store.patch('books', "b1", folder_id="f1")
    assert build_listing(store, flt).folder_counts == {"f1": 2, "f2": 1}
    assert status_counts([]) == {s: 0 for s in BookStatus}


def test_tags_for_book(store):
    """Test resolving a book's tags through its links"""
    assert _ids(tags_for_book(store, "b3")) == ["t1"]
    assert tags_for_book(store, "b4") == []


@pytest.fixture
def memos():
    return [
        InsightMemo(id="old", book_id="b1", type=MemoType.SUMMARY, content="a", created_at=T0),
        InsightMemo(id="pin-old", book_id="b1", type=MemoType.QUOTE, content="b", pinned=True,
                    created_at=T0 + timedelta(minutes=1)),
        InsightMemo(id="new", book_id="b1", type=MemoType.QUOTE, content="c",
                    created_at=T0 + timedelta(minutes=2)),
        InsightMemo(id="pin-new", book_id="b1", type=MemoType.DATA, content="d", pinned=True,
                    created_at=T0 + timedelta(minutes=3)),
        InsightMemo(id="other", book_id="b2", content="e", created_at=T0),
    ]


def test_sort_memos_pinned_first_then_newest(memos):
    """Test that no unpinned memo precedes a pinned one, newest first within each group"""
    ordered = sort_memos(memos[:4])
    assert _ids(ordered) == ["pin-new", "pin-old", "new", "old"]
    for before, after in zip(ordered, ordered[1:]):
        assert before.pinned >= after.pinned
        if before.pinned == after.pinned:
            assert before.created_at >= after.created_at


def test_filter_memos_keeps_order(memos):
    """Test the type filter narrows without reordering"""
    ordered = sort_memos(memos[:4])
    assert _ids(filter_memos(ordered, MemoFilter.QUOTE)) == ["pin-old", "new"]
    assert _ids(filter_memos(ordered, "ALL")) == _ids(ordered)
    assert filter_memos(ordered, MemoFilter.DATA)[0].id == "pin-new"


def test_build_memo_list_only_for_book(memos):
    """Test the memo list of one book"""
    store = EntityStore(memos=memos)
    assert _ids(build_memo_list(store, "b1", MemoFilter.SUMMARY)) == ["old"]
    assert _ids(build_memo_list(store, "b2")) == ["other"]
    assert build_memo_list(store, "b9") == []
