# shelf/views.py
"""Derived views over the entity store.

Every function here is pure: it reads already-loaded records and returns new
lists. Nothing fails; a filter that matches nothing yields an empty list.
"""
from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Dict, Iterable, List, Optional, Union

from .constants import BookStatus, MemoFilter
from .schemas import Book, Folder, Tag, BookTag, InsightMemo
from .store import EntityStore

_EPOCH = datetime.min.replace(tzinfo=UTC)


@dataclass
class ListingFilter:
    """What the listing is currently showing"""
    active_status: BookStatus = BookStatus.READING
    open_folder_id: Optional[str] = None
    search_query: str = ""
    selected_tag_id: Optional[str] = None


@dataclass
class ListingView:
    books: List[Book]
    folders: List[Folder]
    status_counts: Dict[BookStatus, int]
    folder_counts: Dict[str, int] = field(default_factory=dict)


def status_counts(books: Iterable[Book]) -> Dict[BookStatus, int]:
    """Count every book per status, ignoring all other filters"""
    counts = {status: 0 for status in BookStatus}
    for book in books:
        if book.status in counts:
            counts[book.status] += 1
    return counts


def visible_folders(folders: Iterable[Folder], flt: ListingFilter) -> List[Folder]:
    """Folders of the active status; none while a folder is open"""
    if flt.open_folder_id:
        return []
    return [f for f in folders if f.status == flt.active_status]


def _matches(book: Book, query: str) -> bool:
    return query in book.title.lower() or (book.author is not None and query in book.author.lower())


def visible_books(books: Iterable[Book], book_tags: Iterable[BookTag], flt: ListingFilter) -> List[Book]:
    """Narrow books by status, folder scope, search text and tag, in that order"""
    result = [b for b in books if b.status == flt.active_status]

    if flt.open_folder_id:
        result = [b for b in result if b.folder_id == flt.open_folder_id]
    else:
        result = [b for b in result if not b.folder_id]

    if flt.search_query:
        query = flt.search_query.lower()
        result = [b for b in result if _matches(b, query)]

    if flt.selected_tag_id:
        tagged = {bt.book_id for bt in book_tags if bt.tag_id == flt.selected_tag_id}
        result = [b for b in result if b.id in tagged]

    return result


def folder_book_counts(books: Iterable[Book], folders: Iterable[Folder]) -> Dict[str, int]:
    """Live number of books in each folder"""
    counts = {f.id: 0 for f in folders}
    for book in books:
        if book.folder_id in counts:
            counts[book.folder_id] += 1
    return counts


def build_listing(store: EntityStore, flt: ListingFilter) -> ListingView:
    books = store.books
    folders = store.folders
    return ListingView(
        books=visible_books(books, store.book_tags, flt),
        folders=visible_folders(folders, flt),
        status_counts=status_counts(books),
        folder_counts=folder_book_counts(books, folders),
    )


def sort_memos(memos: Iterable[InsightMemo]) -> List[InsightMemo]:
    """Pinned memos first, newest first within each group"""
    newest_first = sorted(memos, key=lambda m: m.created_at or _EPOCH, reverse=True)
    return sorted(newest_first, key=lambda m: not m.pinned)


def filter_memos(memos: Iterable[InsightMemo], memo_filter: Union[MemoFilter, str] = MemoFilter.ALL) -> List[InsightMemo]:
    memo_filter = MemoFilter(memo_filter)
    if memo_filter is MemoFilter.ALL:
        return list(memos)
    return [m for m in memos if m.type.value == memo_filter.value]


def build_memo_list(store: EntityStore, book_id: str,
                    memo_filter: Union[MemoFilter, str] = MemoFilter.ALL) -> List[InsightMemo]:
    return filter_memos(sort_memos(store.memos_for_book(book_id)), memo_filter)


def tags_for_book(store: EntityStore, book_id: str) -> List[Tag]:
    """Tags linked to a book, in tag order, skipping links to unloaded tags"""
    linked = {bt.tag_id for bt in store.links_for_book(book_id)}
    return [t for t in store.tags if t.id in linked]
