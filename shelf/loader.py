# shelf/loader.py
import asyncio
from typing import Optional

from .collaborator import DataCollaborator
from .errors import BookUnavailableError
from .notifications import Notifier
from .schemas import Book
from .store import EntityStore
from .utils.log import get_logger

logger = get_logger(__name__)

LISTING_COLLECTIONS = ('books', 'folders', 'tags', 'book_tags')


async def load_listing(store: EntityStore, collaborator: DataCollaborator,
                       notifier: Optional[Notifier] = None) -> EntityStore:
    """Fill the store with every book, folder, tag and book-tag link.

    A collection whose fetch fails is logged and left empty; a failed book
    fetch is also reported to the user.
    """
    results = await asyncio.gather(
        *(getattr(collaborator, kind).list() for kind in LISTING_COLLECTIONS),
        return_exceptions=True
    )
    for kind, result in zip(LISTING_COLLECTIONS, results):
        if isinstance(result, Exception):
            logger.error(f"Failed to fetch {kind}: {result}")
            store.replace_all(kind, [])
            if kind == 'books' and notifier is not None:
                notifier.error("Could not load your books")
        elif isinstance(result, BaseException):
            raise result
        else:
            store.replace_all(kind, result)
    return store


async def load_book_detail(store: EntityStore, collaborator: DataCollaborator, book_id: str) -> Book:
    """Load one book with its memos, tag links and the tags.

    Raises:
        BookUnavailableError: If the book is missing or cannot be fetched
    """
    try:
        book = await collaborator.books.get(book_id)
    except Exception as e:
        logger.error(f"Failed to fetch book {book_id}: {e}")
        raise BookUnavailableError(book_id, str(e)) from e
    if book is None:
        raise BookUnavailableError(book_id)
    store.upsert('books', book)

    memos, links, tags = await asyncio.gather(
        collaborator.memos.list(book_id=book_id),
        collaborator.book_tags.list(book_id=book_id),
        collaborator.tags.list(),
        return_exceptions=True
    )
    for label, result in (('memos', memos), ('book tags', links), ('tags', tags)):
        if isinstance(result, BaseException) and not isinstance(result, Exception):
            raise result
        if isinstance(result, Exception):
            logger.error(f"Failed to fetch {label} of book {book_id}: {result}")

    store.replace_where('memos', lambda m: m.book_id == book_id,
                        [] if isinstance(memos, BaseException) else memos)
    store.replace_where('book_tags', lambda bt: bt.book_id == book_id,
                        [] if isinstance(links, BaseException) else links)
    if not isinstance(tags, BaseException):
        store.replace_all('tags', tags)
    return book
