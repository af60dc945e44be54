# shelf/store.py
"""In-memory cache of the five entity collections.

The store is a plain object handed to the view functions and to the mutation
coordinator. Records are immutable pydantic models; writes replace records
rather than mutating them, and every write bumps ``revision``.
"""
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .schemas import Book, Folder, Tag, BookTag, InsightMemo

COLLECTIONS = ('books', 'folders', 'tags', 'book_tags', 'memos')

# (position before removal, record)
Removed = List[Tuple[int, Any]]


class EntityStore:
    def __init__(self, books: Iterable[Book] = (), folders: Iterable[Folder] = (),
                 tags: Iterable[Tag] = (), book_tags: Iterable[BookTag] = (),
                 memos: Iterable[InsightMemo] = ()):
        self._collections: Dict[str, List[Any]] = {
            'books': list(books),
            'folders': list(folders),
            'tags': list(tags),
            'book_tags': list(book_tags),
            'memos': list(memos),
        }
        self.revision = 0

    # ------------------------- Reads ------------------------- #
    @property
    def books(self) -> List[Book]:
        return self.all('books')

    @property
    def folders(self) -> List[Folder]:
        return self.all('folders')

    @property
    def tags(self) -> List[Tag]:
        return self.all('tags')

    @property
    def book_tags(self) -> List[BookTag]:
        return self.all('book_tags')

    @property
    def memos(self) -> List[InsightMemo]:
        return self.all('memos')

    def _items(self, kind: str) -> List[Any]:
        try:
            return self._collections[kind]
        except KeyError:
            raise KeyError(f"Unknown collection '{kind}'") from None

    def all(self, kind: str) -> List[Any]:
        return list(self._items(kind))

    def get(self, kind: str, record_id: Optional[str]) -> Optional[Any]:
        if record_id is None:
            return None
        for record in self._items(kind):
            if record.id == record_id:
                return record
        return None

    def books_in_folder(self, folder_id: str) -> List[Book]:
        return [b for b in self._items('books') if b.folder_id == folder_id]

    def memos_for_book(self, book_id: str) -> List[InsightMemo]:
        return [m for m in self._items('memos') if m.book_id == book_id]

    def links_for_book(self, book_id: str) -> List[BookTag]:
        return [bt for bt in self._items('book_tags') if bt.book_id == book_id]

    def links_for_tag(self, tag_id: str) -> List[BookTag]:
        return [bt for bt in self._items('book_tags') if bt.tag_id == tag_id]

    def find_link(self, book_id: str, tag_id: str) -> Optional[BookTag]:
        for link in self._items('book_tags'):
            if link.book_id == book_id and link.tag_id == tag_id:
                return link
        return None

    # ------------------------- Writes ------------------------- #
    def _touch(self) -> None:
        self.revision += 1

    def replace_all(self, kind: str, records: Iterable[Any]) -> None:
        self._collections[self._kind(kind)] = list(records)
        self._touch()

    def replace_where(self, kind: str, predicate: Callable[[Any], bool], records: Iterable[Any]) -> None:
        """Drop the records matching predicate and append the given ones"""
        kept = [r for r in self._items(kind) if not predicate(r)]
        self._collections[kind] = kept + list(records)
        self._touch()

    def _kind(self, kind: str) -> str:
        self._items(kind)
        return kind

    def add(self, kind: str, record: Any, prepend: bool = False) -> None:
        items = self._items(kind)
        if prepend:
            items.insert(0, record)
        else:
            items.append(record)
        self._touch()

    def add_link(self, link: BookTag) -> bool:
        """Append a BookTag unless the pair is already linked"""
        if self.find_link(link.book_id, link.tag_id):
            return False
        self.add('book_tags', link)
        return True

    def upsert(self, kind: str, record: Any) -> None:
        items = self._items(kind)
        for index, existing in enumerate(items):
            if existing.id == record.id:
                items[index] = record
                break
        else:
            items.append(record)
        self._touch()

    def patch(self, kind: str, record_id: str, **fields) -> Dict[str, Any]:
        """Replace fields of a record and return their previous values.

        Raises:
            KeyError: If the record is not in the store
        """
        items = self._items(kind)
        for index, record in enumerate(items):
            if record.id == record_id:
                previous = {name: getattr(record, name) for name in fields}
                items[index] = record.model_copy(update=fields)
                self._touch()
                return previous
        raise KeyError(f"{kind} record '{record_id}' is not loaded")

    def remove(self, kind: str, record_id: str) -> Removed:
        return self.remove_where(kind, lambda r: r.id == record_id)

    def remove_where(self, kind: str, predicate: Callable[[Any], bool]) -> Removed:
        items = self._items(kind)
        removed = [(i, r) for i, r in enumerate(items) if predicate(r)]
        if removed:
            self._collections[kind] = [r for r in items if not predicate(r)]
            self._touch()
        return removed

    def restore(self, kind: str, removed: Removed) -> None:
        """Put removed records back at their former positions"""
        if not removed:
            return
        items = self._items(kind)
        present = {r.id for r in items}
        for index, record in sorted(removed, key=lambda pair: pair[0]):
            if record.id in present:
                continue
            items.insert(min(index, len(items)), record)
        self._touch()
