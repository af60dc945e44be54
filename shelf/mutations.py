# shelf/mutations.py
"""Optimistic writes against the entity store.

Every user action goes through the same steps: remember what is about to
change, change the store right away, call the data collaborator, then either
keep the change and report success or put the store back and report the
failure. Failures are never retried.
"""
import asyncio
from dataclasses import dataclass
from datetime import datetime, UTC
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

from .collaborator import DataCollaborator, settle_all
from .constants import (
    BookStatus, MemoType, FOLDER_COLORS, DEFAULT_FOLDER_COLOR, ROOT_TARGET, STATUS_LABELS
)
from .errors import CollaboratorError, ValidationError
from .notifications import Notification, Notifier, UndoAction
from .schemas import InsightMemo
from .store import EntityStore
from .utils.log import get_logger
from .views import ListingFilter

Confirm = Callable[[str], bool]


class MutationState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    # Terminal states reached without calling the collaborator
    SKIPPED = "skipped"
    CANCELLED = "cancelled"


@dataclass
class MutationResult:
    name: str
    state: MutationState = MutationState.IDLE
    error: Optional[Exception] = None
    value: Any = None
    notification: Optional[Notification] = None
    undo: Optional[UndoAction] = None

    @property
    def ok(self) -> bool:
        return self.state is MutationState.COMMITTED


def require_text(value: Optional[str], field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(field, "must not be empty")
    return text


def _optional_text(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None


def _enum(enum_cls, value, field: str):
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(e.value for e in enum_cls)
        raise ValidationError(field, f"'{value}' is not one of {choices}") from None


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


class MutationCoordinator:
    """Applies user actions optimistically and rolls them back on failure."""

    def __init__(self, store: EntityStore, collaborator: DataCollaborator,
                 notifier: Optional[Notifier] = None, filters: Optional[ListingFilter] = None,
                 clock: Callable[[], datetime] = lambda: datetime.now(UTC)):
        self.store = store
        self.collaborator = collaborator
        self.notifier = notifier or Notifier()
        self.filters = filters or ListingFilter()
        self.clock = clock
        self.logger = get_logger(self.__class__.__name__)

    # ------------------------- Plumbing ------------------------- #
    def _skip(self, name: str, reason: str) -> MutationResult:
        self.logger.info(f"{name} skipped: {reason}")
        return MutationResult(name, MutationState.SKIPPED)

    def _cancel(self, name: str) -> MutationResult:
        self.logger.info(f"{name} cancelled by user")
        return MutationResult(name, MutationState.CANCELLED)

    async def _run(self, name: str,
                   apply: Callable[[], Any],
                   remote: Callable[[], Awaitable[Any]],
                   revert: Callable[[Any], None],
                   success: Optional[str],
                   failure: str,
                   undo: Optional[Callable[[], Awaitable[Any]]] = None) -> MutationResult:
        result = MutationResult(name, MutationState.PENDING)
        self.logger.debug(f"{name} pending")
        snapshot = apply()
        try:
            result.value = await remote()
        except Exception as e:
            if isinstance(e, CollaboratorError):
                error = e
            else:
                # Transport failures from third-party clients count as refusals too
                error = CollaboratorError(f"{name} failed: {e!r}")
                error.__cause__ = e
            revert(snapshot)
            result.state = MutationState.ROLLED_BACK
            result.error = error
            self.logger.error(f"{name} rolled back: {error}", exc_info=error is not e)
            result.notification = self.notifier.error(failure)
            return result

        result.state = MutationState.COMMITTED
        self.logger.info(f"{name} committed")
        if success:
            if undo is not None:
                result.notification = self.notifier.success(success, action_label="Undo", action=undo)
                result.undo = result.notification.action
            else:
                result.notification = self.notifier.success(success)
        return result

    def _patch_back(self, kind: str, record_id: str, previous: Optional[Dict[str, Any]]) -> None:
        if not previous:
            return
        try:
            self.store.patch(kind, record_id, **previous)
        except KeyError:
            self.logger.warning(f"Cannot roll back {kind} '{record_id}': no longer loaded")

    def _detach_books(self, book_ids: Iterable[str]) -> Dict[str, list]:
        ids = set(book_ids)
        return {
            'books': self.store.remove_where('books', lambda b: b.id in ids),
            'memos': self.store.remove_where('memos', lambda m: m.book_id in ids),
            'book_tags': self.store.remove_where('book_tags', lambda bt: bt.book_id in ids),
        }

    def _reattach(self, snapshot: Dict[str, list]) -> None:
        for kind, removed in snapshot.items():
            self.store.restore(kind, removed)

    async def _delete_book_remote(self, book_id: str) -> None:
        """Delete a book's memos and tag links concurrently, then the book"""
        memos, links = await asyncio.gather(
            self.collaborator.memos.list(book_id=book_id),
            self.collaborator.book_tags.list(book_id=book_id),
        )
        await settle_all(
            [self.collaborator.memos.delete(m.id) for m in memos]
            + [self.collaborator.book_tags.delete(bt.id) for bt in links]
        )
        await self.collaborator.books.delete(book_id)

    # ------------------------- Books ------------------------- #
    async def add_book(self, title: str, author: Optional[str] = None,
                       status: BookStatus = BookStatus.TO_READ,
                       tag_ids: Iterable[str] = (), folder_id: Optional[str] = None) -> MutationResult:
        title = require_text(title, "title")
        author = _optional_text(author)
        status = _enum(BookStatus, status, "status")
        tag_ids = list(dict.fromkeys(tag_ids))
        for tag_id in tag_ids:
            if self.store.get('tags', tag_id) is None:
                raise ValidationError("tags", f"unknown tag '{tag_id}'")
        if folder_id is not None:
            folder = self.store.get('folders', folder_id)
            if folder is None:
                raise ValidationError("folder", f"unknown folder '{folder_id}'")
            if folder.status != status:
                raise ValidationError("folder", f"'{folder.name}' holds {STATUS_LABELS[folder.status]} books")

        created: List[Any] = []

        async def remote():
            book = await self.collaborator.books.create(
                title=title, author=author, status=status, memo_count=0, folder_id=folder_id
            )
            self.store.add('books', book)
            created.append(book)
            links = await settle_all(
                self.collaborator.book_tags.create(book_id=book.id, tag_id=tag_id) for tag_id in tag_ids
            )
            for link in links:
                self.store.add_link(link)
            return book

        def revert(_):
            for book in created:
                self._detach_books([book.id])

        return await self._run(
            "add_book", lambda: None, remote, revert,
            success=f'Added "{title}"', failure="Could not add the book",
        )

    async def change_status(self, book_id: str, status: BookStatus) -> MutationResult:
        status = _enum(BookStatus, status, "status")
        book = self.store.get('books', book_id)
        if book is None:
            return self._skip("change_status", f"unknown book '{book_id}'")
        if book.status == status:
            return self._skip("change_status", "status unchanged")

        fields: Dict[str, Any] = {'status': status}
        if book.folder_id:
            folder = self.store.get('folders', book.folder_id)
            if folder is None or folder.status != status:
                fields['folder_id'] = None

        return await self._run(
            "change_status",
            apply=lambda: self.store.patch('books', book_id, **fields),
            remote=lambda: self.collaborator.books.update(book_id, **fields),
            revert=lambda previous: self._patch_back('books', book_id, previous),
            success=f'Moved "{book.title}" to {STATUS_LABELS[status]}',
            failure="Could not change the status",
        )

    async def move_to_folder(self, book_id: str, target: Optional[str]) -> MutationResult:
        """Move a book onto a folder, or out of any folder with ROOT_TARGET"""
        book = self.store.get('books', book_id)
        if book is None:
            return self._skip("move_to_folder", f"unknown book '{book_id}'")

        if target == ROOT_TARGET:
            folder = None
        else:
            folder = self.store.get('folders', target)
            if folder is None:
                return self._skip("move_to_folder", f"unknown drop target '{target}'")

        folder_id = folder.id if folder else None
        if folder_id == (book.folder_id or None):
            return self._skip("move_to_folder", "already there")

        where = f'"{folder.name}"' if folder else "the top level"
        return await self._run(
            "move_to_folder",
            apply=lambda: self.store.patch('books', book_id, folder_id=folder_id),
            remote=lambda: self.collaborator.books.update(book_id, folder_id=folder_id),
            revert=lambda previous: self._patch_back('books', book_id, previous),
            success=f'Moved "{book.title}" to {where}',
            failure="Could not move the book",
        )

    async def set_book_tags(self, book_id: str, tag_ids: Iterable[str]) -> MutationResult:
        """Make the book's tag links match tag_ids exactly"""
        book = self.store.get('books', book_id)
        if book is None:
            return self._skip("set_book_tags", f"unknown book '{book_id}'")
        wanted = list(dict.fromkeys(tag_ids))
        for tag_id in wanted:
            if self.store.get('tags', tag_id) is None:
                raise ValidationError("tags", f"unknown tag '{tag_id}'")

        existing = self.store.links_for_book(book_id)
        existing_tag_ids = {bt.tag_id for bt in existing}
        to_remove = {bt.id for bt in existing if bt.tag_id not in wanted}
        to_add = [tag_id for tag_id in wanted if tag_id not in existing_tag_ids]
        if not to_remove and not to_add:
            return self._skip("set_book_tags", "tags unchanged")

        created: List[Any] = []

        async def remote():
            results = await settle_all(
                [self.collaborator.book_tags.delete(link_id) for link_id in to_remove]
                + [self.collaborator.book_tags.create(book_id=book_id, tag_id=t) for t in to_add]
            )
            for link in results[len(to_remove):]:
                if self.store.add_link(link):
                    created.append(link)

        def revert(removed):
            self.store.restore('book_tags', removed)
            for link in created:
                self.store.remove('book_tags', link.id)

        return await self._run(
            "set_book_tags",
            apply=lambda: self.store.remove_where('book_tags', lambda bt: bt.id in to_remove),
            remote=remote,
            revert=revert,
            success="Tags updated",
            failure="Could not update the tags",
        )

    async def delete_book(self, book_id: str, confirm: Optional[Confirm] = None) -> MutationResult:
        """Delete a book with its memos and tag links; cannot be undone"""
        book = self.store.get('books', book_id)
        if book is None:
            return self._skip("delete_book", f"unknown book '{book_id}'")
        if confirm is not None and not confirm(f'Delete "{book.title}"? All of its memos will be deleted too.'):
            return self._cancel("delete_book")

        return await self._run(
            "delete_book",
            apply=lambda: self._detach_books([book_id]),
            remote=lambda: self._delete_book_remote(book_id),
            revert=self._reattach,
            success=f'Deleted "{book.title}"',
            failure="Could not delete the book",
        )

    # ------------------------- Folders ------------------------- #
    async def create_folder(self, name: str, status: BookStatus = BookStatus.READING,
                            color: Optional[str] = None) -> MutationResult:
        name = require_text(name, "name")
        status = _enum(BookStatus, status, "status")
        color = color or DEFAULT_FOLDER_COLOR
        if color not in FOLDER_COLORS:
            raise ValidationError("color", f"'{color}' is not in the folder palette")

        async def remote():
            folder = await self.collaborator.folders.create(name=name, status=status, color=color)
            self.store.add('folders', folder)
            return folder

        return await self._run(
            "create_folder", lambda: None, remote, lambda _: None,
            success=f'Created folder "{name}"', failure="Could not create the folder",
        )

    async def update_folder(self, folder_id: str, name: Optional[str] = None,
                            status: Optional[BookStatus] = None,
                            color: Optional[str] = None) -> MutationResult:
        """Edit a folder; a new status bucket carries the folder's books along"""
        folder = self.store.get('folders', folder_id)
        if folder is None:
            return self._skip("update_folder", f"unknown folder '{folder_id}'")

        fields: Dict[str, Any] = {}
        if name is not None:
            fields['name'] = require_text(name, "name")
        if status is not None:
            fields['status'] = _enum(BookStatus, status, "status")
        if color is not None:
            if color not in FOLDER_COLORS:
                raise ValidationError("color", f"'{color}' is not in the folder palette")
            fields['color'] = color
        fields = {k: v for k, v in fields.items() if getattr(folder, k) != v}
        if not fields:
            return self._skip("update_folder", "nothing changed")

        new_status = fields.get('status')
        moved = [b.id for b in self.store.books_in_folder(folder_id)] if new_status else []

        def apply():
            books = {book_id: self.store.patch('books', book_id, status=new_status) for book_id in moved}
            return self.store.patch('folders', folder_id, **fields), books

        async def remote():
            await settle_all(
                [self.collaborator.folders.update(folder_id, **fields)]
                + [self.collaborator.books.update(book_id, status=new_status) for book_id in moved]
            )

        def revert(snapshot):
            previous, books = snapshot
            self._patch_back('folders', folder_id, previous)
            for book_id, book_previous in books.items():
                self._patch_back('books', book_id, book_previous)

        return await self._run(
            "update_folder", apply, remote, revert,
            success=f'Updated folder "{fields.get("name", folder.name)}"',
            failure="Could not save the folder",
        )

    async def delete_folder(self, folder_id: str, confirm: Optional[Confirm] = None) -> MutationResult:
        """Delete a folder together with every book in it"""
        folder = self.store.get('folders', folder_id)
        if folder is None:
            return self._skip("delete_folder", f"unknown folder '{folder_id}'")
        book_ids = [b.id for b in self.store.books_in_folder(folder_id)]
        question = f'Delete folder "{folder.name}" and the {_plural(len(book_ids), "book")} in it?'
        if confirm is not None and not confirm(question):
            return self._cancel("delete_folder")

        def apply():
            snapshot = self._detach_books(book_ids)
            snapshot['folders'] = self.store.remove('folders', folder_id)
            return snapshot

        async def remote():
            await settle_all(self._delete_book_remote(book_id) for book_id in book_ids)
            await self.collaborator.folders.delete(folder_id)

        return await self._run(
            "delete_folder", apply, remote, self._reattach,
            success=f'Deleted folder "{folder.name}"',
            failure="Could not delete the folder",
        )

    # ------------------------- Tags ------------------------- #
    async def create_tag(self, name: str, color: Optional[str] = None) -> MutationResult:
        name = require_text(name, "name")

        async def remote():
            tag = await self.collaborator.tags.create(name=name, color=color)
            self.store.add('tags', tag)
            return tag

        return await self._run(
            "create_tag", lambda: None, remote, lambda _: None,
            success=f'Created tag "{name}"', failure="Could not create the tag",
        )

    async def delete_tag(self, tag_id: str, confirm: Optional[Confirm] = None) -> MutationResult:
        """Delete a tag and its links; clears the tag filter if it was selected"""
        tag = self.store.get('tags', tag_id)
        if tag is None:
            return self._skip("delete_tag", f"unknown tag '{tag_id}'")
        if confirm is not None and not confirm(f'Delete tag "{tag.name}"?'):
            return self._cancel("delete_tag")

        def apply():
            cleared = self.filters.selected_tag_id == tag_id
            if cleared:
                self.filters.selected_tag_id = None
            return {
                'tags': self.store.remove('tags', tag_id),
                'book_tags': self.store.remove_where('book_tags', lambda bt: bt.tag_id == tag_id),
            }, cleared

        async def remote():
            links = await self.collaborator.book_tags.list(tag_id=tag_id)
            await settle_all(self.collaborator.book_tags.delete(bt.id) for bt in links)
            await self.collaborator.tags.delete(tag_id)

        def revert(snapshot):
            removed, cleared = snapshot
            self._reattach(removed)
            if cleared and self.filters.selected_tag_id is None:
                self.filters.selected_tag_id = tag_id

        return await self._run(
            "delete_tag", apply, remote, revert,
            success=f'Deleted tag "{tag.name}"', failure="Could not delete the tag",
        )

    # ------------------------- Memos ------------------------- #
    async def add_memo(self, book_id: str, content: str, memo_type: MemoType = MemoType.SUMMARY,
                       source_page: Optional[str] = None, pinned: bool = False) -> MutationResult:
        content = require_text(content, "content")
        memo_type = _enum(MemoType, memo_type, "type")
        source_page = _optional_text(source_page)
        book = self.store.get('books', book_id)
        if book is None:
            return self._skip("add_memo", f"unknown book '{book_id}'")

        count = (book.memo_count or 0) + 1
        stamp = self.clock()
        created: List[InsightMemo] = []

        async def remote():
            memo = await self.collaborator.memos.create(
                book_id=book_id, type=memo_type, content=content,
                source_page=source_page, pinned=pinned
            )
            self.store.add('memos', memo, prepend=True)
            created.append(memo)
            await self.collaborator.books.update(book_id, memo_count=count, last_memo_at=stamp)
            return memo

        def revert(previous):
            self._patch_back('books', book_id, previous)
            for memo in created:
                self.store.remove('memos', memo.id)

        return await self._run(
            "add_memo",
            apply=lambda: self.store.patch('books', book_id, memo_count=count, last_memo_at=stamp),
            remote=remote,
            revert=revert,
            success="Memo added",
            failure="Could not add the memo",
        )

    async def update_memo(self, memo_id: str, content: Optional[str] = None,
                          memo_type: Optional[MemoType] = None,
                          source_page: Optional[str] = None) -> MutationResult:
        memo = self.store.get('memos', memo_id)
        if memo is None:
            return self._skip("update_memo", f"unknown memo '{memo_id}'")

        fields: Dict[str, Any] = {}
        if content is not None:
            fields['content'] = require_text(content, "content")
        if memo_type is not None:
            fields['type'] = _enum(MemoType, memo_type, "type")
        if source_page is not None:
            fields['source_page'] = _optional_text(source_page)
        fields = {k: v for k, v in fields.items() if getattr(memo, k) != v}
        if not fields:
            return self._skip("update_memo", "nothing changed")

        return await self._run(
            "update_memo",
            apply=lambda: self.store.patch('memos', memo_id, **fields),
            remote=lambda: self.collaborator.memos.update(memo_id, **fields),
            revert=lambda previous: self._patch_back('memos', memo_id, previous),
            success="Memo updated",
            failure="Could not update the memo",
        )

    async def toggle_pin(self, memo_id: str) -> MutationResult:
        memo = self.store.get('memos', memo_id)
        if memo is None:
            return self._skip("toggle_pin", f"unknown memo '{memo_id}'")
        pinned = not memo.pinned

        return await self._run(
            "toggle_pin",
            apply=lambda: self.store.patch('memos', memo_id, pinned=pinned),
            remote=lambda: self.collaborator.memos.update(memo_id, pinned=pinned),
            revert=lambda previous: self._patch_back('memos', memo_id, previous),
            success="Pinned" if pinned else "Unpinned",
            failure="Could not change the pin",
        )

    async def delete_memo(self, memo_id: str) -> MutationResult:
        """Delete a memo; the success notification carries a one-shot undo"""
        memo = self.store.get('memos', memo_id)
        if memo is None:
            return self._skip("delete_memo", f"unknown memo '{memo_id}'")
        book = self.store.get('books', memo.book_id)
        count = max(0, (book.memo_count or 0) - 1) if book else None

        def apply():
            removed = self.store.remove('memos', memo_id)
            previous = self.store.patch('books', book.id, memo_count=count) if book else None
            return removed, previous

        async def remote():
            await self.collaborator.memos.delete(memo_id)
            if book:
                await self.collaborator.books.update(book.id, memo_count=count)

        def revert(snapshot):
            removed, previous = snapshot
            self.store.restore('memos', removed)
            if book:
                self._patch_back('books', book.id, previous)

        return await self._run(
            "delete_memo", apply, remote, revert,
            success="Memo deleted",
            failure="Could not delete the memo",
            undo=lambda: self.restore_memo(memo),
        )

    async def restore_memo(self, memo: InsightMemo) -> MutationResult:
        """Recreate a deleted memo; it gets a new id and creation time"""
        book = self.store.get('books', memo.book_id)
        count = (book.memo_count or 0) + 1 if book else None
        created: List[InsightMemo] = []

        async def remote():
            restored = await self.collaborator.memos.create(
                book_id=memo.book_id, type=memo.type, content=memo.content,
                source_page=memo.source_page, pinned=memo.pinned
            )
            self.store.add('memos', restored, prepend=True)
            created.append(restored)
            if book:
                await self.collaborator.books.update(book.id, memo_count=count)
            return restored

        def revert(previous):
            if book:
                self._patch_back('books', book.id, previous)
            for restored in created:
                self.store.remove('memos', restored.id)

        return await self._run(
            "restore_memo",
            apply=lambda: self.store.patch('books', book.id, memo_count=count) if book else None,
            remote=remote,
            revert=revert,
            success="Memo restored",
            failure="Could not restore the memo",
        )
