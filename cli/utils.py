# cli/utils.py
import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Iterable, List, Optional

import click

from shelf.collaborator import SqlCollaborator
from shelf.config import settings
from shelf.constants import STATUS_LABELS, MEMO_LABELS
from shelf.errors import ShelfError, ValidationError
from shelf.loader import load_listing, load_book_detail
from shelf.mutations import MutationCoordinator, MutationResult, MutationState
from shelf.notifications import Notification, NotificationLevel, Notifier
from shelf.sa.database import Database
from shelf.store import EntityStore
from shelf.views import ListingFilter

LEVEL_COLORS = {
    NotificationLevel.SUCCESS: 'green',
    NotificationLevel.ERROR: 'red',
    NotificationLevel.WARNING: 'yellow',
    NotificationLevel.INFO: 'blue',
}


def run(coro: Awaitable[Any]) -> Any:
    """Run a coroutine to completion, turning shelf errors into CLI errors"""
    try:
        return asyncio.run(coro)
    except ValidationError as e:
        raise click.BadParameter(e.message, param_hint=e.field)
    except ShelfError as e:
        raise click.ClickException(str(e))


def echo_notification(notification: Notification) -> None:
    click.echo(click.style(notification.message, fg=LEVEL_COLORS[notification.level]),
               err=notification.level is NotificationLevel.ERROR)


@dataclass
class Workspace:
    """Everything a command needs: store, collaborator, notifier and coordinator"""
    owner: str
    database: Database
    collaborator: SqlCollaborator
    store: EntityStore
    notifier: Notifier
    filters: ListingFilter
    coordinator: MutationCoordinator

    def load_listing(self) -> EntityStore:
        return run(load_listing(self.store, self.collaborator, self.notifier))

    def load_book(self, book_id: str):
        return run(load_book_detail(self.store, self.collaborator, book_id))


def open_workspace(owner: Optional[str] = None, listing: bool = True) -> Workspace:
    owner = owner or settings.owner
    database = Database()
    database.init_db()
    collaborator = SqlCollaborator(database, owner)
    store = EntityStore()
    notifier = Notifier()
    notifier.subscribe(echo_notification)
    filters = ListingFilter()
    workspace = Workspace(
        owner=owner,
        database=database,
        collaborator=collaborator,
        store=store,
        notifier=notifier,
        filters=filters,
        coordinator=MutationCoordinator(store, collaborator, notifier, filters),
    )
    if listing:
        workspace.load_listing()
    return workspace


def resolve(records: Iterable[Any], ref: str, label: str, attr: str = 'name') -> Any:
    """Find a record by id, unique id prefix, or exact (case-insensitive) name"""
    records = list(records)
    for record in records:
        if record.id == ref:
            return record
    matches = [r for r in records if r.id.startswith(ref)]
    if not matches:
        matches = [r for r in records if (getattr(r, attr, None) or '').lower() == ref.lower()]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise click.BadParameter(f"No {label} matches '{ref}'")
    raise click.BadParameter(f"'{ref}' matches {len(matches)} {label}s; use a longer id")


def report(result: MutationResult) -> MutationResult:
    """Print outcomes that produced no notification; exit non-zero on rollback"""
    if result.state is MutationState.SKIPPED:
        click.echo(click.style("Nothing to do", fg='yellow'))
    elif result.state is MutationState.CANCELLED:
        click.echo(click.style("Cancelled", fg='yellow'))
    elif result.state is MutationState.ROLLED_BACK:
        raise click.exceptions.Exit(1)
    return result


def short_id(record_id: str) -> str:
    return record_id[:8]


def book_line(book, tags: List[Any] = ()) -> str:
    line = (click.style(short_id(book.id), fg='cyan') + "  "
            + click.style(book.title, bold=True))
    if book.author:
        line += f" by {book.author}"
    line += click.style(f"  [{STATUS_LABELS[book.status]}, {book.memo_count} memos]", fg='blue')
    if tags:
        line += "  " + ", ".join(click.style(f"#{t.name}", fg='magenta') for t in tags)
    return line


def memo_line(memo) -> str:
    pin = click.style("* ", fg='yellow') if memo.pinned else "  "
    line = (pin + click.style(short_id(memo.id), fg='cyan') + "  "
            + click.style(f"[{MEMO_LABELS[memo.type]}]", fg='blue') + " " + memo.content)
    if memo.source_page:
        line += click.style(f" (p. {memo.source_page})", fg='white')
    return line
