# cli/commands/book.py
from typing import Optional, Tuple

import click

from shelf.constants import BookStatus, ROOT_TARGET, STATUS_LABELS
from shelf.views import build_listing, tags_for_book
from ..utils import open_workspace, resolve, report, run, book_line, short_id

STATUS_CHOICE = click.Choice([s.value for s in BookStatus], case_sensitive=False)


@click.group()
def book():
    """Book related commands"""
    pass


@book.command()
@click.argument('title')
@click.option('--author', default=None, help='Author of the book')
@click.option('--status', type=STATUS_CHOICE, default=BookStatus.TO_READ.value, help='Reading status')
@click.option('--tag', 'tags', multiple=True, help='Tag id or name; repeatable')
@click.option('--folder', default=None, help='Folder id or name')
@click.pass_context
def add(ctx, title: str, author: Optional[str], status: str, tags: Tuple[str, ...], folder: Optional[str]):
    """Add a book to the shelf

    Example:
        shelf book add "Project Hail Mary" --author "Andy Weir" --status READING --tag sci-fi
    """
    ws = open_workspace(ctx.obj['owner'])
    tag_ids = [resolve(ws.store.tags, ref, 'tag').id for ref in tags]
    folder_id = resolve(ws.store.folders, folder, 'folder').id if folder else None
    result = report(run(ws.coordinator.add_book(title, author, BookStatus(status), tag_ids, folder_id)))
    if result.ok:
        click.echo(book_line(result.value, tags_for_book(ws.store, result.value.id)))


@book.command(name='list')
@click.option('--status', type=STATUS_CHOICE, default=BookStatus.READING.value, help='Status tab to show')
@click.option('--folder', default=None, help='Open this folder (id or name)')
@click.option('--search', default='', help='Match title or author')
@click.option('--tag', default=None, help='Only books with this tag (id or name)')
@click.pass_context
def list_books(ctx, status: str, folder: Optional[str], search: str, tag: Optional[str]):
    """List the books of one status tab"""
    ws = open_workspace(ctx.obj['owner'])
    flt = ws.filters
    flt.active_status = BookStatus(status)
    flt.search_query = search
    if folder:
        flt.open_folder_id = resolve(ws.store.folders, folder, 'folder').id
    if tag:
        flt.selected_tag_id = resolve(ws.store.tags, tag, 'tag').id

    view = build_listing(ws.store, flt)
    tabs = "  ".join(
        click.style(f"{STATUS_LABELS[s]} ({view.status_counts[s]})", bold=s is flt.active_status)
        for s in BookStatus
    )
    click.echo(tabs)
    for f in view.folders:
        click.echo(click.style(short_id(f.id), fg='cyan') + "  "
                   + click.style(f"[{f.name}]", fg='magenta') + f"  {view.folder_counts.get(f.id, 0)} books")
    for b in view.books:
        click.echo(book_line(b, tags_for_book(ws.store, b.id)))
    if not view.books and not view.folders:
        click.echo(click.style("No books here yet", fg='yellow'))


@book.command()
@click.argument('book_ref')
@click.argument('status', type=STATUS_CHOICE)
@click.pass_context
def status(ctx, book_ref: str, status: str):
    """Move a book to another status tab"""
    ws = open_workspace(ctx.obj['owner'])
    target = resolve(ws.store.books, book_ref, 'book', attr='title')
    report(run(ws.coordinator.change_status(target.id, BookStatus(status))))


@book.command()
@click.argument('book_ref')
@click.argument('folder_ref')
@click.pass_context
def move(ctx, book_ref: str, folder_ref: str):
    """Move a book into a folder, or out of it with 'root'"""
    ws = open_workspace(ctx.obj['owner'])
    target = resolve(ws.store.books, book_ref, 'book', attr='title')
    folder_id = ROOT_TARGET if folder_ref == ROOT_TARGET else resolve(ws.store.folders, folder_ref, 'folder').id
    report(run(ws.coordinator.move_to_folder(target.id, folder_id)))


@book.command()
@click.argument('book_ref')
@click.argument('tag_refs', nargs=-1)
@click.pass_context
def tags(ctx, book_ref: str, tag_refs: Tuple[str, ...]):
    """Set the tags of a book; no tags clears them"""
    ws = open_workspace(ctx.obj['owner'])
    target = resolve(ws.store.books, book_ref, 'book', attr='title')
    tag_ids = [resolve(ws.store.tags, ref, 'tag').id for ref in tag_refs]
    report(run(ws.coordinator.set_book_tags(target.id, tag_ids)))


@book.command()
@click.argument('book_ref')
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
def delete(ctx, book_ref: str, yes: bool):
    """Delete a book and all of its memos"""
    ws = open_workspace(ctx.obj['owner'])
    target = resolve(ws.store.books, book_ref, 'book', attr='title')
    report(run(ws.coordinator.delete_book(target.id, confirm=lambda q: yes or click.confirm(q, default=False))))
