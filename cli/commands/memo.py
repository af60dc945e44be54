# cli/commands/memo.py
from typing import Optional

import click

from shelf.constants import MemoType, MemoFilter
from shelf.views import build_memo_list, tags_for_book
from ..utils import open_workspace, resolve, report, run, book_line, memo_line

TYPE_CHOICE = click.Choice([t.value for t in MemoType], case_sensitive=False)
FILTER_CHOICE = click.Choice([f.value for f in MemoFilter], case_sensitive=False)


def _open_book(owner: str, book_ref: str):
    ws = open_workspace(owner)
    target = resolve(ws.store.books, book_ref, 'book', attr='title')
    ws.load_book(target.id)
    return ws, ws.store.get('books', target.id)


def _open_memo(owner: str, memo_ref: str):
    ws = open_workspace(owner, listing=False)
    memo = resolve(run(ws.collaborator.memos.list()), memo_ref, 'memo', attr='content')
    ws.load_book(memo.book_id)
    return ws, ws.store.get('memos', memo.id)


@click.group()
def memo():
    """Insight memo commands"""
    pass


@memo.command()
@click.argument('book_ref')
@click.argument('content')
@click.option('--type', 'memo_type', type=TYPE_CHOICE, default=MemoType.SUMMARY.value, help='Kind of memo')
@click.option('--page', default=None, help='Where in the book it comes from')
@click.option('--pin', is_flag=True, help='Pin the memo to the top')
@click.pass_context
def add(ctx, book_ref: str, content: str, memo_type: str, page: Optional[str], pin: bool):
    """Add a memo to a book

    Example:
        shelf memo add "Project Hail Mary" "Amaze!" --type QUOTE --page 212
    """
    ws, target = _open_book(ctx.obj['owner'], book_ref)
    report(run(ws.coordinator.add_memo(target.id, content, MemoType(memo_type), page, pin)))


@memo.command(name='list')
@click.argument('book_ref')
@click.option('--type', 'memo_filter', type=FILTER_CHOICE, default=MemoFilter.ALL.value, help='Only memos of this kind')
@click.pass_context
def list_memos(ctx, book_ref: str, memo_filter: str):
    """Show a book with its memos, pinned first"""
    ws, target = _open_book(ctx.obj['owner'], book_ref)
    click.echo(book_line(target, tags_for_book(ws.store, target.id)))
    memos = build_memo_list(ws.store, target.id, MemoFilter(memo_filter))
    if not memos:
        click.echo(click.style("No memos", fg='yellow'))
    for m in memos:
        click.echo(memo_line(m))


@memo.command()
@click.argument('memo_ref')
@click.pass_context
def pin(ctx, memo_ref: str):
    """Pin or unpin a memo"""
    ws, target = _open_memo(ctx.obj['owner'], memo_ref)
    report(run(ws.coordinator.toggle_pin(target.id)))


@memo.command()
@click.argument('memo_ref')
@click.option('--content', default=None, help='New text')
@click.option('--type', 'memo_type', type=TYPE_CHOICE, default=None, help='New kind')
@click.option('--page', default=None, help='New source page; empty clears it')
@click.pass_context
def edit(ctx, memo_ref: str, content: Optional[str], memo_type: Optional[str], page: Optional[str]):
    """Edit a memo"""
    ws, target = _open_memo(ctx.obj['owner'], memo_ref)
    report(run(ws.coordinator.update_memo(
        target.id, content=content, memo_type=MemoType(memo_type) if memo_type else None, source_page=page
    )))


@memo.command()
@click.argument('memo_ref')
@click.option('--no-undo', is_flag=True, help='Do not offer to undo')
@click.pass_context
def delete(ctx, memo_ref: str, no_undo: bool):
    """Delete a memo; it can be restored for a few seconds"""
    ws, target = _open_memo(ctx.obj['owner'], memo_ref)
    result = report(run(ws.coordinator.delete_memo(target.id)))
    if result.undo is None or no_undo:
        return
    if click.confirm("Undo?", default=False):
        if run(result.undo()) is None:
            click.echo(click.style("Too late to undo", fg='yellow'))
