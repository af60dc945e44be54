# cli/commands/folder.py
from typing import Optional

import click

from shelf.constants import BookStatus, FOLDER_COLORS
from ..utils import open_workspace, resolve, report, run

STATUS_CHOICE = click.Choice([s.value for s in BookStatus], case_sensitive=False)
COLOR_CHOICE = click.Choice(FOLDER_COLORS, case_sensitive=False)


@click.group()
def folder():
    """Folder management commands"""
    pass


@folder.command()
@click.argument('name')
@click.option('--status', type=STATUS_CHOICE, default=BookStatus.READING.value, help='Status tab the folder lives in')
@click.option('--color', type=COLOR_CHOICE, default=None, help='Folder colour')
@click.pass_context
def create(ctx, name: str, status: str, color: Optional[str]):
    """Create a folder in a status tab"""
    ws = open_workspace(ctx.obj['owner'])
    report(run(ws.coordinator.create_folder(name, BookStatus(status), color)))


@folder.command()
@click.argument('folder_ref')
@click.option('--name', default=None, help='New name')
@click.option('--status', type=STATUS_CHOICE, default=None, help='Move the folder and its books to this tab')
@click.option('--color', type=COLOR_CHOICE, default=None, help='New colour')
@click.pass_context
def edit(ctx, folder_ref: str, name: Optional[str], status: Optional[str], color: Optional[str]):
    """Rename, recolour or move a folder"""
    ws = open_workspace(ctx.obj['owner'])
    target = resolve(ws.store.folders, folder_ref, 'folder')
    report(run(ws.coordinator.update_folder(
        target.id, name=name, status=BookStatus(status) if status else None, color=color
    )))


@folder.command()
@click.argument('folder_ref')
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
def delete(ctx, folder_ref: str, yes: bool):
    """Delete a folder together with every book in it"""
    ws = open_workspace(ctx.obj['owner'])
    target = resolve(ws.store.folders, folder_ref, 'folder')
    report(run(ws.coordinator.delete_folder(target.id, confirm=lambda q: yes or click.confirm(q, default=False))))
