# cli/commands/tag.py
from typing import Optional

import click

from ..utils import open_workspace, resolve, report, run, short_id


@click.group()
def tag():
    """Tag management commands"""
    pass


@tag.command()
@click.argument('name')
@click.option('--color', default=None, help='Optional display colour')
@click.pass_context
def create(ctx, name: str, color: Optional[str]):
    """Create a tag"""
    ws = open_workspace(ctx.obj['owner'])
    report(run(ws.coordinator.create_tag(name, color)))


@tag.command(name='list')
@click.pass_context
def list_tags(ctx):
    """List tags with the number of books carrying each"""
    ws = open_workspace(ctx.obj['owner'])
    if not ws.store.tags:
        click.echo(click.style("No tags yet", fg='yellow'))
    for t in ws.store.tags:
        count = len(ws.store.links_for_tag(t.id))
        click.echo(click.style(short_id(t.id), fg='cyan') + "  "
                   + click.style(f"#{t.name}", fg='magenta') + f"  {count} books")


@tag.command()
@click.argument('tag_ref')
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
def delete(ctx, tag_ref: str, yes: bool):
    """Delete a tag and remove it from every book"""
    ws = open_workspace(ctx.obj['owner'])
    target = resolve(ws.store.tags, tag_ref, 'tag')
    report(run(ws.coordinator.delete_tag(target.id, confirm=lambda q: yes or click.confirm(q, default=False))))
