# cli/main.py
import click

from shelf.config import settings
from .commands.book import book
from .commands.folder import folder
from .commands.tag import tag
from .commands.memo import memo


@click.group()
@click.option('--owner', default=None, help='Whose shelf to use (defaults to SHELF_OWNER)')
@click.pass_context
def cli(ctx, owner):
    """Insight Shelf CLI"""
    ctx.ensure_object(dict)
    ctx.obj['owner'] = owner or settings.owner


cli.add_command(book)
cli.add_command(folder)
cli.add_command(tag)
cli.add_command(memo)


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
