# shelf/sa/models/__init__.py
from .base import Base, TimestampMixin, OwnedMixin
from .folder import Folder
from .book import Book
from .tag import Tag, BookTag
from .memo import InsightMemo

__all__ = [
    'Base',
    'TimestampMixin',
    'OwnedMixin',
    'Book',
    'Folder',
    'Tag',
    'BookTag',
    'InsightMemo'
]
