# shelf/sa/__init__.py
from .database import Database
from .models import Base, Book, Folder, Tag, BookTag, InsightMemo

__all__ = [
    'Database',
    'Base',
    'Book',
    'Folder',
    'Tag',
    'BookTag',
    'InsightMemo'
]
