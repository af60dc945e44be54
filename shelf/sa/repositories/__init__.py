# shelf/sa/repositories/__init__.py
from .base import OwnedRepository
from .book import BookRepository, FolderRepository
from .tag import TagRepository, BookTagRepository
from .memo import InsightMemoRepository

__all__ = [
    'OwnedRepository',
    'BookRepository',
    'FolderRepository',
    'TagRepository',
    'BookTagRepository',
    'InsightMemoRepository'
]
