# shelf/schemas/__init__.py
from .base import Record
from .book import Book, BookCreate, BookUpdate
from .folder import Folder, FolderCreate, FolderUpdate
from .tag import Tag, TagCreate, TagUpdate, BookTag, BookTagCreate, BookTagUpdate
from .memo import InsightMemo, InsightMemoCreate, InsightMemoUpdate

__all__ = [
    'Record',
    'Book',
    'BookCreate',
    'BookUpdate',
    'Folder',
    'FolderCreate',
    'FolderUpdate',
    'Tag',
    'TagCreate',
    'TagUpdate',
    'BookTag',
    'BookTagCreate',
    'BookTagUpdate',
    'InsightMemo',
    'InsightMemoCreate',
    'InsightMemoUpdate',
]
