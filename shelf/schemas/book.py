# shelf/schemas/book.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, field_validator

from ..constants import BookStatus
from .base import Record, as_utc, non_blank


class Book(Record):
    title: str
    author: Optional[str] = None
    status: BookStatus = BookStatus.TO_READ
    memo_count: int = 0
    last_memo_at: Optional[datetime] = None
    folder_id: Optional[str] = None

    @field_validator('last_memo_at')
    @classmethod
    def _utc_last_memo(cls, value):
        return as_utc(value)

    @field_validator('memo_count', mode='before')
    @classmethod
    def _count_default(cls, value):
        return value or 0


class BookCreate(BaseModel):
    title: str
    author: Optional[str] = None
    status: BookStatus = BookStatus.TO_READ
    memo_count: int = 0
    last_memo_at: Optional[datetime] = None
    folder_id: Optional[str] = None

    @field_validator('title')
    @classmethod
    def _title_required(cls, value):
        return non_blank(value)


class BookUpdate(BaseModel):
    title: Optional[str] = None
    author: Optional[str] = None
    status: Optional[BookStatus] = None
    memo_count: Optional[int] = None
    last_memo_at: Optional[datetime] = None
    folder_id: Optional[str] = None

    @field_validator('title')
    @classmethod
    def _title_not_blank(cls, value):
        # Runs only when a title is sent
        return non_blank(value)
