# shelf/schemas/memo.py
from typing import Optional
from pydantic import BaseModel, field_validator

from ..constants import MemoType
from .base import Record, non_blank


class InsightMemo(Record):
    book_id: str
    type: MemoType = MemoType.SUMMARY
    content: str
    source_page: Optional[str] = None
    pinned: bool = False

    @field_validator('pinned', mode='before')
    @classmethod
    def _pinned_default(cls, value):
        return bool(value)


class InsightMemoCreate(BaseModel):
    book_id: str
    type: MemoType = MemoType.SUMMARY
    content: str
    source_page: Optional[str] = None
    pinned: bool = False

    @field_validator('content')
    @classmethod
    def _content_required(cls, value):
        return non_blank(value)


class InsightMemoUpdate(BaseModel):
    type: Optional[MemoType] = None
    content: Optional[str] = None
    source_page: Optional[str] = None
    pinned: Optional[bool] = None

    @field_validator('content')
    @classmethod
    def _content_not_blank(cls, value):
        return non_blank(value)
