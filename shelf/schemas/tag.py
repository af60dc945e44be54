# shelf/schemas/tag.py
from typing import Optional
from pydantic import BaseModel, field_validator

from .base import Record, non_blank


class Tag(Record):
    name: str
    color: Optional[str] = None


class TagCreate(BaseModel):
    name: str
    color: Optional[str] = None

    @field_validator('name')
    @classmethod
    def _name_required(cls, value):
        return non_blank(value)


class TagUpdate(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None

    @field_validator('name')
    @classmethod
    def _name_not_blank(cls, value):
        return non_blank(value)


class BookTag(Record):
    """Join row between a book and a tag"""
    book_id: str
    tag_id: str


class BookTagCreate(BaseModel):
    book_id: str
    tag_id: str


class BookTagUpdate(BaseModel):
    book_id: Optional[str] = None
    tag_id: Optional[str] = None
