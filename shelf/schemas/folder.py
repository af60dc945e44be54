# shelf/schemas/folder.py
from typing import Optional
from pydantic import BaseModel, field_validator

from ..constants import BookStatus
from .base import Record, non_blank


class Folder(Record):
    name: str
    status: BookStatus = BookStatus.READING
    color: Optional[str] = None


class FolderCreate(BaseModel):
    name: str
    status: BookStatus = BookStatus.READING
    color: Optional[str] = None

    @field_validator('name')
    @classmethod
    def _name_required(cls, value):
        return non_blank(value)


class FolderUpdate(BaseModel):
    name: Optional[str] = None
    status: Optional[BookStatus] = None
    color: Optional[str] = None

    @field_validator('name')
    @classmethod
    def _name_not_blank(cls, value):
        return non_blank(value)
