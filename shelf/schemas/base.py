# shelf/schemas/base.py
from datetime import datetime, UTC
from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; every timestamp on a record is UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def non_blank(value: Optional[str]) -> str:
    """Trim a required text field, refusing empty and whitespace-only values"""
    text = (value or "").strip()
    if not text:
        raise ValueError("must not be empty")
    return text


class Record(BaseModel):
    """Fields the collaborator assigns to every stored entity"""
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator('created_at', 'updated_at')
    @classmethod
    def _utc_timestamps(cls, value):
        return as_utc(value)
