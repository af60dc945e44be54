# shelf/sa/models/book.py
from datetime import datetime
from sqlalchemy import String, Integer, ForeignKey, DateTime, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, OwnedMixin

class Book(Base, OwnedMixin, TimestampMixin):
    __tablename__ = 'book'

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    memo_count: Mapped[int] = mapped_column(Integer, default=0)
    last_memo_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    folder_id: Mapped[str | None] = mapped_column(String(36), ForeignKey('folder.id'), nullable=True)

    # Relationships
    folder = relationship('Folder', back_populates='books')
    memos = relationship('InsightMemo', back_populates='book', passive_deletes='all')
    book_tags = relationship('BookTag', back_populates='book', passive_deletes='all')

    __table_args__ = (
        Index('idx_book_owner_status', 'owner', 'status'),
        Index('idx_book_folder_id', 'folder_id'),
    )
