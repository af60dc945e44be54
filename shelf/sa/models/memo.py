# shelf/sa/models/memo.py
from sqlalchemy import String, Text, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, OwnedMixin

class InsightMemo(Base, OwnedMixin, TimestampMixin):
    __tablename__ = 'insight_memo'

    book_id: Mapped[str] = mapped_column(String(36), ForeignKey('book.id'), nullable=False)
    type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    source_page: Mapped[str | None] = mapped_column(String(50), nullable=True)
    pinned: Mapped[bool] = mapped_column(Boolean, default=False)

    # Relationships
    book = relationship('Book', back_populates='memos')

    __table_args__ = (
        Index('idx_insight_memo_book_id', 'book_id'),
    )
