# shelf/sa/models/tag.py
from sqlalchemy import String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, OwnedMixin

class Tag(Base, OwnedMixin, TimestampMixin):
    __tablename__ = 'tag'

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    color: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Relationships
    book_tags = relationship('BookTag', back_populates='tag', passive_deletes='all')

class BookTag(Base, OwnedMixin, TimestampMixin):
    """Association model between books and tags"""
    __tablename__ = 'book_tag'

    book_id: Mapped[str] = mapped_column(String(36), ForeignKey('book.id'), nullable=False, index=True)
    tag_id: Mapped[str] = mapped_column(String(36), ForeignKey('tag.id'), nullable=False, index=True)

    # Relationships
    book = relationship('Book', back_populates='book_tags')
    tag = relationship('Tag', back_populates='book_tags')

    __table_args__ = (
        UniqueConstraint('book_id', 'tag_id', name='uix_book_tag_book_tag'),
    )
