# shelf/sa/models/folder.py
from sqlalchemy import String, Index
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin, OwnedMixin

class Folder(Base, OwnedMixin, TimestampMixin):
    __tablename__ = 'folder'

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    color: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Relationships
    books = relationship('Book', back_populates='folder', passive_deletes='all')

    __table_args__ = (
        Index('idx_folder_owner_status', 'owner', 'status'),
    )
