# shelf/sa/repositories/tag.py
from typing import List, Optional
from shelf.sa.models import Tag, BookTag
from .base import OwnedRepository

class TagRepository(OwnedRepository):
    """Repository for managing Tag entities."""
    model = Tag

    def get_by_name(self, name: str) -> Optional[Tag]:
        """Get a tag by its name"""
        return self._query().filter(Tag.name == name).first()

    def get_tags_by_book(self, book_id: str) -> List[Tag]:
        """Get all tags linked to a book.

        Args:
            book_id: The ID of the book

        Returns:
            List of Tag objects linked to the book
        """
        return (
            self._query()
            .join(Tag.book_tags)
            .filter(BookTag.book_id == book_id)
            .order_by(Tag.name)
            .all()
        )

class BookTagRepository(OwnedRepository):
    """Repository for managing BookTag links."""
    model = BookTag

    def get_link(self, book_id: str, tag_id: str) -> Optional[BookTag]:
        """Get the link between a book and a tag if it exists"""
        return (
            self._query()
            .filter(BookTag.book_id == book_id, BookTag.tag_id == tag_id)
            .first()
        )

    def create(self, **fields) -> BookTag:
        """Create a link, refusing a second link for the same book and tag.

        Raises:
            ValueError: If the book is already linked to the tag
        """
        book_id = fields.get('book_id')
        tag_id = fields.get('tag_id')
        if self.get_link(book_id, tag_id):
            raise ValueError(f"Book '{book_id}' is already tagged with '{tag_id}'")
        return super().create(**fields)
